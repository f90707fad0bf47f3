"""Tests for promotion lookup and shipping selection at checkout."""

from giftshop.orders.checkout import (
    resolve_promotion, select_shipping, shipping_amount, shipping_label, shipping_options,
)
from giftshop.schemas import ShippingFee


def test_empty_code(request_ctx):
    assert resolve_promotion('  ', 100000) == (None, 'Please enter a promotion code')


def test_unknown_code(request_ctx, fake_api):
    assert resolve_promotion('NOPE', 100000) == (None, 'Promotion code not found')


def test_valid_code(request_ctx, catalog_api):
    promotion, message = resolve_promotion('AUTUMN10', 500000)
    assert promotion.promo_code == 'AUTUMN10'
    assert message == 'Promotion applied'


def test_missing_promotion_record(request_ctx, fake_api):
    fake_api.add('GET', '/promotions/code/GHOST', {'data': None})
    assert resolve_promotion('GHOST', 200000) == (None, 'This promotion code is not valid')


def test_malformed_promotion_record(request_ctx, fake_api):
    fake_api.add('GET', '/promotions/code/ODD', {'data': {'id': 'promo-9', 'type': 'BOGUS'}})
    assert resolve_promotion('ODD', 200000) == (None, 'This promotion code is not valid')


def test_rejected_code_is_not_applied(request_ctx, fake_api, promotion_payload):
    fake_api.add('GET', '/promotions/code/BIG', {'data': promotion_payload(promoCode='BIG', minOrderValue=300000)})
    promotion, message = resolve_promotion('BIG', 200000)
    assert promotion is None
    assert message == 'Minimum order value for this code is 300.000 ₫'


def test_shipping_options(request_ctx, catalog_api):
    areas, fees = shipping_options()
    assert areas == ['Hà Nội', 'Hồ Chí Minh']
    assert [fee.id for fee in fees] == ['ship-1']
    request = catalog_api.calls('GET', '/shipping-fees')[0]
    assert request.url.params['area'] == 'Hà Nội'


def test_shipping_options_without_api(request_ctx, fake_api):
    fake_api.add('GET', '/shipping-fees/areas', None, status=500)
    areas, fees = shipping_options('Đà Nẵng')
    assert areas == ['Đà Nẵng']
    assert fees == []


def test_select_shipping():
    fees = [ShippingFee(id='a', shipping_fee=30000), ShippingFee(id='b', shipping_fee=50000)]
    assert select_shipping(fees, 'b').id == 'b'
    assert select_shipping(fees, 'zzz').id == 'a'
    assert select_shipping([], 'b') is None


def test_shipping_amount_falls_back_to_flat_fee(app, request_ctx):
    assert shipping_amount(None) == app.config['DEFAULT_SHIPPING_FEE']
    assert shipping_amount(ShippingFee(id='b', shipping_fee=50000)) == 50000


def test_shipping_label():
    fee = ShippingFee(id='a', shipping_type='Express', shipping_fee=50000, estimated_delivery_time='1 day')
    assert shipping_label(fee) == 'Express - 50.000 ₫ - 1 day'
