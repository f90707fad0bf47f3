"""Tests for order composition from catalog data and customer choices."""

import pytest

from giftshop.orders.composition import (
    OrderDetails, compose_background, compose_batch_order, compose_order_submission,
    compose_selected_options, fetch_order_details, option_index,
)
from giftshop.schemas import CartItem, CustomerInfo, OrderData, Promotion, ShippingFee


@pytest.fixture
def order_data():
    return OrderData.model_validate({
        'productId': 'prod-1',
        'variantId': 'var-1',
        'selectedOptions': [{'id': 'option-0', 'price': 50000}, {'id': 'option-7', 'price': 15000}],
        'customQuantities': {'cus-1': 2, 'cus-gone': 1},
        'selectedCategoryProducts': {'cat-1': [
            {'productCustomId': 'cus-1', 'quantity': 2},
            {'productCustomId': 'cus-gone', 'quantity': 1},
        ]},
        'selectedBackgroundIds': ['bg-1'],
        'backgroundFormData': {'values': [
            {'fieldId': 'f1', 'value': 'Nguyễn Văn A'},
            {'fieldId': 'f9', 'value': 'extra'},
        ]},
    })


@pytest.fixture
def shipping(shipping_fee_data):
    return ShippingFee.model_validate(shipping_fee_data)


@pytest.fixture
def details(request_ctx, catalog_api, order_data):
    return fetch_order_details(order_data)


@pytest.mark.parametrize('option_id,expected', [
    ('option-0', 0), ('option-12', 12), ('option', None), ('option-x', None),
])
def test_option_index(option_id, expected):
    assert option_index(option_id) == expected


def test_fetch_skips_missing_custom_products(details):
    assert details.product['id'] == 'prod-1'
    assert details.variant['id'] == 'var-1'
    assert set(details.product_customs) == {'cus-1'}
    assert details.custom_prices == {'cus-1': 25000.0}
    assert details.background['id'] == 'bg-1'


def test_fetch_uses_embedded_variant(request_ctx, catalog_api, order_data):
    fetch_order_details(order_data)
    assert catalog_api.calls('GET', '/product-variants/var-1') == []


def test_selected_options_are_labelled(order_data, details):
    options = compose_selected_options(order_data, details)
    assert options[0] == {'id': 'option-0', 'name': 'Gift wrap', 'description': 'Premium paper', 'price': 50000.0}
    assert options[1]['name'] == 'Option option-7'
    assert options[1]['price'] == 15000.0


def test_background_values_are_labelled(order_data, details):
    background = compose_background(order_data, details)
    assert background['backgroundId'] == 'bg-1'
    assert background['backgroundPrice'] == 0
    values = background['formData']['values']
    assert values[0] == {'fieldId': 'f1', 'fieldTitle': 'Họ tên người nhận', 'fieldType': 'text', 'value': 'Nguyễn Văn A'}
    assert values[1]['fieldTitle'] == 'f9'
    assert [f['id'] for f in background['formConfig']['fields']] == ['f1', 'f2']


def test_no_background_selected():
    order_data = OrderData(product_id='prod-1', variant_id='var-1')
    assert compose_background(order_data, OrderDetails()) is None


def test_order_submission(order_data, details, shipping, make_promotion):
    payload = compose_order_submission(order_data, details, shipping,
                                       make_promotion(type='FIXED_AMOUNT', value=20000))
    wire = payload.to_wire()

    assert wire['product'] == {'id': 'prod-1', 'name': 'Photo frame', 'hasBg': True}
    assert wire['collection']['routeName'] == 'frames'
    group = wire['selectedCategoryProducts']['cat-1']
    assert group['categoryName'] == 'Figurines'
    assert group['products'][0]['totalPrice'] == 50000
    assert group['products'][1].get('productCustomName') is None
    assert wire['shipping']['shippingId'] == 'ship-1'
    assert wire['promotion']['discountAmount'] == 20000
    # 400000 variant + 65000 options + 50000 custom products
    assert wire['pricing']['subtotal'] == 515000
    assert wire['pricing']['total'] == 515000 + 30000 - 20000


def test_batch_order(shipping, make_promotion):
    def cart_item(item_id, subtotal):
        return CartItem(id=item_id, order_data=OrderData(product_id='prod-1', variant_id='var-1'),
                        subtotal=subtotal, total=subtotal + 30000, created_at='2024-01-01T00:00:00+00:00')

    items = [cart_item('cart_1', 200000), cart_item('cart_2', 350000)]
    details_map = {'cart_1': OrderDetails(product={'id': 'prod-1', 'name': 'Frame'}, variant={'id': 'var-1', 'price': 200000})}
    promotion = make_promotion(type='PERCENTAGE', value=10, maxDiscountAmount=40000)

    payload = compose_batch_order(items, details_map, CustomerInfo(name='An', phone='0901'),
                                  shipping, promotion, user_id='u1')
    wire = payload.to_wire()

    assert wire['pricing'] == {'itemsSubtotal': 550000, 'shippingFee': 30000,
                               'discountAmount': 40000, 'total': 540000}
    assert [item['pricing']['itemSubtotal'] for item in wire['items']] == [200000, 350000]
    assert wire['items'][1]['product']['id'] == 'prod-1'
    assert wire['items'][1]['product'].get('name') is None
    assert wire['customerInfo'] == {'name': 'An', 'phone': '0901'}
    assert wire['userId'] == 'u1'
    assert wire['metadata']['orderSource'] == 'web'


def test_promotion_is_optional(order_data, details, shipping):
    wire = compose_order_submission(order_data, details, shipping, None).to_wire()
    assert 'promotion' not in wire
    assert wire['pricing']['discountAmount'] == 0


def test_promotion_model_accepts_wire_names():
    promotion = Promotion.model_validate({
        'id': 'p', 'type': 'FIXED_AMOUNT', 'value': 5, 'startDate': '2024-01-01T00:00:00Z',
    })
    assert promotion.min_order_value == 0
    assert promotion.usage_limit is None
