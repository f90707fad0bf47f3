"""Tests for pricing rules and promotion validation."""

from datetime import datetime, timedelta, timezone

import pytest

from giftshop.pricing import (
    build_pricing, calculate_custom_products_price, calculate_discount,
    calculate_items_subtotal, calculate_options_price, calculate_subtotal,
    calculate_total, format_price, validate_promotion,
)
from giftshop.schemas import CartItem, OrderData


@pytest.fixture
def order_data():
    return OrderData.model_validate({
        'productId': 'prod-1',
        'variantId': 'var-1',
        'selectedOptions': [{'id': 'option-0', 'price': 50000}, {'id': 'option-1', 'price': 20000}],
        'customQuantities': {'cus-1': 2},
        'selectedCategoryProducts': {'cat-1': [{'productCustomId': 'cus-1', 'quantity': 2}]},
        'multiItemCustomizations': {'1': {'cat-1': [{'productCustomId': 'cus-2', 'quantity': 1}]}},
    })


class TestSubtotal:
    def test_options_price(self, order_data):
        assert calculate_options_price(order_data) == 70000

    def test_custom_products_weighted_by_quantity(self, order_data):
        prices = {'cus-1': 25000, 'cus-2': 10000}
        assert calculate_custom_products_price(order_data, prices) == 60000

    def test_unknown_custom_products_contribute_nothing(self, order_data):
        assert calculate_custom_products_price(order_data, {'cus-1': 25000}) == 50000

    def test_subtotal_sums_variant_options_and_customs(self, order_data):
        prices = {'cus-1': 25000, 'cus-2': 10000}
        assert calculate_subtotal(order_data, 400000, prices) == 530000

    def test_subtotal_without_order_data(self):
        assert calculate_subtotal(None, 400000, {}) == 0

    def test_missing_variant_price_counts_as_zero(self, order_data):
        assert calculate_subtotal(order_data, None, {}) == 70000


class TestDiscount:
    def test_no_promotion(self):
        assert calculate_discount(None, 500000) == 0

    def test_percentage_capped(self, make_promotion):
        promotion = make_promotion(type='PERCENTAGE', value=10, maxDiscountAmount=40000)
        assert calculate_discount(promotion, 500000) == 40000

    def test_percentage_under_cap(self, make_promotion):
        promotion = make_promotion(type='PERCENTAGE', value=10, maxDiscountAmount=40000)
        assert calculate_discount(promotion, 200000) == 20000

    def test_percentage_without_cap(self, make_promotion):
        promotion = make_promotion(type='PERCENTAGE', value=10, maxDiscountAmount=None)
        assert calculate_discount(promotion, 500000) == 50000

    def test_zero_cap_means_no_cap(self, make_promotion):
        promotion = make_promotion(type='PERCENTAGE', value=10, maxDiscountAmount=0)
        assert calculate_discount(promotion, 500000) == 50000

    def test_fixed_amount_never_exceeds_subtotal(self, make_promotion):
        promotion = make_promotion(type='FIXED_AMOUNT', value=150000, maxDiscountAmount=None)
        assert calculate_discount(promotion, 100000) == 100000

    def test_percentage_over_hundred_never_exceeds_subtotal(self, make_promotion):
        promotion = make_promotion(type='PERCENTAGE', value=150, maxDiscountAmount=None)
        assert calculate_discount(promotion, 100000) == 100000

    @pytest.mark.parametrize('subtotal', [0, 1, 99999, 100000, 2500000])
    def test_discount_bounded_by_subtotal(self, make_promotion, subtotal):
        for promotion in (make_promotion(type='PERCENTAGE', value=100, maxDiscountAmount=None),
                          make_promotion(type='FIXED_AMOUNT', value=100000)):
            assert 0 <= calculate_discount(promotion, subtotal) <= subtotal


class TestTotal:
    def test_total_formula(self):
        assert calculate_total(500000, 30000, 40000) == 490000

    def test_total_never_negative(self):
        assert calculate_total(10000, 0, 50000) == 0

    def test_percentage_example(self, make_promotion):
        promotion = make_promotion(type='PERCENTAGE', value=10, maxDiscountAmount=40000)
        discount = calculate_discount(promotion, 500000)
        assert (discount, calculate_total(500000, 30000, discount)) == (40000, 490000)

    def test_fixed_amount_example(self, make_promotion):
        promotion = make_promotion(type='FIXED_AMOUNT', value=150000)
        discount = calculate_discount(promotion, 100000)
        assert (discount, calculate_total(100000, 30000, discount)) == (100000, 30000)

    def test_batch_grand_total(self):
        items = [
            CartItem(id='a', order_data=OrderData(product_id='p', variant_id='v'),
                     subtotal=170000, total=200000, created_at='2024-01-01T00:00:00+00:00'),
            CartItem(id='b', order_data=OrderData(product_id='p', variant_id='v'),
                     subtotal=320000, total=350000, created_at='2024-01-01T00:00:00+00:00'),
        ]
        assert sum(item.total for item in items) == 550000
        assert calculate_items_subtotal(items) == 490000


class TestValidatePromotion:
    def test_valid(self, make_promotion):
        assert validate_promotion(make_promotion(), 500000) == (True, 'Promotion applied')

    def test_inactive(self, make_promotion):
        ok, message = validate_promotion(make_promotion(isActive=False), 500000)
        assert not ok
        assert 'no longer active' in message

    def test_not_started(self, make_promotion):
        start = datetime.now(timezone.utc) + timedelta(days=2)
        ok, message = validate_promotion(make_promotion(startDate=start.isoformat()), 500000)
        assert not ok
        assert 'not valid yet' in message

    def test_expired(self, make_promotion):
        end = datetime.now(timezone.utc) - timedelta(hours=1)
        ok, message = validate_promotion(make_promotion(endDate=end.isoformat()), 500000)
        assert not ok
        assert 'expired' in message

    def test_usage_limit_reached(self, make_promotion):
        ok, message = validate_promotion(make_promotion(usageLimit=5, usageCount=5), 500000)
        assert not ok
        assert 'usage limit' in message

    def test_below_minimum_order_value(self, make_promotion):
        ok, message = validate_promotion(make_promotion(minOrderValue=300000), 200000)
        assert not ok
        assert message == 'Minimum order value for this code is 300.000 ₫'

    def test_first_failing_check_wins(self, make_promotion):
        end = datetime.now(timezone.utc) - timedelta(hours=1)
        promotion = make_promotion(isActive=False, endDate=end.isoformat(), minOrderValue=900000)
        ok, message = validate_promotion(promotion, 1000)
        assert not ok
        assert 'no longer active' in message

    def test_naive_dates_are_utc(self, make_promotion):
        promotion = make_promotion(startDate='2024-01-01T00:00:00', endDate='2024-01-31T00:00:00')
        now = datetime(2024, 1, 15, tzinfo=timezone.utc)
        assert validate_promotion(promotion, 100000, now=now)[0]


def test_build_pricing(order_data, make_promotion):
    pricing = build_pricing(order_data, 400000, {'cus-1': 25000}, 30000,
                            make_promotion(type='FIXED_AMOUNT', value=20000))
    assert pricing.product_price == 400000
    assert pricing.options_price == 70000
    assert pricing.custom_products_price == 50000
    assert pricing.background_price == 0
    assert pricing.subtotal == 520000
    assert pricing.discount_amount == 20000
    assert pricing.total == 530000


@pytest.mark.parametrize('amount,expected', [
    (500000, '500.000 ₫'),
    (0, '0 ₫'),
    (None, '0 ₫'),
    (1234567.6, '1.234.568 ₫'),
])
def test_format_price(amount, expected):
    assert format_price(amount) == expected
