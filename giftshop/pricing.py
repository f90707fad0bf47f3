"""Pricing rules for orders and cart checkout.

Everything here is a pure function of the order configuration, reference
prices fetched from the API and the user's shipping/promotion choices.
"""

from datetime import datetime, timezone
from typing import Iterable, Mapping, Optional, Tuple

from giftshop.schemas import CartItem, OrderData, OrderPricing, Promotion, PromotionType


def calculate_options_price(order_data: OrderData) -> float:
    """Sum of the selected purchase option prices."""
    return sum(float(option.price or 0) for option in order_data.selected_options)


def calculate_custom_products_price(order_data: OrderData, custom_prices: Mapping[str, float]) -> float:
    """Quantity-weighted price of every chosen custom product.

    Custom products missing from ``custom_prices`` (not found, or priceless)
    contribute nothing.
    """
    total = 0.0
    for _, choice in order_data.category_choices():
        price = custom_prices.get(choice.product_custom_id)
        if price:
            total += float(price) * choice.quantity
    return total


def calculate_subtotal(order_data: Optional[OrderData], variant_price: Optional[float],
                       custom_prices: Mapping[str, float]) -> float:
    """Variant price plus selected options plus custom products."""
    if order_data is None:
        return 0
    total = float(variant_price or 0)
    total += calculate_options_price(order_data)
    total += calculate_custom_products_price(order_data, custom_prices)
    return total


def calculate_items_subtotal(items: Iterable[CartItem]) -> float:
    """Subtotal of a batch checkout: the sum of each cart item's subtotal."""
    return sum(item.subtotal for item in items)


def calculate_discount(promotion: Optional[Promotion], subtotal: float) -> float:
    """Discount granted by an applied promotion."""
    if promotion is None:
        return 0
    if promotion.type == PromotionType.PERCENTAGE:
        discount = (subtotal * promotion.value) / 100
        if promotion.max_discount_amount:
            discount = min(discount, promotion.max_discount_amount)
        return min(discount, subtotal)
    if promotion.type == PromotionType.FIXED_AMOUNT:
        return min(promotion.value, subtotal)
    return 0


def calculate_total(subtotal: float, shipping_fee: float, discount: float) -> float:
    return max(0, subtotal + shipping_fee - discount)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def validate_promotion(promotion: Promotion, subtotal: float,
                       now: Optional[datetime] = None) -> Tuple[bool, str]:
    """Check whether a promotion may be applied to an order of ``subtotal``.

    Checks run in a fixed order and the first failure is reported.
    """
    now = _as_utc(now or datetime.now(timezone.utc))

    if not promotion.is_active:
        return False, 'This promotion code is no longer active'

    if now < _as_utc(promotion.start_date):
        return False, 'This promotion code is not valid yet'
    if promotion.end_date and now > _as_utc(promotion.end_date):
        return False, 'This promotion code has expired'

    if promotion.usage_limit and promotion.usage_count >= promotion.usage_limit:
        return False, 'This promotion code has reached its usage limit'

    if subtotal < promotion.min_order_value:
        return False, f'Minimum order value for this code is {format_price(promotion.min_order_value)}'

    return True, 'Promotion applied'


def build_pricing(order_data: OrderData, variant_price: Optional[float], custom_prices: Mapping[str, float],
                  shipping_fee: float, promotion: Optional[Promotion]) -> OrderPricing:
    """Full pricing breakdown for a single order submission."""
    subtotal = calculate_subtotal(order_data, variant_price, custom_prices)
    discount = calculate_discount(promotion, subtotal)
    return OrderPricing(
        product_price=float(variant_price or 0),
        options_price=calculate_options_price(order_data),
        custom_products_price=calculate_custom_products_price(order_data, custom_prices),
        # Backgrounds are not priced
        background_price=0,
        subtotal=subtotal,
        shipping_fee=shipping_fee,
        discount_amount=discount,
        total=calculate_total(subtotal, shipping_fee, discount),
    )


def format_price(amount) -> str:
    """Format an amount in VND, e.g. ``500.000 ₫``."""
    try:
        value = int(round(float(amount or 0)))
    except (TypeError, ValueError):
        value = 0
    return f'{value:,}'.replace(',', '.') + ' ₫'
