"""Checkout helpers shared by the order pages and the JSON endpoints."""

import logging
from typing import List, Optional, Tuple

from flask import current_app, request
from pydantic import ValidationError

from giftshop.api import ApiError
from giftshop.api import promotions as promotions_api
from giftshop.api import shipping as shipping_api
from giftshop.orders.composition import build_metadata
from giftshop.pricing import format_price, validate_promotion
from giftshop.schemas import OrderMetadata, Promotion, ShippingFee

logger = logging.getLogger(__name__)

PROMOTION_NOT_FOUND = 'Promotion code not found'
PROMOTION_INVALID = 'This promotion code is not valid'


def resolve_promotion(code: Optional[str], subtotal: float) -> Tuple[Optional[Promotion], str]:
    """Look up ``code`` and check it against ``subtotal``.

    Returns ``(promotion, message)``; the promotion is None whenever the code
    cannot be applied.
    """
    code = (code or '').strip()
    if not code:
        return None, 'Please enter a promotion code'
    try:
        promotion = promotions_api.get_promotion_by_code(code)
    except ApiError as exc:
        if exc.is_not_found:
            return None, PROMOTION_NOT_FOUND
        return None, exc.message
    except ValidationError:
        logger.warning('Unreadable promotion returned for code %s', code, exc_info=True)
        return None, PROMOTION_INVALID
    ok, message = validate_promotion(promotion, subtotal)
    if not ok:
        logger.info('Promotion %s rejected: %s', code, message)
        return None, message
    return promotion, message


def _area_name(area) -> Optional[str]:
    if isinstance(area, dict):
        return area.get('area') or area.get('name')
    return area


def shipping_options(area: Optional[str] = None) -> Tuple[List[str], List[ShippingFee]]:
    """Known shipping areas and the fees for ``area`` (default area when unset)."""
    area = area or current_app.config['DEFAULT_SHIPPING_AREA']
    try:
        areas = [name for name in map(_area_name, shipping_api.get_areas()) if name]
    except ApiError:
        areas = []
    if area not in areas:
        areas.insert(0, area)
    try:
        fees = shipping_api.get_shipping_fees(area=area)
    except ApiError:
        fees = []
    return areas, fees


def select_shipping(fees: List[ShippingFee], shipping_id: Optional[str]) -> Optional[ShippingFee]:
    """Fee picked by the customer, else the first one offered."""
    for fee in fees:
        if fee.id == shipping_id:
            return fee
    return fees[0] if fees else None


def shipping_amount(shipping: Optional[ShippingFee]) -> float:
    """Fee charged for ``shipping``; the configured flat fee when none is chosen."""
    if shipping is None:
        return current_app.config['DEFAULT_SHIPPING_FEE']
    return shipping.shipping_fee


def shipping_label(fee: ShippingFee) -> str:
    parts = [fee.shipping_type or 'Delivery', format_price(fee.shipping_fee)]
    if fee.estimated_delivery_time:
        parts.append(fee.estimated_delivery_time)
    return ' - '.join(parts)


def request_metadata() -> OrderMetadata:
    return build_metadata(
        order_source=current_app.config['ORDER_SOURCE'],
        user_agent=request.user_agent.string,
        ip_address=request.remote_addr,
    )
