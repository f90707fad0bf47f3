"""The order being prepared on the order page, kept in the session."""

import logging
from typing import Optional

from flask import session
from pydantic import ValidationError

from giftshop.schemas import OrderData

logger = logging.getLogger(__name__)

SESSION_KEY = 'pending_order'


def set_pending_order(order_data: OrderData, cart_item_id: Optional[str] = None,
                      promo_code: Optional[str] = None):
    session[SESSION_KEY] = {
        'orderData': order_data.to_wire(),
        'cartItemId': cart_item_id,
        'promoCode': promo_code,
    }


def get_pending_order() -> Optional[dict]:
    """Pending order as ``{'order_data', 'cart_item_id', 'promo_code'}``, or None."""
    raw = session.get(SESSION_KEY)
    if not raw:
        return None
    try:
        order_data = OrderData.model_validate(raw.get('orderData') or {})
    except ValidationError:
        logger.warning('Dropping unreadable pending order', exc_info=True)
        session.pop(SESSION_KEY, None)
        return None
    return {
        'order_data': order_data,
        'cart_item_id': raw.get('cartItemId'),
        'promo_code': raw.get('promoCode'),
    }


def set_pending_promo_code(promo_code: Optional[str]):
    raw = session.get(SESSION_KEY)
    if raw:
        raw['promoCode'] = promo_code
        session[SESSION_KEY] = raw


def clear_pending_order():
    session.pop(SESSION_KEY, None)
