"""Order submission: one POST per checkout, cart cleared only on success."""

import logging
from typing import Optional

from giftshop.api import ApiError, unwrap
from giftshop.api import orders as orders_api
from giftshop.cart import CartStore
from giftshop.orders.composition import (
    OrderDetails, compose_batch_order, compose_order_submission, fetch_order_details,
)
from giftshop.schemas import (
    BatchOrderSubmissionData, CustomerInfo, OrderData, OrderMetadata,
    OrderSubmissionData, Promotion, ShippingFee,
)

logger = logging.getLogger(__name__)

ORDER_FAILED = 'Something went wrong while placing your order. Please try again.'
BATCH_ORDER_FAILED = 'Could not place the order for your cart. Please try again.'


class OrderSubmissionError(Exception):
    """Order could not be placed; ``message`` is safe to show the customer."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def extract_order_code(response) -> str:
    data = unwrap(response) or {}
    if not isinstance(data, dict):
        return ''
    return data.get('orderCode') or (data.get('information') or {}).get('orderCode') or ''


def submit_order(payload: OrderSubmissionData) -> str:
    """POST a single order and return its order code."""
    try:
        response = orders_api.create_order(payload.to_wire())
    except ApiError as exc:
        logger.error('Order submission failed: %s', exc.message)
        raise OrderSubmissionError(exc.message or ORDER_FAILED, exc.status_code) from exc
    code = extract_order_code(response)
    logger.info('Order %s created', code)
    return code


def submit_batch_order(payload: BatchOrderSubmissionData) -> str:
    """POST a batch order and return its order code."""
    try:
        response = orders_api.create_batch_order(payload.to_wire())
    except ApiError as exc:
        logger.error('Batch order submission failed: %s', exc.message)
        raise OrderSubmissionError(exc.message or BATCH_ORDER_FAILED, exc.status_code) from exc
    code = extract_order_code(response)
    logger.info('Batch order %s created with %d items', code, len(payload.items))
    return code


def place_order(order_data: OrderData, shipping: ShippingFee, promotion: Optional[Promotion] = None,
                metadata: Optional[OrderMetadata] = None, cart: Optional[CartStore] = None,
                cart_item_id: Optional[str] = None, details: Optional[OrderDetails] = None) -> str:
    """Compose and submit a single order.

    When the order came from the cart, that cart item is removed once the
    order has been accepted.
    """
    if shipping is None:
        raise OrderSubmissionError('Please choose a shipping method.')
    try:
        details = details or fetch_order_details(order_data)
    except ApiError as exc:
        raise OrderSubmissionError(exc.message or ORDER_FAILED, exc.status_code) from exc

    payload = compose_order_submission(order_data, details, shipping, promotion, metadata)
    code = submit_order(payload)
    if cart is not None and cart_item_id:
        cart.remove_item(cart_item_id)
    return code


def checkout_batch(cart: CartStore, customer_info: CustomerInfo, shipping: ShippingFee,
                   promotion: Optional[Promotion] = None, metadata: Optional[OrderMetadata] = None,
                   user_id: Optional[str] = None) -> str:
    """Submit every cart item as one batch order.

    All-or-nothing: on failure the cart is left exactly as it was.
    """
    items = list(cart.items)
    if not items:
        raise OrderSubmissionError('Your cart is empty.')
    if shipping is None:
        raise OrderSubmissionError('Please choose a shipping method.')

    details_map = {}
    for item in items:
        try:
            details_map[item.id] = fetch_order_details(item.order_data)
        except ApiError:
            logger.error('Could not load details for cart item %s', item.id, exc_info=True)
            details_map[item.id] = OrderDetails()

    payload = compose_batch_order(items, details_map, customer_info, shipping, promotion,
                                  metadata, user_id=user_id)
    code = submit_batch_order(payload)
    cart.remove_items(item.id for item in items)
    return code


def checkout_cart_item(cart: CartStore, item_id: str, shipping: ShippingFee,
                       promotion: Optional[Promotion] = None,
                       metadata: Optional[OrderMetadata] = None,
                       details: Optional[OrderDetails] = None) -> str:
    """Submit one cart item as a single order and drop it from the cart."""
    item = cart.get_item(item_id)
    if item is None:
        raise OrderSubmissionError('This item is no longer in your cart.')
    return place_order(item.order_data, shipping, promotion, metadata,
                       cart=cart, cart_item_id=item_id, details=details)
