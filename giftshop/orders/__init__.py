"""Order composition, submission and tracking."""

from .submission import (
    OrderSubmissionError, checkout_batch, checkout_cart_item, extract_order_code,
    place_order, submit_batch_order, submit_order,
)

__all__ = [
    'OrderSubmissionError', 'checkout_batch', 'checkout_cart_item', 'extract_order_code',
    'place_order', 'submit_batch_order', 'submit_order',
]
