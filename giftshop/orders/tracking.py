"""Order tracking: status lookup tables and order information helpers.

Order status is an opaque string owned by the server. It is only used here
to pick a label, a colour and a progress phase for display.
"""

from typing import Callable, Optional, Tuple

from giftshop.api import ApiError, unwrap
from giftshop.api import orders as orders_api

# Vietnamese staff labels to status keys, legacy labels last
STATUS_MAP_VI_TO_EN = {
    'chờ xử lý': 'pending',
    'đã nhận đơn': 'acknowledged',
    'tư vấn': 'consulting',
    'chờ demo': 'demo_pending',
    'đã gửi demo': 'demo_sent',
    'chờ confirm demo': 'demo_confirm_pending',
    'chỉnh sửa demo': 'demo_editing',
    'chờ duyệt demo': 'demo_approval_pending',
    'chờ bank': 'payment_pending',
    'đã thanh toán': 'paid',
    'chờ thiết kế': 'design_pending',
    'duyệt thiết kế': 'design_approved',
    'đang sản xuất': 'manufacturing',
    'hoàn thành': 'completed',
    'đã giao hàng': 'delivered',
    'giải quyết khiếu nại': 'complaint_resolving',
    'đóng khiếu nại': 'complaint_closed',
    'đã xác nhận': 'acknowledged',
    'đang xử lý': 'manufacturing',
    'đang giao': 'delivered',
    'đã giao': 'delivered',
    'đã hủy': 'complaint_closed',
}

STATUS_MAP_EN_TO_VI = {}
for _vi, _en in STATUS_MAP_VI_TO_EN.items():
    # first mapping wins
    STATUS_MAP_EN_TO_VI.setdefault(_en, _vi)

STATUS_TO_PHASE = {
    'pending': 'intake',
    'acknowledged': 'intake',
    'consulting': 'intake',
    'demo_pending': 'demo',
    'demo_sent': 'demo',
    'demo_confirm_pending': 'demo',
    'demo_editing': 'demo',
    'demo_approval_pending': 'demo',
    'payment_pending': 'finance',
    'paid': 'finance',
    'design_pending': 'production',
    'design_approved': 'production',
    'manufacturing': 'production',
    'completed': 'fulfillment',
    'delivered': 'fulfillment',
    'complaint_resolving': 'after_sales',
    'complaint_closed': 'after_sales',
}

PHASE_COLORS = {
    'intake': '#ff9800',
    'demo': '#2196f3',
    'finance': '#9c27b0',
    'production': '#3f51b5',
    'fulfillment': '#4caf50',
    'after_sales': '#795548',
}
DEFAULT_STATUS_COLOR = '#757575'

STATUS_STEPS = [
    ('intake', 'Received'),
    ('demo', 'Demo'),
    ('finance', 'Confirmation & payment'),
    ('production', 'Design & production'),
    ('fulfillment', 'Completion & delivery'),
    ('after_sales', 'After-sales'),
]

STATUS_LABELS = {
    'pending': 'Pending',
    'acknowledged': 'Acknowledged',
    'consulting': 'Consulting',
    'demo_pending': 'Preparing demo',
    'demo_sent': 'Demo sent',
    'demo_confirm_pending': 'Awaiting demo confirmation',
    'demo_editing': 'Editing demo',
    'demo_approval_pending': 'Awaiting demo approval',
    'payment_pending': 'Awaiting payment',
    'paid': 'Paid',
    'design_pending': 'Design in progress',
    'design_approved': 'Design approved',
    'manufacturing': 'Manufacturing',
    'completed': 'Production complete',
    'delivered': 'Delivered',
    'complaint_resolving': 'Resolving complaint',
    'complaint_closed': 'Complaint closed',
    'cancelled': 'Cancelled',
}

STATUS_DESCRIPTIONS = {
    'pending': 'Your order is waiting to be picked up by our staff.',
    'acknowledged': 'Your order has been received and is being processed.',
    'consulting': 'Our staff are advising you on the product.',
    'demo_pending': 'A demo is being prepared for you.',
    'demo_sent': 'A demo has been sent; please check it and reply.',
    'demo_confirm_pending': 'Waiting for you to confirm the demo.',
    'demo_editing': 'The demo is being edited as you requested.',
    'demo_approval_pending': 'The demo is waiting for your final approval.',
    'payment_pending': 'Waiting for payment before production starts.',
    'paid': 'Your payment has been confirmed.',
    'design_pending': 'The detailed design is in progress.',
    'design_approved': 'The design is approved and production is being prepared.',
    'manufacturing': 'Your product is being made.',
    'completed': 'Your product is finished and about to ship.',
    'delivered': 'Your product has been delivered.',
    'complaint_resolving': 'We are handling your complaint.',
    'complaint_closed': 'Your complaint has been resolved.',
    'cancelled': 'This order has been cancelled.',
}


def map_status_to_english(vietnamese_status: str) -> str:
    return STATUS_MAP_VI_TO_EN.get(vietnamese_status, vietnamese_status)


def map_status_to_vietnamese(english_status: str) -> str:
    return STATUS_MAP_EN_TO_VI.get(english_status, english_status)


def status_to_phase(status: str) -> Optional[str]:
    return STATUS_TO_PHASE.get(status)


def current_step(status: str) -> int:
    """Index of the status's phase in ``STATUS_STEPS``, or -1 when unknown."""
    phase = status_to_phase(status)
    if not phase:
        return -1
    for index, (key, _) in enumerate(STATUS_STEPS):
        if key == phase:
            return index
    return -1


def status_color(status: str) -> str:
    phase = status_to_phase(status)
    if not phase:
        return DEFAULT_STATUS_COLOR
    return PHASE_COLORS.get(phase, DEFAULT_STATUS_COLOR)


def status_color_by_vietnamese(vietnamese_status: str) -> str:
    return status_color(map_status_to_english(vietnamese_status))


def status_label(status: str) -> str:
    return STATUS_LABELS.get(status, status)


def apply_order_status_update(order_id: str, prev_status: str, new_vietnamese_status: str,
                              update_fn: Callable[[str, str], object]) -> Tuple[bool, str, Optional[str]]:
    """Push a status change picked from the Vietnamese staff labels.

    Returns ``(updated, status, error)``; ``status`` is the previous one when
    nothing changed or the update failed.
    """
    next_status = map_status_to_english(new_vietnamese_status)
    if not next_status or next_status == prev_status:
        return False, prev_status, None
    try:
        update_fn(order_id, next_status)
    except ApiError as exc:
        return False, prev_status, exc.message or 'Could not update the status'
    return True, next_status, None


def search_orders(order_code: Optional[str] = None, email: Optional[str] = None) -> Tuple[list, str]:
    """Search orders by code or email; returns ``(orders, server message)``."""
    response = orders_api.search_orders(order_code=order_code, email=email) or {}
    orders = unwrap(response) or []
    if isinstance(orders, dict):
        orders = [orders]
    message = response.get('message', '') if isinstance(response, dict) else ''
    return orders, message


# --- Order information helpers ---

def _info(order: dict) -> dict:
    return order.get('information') or {}


def _form_values(order: dict) -> list:
    return (((_info(order).get('background') or {}).get('formData') or {}).get('values')) or []


def _find_field(order: dict, predicate) -> Optional[str]:
    for field in _form_values(order):
        title = (field.get('fieldTitle') or '').lower()
        if predicate(title):
            return field.get('value')
    return None


def is_batch_order(order: dict) -> bool:
    return _info(order).get('isBatchOrder') is True


def get_item_count(order: dict) -> int:
    if is_batch_order(order):
        return _info(order).get('itemCount') or 0
    return 1


def get_product_names(order: dict) -> str:
    info = _info(order)
    if is_batch_order(order):
        items = info.get('items') or []
        item_count = info.get('itemCount') or len(items)
        names = ', '.join((item.get('product') or {}).get('name') or 'Product' for item in items[:2])
        if item_count > 2:
            return f'{names}... (+{item_count - 2})'
        return names or f'{item_count} products'
    return (info.get('product') or {}).get('name') or 'Product'


def get_order_total(order: dict) -> float:
    return (_info(order).get('pricing') or {}).get('total') or 0


def _user(order: dict) -> dict:
    return order.get('user') or {}


def _is_name_title(title):
    return (
        'họ tên' in title or 'tên khách' in title or 'họ và tên' in title
        or 'tên người đặt' in title or ('tên' in title and 'người nhận' not in title)
        or title in ('name', 'customer name')
    )


def _is_phone_title(title):
    return 'số điện thoại' in title or 'điện thoại' in title or 'sđt' in title or 'phone' in title


def _is_address_title(title):
    return 'địa chỉ' in title or 'dia chi' in title or 'address' in title or 'nhận hàng' in title


def get_customer_name(order: dict) -> str:
    info = _info(order)
    if is_batch_order(order):
        return (info.get('customerInfo') or {}).get('name') or _user(order).get('name') or 'N/A'
    if (info.get('contactInfo') or {}).get('name'):
        return info['contactInfo']['name']
    return _find_field(order, _is_name_title) or _user(order).get('name') or 'N/A'


def get_customer_phone(order: dict) -> str:
    info = _info(order)
    if is_batch_order(order):
        return (info.get('customerInfo') or {}).get('phone') or _user(order).get('phone') or 'N/A'
    if (info.get('contactInfo') or {}).get('phone'):
        return info['contactInfo']['phone']
    return _find_field(order, _is_phone_title) or _user(order).get('phone') or 'N/A'


def get_customer_email(order: dict) -> str:
    info = _info(order)
    if is_batch_order(order):
        return (info.get('customerInfo') or {}).get('email') or _user(order).get('email') or 'N/A'
    if (info.get('contactInfo') or {}).get('email'):
        return info['contactInfo']['email']
    found = _find_field(order, lambda title: 'email' in title or 'e-mail' in title)
    return found or _user(order).get('email') or 'N/A'


def get_customer_address(order: dict) -> str:
    info = _info(order)
    if is_batch_order(order):
        return (info.get('customerInfo') or {}).get('address') or 'N/A'
    return _find_field(order, _is_address_title) or (info.get('shipping') or {}).get('address') or 'N/A'


def get_receiver_name(order: dict) -> str:
    if is_batch_order(order):
        return (_info(order).get('customerInfo') or {}).get('name') or 'N/A'
    return _find_field(order, lambda title: 'người nhận' in title or 'receiver name' in title) or 'N/A'


def get_receiver_phone(order: dict) -> str:
    if is_batch_order(order):
        return (_info(order).get('customerInfo') or {}).get('phone') or 'N/A'
    return _find_field(order, lambda title: _is_phone_title(title) and 'người nhận' in title) or 'N/A'


def get_customer_info(order: dict) -> dict:
    return {
        'name': get_customer_name(order),
        'phone': get_customer_phone(order),
        'email': get_customer_email(order),
        'address': get_customer_address(order),
        'receiver_name': get_receiver_name(order),
        'receiver_phone': get_receiver_phone(order),
        'is_batch_order': is_batch_order(order),
        'item_count': get_item_count(order),
    }
