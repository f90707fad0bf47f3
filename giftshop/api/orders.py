"""Order endpoints."""

from giftshop.api import get_api, paths
from giftshop.api.client import unwrap


def create_order(order_data: dict):
    """POST a single order; the backend expects it wrapped with a status."""
    return get_api().post(paths.ORDERS, json={'orderData': order_data, 'status': 'pending'})


def create_batch_order(batch_data: dict):
    return get_api().post(paths.ORDERS_BATCH, json=batch_data)


def search_orders(order_code=None, email=None):
    params = {}
    if order_code:
        params['orderCode'] = order_code
    if email:
        params['email'] = email
    return get_api().get(paths.ORDER_SEARCH, params=params, mutation=True)


def get_orders(params=None):
    payload = get_api().get(paths.ORDERS, params=params)
    meta = payload.get('meta', {}) if isinstance(payload, dict) else {}
    data = unwrap(payload)
    if isinstance(data, dict):
        meta = data.get('meta', meta)
        data = data.get('data') or data.get('orders') or []
    return data or [], meta


def get_order(order_id):
    return unwrap(get_api().get(paths.order_by_id(order_id)))


def update_order(order_id, data):
    return unwrap(get_api().patch(paths.order_by_id(order_id), json=data))


def delete_order(order_id):
    return get_api().delete(paths.order_by_id(order_id))
