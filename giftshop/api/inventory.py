"""Inventory endpoints."""

from giftshop.api import get_api, paths
from giftshop.api.client import unwrap, unwrap_list


def get_inventory(params=None):
    return unwrap_list(get_api().get(paths.INVENTORY, params=params))


def get_inventory_item(inventory_id):
    return unwrap(get_api().get(paths.inventory_by_id(inventory_id)))


def get_low_stock(limit=10):
    return unwrap_list(get_api().get(paths.INVENTORY_LOW_STOCK, params={'limit': limit}))


def create_inventory(data):
    return unwrap(get_api().post(paths.INVENTORY, json=data))


def update_inventory(inventory_id, data):
    return unwrap(get_api().patch(paths.inventory_by_id(inventory_id), json=data))


def delete_inventory(inventory_id):
    return get_api().delete(paths.inventory_by_id(inventory_id))


def adjust_stock(inventory_id, quantity, reason=None):
    """Adjust current stock by ``quantity`` (negative to remove)."""
    body = {'quantity': quantity}
    if reason:
        body['reason'] = reason
    return unwrap(get_api().post(paths.inventory_adjust_stock(inventory_id), json=body))


def reserve_stock(inventory_id, quantity, reason=None):
    body = {'quantity': quantity}
    if reason:
        body['reason'] = reason
    return unwrap(get_api().post(paths.inventory_reserve_stock(inventory_id), json=body))


def release_reserved_stock(inventory_id, quantity):
    return unwrap(get_api().post(paths.inventory_release_reserved_stock(inventory_id), json={'quantity': quantity}))


def is_low_stock(item):
    """True when available stock has fallen to the alert threshold."""
    available = (item.get('currentStock') or 0) - (item.get('reservedStock') or 0)
    return available <= (item.get('minStockAlert') or 0)
