"""Shipping fee endpoints."""

from giftshop.api import get_api, paths
from giftshop.api.client import unwrap, unwrap_list
from giftshop.schemas import ShippingFee


def get_shipping_fees(area=None, limit=100, **params):
    if area:
        params['area'] = area
    params['limit'] = limit
    return [ShippingFee.model_validate(f) for f in unwrap_list(get_api().get(paths.SHIPPING_FEES, params=params))]


def get_shipping_fee(fee_id):
    return ShippingFee.model_validate(unwrap(get_api().get(paths.shipping_fee_by_id(fee_id))))


def get_areas():
    return unwrap_list(get_api().get(paths.SHIPPING_FEE_AREAS))


def create_shipping_fee(data):
    return unwrap(get_api().post(paths.SHIPPING_FEES, json=data))


def update_shipping_fee(fee_id, data):
    return unwrap(get_api().patch(paths.shipping_fee_by_id(fee_id), json=data))


def delete_shipping_fee(fee_id):
    return get_api().delete(paths.shipping_fee_by_id(fee_id))
