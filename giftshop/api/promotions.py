"""Promotion endpoints."""

from giftshop.api import get_api, paths
from giftshop.api.client import unwrap, unwrap_list
from giftshop.schemas import Promotion


def get_promotions(params=None):
    return unwrap_list(get_api().get(paths.PROMOTIONS, params=params))


def get_active_promotions():
    return [Promotion.model_validate(p) for p in unwrap_list(get_api().get(paths.ACTIVE_PROMOTIONS))]


def get_promotion(promotion_id):
    return unwrap(get_api().get(paths.promotion_by_id(promotion_id)))


def get_promotion_by_code(promo_code):
    """Look a promotion up by its code.

    Lookup failures are reported by the caller next to the code field, so
    this is sent as a mutation to keep the generic error flash quiet.
    """
    data = unwrap(get_api().get(paths.promotion_by_code(promo_code), mutation=True))
    return Promotion.model_validate(data)


def create_promotion(data):
    return unwrap(get_api().post(paths.PROMOTIONS, json=data))


def update_promotion(promotion_id, data):
    return unwrap(get_api().patch(paths.promotion_by_id(promotion_id), json=data))


def delete_promotion(promotion_id):
    return get_api().delete(paths.promotion_by_id(promotion_id))


def get_promotion_statistics():
    return unwrap(get_api().get(paths.PROMOTION_STATISTICS))
