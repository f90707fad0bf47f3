"""Consultation requests from the storefront."""

from giftshop.api import get_api, paths
from giftshop.api.client import unwrap, unwrap_list


def create_consultation(data):
    return unwrap(get_api().post(paths.CONSULTATIONS, json=data, auth=False))


def get_consultations(params=None):
    return unwrap_list(get_api().get(paths.CONSULTATIONS, params=params))


def update_consultation_status(consultation_id, status):
    return unwrap(get_api().patch(paths.consultation_status(consultation_id), json={'status': status}))
