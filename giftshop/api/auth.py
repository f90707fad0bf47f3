"""Login, logout and profile calls."""

import logging

from giftshop.api import get_api, paths
from giftshop.api.client import unwrap

logger = logging.getLogger(__name__)


def login(email, password):
    """Authenticate against the API and keep the tokens in the session.

    Returns the user record from the login response.
    """
    api = get_api()
    data = unwrap(api.post(paths.LOGIN, json={'email': email, 'password': password}, auth=False))
    api.token_store.set_tokens(
        data.get('accessToken'),
        refresh_token=data.get('refreshToken'),
        expires_at=data.get('expiresAt'),
        user=data.get('user'),
    )
    logger.info('User %s logged in', (data.get('user') or {}).get('id'))
    return data.get('user') or {}


def logout():
    api = get_api()
    try:
        api.post(paths.LOGOUT)
    finally:
        api.token_store.clear()


def get_profile():
    return unwrap(get_api().get(paths.USER_PROFILE))


def get_permissions(user_id):
    """Permission names granted to a user through their roles."""
    data = unwrap(get_api().get(paths.user_permissions(user_id)))
    if isinstance(data, dict):
        data = data.get('permissions') or []
    return [p['name'] if isinstance(p, dict) else p for p in data or []]
