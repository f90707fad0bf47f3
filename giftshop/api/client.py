"""HTTP client for the remote REST API.

Every call carries the session's bearer token. A 401 on any request other
than the refresh call triggers exactly one token refresh followed by one
retry of the original request.
"""

import logging
from typing import Any, Callable, Optional

import httpx
from flask import flash, has_request_context, session

from giftshop.api import paths
from giftshop.api.errors import (
    NETWORK_ERROR, REFRESH_FAILED, SESSION_EXPIRED, TIMEOUT_ERROR,
    ApiError, extract_error_message,
)

logger = logging.getLogger(__name__)


class SessionTokenStore:
    """Auth tokens and the signed-in user kept in the Flask session."""

    def get_token(self) -> Optional[str]:
        return session.get('access_token')

    def get_refresh_token(self) -> Optional[str]:
        return session.get('refresh_token')

    def get_user(self) -> Optional[dict]:
        return session.get('user')

    def set_tokens(self, access_token, refresh_token=None, expires_at=None, user=None):
        session['access_token'] = access_token
        if refresh_token:
            session['refresh_token'] = refresh_token
        if expires_at:
            session['token_expires'] = expires_at
        if user:
            session['user'] = user

    def clear(self):
        for key in ('access_token', 'refresh_token', 'token_expires', 'user'):
            session.pop(key, None)


def flash_error(message: str):
    if has_request_context():
        flash(message, 'danger')


def unwrap(payload: Any) -> Any:
    """Return the ``data`` member of an API envelope, or the payload itself."""
    if isinstance(payload, dict) and 'data' in payload:
        return payload['data']
    return payload


class ApiClient:
    """Thin wrapper around ``httpx.Client`` with auth refresh and error mapping."""

    def __init__(self, base_url: str, timeout: float = 30.0, token_store=None,
                 transport: Optional[httpx.BaseTransport] = None,
                 notify: Callable[[str], None] = flash_error):
        self.token_store = token_store or SessionTokenStore()
        self.notify = notify
        self._http = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def close(self):
        self._http.close()

    def _headers(self, auth: bool) -> dict:
        headers = {'Accept': 'application/json'}
        token = self.token_store.get_token() if auth else None
        if token:
            headers['Authorization'] = f'Bearer {token}'
        return headers

    def _send(self, method, path, params, json, auth, mutation):
        try:
            return self._http.request(method, path, params=params, json=json, headers=self._headers(auth))
        except httpx.TimeoutException as exc:
            logger.warning('Timeout calling %s %s', method, path)
            if not mutation:
                self.notify(TIMEOUT_ERROR)
            raise ApiError(None, TIMEOUT_ERROR) from exc
        except httpx.RequestError as exc:
            logger.warning('Network error calling %s %s: %s', method, path, exc)
            if not mutation:
                self.notify(NETWORK_ERROR)
            raise ApiError(None, NETWORK_ERROR) from exc

    def _refresh(self, mutation: bool):
        refresh_token = self.token_store.get_refresh_token()
        if not refresh_token:
            self.token_store.clear()
            if not mutation:
                self.notify(SESSION_EXPIRED)
            raise ApiError(401, SESSION_EXPIRED)

        try:
            response = self._http.post(paths.REFRESH, json={'refreshToken': refresh_token})
            response.raise_for_status()
            data = unwrap(response.json())
        except (httpx.HTTPError, ValueError) as exc:
            logger.info('Token refresh failed: %s', exc)
            self.token_store.clear()
            if not mutation:
                self.notify(REFRESH_FAILED)
            raise ApiError(401, REFRESH_FAILED) from exc

        self.token_store.set_tokens(
            data.get('accessToken'),
            refresh_token=data.get('refreshToken'),
            expires_at=data.get('expiresAt'),
            user=data.get('user'),
        )
        logger.info('Access token refreshed')

    def request(self, method: str, path: str, *, params=None, json=None,
                mutation: bool = False, auth: bool = True) -> Any:
        """Perform a request and return the decoded JSON body.

        ``mutation`` requests report their own errors, so the generic
        error flash is suppressed for them.
        """
        response = self._send(method, path, params, json, auth, mutation)

        if response.status_code == 401 and auth and path != paths.REFRESH:
            self._refresh(mutation)
            response = self._send(method, path, params, json, auth, mutation)

        try:
            payload = response.json() if response.content else None
        except ValueError:
            payload = None

        if response.status_code >= 400:
            message = extract_error_message(payload, response.status_code)
            logger.info('%s %s failed with %s: %s', method, path, response.status_code, message)
            if not mutation and response.status_code not in (401, 403):
                self.notify(message)
            raise ApiError(response.status_code, message, payload)

        return payload

    def get(self, path, params=None, **kwargs):
        return self.request('GET', path, params=params, **kwargs)

    def post(self, path, json=None, mutation=True, **kwargs):
        return self.request('POST', path, json=json, mutation=mutation, **kwargs)

    def put(self, path, json=None, mutation=True, **kwargs):
        return self.request('PUT', path, json=json, mutation=mutation, **kwargs)

    def patch(self, path, json=None, mutation=True, **kwargs):
        return self.request('PATCH', path, json=json, mutation=mutation, **kwargs)

    def delete(self, path, mutation=True, **kwargs):
        return self.request('DELETE', path, mutation=mutation, **kwargs)


def unwrap_list(payload: Any) -> list:
    """Extract a list of records from the API's various list envelopes."""
    data = unwrap(payload)
    if isinstance(data, dict):
        data = data.get('data') or data.get('items') or []
    return data or []
