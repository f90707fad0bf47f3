"""Remote REST API access."""

from flask import Flask, current_app, g

from .client import ApiClient, unwrap, unwrap_list
from .errors import ApiError


def init_api(app: Flask, transport=None):
    """Register API settings on the app; ``transport`` overrides the network layer."""
    app.extensions['giftshop_api'] = {'transport': transport}

    @app.teardown_appcontext
    def close_api_client(exception=None):
        client = g.pop('api_client', None)
        if client is not None:
            client.close()


def get_api() -> ApiClient:
    """API client for the current request."""
    if 'api_client' not in g:
        settings = current_app.extensions.get('giftshop_api', {})
        g.api_client = ApiClient(
            current_app.config['API_BASE_URL'],
            timeout=current_app.config['API_TIMEOUT'],
            transport=settings.get('transport'),
        )
    return g.api_client


__all__ = ['ApiClient', 'ApiError', 'get_api', 'init_api', 'unwrap', 'unwrap_list']
