"""Shared pytest fixtures: app, client and an in-memory remote API."""

from datetime import datetime, timedelta, timezone

import httpx
import pytest

from giftshop import create_app


class FakeApi:
    """Stand-in for the remote REST API, served through ``httpx.MockTransport``.

    Routes map ``(method, path)`` to a static ``(status, body)`` pair or to a
    callable taking the request and returning one.
    """

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, method, path, body=None, status=200):
        self.routes[(method, path)] = (status, body)

    def add_handler(self, method, path, handler):
        self.routes[(method, path)] = handler

    def __call__(self, request):
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={'message': 'Not found'})
        status, body = route(request) if callable(route) else route
        return httpx.Response(status, json=body)

    def calls(self, method, path):
        return [r for r in self.requests if r.method == method and r.url.path == path]


@pytest.fixture
def fake_api():
    return FakeApi()


@pytest.fixture
def app(fake_api):
    """Application wired to the fake API with an in-memory cart store."""
    return create_app('testing', api_transport=httpx.MockTransport(fake_api))


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def request_ctx(app):
    """Request context for calling services and the cart store directly."""
    with app.test_request_context():
        yield


# --- Catalog data ---

@pytest.fixture
def variant():
    return {
        'id': 'var-1',
        'name': 'Large frame',
        'description': 'A3 wooden frame',
        'price': 400000,
        'option': {
            'purchaseOptions': [
                {'name': 'Gift wrap', 'description': 'Premium paper', 'price': 50000},
                {'name': 'Card', 'price': 20000},
            ]
        },
    }


@pytest.fixture
def product(variant):
    return {
        'id': 'prod-1',
        'name': 'Photo frame',
        'hasBg': True,
        'collectionId': 'col-1',
        'collection': {'id': 'col-1', 'name': 'Frames', 'imageUrl': 'frames.png', 'routeName': 'frames'},
        'productVariants': [variant],
    }


@pytest.fixture
def category():
    return {'id': 'cat-1', 'name': 'Figurines', 'productId': 'prod-1'}


@pytest.fixture
def custom():
    return {'id': 'cus-1', 'name': 'Cat figurine', 'price': 25000, 'imageUrl': 'cat.png',
            'description': 'Small clay cat', 'productCategoryId': 'cat-1'}


@pytest.fixture
def background():
    return {
        'id': 'bg-1',
        'name': 'Beach',
        'description': 'Sunset beach',
        'imageUrl': 'beach.png',
        'config': {'fields': [
            {'id': 'f1', 'type': 'text', 'title': 'Họ tên người nhận', 'required': True},
            {'id': 'f2', 'type': 'text', 'title': 'Số điện thoại'},
        ]},
    }


@pytest.fixture
def shipping_fee_data():
    return {
        'id': 'ship-1',
        'shippingType': 'Standard',
        'area': 'Hà Nội',
        'estimatedDeliveryTime': '2-3 days',
        'shippingFee': 30000,
        'notesOrRemarks': 'Inner city',
    }


def promotion_data(**overrides):
    now = datetime.now(timezone.utc)
    data = {
        'id': 'promo-1',
        'title': 'Autumn sale',
        'description': '10% off',
        'promoCode': 'AUTUMN10',
        'type': 'PERCENTAGE',
        'value': 10,
        'minOrderValue': 0,
        'maxDiscountAmount': 40000,
        'startDate': (now - timedelta(days=1)).isoformat(),
        'endDate': (now + timedelta(days=30)).isoformat(),
        'usageLimit': 100,
        'usageCount': 3,
        'isActive': True,
    }
    data.update(overrides)
    return data


@pytest.fixture
def catalog_api(fake_api, product, variant, category, custom, background, shipping_fee_data):
    """Register every catalog lookup used by order composition."""
    fake_api.add('GET', '/products/prod-1', {'data': product})
    fake_api.add('GET', '/product-variants/var-1', {'data': variant})
    fake_api.add('GET', '/product-categories/cat-1', {'data': category})
    fake_api.add('GET', '/product-customs/cus-1', {'data': custom})
    fake_api.add('GET', '/backgrounds/bg-1', {'data': background})
    fake_api.add('GET', '/product-categories/product/prod-1', {'data': [category]})
    fake_api.add('GET', '/product-customs/category/cat-1', {'data': [custom]})
    fake_api.add('GET', '/backgrounds/product/prod-1', {'data': [background]})
    fake_api.add('GET', '/shipping-fees', {'data': [shipping_fee_data]})
    fake_api.add('GET', '/shipping-fees/areas', {'data': ['Hà Nội', 'Hồ Chí Minh']})
    fake_api.add('GET', '/promotions/code/AUTUMN10', {'data': promotion_data()})
    return fake_api


@pytest.fixture
def make_promotion():
    """Factory for ``Promotion`` models with sensible defaults."""
    from giftshop.schemas import Promotion

    def factory(**overrides):
        return Promotion.model_validate(promotion_data(**overrides))
    return factory


@pytest.fixture
def promotion_payload():
    """Factory for promotion records as the API returns them."""
    return promotion_data
