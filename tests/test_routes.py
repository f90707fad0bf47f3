"""End-to-end tests of the storefront and back-office routes."""

import json

import pytest

from giftshop.cart import CartStore


@pytest.fixture
def storefront(catalog_api, promotion_payload):
    catalog_api.add('GET', '/collections/hot', {'data': [
        {'id': 'col-1', 'name': 'Frames', 'routeName': 'frames', 'imageUrl': 'frames.png'},
    ]})
    catalog_api.add('GET', '/promotions/active', {'data': [promotion_payload()]})
    return catalog_api


@pytest.fixture
def configured(client, storefront):
    """Configure prod-1 on the product page: gift wrap plus two cat figurines."""
    response = client.post('/products/prod-1', data={
        'variant_id': 'var-1',
        'options': ['option-0'],
        'custom_cus-1': '2',
        'background_id': 'bg-1',
        'bg_field_f1': 'Nguyễn Văn A',
    })
    assert response.status_code == 302
    assert response.headers['Location'].endswith('/orders/new')
    return response


def login_as(client, permissions=(), roles=()):
    with client.session_transaction() as sess:
        sess['user'] = {'id': 'u1', 'email': 'staff@example.com', 'fullName': 'Staff', 'roles': list(roles)}
        sess['permissions'] = list(permissions)
        sess['access_token'] = 'token'
        sess['_user_id'] = 'u1'
        sess['_fresh'] = True


class TestStorefront:
    def test_index(self, client, storefront):
        response = client.get('/')
        assert response.status_code == 200
        assert b'Frames' in response.data
        assert b'AUTUMN10' in response.data

    def test_index_survives_api_outage(self, client):
        assert client.get('/').status_code == 200

    def test_product_page(self, client, storefront):
        response = client.get('/products/prod-1')
        assert response.status_code == 200
        html = response.get_data(as_text=True)
        assert 'Photo frame' in html
        assert 'Gift wrap' in html
        assert 'name="custom_cus-1"' in html
        assert 'Họ tên người nhận' in html

    def test_unknown_product(self, client, storefront):
        assert client.get('/products/nope').status_code == 404

    def test_order_page_requires_configuration(self, client):
        response = client.get('/orders/new')
        assert response.status_code == 302

    def test_order_page_prices_configuration(self, client, configured):
        response = client.get('/orders/new')
        assert response.status_code == 200
        html = response.get_data(as_text=True)
        # 400.000 variant + 50.000 gift wrap + 2 x 25.000 figurines
        assert '500.000 ₫' in html
        assert '530.000 ₫' in html

    def test_apply_promotion(self, client, configured):
        response = client.post('/orders/new', data={
            'promo_code': 'AUTUMN10', 'apply_promo': 'Apply', 'area': 'Hà Nội', 'shipping_id': 'ship-1',
        })
        assert response.status_code == 302
        html = client.get('/orders/new').get_data(as_text=True)
        assert '-40.000 ₫' in html
        assert '490.000 ₫' in html

    def test_place_order(self, client, configured, storefront):
        storefront.add('POST', '/orders', {'data': {'orderCode': 'ORD-9'}}, status=201)
        response = client.post('/orders/new', data={
            'area': 'Hà Nội', 'shipping_id': 'ship-1', 'place_order': 'Place order',
        })
        assert response.status_code == 302
        assert response.headers['Location'].endswith('/orders/success/ORD-9')
        body = json.loads(storefront.calls('POST', '/orders')[0].content)
        assert body['orderData']['shipping']['shippingId'] == 'ship-1'
        assert body['orderData']['background']['formData']['values'][0]['fieldTitle'] == 'Họ tên người nhận'
        assert body['orderData']['metadata']['orderSource'] == 'web'
        # the pending order is consumed
        assert client.get('/orders/new').status_code == 302

    def test_failed_order_stays_on_page(self, client, configured, storefront):
        storefront.add('POST', '/orders', {'message': 'Variant is sold out'}, status=400)
        response = client.post('/orders/new', data={
            'area': 'Hà Nội', 'shipping_id': 'ship-1', 'place_order': 'Place order',
        })
        assert response.status_code == 200
        assert 'Variant is sold out' in response.get_data(as_text=True)


class TestCart:
    def test_add_from_product_page(self, app, client, storefront):
        response = client.post('/cart/add/prod-1', data={'variant_id': 'var-1', 'custom_cus-1': '1'})
        assert response.status_code == 302
        data = client.get('/api/cart/count').get_json()
        assert data == {'count': 1, 'total': 425000 + app.config['DEFAULT_SHIPPING_FEE']}

    def test_add_json(self, client, storefront):
        response = client.post('/cart/add/prod-1', data={'variant_id': 'var-1'},
                               headers={'X-Requested-With': 'XMLHttpRequest'})
        assert response.get_json() == {'success': True, 'cart_count': 1}

    def test_order_page_adds_to_cart(self, client, configured):
        response = client.post('/orders/new', data={
            'area': 'Hà Nội', 'shipping_id': 'ship-1', 'add_to_cart': 'Add to cart',
        })
        assert response.status_code == 302
        assert client.get('/api/cart/count').get_json() == {'count': 1, 'total': 530000}
        html = client.get('/cart/').get_data(as_text=True)
        assert '530.000 ₫' in html

    def test_remove_unknown_item(self, client):
        assert client.post('/cart/remove/cart_missing').status_code == 404

    def test_api_add_and_remove(self, client, storefront):
        response = client.post('/api/cart/add', json={
            'orderData': {'productId': 'prod-1', 'variantId': 'var-1'},
            'shippingFee': 20000,
            'promoCode': 'AUTUMN10',
        })
        data = response.get_json()
        assert data['success'] is True
        assert data['item']['subtotal'] == 400000
        assert data['item']['discount'] == 40000
        assert data['item']['total'] == 380000
        assert data['item']['appliedPromotionCode'] == 'AUTUMN10'

        item_id = data['item']['id']
        assert client.delete(f'/api/cart/remove/{item_id}').get_json() == {'success': True, 'cart_count': 0}
        assert client.delete(f'/api/cart/remove/{item_id}').status_code == 404

    def test_api_rejects_bad_order_data(self, client):
        response = client.post('/api/cart/add', json={'orderData': {'variantId': 'var-1'}})
        assert response.status_code == 400

    def test_promotion_check(self, client, storefront):
        data = client.post('/api/promotions/check', json={'code': 'AUTUMN10', 'subtotal': 200000}).get_json()
        assert data['valid'] is True
        assert data['discount'] == 20000

        data = client.post('/api/promotions/check', json={'code': 'NOPE', 'subtotal': 200000}).get_json()
        assert data == {'valid': False, 'message': 'Promotion code not found'}

    def test_promotion_check_with_empty_record(self, client, storefront):
        storefront.add('GET', '/promotions/code/GHOST', {'data': None})
        response = client.post('/api/promotions/check', json={'code': 'GHOST', 'subtotal': 200000})
        assert response.status_code == 200
        assert response.get_json() == {'valid': False, 'message': 'This promotion code is not valid'}

    def test_api_add_with_empty_promotion_record(self, client, storefront):
        storefront.add('GET', '/promotions/code/GHOST', {'data': None})
        data = client.post('/api/cart/add', json={
            'orderData': {'productId': 'prod-1', 'variantId': 'var-1'},
            'shippingFee': 20000,
            'promoCode': 'GHOST',
        }).get_json()
        assert data['success'] is True
        assert data['item']['discount'] == 0
        assert data['promotion_message'] == 'This promotion code is not valid'

    @pytest.mark.parametrize('shipping_fee', ['abc', [], {}, -1, True])
    def test_quote_rejects_bad_shipping_fee(self, client, storefront, shipping_fee):
        body = {'orderData': {'productId': 'prod-1', 'variantId': 'var-1'}, 'shippingFee': shipping_fee}
        for url in ('/api/pricing/quote', '/api/cart/add'):
            response = client.post(url, json=body)
            assert response.status_code == 400
            assert response.get_json() == {'success': False, 'message': 'Invalid shipping fee'}
        assert client.get('/api/cart/count').get_json()['count'] == 0

    def test_batch_checkout(self, app, client, storefront):
        storefront.add('POST', '/orders/batch', {'data': {'orderCode': 'BATCH-9'}})
        client.post('/cart/add/prod-1', data={'variant_id': 'var-1'})
        client.post('/cart/add/prod-1', data={'variant_id': 'var-1', 'options': ['option-1']})

        response = client.post('/orders/checkout', data={
            'name': 'Nguyễn Văn A', 'phone': '0901234567', 'area': 'Hà Nội',
            'shipping_id': 'ship-1', 'place_order': 'Place order',
        })

        assert response.status_code == 302
        assert response.headers['Location'].endswith('/orders/success/BATCH-9')
        body = json.loads(storefront.calls('POST', '/orders/batch')[0].content)
        assert body['pricing']['itemsSubtotal'] == 820000
        assert body['pricing']['total'] == 850000
        assert client.get('/api/cart/count').get_json()['count'] == 0

    def test_batch_checkout_needs_items(self, client):
        response = client.get('/orders/checkout')
        assert response.status_code == 302
        assert response.headers['Location'].endswith('/cart/')


class TestTracking:
    def test_track_by_code(self, client, fake_api):
        fake_api.add('GET', '/orders/search', {'data': [{
            'id': 'o1', 'orderCode': 'ORD-1', 'status': 'đã thanh toán',
            'information': {'product': {'name': 'Photo frame'}, 'pricing': {'total': 490000}},
        }]})
        response = client.get('/orders/track?order_code=ORD-1')
        html = response.get_data(as_text=True)
        assert response.status_code == 200
        assert 'ORD-1' in html
        assert 'Paid' in html
        assert '490.000 ₫' in html

    def test_track_requires_code_or_email(self, client, fake_api):
        response = client.post('/orders/track', data={})
        assert response.status_code == 200
        assert fake_api.calls('GET', '/orders/search') == []

    def test_no_results(self, client, fake_api):
        fake_api.add('GET', '/orders/search', {'data': []})
        response = client.post('/orders/track', data={'email': 'nobody@example.com'})
        assert 'No orders match that search.' in response.get_data(as_text=True)


class TestAdmin:
    def test_redirects_anonymous_users(self, client):
        response = client.get('/admin/')
        assert response.status_code == 302
        assert '/login' in response.headers['Location']

    def test_customers_are_not_staff(self, client):
        login_as(client)
        assert client.get('/admin/').status_code == 403

    def test_dashboard_for_admin(self, client):
        login_as(client, roles=['admin'])
        assert client.get('/admin/').status_code == 200

    def test_permission_is_checked(self, client, fake_api):
        fake_api.add('GET', '/orders', {'data': []})
        login_as(client, permissions=['products.list'])
        assert client.get('/admin/orders').status_code == 403

    def test_manage_permission_grants_module(self, client, fake_api):
        fake_api.add('GET', '/orders', {'data': [{'id': 'o1', 'orderCode': 'ORD-1', 'status': 'chờ xử lý'}]})
        login_as(client, permissions=['orders.manage'])
        response = client.get('/admin/orders')
        assert response.status_code == 200
        assert b'ORD-1' in response.data

    def test_order_status_update(self, client, fake_api):
        fake_api.add('GET', '/orders/o1', {'data': {'id': 'o1', 'orderCode': 'ORD-1', 'status': 'pending'}})
        fake_api.add('PATCH', '/orders/o1', {'data': {'id': 'o1', 'status': 'paid'}})
        login_as(client, permissions=['orders.manage'])

        response = client.post('/admin/orders/o1', data={'status': 'đã thanh toán'})

        assert response.status_code == 302
        patch = fake_api.calls('PATCH', '/orders/o1')
        assert [json.loads(r.content) for r in patch] == [{'status': 'paid'}]

    def test_unchanged_status_is_not_sent(self, client, fake_api):
        fake_api.add('GET', '/orders/o1', {'data': {'id': 'o1', 'orderCode': 'ORD-1', 'status': 'pending'}})
        login_as(client, permissions=['orders.manage'])
        client.post('/admin/orders/o1', data={'status': 'chờ xử lý'})
        assert fake_api.calls('PATCH', '/orders/o1') == []


class TestAuth:
    def test_login_stores_session(self, client, fake_api):
        fake_api.add('POST', '/auth/login', {'data': {
            'accessToken': 'a1', 'refreshToken': 'r1',
            'user': {'id': 'u1', 'email': 'staff@example.com', 'roles': [{'name': 'admin'}]},
        }})
        fake_api.add('GET', '/user-permissions/user/u1/permissions', {'data': ['orders.manage']})

        response = client.post('/login', data={'email': 'Staff@Example.com', 'password': 'secret'})

        assert response.status_code == 302
        assert '/admin' in response.headers['Location']
        with client.session_transaction() as sess:
            assert sess['access_token'] == 'a1'
            assert sess['permissions'] == ['orders.manage']
        body = json.loads(fake_api.calls('POST', '/auth/login')[0].content)
        assert body['email'] == 'staff@example.com'

    def test_bad_credentials(self, client, fake_api):
        fake_api.add('POST', '/auth/login', {'message': 'Invalid credentials'}, status=401)
        response = client.post('/login', data={'email': 'staff@example.com', 'password': 'wrong'})
        assert response.status_code == 200
        assert 'Invalid credentials' in response.get_data(as_text=True)

    def test_logout_clears_session(self, client, fake_api):
        fake_api.add('POST', '/auth/logout', {'data': None})
        login_as(client, roles=['admin'])
        client.get('/logout')
        with client.session_transaction() as sess:
            assert 'access_token' not in sess
            assert 'permissions' not in sess


def test_cart_survives_between_requests(app, client, storefront):
    client.post('/cart/add/prod-1', data={'variant_id': 'var-1'})
    with client.session_transaction() as sess:
        owner = sess['cart_owner']
    with app.test_request_context():
        assert CartStore.load(owner).get_item_count() == 1
