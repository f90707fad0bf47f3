"""JSON API endpoints for AJAX operations."""

import math

from flask import Blueprint, jsonify, request, current_app
from pydantic import ValidationError
from giftshop.api import ApiError
from giftshop.cart import current_cart
from giftshop.orders.checkout import resolve_promotion
from giftshop.orders.composition import fetch_order_details
from giftshop.pricing import build_pricing, calculate_discount, calculate_subtotal, format_price
from giftshop.schemas import OrderData

api_bp = Blueprint('api', __name__)


def _shipping_fee(data):
    """Shipping fee from a JSON body; None when it is not a usable amount."""
    value = data.get('shippingFee')
    if value is None:
        return float(current_app.config['DEFAULT_SHIPPING_FEE'])
    if isinstance(value, bool):
        return None
    try:
        fee = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(fee) or fee < 0:
        return None
    return fee


def _quote(data, shipping_fee):
    """Order data, details and pricing for a JSON request body."""
    order_data = OrderData.model_validate(data.get('orderData') or {})
    details = fetch_order_details(order_data)

    promotion, message = None, None
    subtotal = calculate_subtotal(order_data, details.variant_price, details.custom_prices)
    if data.get('promoCode'):
        promotion, message = resolve_promotion(data['promoCode'], subtotal)
    pricing = build_pricing(order_data, details.variant_price, details.custom_prices,
                            shipping_fee, promotion)
    return order_data, pricing, promotion, message


@api_bp.route('/cart/count')
def cart_count():
    """Get cart item count and total."""
    cart = current_cart()
    return jsonify({'count': cart.get_item_count(), 'total': cart.get_total_amount()})


@api_bp.route('/cart/add', methods=['POST'])
def add_to_cart():
    """Add a configured order to the cart."""
    data = request.get_json(silent=True) or {}
    shipping_fee = _shipping_fee(data)
    if shipping_fee is None:
        return jsonify({'success': False, 'message': 'Invalid shipping fee'}), 400
    try:
        order_data, pricing, promotion, message = _quote(data, shipping_fee)
    except ValidationError:
        return jsonify({'success': False, 'message': 'Invalid order data'}), 400
    except ApiError as exc:
        return jsonify({'success': False, 'message': exc.message}), 400

    cart = current_cart()
    item = cart.add_order(
        order_data, pricing,
        selected_shipping_id=data.get('selectedShippingId'),
        applied_promotion_code=promotion.promo_code if promotion else None,
    )
    return jsonify({
        'success': True,
        'item': item.to_wire(),
        'promotion_message': message,
        'cart_count': cart.get_item_count(),
    })


@api_bp.route('/cart/remove/<item_id>', methods=['DELETE'])
def remove_from_cart(item_id):
    """Remove item from cart."""
    cart = current_cart()
    if not cart.remove_item(item_id):
        return jsonify({'success': False, 'message': 'Item not found'}), 404
    return jsonify({'success': True, 'cart_count': cart.get_item_count()})


@api_bp.route('/pricing/quote', methods=['POST'])
def pricing_quote():
    """Price an order without adding it to the cart."""
    data = request.get_json(silent=True) or {}
    shipping_fee = _shipping_fee(data)
    if shipping_fee is None:
        return jsonify({'success': False, 'message': 'Invalid shipping fee'}), 400
    try:
        _, pricing, promotion, message = _quote(data, shipping_fee)
    except ValidationError:
        return jsonify({'success': False, 'message': 'Invalid order data'}), 400
    except ApiError as exc:
        return jsonify({'success': False, 'message': exc.message}), 400

    return jsonify({
        'success': True,
        'pricing': pricing.to_wire(),
        'promotion_applied': promotion is not None,
        'promotion_message': message,
    })


@api_bp.route('/promotions/check', methods=['POST'])
def check_promotion():
    """Validate a promotion code against an order amount."""
    data = request.get_json(silent=True) or {}
    code = data.get('code', '')
    try:
        subtotal = float(data.get('subtotal', 0))
    except (TypeError, ValueError):
        return jsonify({'valid': False, 'message': 'Invalid order amount'}), 400

    promotion, message = resolve_promotion(code, subtotal)
    if promotion is None:
        return jsonify({'valid': False, 'message': message})

    discount = calculate_discount(promotion, subtotal)
    return jsonify({
        'valid': True,
        'message': f'Promotion applied! You save {format_price(discount)}',
        'discount': discount,
        'promotion': promotion.to_wire(),
    })
