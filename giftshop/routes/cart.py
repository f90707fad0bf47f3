"""Cart routes."""

from flask import Blueprint, render_template, redirect, url_for, flash, request, jsonify, abort, current_app
from giftshop.api import ApiError, catalog
from giftshop.cart import current_cart
from giftshop.orders.configuration import (
    ConfigurationError, custom_prices_for, load_configurator, order_data_from_form,
)
from giftshop.pricing import build_pricing

cart_bp = Blueprint('cart', __name__)


def _wants_json():
    return request.headers.get('X-Requested-With') == 'XMLHttpRequest'


@cart_bp.route('/')
def view_cart():
    """View shopping cart."""
    cart = current_cart()
    return render_template('cart/cart.html',
                           cart_items=list(cart),
                           cart_total=cart.get_total_amount())


@cart_bp.route('/add/<product_id>', methods=['POST'])
def add_to_cart(product_id):
    """Add the configuration posted from the product page straight to the cart.

    The default shipping fee is used until the customer checks out.
    """
    try:
        product, categories, _ = load_configurator(product_id)
    except ApiError:
        return redirect(request.referrer or url_for('main.index'))

    try:
        order_data = order_data_from_form(product, categories, request.form)
    except ConfigurationError as exc:
        flash(str(exc), 'warning')
        return redirect(url_for('main.product_detail', product_id=product_id))

    variant = catalog.find_variant(product, order_data.variant_id) or {}
    pricing = build_pricing(order_data, variant.get('price'), custom_prices_for(categories),
                            current_app.config['DEFAULT_SHIPPING_FEE'], None)
    cart = current_cart()
    cart.add_order(order_data, pricing)

    if _wants_json():
        return jsonify({'success': True, 'cart_count': cart.get_item_count()})

    flash(f"{product.get('name') or 'Product'} added to cart!", 'success')
    return redirect(url_for('cart.view_cart'))


@cart_bp.route('/remove/<item_id>', methods=['POST'])
def remove_from_cart(item_id):
    """Remove item from cart."""
    cart = current_cart()
    if not cart.remove_item(item_id):
        abort(404)

    if _wants_json():
        return jsonify({'success': True, 'cart_count': cart.get_item_count()})

    flash('Item removed from cart.', 'success')
    return redirect(url_for('cart.view_cart'))


@cart_bp.route('/clear', methods=['POST'])
def clear_cart():
    """Clear all items from cart."""
    current_cart().clear_cart()
    flash('Cart cleared.', 'success')
    return redirect(url_for('cart.view_cart'))
