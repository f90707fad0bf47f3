"""Order routes: order page, batch checkout, confirmation and tracking."""

from flask import Blueprint, render_template, redirect, url_for, flash, request, session, abort
from flask_login import current_user
from giftshop.api import ApiError
from giftshop.cart import current_cart
from giftshop.forms.orders import OrderForm, BatchCheckoutForm, TrackOrderForm
from giftshop.orders import OrderSubmissionError, checkout_batch, checkout_cart_item, place_order
from giftshop.orders import tracking
from giftshop.orders.checkout import (
    request_metadata, resolve_promotion, select_shipping, shipping_amount,
    shipping_label, shipping_options,
)
from giftshop.orders.composition import fetch_order_details
from giftshop.orders.pending import (
    clear_pending_order, get_pending_order, set_pending_order, set_pending_promo_code,
)
from giftshop.pricing import (
    build_pricing, calculate_discount, calculate_items_subtotal, calculate_subtotal,
    calculate_total,
)
from giftshop.schemas import CustomerInfo

orders_bp = Blueprint('orders', __name__)

BATCH_PROMO_KEY = 'batch_promo_code'


def _prepare_shipping(form):
    """Fill the area and shipping selects; return the chosen fee."""
    area = form.area.data or request.args.get('area')
    areas, fees = shipping_options(area)
    area = area or areas[0]
    form.area.choices = [(name, name) for name in areas]
    form.area.data = area
    form.shipping_id.choices = [(fee.id, shipping_label(fee)) for fee in fees]
    shipping = select_shipping(fees, form.shipping_id.data)
    if shipping is not None:
        form.shipping_id.data = shipping.id
    return area, shipping


@orders_bp.route('/new', methods=['GET', 'POST'])
def order_page():
    """Order page for the product configured last, or a cart item being checked out."""
    pending = get_pending_order()
    if pending is None:
        flash('Please choose and configure a product first.', 'info')
        return redirect(url_for('main.index'))

    order_data = pending['order_data']
    try:
        details = fetch_order_details(order_data)
    except ApiError as exc:
        flash(exc.message or 'This product is no longer available.', 'danger')
        clear_pending_order()
        return redirect(url_for('main.index'))

    form = OrderForm()
    area, shipping = _prepare_shipping(form)
    subtotal = calculate_subtotal(order_data, details.variant_price, details.custom_prices)

    promotion = None
    if pending['promo_code']:
        promotion, _ = resolve_promotion(pending['promo_code'], subtotal)
        if promotion is None:
            set_pending_promo_code(None)

    if form.validate_on_submit():
        if form.apply_promo.data:
            promotion, message = resolve_promotion(form.promo_code.data, subtotal)
            set_pending_promo_code(promotion.promo_code if promotion else None)
            flash(message, 'success' if promotion else 'warning')
            return redirect(url_for('orders.order_page', area=area))

        if form.remove_promo.data:
            set_pending_promo_code(None)
            flash('Promotion removed.', 'info')
            return redirect(url_for('orders.order_page', area=area))

        if form.add_to_cart.data:
            pricing = build_pricing(order_data, details.variant_price, details.custom_prices,
                                    shipping_amount(shipping), promotion)
            current_cart().add_order(
                order_data, pricing,
                selected_shipping_id=shipping.id if shipping else None,
                applied_promotion_code=promotion.promo_code if promotion else None,
            )
            clear_pending_order()
            flash('Added to your cart.', 'success')
            return redirect(url_for('cart.view_cart'))

        if form.place_order.data:
            try:
                if pending['cart_item_id']:
                    order_code = checkout_cart_item(current_cart(), pending['cart_item_id'], shipping,
                                                    promotion, request_metadata(), details=details)
                else:
                    order_code = place_order(order_data, shipping, promotion, request_metadata(),
                                             details=details)
            except OrderSubmissionError as exc:
                flash(exc.message, 'danger')
            else:
                clear_pending_order()
                flash('Your order has been placed!', 'success')
                return redirect(url_for('orders.success', order_code=order_code))

    if promotion and not form.promo_code.data:
        form.promo_code.data = promotion.promo_code

    pricing = build_pricing(order_data, details.variant_price, details.custom_prices,
                            shipping_amount(shipping), promotion)
    return render_template('orders/order.html',
                           form=form,
                           details=details,
                           order_data=order_data,
                           shipping=shipping,
                           promotion=promotion,
                           pricing=pricing,
                           from_cart=bool(pending['cart_item_id']))


@orders_bp.route('/checkout/<item_id>', methods=['POST'])
def checkout_item(item_id):
    """Open the order page for one cart item."""
    item = current_cart().get_item(item_id)
    if item is None:
        abort(404)
    set_pending_order(item.order_data, cart_item_id=item.id, promo_code=item.applied_promotion_code)
    return redirect(url_for('orders.order_page'))


@orders_bp.route('/checkout', methods=['GET', 'POST'])
def batch_checkout():
    """Checkout every cart item as one order."""
    cart = current_cart()
    if not len(cart):
        flash('Your cart is empty.', 'warning')
        return redirect(url_for('cart.view_cart'))

    form = BatchCheckoutForm()
    area, shipping = _prepare_shipping(form)
    items_subtotal = calculate_items_subtotal(cart)

    promotion = None
    if session.get(BATCH_PROMO_KEY):
        promotion, _ = resolve_promotion(session[BATCH_PROMO_KEY], items_subtotal)
        if promotion is None:
            session.pop(BATCH_PROMO_KEY, None)

    if request.method == 'POST':
        if form.apply_promo.data:
            promotion, message = resolve_promotion(form.promo_code.data, items_subtotal)
            if promotion:
                session[BATCH_PROMO_KEY] = promotion.promo_code
            else:
                session.pop(BATCH_PROMO_KEY, None)
            flash(message, 'success' if promotion else 'warning')
            return redirect(url_for('orders.batch_checkout', area=area))

        if form.remove_promo.data:
            session.pop(BATCH_PROMO_KEY, None)
            flash('Promotion removed.', 'info')
            return redirect(url_for('orders.batch_checkout', area=area))

        if form.place_order.data and form.validate():
            customer_info = CustomerInfo(
                name=form.name.data,
                phone=form.phone.data,
                email=form.email.data or None,
                address=form.address.data or None,
                notes=form.notes.data or None,
            )
            user_id = current_user.id if current_user.is_authenticated else None
            try:
                order_code = checkout_batch(cart, customer_info, shipping, promotion,
                                            request_metadata(), user_id=user_id)
            except OrderSubmissionError as exc:
                flash(exc.message, 'danger')
            else:
                session.pop(BATCH_PROMO_KEY, None)
                flash('Your order has been placed!', 'success')
                return redirect(url_for('orders.success', order_code=order_code))

    if promotion and not form.promo_code.data:
        form.promo_code.data = promotion.promo_code

    fee = shipping_amount(shipping)
    discount = calculate_discount(promotion, items_subtotal)
    return render_template('orders/batch_checkout.html',
                           form=form,
                           cart_items=list(cart),
                           shipping=shipping,
                           promotion=promotion,
                           items_subtotal=items_subtotal,
                           shipping_fee=fee,
                           discount=discount,
                           total=calculate_total(items_subtotal, fee, discount))


@orders_bp.route('/success/<order_code>')
def success(order_code):
    """Order confirmation page."""
    return render_template('orders/success.html', order_code=order_code)


def _tracking_view(order):
    status = tracking.map_status_to_english(order.get('status') or '')
    return {
        'order': order,
        'code': order.get('orderCode') or (order.get('information') or {}).get('orderCode'),
        'status': status,
        'label': tracking.status_label(status),
        'description': tracking.STATUS_DESCRIPTIONS.get(status, ''),
        'color': tracking.status_color(status),
        'step': tracking.current_step(status),
        'products': tracking.get_product_names(order),
        'total': tracking.get_order_total(order),
        'customer': tracking.get_customer_info(order),
    }


@orders_bp.route('/track', methods=['GET', 'POST'])
def track():
    """Find orders by order code or email and show their progress."""
    form = TrackOrderForm()
    results = None
    order_code = email = None
    if request.method == 'GET' and request.args.get('order_code'):
        order_code = form.order_code.data = request.args['order_code'].strip()
    elif form.validate_on_submit():
        order_code = (form.order_code.data or '').strip() or None
        email = (form.email.data or '').strip() or None

    if order_code or email:
        try:
            orders, _ = tracking.search_orders(order_code=order_code, email=email)
        except ApiError as exc:
            orders = []
            if not exc.is_not_found:
                flash(exc.message, 'danger')
        results = [_tracking_view(order) for order in orders]
        if not results:
            flash('No orders match that search.', 'info')

    return render_template('orders/track.html',
                           form=form,
                           results=results,
                           steps=tracking.STATUS_STEPS)
