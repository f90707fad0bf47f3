"""Main public routes."""

from flask import Blueprint, render_template, redirect, url_for, flash, request, abort
from giftshop.api import ApiError
from giftshop.api import catalog, consultations
from giftshop.api import promotions as promotions_api
from giftshop.forms.orders import ConsultationForm
from giftshop.orders.configuration import ConfigurationError, load_configurator, order_data_from_form
from giftshop.orders.pending import set_pending_order

main_bp = Blueprint('main', __name__)


@main_bp.route('/')
def index():
    """Homepage with hot collections and running promotions."""
    try:
        hot_collections = catalog.get_hot_collections()
    except ApiError:
        hot_collections = []
    try:
        promotions = promotions_api.get_active_promotions()
    except ApiError:
        promotions = []

    return render_template('main/index.html',
                           hot_collections=hot_collections,
                           promotions=promotions,
                           consultation_form=ConsultationForm())


@main_bp.route('/collections')
def collections():
    """All collections."""
    try:
        items = catalog.get_collections()
    except ApiError:
        items = []
    return render_template('main/collections.html', collections=items)


@main_bp.route('/collections/<slug>')
def collection_detail(slug):
    """Products of one collection."""
    try:
        collection = catalog.get_collection_by_slug(slug)
    except ApiError as exc:
        if exc.is_not_found:
            abort(404)
        return redirect(url_for('main.collections'))
    try:
        products = catalog.get_products_by_collection(collection['id'])
    except ApiError:
        products = []
    return render_template('main/collection_detail.html',
                           collection=collection,
                           products=products)


@main_bp.route('/products/<product_id>', methods=['GET', 'POST'])
def product_detail(product_id):
    """Configure a product: variant, options, custom products and background."""
    try:
        product, categories, backgrounds = load_configurator(product_id)
    except ApiError as exc:
        if exc.is_not_found:
            abort(404)
        return redirect(url_for('main.index'))

    if request.method == 'POST':
        try:
            order_data = order_data_from_form(product, categories, request.form)
        except ConfigurationError as exc:
            flash(str(exc), 'warning')
        else:
            set_pending_order(order_data)
            return redirect(url_for('orders.order_page'))

    return render_template('main/product_detail.html',
                           product=product,
                           categories=categories,
                           backgrounds=backgrounds)


@main_bp.route('/consultation', methods=['POST'])
def consultation():
    """Ask to be called back."""
    form = ConsultationForm()
    if form.validate_on_submit():
        try:
            consultations.create_consultation({
                'customerName': form.customer_name.data,
                'phoneNumber': form.phone_number.data,
            })
        except ApiError as exc:
            flash(exc.message or 'Could not send your request. Please try again.', 'danger')
        else:
            flash('Thank you! We will call you back shortly.', 'success')
    else:
        for errors in form.errors.values():
            for error in errors:
                flash(error, 'warning')
    return redirect(url_for('main.index'))
