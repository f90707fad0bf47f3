"""Back-office routes. Every change goes through the remote API."""

from flask import Blueprint, render_template, redirect, url_for, flash, request, abort, current_app
from flask_login import login_required
from giftshop.api import ApiError
from giftshop.api import access, catalog, consultations, inventory
from giftshop.api import orders as orders_api
from giftshop.api import promotions as promotions_api
from giftshop.api import shipping as shipping_api
from giftshop.forms.admin import (
    ProductForm, CategoryForm, PromotionForm, ShippingFeeForm, InventoryForm,
    StockAdjustmentForm, OrderStatusForm, RoleForm, RolePermissionsForm,
)
from giftshop.orders import tracking
from giftshop.schemas import Promotion
from giftshop.utils.decorators import admin_required, permission_required

admin_bp = Blueprint('admin', __name__)


def _safe(call, default=None, *args, **kwargs):
    """Result of an optional lookup; the client has already reported the error."""
    try:
        return call(*args, **kwargs)
    except ApiError:
        return default


def _save(call, success_message, *args):
    """Run a create/update/delete call and flash the outcome."""
    try:
        call(*args)
    except ApiError as exc:
        flash(exc.message, 'danger')
        return False
    flash(success_message, 'success')
    return True


@admin_bp.route('/')
@admin_bp.route('/dashboard')
@login_required
@admin_required
def dashboard():
    """Back-office overview."""
    recent_orders, _ = _safe(orders_api.get_orders, ([], {}), {'page': 1, 'limit': 10})
    return render_template('admin/dashboard.html',
                           product_stats=_safe(catalog.get_product_statistics, {}),
                           promotion_stats=_safe(promotions_api.get_promotion_statistics, {}),
                           low_stock=_safe(inventory.get_low_stock, []),
                           recent_orders=[_order_row(order) for order in recent_orders])


# --- Orders ---

def _order_row(order):
    status = tracking.map_status_to_english(order.get('status') or '')
    return {
        'order': order,
        'id': order.get('id'),
        'code': order.get('orderCode') or (order.get('information') or {}).get('orderCode'),
        'status': status,
        'color': tracking.status_color(status),
        'products': tracking.get_product_names(order),
        'total': tracking.get_order_total(order),
        'customer': tracking.get_customer_name(order),
        'phone': tracking.get_customer_phone(order),
        'is_batch': tracking.is_batch_order(order),
        'created_at': order.get('createdAt'),
    }


@admin_bp.route('/orders')
@login_required
@permission_required('orders.list')
def orders():
    """All orders."""
    page = request.args.get('page', 1, type=int)
    params = {'page': page, 'limit': current_app.config['ITEMS_PER_PAGE']}
    if request.args.get('search'):
        params['search'] = request.args['search']
    if request.args.get('status'):
        params['status'] = request.args['status']

    items, meta = _safe(orders_api.get_orders, ([], {}), params)
    return render_template('admin/orders.html',
                           orders=[_order_row(order) for order in items],
                           meta=meta,
                           page=page,
                           statuses=tracking.STATUS_LABELS)


@admin_bp.route('/orders/<order_id>', methods=['GET', 'POST'])
@login_required
@permission_required('orders.view')
def order_detail(order_id):
    """Order detail with status update."""
    try:
        order = orders_api.get_order(order_id)
    except ApiError as exc:
        if exc.is_not_found:
            abort(404)
        return redirect(url_for('admin.orders'))

    row = _order_row(order)
    form = OrderStatusForm()
    if form.validate_on_submit():
        updated, _, error = tracking.apply_order_status_update(
            order_id, row['status'], form.status.data,
            lambda oid, status: orders_api.update_order(oid, {'status': status}),
        )
        if error:
            flash(error, 'danger')
        elif updated:
            flash('Order status updated.', 'success')
        return redirect(url_for('admin.order_detail', order_id=order_id))

    form.status.data = tracking.map_status_to_vietnamese(row['status'])
    return render_template('admin/order_detail.html',
                           row=row,
                           form=form,
                           info=tracking.get_customer_info(order),
                           steps=tracking.STATUS_STEPS,
                           step=tracking.current_step(row['status']))


# --- Inventory ---

@admin_bp.route('/inventory')
@login_required
@permission_required('inventory.list')
def inventory_list():
    items = _safe(inventory.get_inventory, [], {'limit': 100})
    for item in items:
        item['low_stock'] = inventory.is_low_stock(item)
    return render_template('admin/inventory.html', items=items, adjust_form=StockAdjustmentForm())


@admin_bp.route('/inventory/new', methods=['GET', 'POST'])
@login_required
@permission_required('inventory.create')
def inventory_create():
    form = InventoryForm()
    if form.validate_on_submit():
        if _save(inventory.create_inventory, 'Inventory record created.', form.to_payload()):
            return redirect(url_for('admin.inventory_list'))
    return render_template('admin/form.html', form=form, title='New inventory record',
                           back_url=url_for('admin.inventory_list'))


@admin_bp.route('/inventory/<inventory_id>/adjust', methods=['POST'])
@login_required
@permission_required('inventory.update')
def inventory_adjust(inventory_id):
    form = StockAdjustmentForm()
    if form.validate_on_submit():
        _save(inventory.adjust_stock, 'Stock adjusted.', inventory_id, form.quantity.data, form.reason.data)
    else:
        flash('Please enter a quantity.', 'warning')
    return redirect(url_for('admin.inventory_list'))


@admin_bp.route('/inventory/<inventory_id>/delete', methods=['POST'])
@login_required
@permission_required('inventory.delete')
def inventory_delete(inventory_id):
    _save(inventory.delete_inventory, 'Inventory record deleted.', inventory_id)
    return redirect(url_for('admin.inventory_list'))


# --- Products ---

def _collection_choices():
    return [(c['id'], c.get('name') or c['id']) for c in _safe(catalog.get_collections, [])]


@admin_bp.route('/products')
@login_required
@permission_required('products.list')
def products():
    page = request.args.get('page', 1, type=int)
    items, meta = _safe(catalog.get_products, ([], {}),
                        {'page': page, 'limit': current_app.config['ITEMS_PER_PAGE']})
    return render_template('admin/products.html', products=items, meta=meta, page=page)


@admin_bp.route('/products/new', methods=['GET', 'POST'])
@login_required
@permission_required('products.create')
def product_create():
    form = ProductForm()
    form.collection_id.choices = _collection_choices()
    if form.validate_on_submit():
        if _save(catalog.create_product, 'Product created.', form.to_payload()):
            return redirect(url_for('admin.products'))
    return render_template('admin/form.html', form=form, title='New product',
                           back_url=url_for('admin.products'))


@admin_bp.route('/products/<product_id>/edit', methods=['GET', 'POST'])
@login_required
@permission_required('products.update')
def product_edit(product_id):
    product = _safe(catalog.get_product, None, product_id) or abort(404)
    form = ProductForm(data={
        'name': product.get('name'),
        'collection_id': product.get('collectionId'),
        'status': product.get('status') or 'active',
        'has_bg': bool(product.get('hasBg')),
    })
    form.collection_id.choices = _collection_choices()
    if form.validate_on_submit():
        if _save(catalog.update_product, 'Product updated.', product_id, form.to_payload()):
            return redirect(url_for('admin.products'))
    return render_template('admin/form.html', form=form, title=f"Edit {product.get('name')}",
                           back_url=url_for('admin.products'))


@admin_bp.route('/products/<product_id>/delete', methods=['POST'])
@login_required
@permission_required('products.delete')
def product_delete(product_id):
    _save(catalog.delete_product, 'Product deleted.', product_id)
    return redirect(url_for('admin.products'))


# --- Product categories ---

def _product_choices():
    items, _ = _safe(catalog.get_products, ([], {}), {'limit': 100})
    return [(p['id'], p.get('name') or p['id']) for p in items]


@admin_bp.route('/categories')
@login_required
@permission_required('product-categories.list')
def categories():
    params = {'limit': 100}
    if request.args.get('product_id'):
        params['productId'] = request.args['product_id']
    return render_template('admin/categories.html',
                           categories=_safe(catalog.get_categories, [], params))


@admin_bp.route('/categories/new', methods=['GET', 'POST'])
@login_required
@permission_required('product-categories.create')
def category_create():
    form = CategoryForm()
    form.product_id.choices = _product_choices()
    if form.validate_on_submit():
        if _save(catalog.create_category, 'Category created.', form.to_payload()):
            return redirect(url_for('admin.categories'))
    return render_template('admin/form.html', form=form, title='New category',
                           back_url=url_for('admin.categories'))


@admin_bp.route('/categories/<category_id>/edit', methods=['GET', 'POST'])
@login_required
@permission_required('product-categories.update')
def category_edit(category_id):
    category = _safe(catalog.get_category, None, category_id) or abort(404)
    form = CategoryForm(data={'name': category.get('name'), 'product_id': category.get('productId')})
    form.product_id.choices = _product_choices()
    if form.validate_on_submit():
        if _save(catalog.update_category, 'Category updated.', category_id, form.to_payload()):
            return redirect(url_for('admin.categories'))
    return render_template('admin/form.html', form=form, title=f"Edit {category.get('name')}",
                           back_url=url_for('admin.categories'))


@admin_bp.route('/categories/<category_id>/delete', methods=['POST'])
@login_required
@permission_required('product-categories.delete')
def category_delete(category_id):
    _save(catalog.delete_category, 'Category deleted.', category_id)
    return redirect(url_for('admin.categories'))


# --- Promotions ---

@admin_bp.route('/promotions')
@login_required
@permission_required('promotions.list')
def promotions():
    return render_template('admin/promotions.html',
                           promotions=_safe(promotions_api.get_promotions, [], {'limit': 100}))


@admin_bp.route('/promotions/new', methods=['GET', 'POST'])
@login_required
@permission_required('promotions.create')
def promotion_create():
    form = PromotionForm()
    if form.validate_on_submit():
        if _save(promotions_api.create_promotion, 'Promotion created.', form.to_payload()):
            return redirect(url_for('admin.promotions'))
    return render_template('admin/form.html', form=form, title='New promotion',
                           back_url=url_for('admin.promotions'))


@admin_bp.route('/promotions/<promotion_id>/edit', methods=['GET', 'POST'])
@login_required
@permission_required('promotions.update')
def promotion_edit(promotion_id):
    data = _safe(promotions_api.get_promotion, None, promotion_id) or abort(404)
    promotion = Promotion.model_validate(data)
    form = PromotionForm(data={
        'title': promotion.title,
        'description': promotion.description,
        'promo_code': promotion.promo_code,
        'type': promotion.type.value,
        'value': promotion.value,
        'min_order_value': promotion.min_order_value,
        'max_discount_amount': promotion.max_discount_amount,
        'start_date': promotion.start_date,
        'end_date': promotion.end_date,
        'usage_limit': promotion.usage_limit,
        'is_active': promotion.is_active,
    })
    if form.validate_on_submit():
        if _save(promotions_api.update_promotion, 'Promotion updated.', promotion_id, form.to_payload()):
            return redirect(url_for('admin.promotions'))
    return render_template('admin/form.html', form=form, title=f'Edit {promotion.promo_code}',
                           back_url=url_for('admin.promotions'))


@admin_bp.route('/promotions/<promotion_id>/delete', methods=['POST'])
@login_required
@permission_required('promotions.delete')
def promotion_delete(promotion_id):
    _save(promotions_api.delete_promotion, 'Promotion deleted.', promotion_id)
    return redirect(url_for('admin.promotions'))


# --- Shipping fees ---

@admin_bp.route('/shipping-fees')
@login_required
@permission_required('shipping-fees.list')
def shipping_fees():
    area = request.args.get('area') or None
    return render_template('admin/shipping_fees.html',
                           fees=_safe(shipping_api.get_shipping_fees, [], area),
                           area=area)


@admin_bp.route('/shipping-fees/new', methods=['GET', 'POST'])
@login_required
@permission_required('shipping-fees.create')
def shipping_fee_create():
    form = ShippingFeeForm()
    if form.validate_on_submit():
        if _save(shipping_api.create_shipping_fee, 'Shipping fee created.', form.to_payload()):
            return redirect(url_for('admin.shipping_fees'))
    return render_template('admin/form.html', form=form, title='New shipping fee',
                           back_url=url_for('admin.shipping_fees'))


@admin_bp.route('/shipping-fees/<fee_id>/edit', methods=['GET', 'POST'])
@login_required
@permission_required('shipping-fees.update')
def shipping_fee_edit(fee_id):
    fee = _safe(shipping_api.get_shipping_fee, None, fee_id) or abort(404)
    form = ShippingFeeForm(data={
        'shipping_type': fee.shipping_type,
        'area': fee.area,
        'estimated_delivery_time': fee.estimated_delivery_time,
        'shipping_fee': fee.shipping_fee,
        'notes_or_remarks': fee.notes_or_remarks,
    })
    if form.validate_on_submit():
        if _save(shipping_api.update_shipping_fee, 'Shipping fee updated.', fee_id, form.to_payload()):
            return redirect(url_for('admin.shipping_fees'))
    return render_template('admin/form.html', form=form, title='Edit shipping fee',
                           back_url=url_for('admin.shipping_fees'))


@admin_bp.route('/shipping-fees/<fee_id>/delete', methods=['POST'])
@login_required
@permission_required('shipping-fees.delete')
def shipping_fee_delete(fee_id):
    _save(shipping_api.delete_shipping_fee, 'Shipping fee deleted.', fee_id)
    return redirect(url_for('admin.shipping_fees'))


# --- Roles and permissions ---

@admin_bp.route('/roles', methods=['GET', 'POST'])
@login_required
@permission_required('roles.list')
def roles():
    form = RoleForm()
    if form.validate_on_submit():
        _save(access.create_role, 'Role created.', form.name.data)
        return redirect(url_for('admin.roles'))
    return render_template('admin/roles.html', roles=_safe(access.get_roles, []), form=form)


@admin_bp.route('/roles/<role_id>', methods=['GET', 'POST'])
@login_required
@permission_required('role-permissions.view')
def role_detail(role_id):
    role = _safe(access.get_role, None, role_id) or abort(404)
    assigned = _safe(access.get_role_permissions, [], role_id)
    assigned_ids = {(p.get('permission') or p).get('id') for p in assigned}

    form = RolePermissionsForm()
    form.permission_ids.choices = [
        (p['id'], p.get('name') or p['id'])
        for p in _safe(access.get_permissions, [])
        if p['id'] not in assigned_ids
    ]
    if form.validate_on_submit():
        if form.permission_ids.data:
            _save(access.assign_permissions, 'Permissions assigned.', role_id, form.permission_ids.data)
        return redirect(url_for('admin.role_detail', role_id=role_id))

    return render_template('admin/role_detail.html', role=role, assigned=assigned, form=form)


@admin_bp.route('/roles/<role_id>/permissions/<permission_id>/remove', methods=['POST'])
@login_required
@permission_required('role-permissions.revoke')
def role_permission_remove(role_id, permission_id):
    _save(access.remove_permission, 'Permission removed.', role_id, permission_id)
    return redirect(url_for('admin.role_detail', role_id=role_id))


@admin_bp.route('/roles/<role_id>/delete', methods=['POST'])
@login_required
@permission_required('roles.delete')
def role_delete(role_id):
    _save(access.delete_role, 'Role deleted.', role_id)
    return redirect(url_for('admin.roles'))


# --- Consultations ---

@admin_bp.route('/consultations')
@login_required
@permission_required('consultations.list')
def consultation_list():
    return render_template('admin/consultations.html',
                           consultations=_safe(consultations.get_consultations, [], {'limit': 100}))


@admin_bp.route('/consultations/<consultation_id>/status', methods=['POST'])
@login_required
@permission_required('consultations.update')
def consultation_status(consultation_id):
    status = request.form.get('status')
    if status:
        _save(consultations.update_consultation_status, 'Consultation updated.', consultation_id, status)
    return redirect(url_for('admin.consultation_list'))
