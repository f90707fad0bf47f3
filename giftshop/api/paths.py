"""Endpoint paths of the remote REST API."""

LOGIN = '/auth/login'
LOGOUT = '/auth/logout'
REFRESH = '/auth/refresh'
USER_PROFILE = '/user/profile'

# Promotions
PROMOTIONS = '/promotions'
ACTIVE_PROMOTIONS = '/promotions/active'
VALIDATE_PROMOTION = '/promotions/validate'
PROMOTION_STATISTICS = '/promotions/statistics'


def promotion_by_id(promotion_id):
    return f'/promotions/{promotion_id}'


def promotion_by_code(promo_code):
    return f'/promotions/code/{promo_code}'


# Roles & permissions
ROLES = '/roles'
PERMISSIONS = '/permissions'


def role_by_id(role_id):
    return f'/roles/{role_id}'


def role_permissions(role_id):
    return f'/role-permissions/role/{role_id}'


def assign_permissions_to_role(role_id):
    return f'/role-permissions/assign/{role_id}'


def remove_permission_from_role(role_id, permission_id):
    return f'/role-permissions/role/{role_id}/permission/{permission_id}'


# Users
USERS = '/user'
ASSIGN_ROLES_TO_USER = '/user-roles/assign'


def user_by_id(user_id):
    return f'/user/{user_id}'


def user_permissions(user_id):
    return f'/user-permissions/user/{user_id}/permissions'


# Collections
COLLECTIONS = '/collections'
HOT_COLLECTIONS = '/collections/hot'


def collection_by_slug(slug):
    return f'/collections/route/{slug}'


# Products
PRODUCTS = '/products'
PRODUCT_STATISTICS = '/products/statistics'


def product_by_id(product_id):
    return f'/products/{product_id}'


def products_by_collection(collection_id):
    return f'/products/collection/{collection_id}'


def product_status(product_id):
    return f'/products/{product_id}/status'


# Product categories
PRODUCT_CATEGORIES = '/product-categories'


def product_category_by_id(category_id):
    return f'/product-categories/{category_id}'


def product_categories_by_product(product_id):
    return f'/product-categories/product/{product_id}'


# Product variants
PRODUCT_VARIANTS = '/product-variants'


def product_variant_by_id(variant_id):
    return f'/product-variants/{variant_id}'


def product_variants_by_product(product_id):
    return f'/product-variants/product/{product_id}'


# Product customs
PRODUCT_CUSTOMS = '/product-customs'


def product_custom_by_id(custom_id):
    return f'/product-customs/{custom_id}'


def product_customs_by_category(category_id):
    return f'/product-customs/category/{category_id}'


# Backgrounds
BACKGROUNDS = '/backgrounds'


def background_by_id(background_id):
    return f'/backgrounds/{background_id}'


def backgrounds_by_product(product_id):
    return f'/backgrounds/product/{product_id}'


# Shipping fees
SHIPPING_FEES = '/shipping-fees'
SHIPPING_FEE_AREAS = '/shipping-fees/areas'


def shipping_fee_by_id(fee_id):
    return f'/shipping-fees/{fee_id}'


# Inventory
INVENTORY = '/inventory'
INVENTORY_LOW_STOCK = '/inventory/low-stock'


def inventory_by_id(inventory_id):
    return f'/inventory/{inventory_id}'


def inventory_adjust_stock(inventory_id):
    return f'/inventory/{inventory_id}/adjust-stock'


def inventory_reserve_stock(inventory_id):
    return f'/inventory/{inventory_id}/reserve-stock'


def inventory_release_reserved_stock(inventory_id):
    return f'/inventory/{inventory_id}/release-reserved-stock'


# Orders
ORDERS = '/orders'
ORDERS_BATCH = '/orders/batch'
ORDER_SEARCH = '/orders/search'


def order_by_id(order_id):
    return f'/orders/{order_id}'


# Consultations
CONSULTATIONS = '/consultations'


def consultation_status(consultation_id):
    return f'/consultations/{consultation_id}/status'
