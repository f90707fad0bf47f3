"""Catalog endpoints: collections, products, variants, categories, custom products, backgrounds."""

from giftshop.api import get_api, paths
from giftshop.api.client import unwrap, unwrap_list


# --- Collections ---

def get_collections(params=None):
    return unwrap_list(get_api().get(paths.COLLECTIONS, params=params))


def get_hot_collections():
    return unwrap_list(get_api().get(paths.HOT_COLLECTIONS))


def get_collection_by_slug(slug):
    return unwrap(get_api().get(paths.collection_by_slug(slug)))


# --- Products ---

def get_products(params=None):
    payload = get_api().get(paths.PRODUCTS, params=params)
    meta = payload.get('meta', {}) if isinstance(payload, dict) else {}
    return unwrap_list(payload), meta


def get_products_by_collection(collection_id):
    return unwrap_list(get_api().get(paths.products_by_collection(collection_id)))


def get_product(product_id):
    return unwrap(get_api().get(paths.product_by_id(product_id)))


def create_product(data):
    return unwrap(get_api().post(paths.PRODUCTS, json=data))


def update_product(product_id, data):
    return unwrap(get_api().patch(paths.product_by_id(product_id), json=data))


def update_product_status(product_id, status):
    return unwrap(get_api().patch(paths.product_status(product_id), json={'status': status}))


def delete_product(product_id):
    return get_api().delete(paths.product_by_id(product_id))


def get_product_statistics():
    return unwrap(get_api().get(paths.PRODUCT_STATISTICS))


# --- Variants ---

def get_variants_by_product(product_id):
    return unwrap_list(get_api().get(paths.product_variants_by_product(product_id)))


def get_variant(variant_id, **options):
    return unwrap(get_api().get(paths.product_variant_by_id(variant_id), **options))


def find_variant(product, variant_id):
    """Variant ``variant_id`` among the product's embedded variants, if present."""
    for variant in (product or {}).get('productVariants') or []:
        if variant.get('id') == variant_id:
            return variant
    return None


# --- Product categories ---

def get_categories(params=None):
    payload = get_api().get(paths.PRODUCT_CATEGORIES, params=params)
    return unwrap_list(payload)


def get_categories_by_product(product_id):
    return unwrap_list(get_api().get(paths.product_categories_by_product(product_id)))


def get_category(category_id, **options):
    return unwrap(get_api().get(paths.product_category_by_id(category_id), **options))


def create_category(data):
    return unwrap(get_api().post(paths.PRODUCT_CATEGORIES, json=data))


def update_category(category_id, data):
    return unwrap(get_api().patch(paths.product_category_by_id(category_id), json=data))


def delete_category(category_id):
    return get_api().delete(paths.product_category_by_id(category_id))


# --- Custom products ---

def get_product_customs(params=None):
    return unwrap_list(get_api().get(paths.PRODUCT_CUSTOMS, params=params))


def get_product_customs_by_category(category_id):
    return unwrap_list(get_api().get(paths.product_customs_by_category(category_id)))


def get_product_custom(custom_id, **options):
    return unwrap(get_api().get(paths.product_custom_by_id(custom_id), **options))


# --- Backgrounds ---

def get_backgrounds_by_product(product_id):
    return unwrap_list(get_api().get(paths.backgrounds_by_product(product_id)))


def get_background(background_id, **options):
    return unwrap(get_api().get(paths.background_by_id(background_id), **options))
