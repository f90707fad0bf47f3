"""Product configuration: turn the product page form into ``OrderData``."""

import logging

from giftshop.api import ApiError
from giftshop.api import catalog
from giftshop.orders.composition import option_index
from giftshop.pricing import calculate_subtotal
from giftshop.schemas import CategoryProductChoice, OrderData, SelectedOption

logger = logging.getLogger(__name__)

BACKGROUND_FIELD_PREFIX = 'bg_field_'
CUSTOM_FIELD_PREFIX = 'custom_'


class ConfigurationError(ValueError):
    """The submitted configuration cannot be turned into an order."""


def load_configurator(product_id):
    """Product with its categories (each carrying ``customs``) and backgrounds.

    Only the product itself is required.
    """
    product = catalog.get_product(product_id)
    try:
        categories = catalog.get_categories_by_product(product_id)
    except ApiError:
        logger.warning('Could not load categories for product %s', product_id)
        categories = []
    for category in categories:
        try:
            category['customs'] = catalog.get_product_customs_by_category(category['id'])
        except ApiError:
            logger.warning('Could not load custom products for category %s', category.get('id'))
            category['customs'] = []

    backgrounds = []
    if product.get('hasBg'):
        try:
            backgrounds = catalog.get_backgrounds_by_product(product_id)
        except ApiError:
            logger.warning('Could not load backgrounds for product %s', product_id)
    return product, categories, backgrounds


def custom_prices_for(categories):
    return {
        custom['id']: float(custom.get('price') or 0)
        for category in categories
        for custom in category.get('customs') or []
    }


def order_data_from_form(product, categories, form) -> OrderData:
    """Build the order data for the choices posted from the product page."""
    variants = product.get('productVariants') or []
    variant_id = form.get('variant_id') or (variants[0]['id'] if variants else None)
    variant = catalog.find_variant(product, variant_id)
    if variant is None:
        raise ConfigurationError('Please choose a variant.')

    purchase_options = ((variant.get('option') or {}).get('purchaseOptions')) or []
    selected_options = []
    for option_id in form.getlist('options'):
        index = option_index(option_id)
        if index is None or not 0 <= index < len(purchase_options):
            continue
        price = float((purchase_options[index] or {}).get('price') or 0)
        selected_options.append(SelectedOption(id=option_id, price=price))

    selected_category_products = {}
    custom_quantities = {}
    for category in categories:
        choices = []
        for custom in category.get('customs') or []:
            quantity = form.get(f"{CUSTOM_FIELD_PREFIX}{custom['id']}", type=int) or 0
            if quantity > 0:
                choices.append(CategoryProductChoice(product_custom_id=custom['id'], quantity=quantity))
                custom_quantities[custom['id']] = quantity
        if choices:
            selected_category_products[category['id']] = choices

    background_ids = []
    background_form_data = None
    if form.get('background_id'):
        background_ids.append(form['background_id'])
        background_form_data = {'values': [
            {'fieldId': key[len(BACKGROUND_FIELD_PREFIX):], 'value': value}
            for key, value in form.items()
            if key.startswith(BACKGROUND_FIELD_PREFIX) and value
        ]}

    order_data = OrderData(
        product_id=product['id'],
        variant_id=variant['id'],
        selected_options=selected_options,
        custom_quantities=custom_quantities,
        selected_category_products=selected_category_products or None,
        selected_background_ids=background_ids,
        background_form_data=background_form_data,
    )
    product_total = calculate_subtotal(order_data, variant.get('price'), custom_prices_for(categories))
    return order_data.model_copy(update={
        'product_total_price': product_total,
        'total_price': product_total,
    })
