"""Order composition: merge fetched catalog data with the customer's choices.

The backend expects every order to carry resolved names, images and
descriptions next to the ids the customer picked, so the reference entities
are fetched first and then folded into the submission schema.
"""

import logging
from typing import Dict, Iterable, List, Optional

from giftshop.api import ApiError
from giftshop.api import catalog
from giftshop.pricing import (
    build_pricing, calculate_custom_products_price, calculate_discount,
    calculate_items_subtotal, calculate_options_price, calculate_total,
)
from giftshop.schemas import (
    BatchItemPricing, BatchOrderItem, BatchOrderSubmissionData, BatchPricing,
    CartItem, CustomerInfo, OrderData, OrderMetadata, OrderSubmissionData,
    Promotion, PromotionSelection, ShippingFee, ShippingSelection,
)

logger = logging.getLogger(__name__)


class OrderDetails:
    """Reference entities fetched for one order."""

    def __init__(self, product=None, variant=None, backgrounds=None,
                 product_customs=None, categories=None):
        self.product = product
        self.variant = variant
        self.backgrounds = backgrounds or []
        self.product_customs = product_customs or {}
        self.categories = categories or {}

    @property
    def variant_price(self) -> float:
        return float((self.variant or {}).get('price') or 0)

    @property
    def custom_prices(self) -> Dict[str, float]:
        return {
            custom_id: float(custom.get('price') or 0)
            for custom_id, custom in self.product_customs.items()
        }

    @property
    def background(self) -> Optional[dict]:
        return self.backgrounds[0] if self.backgrounds else None


def fetch_order_details(order_data: OrderData) -> OrderDetails:
    """Fetch product, variant, backgrounds, categories and custom products.

    A missing product is an error; any other missing entity is skipped.
    """
    product = catalog.get_product(order_data.product_id)
    variant = catalog.find_variant(product, order_data.variant_id)
    if variant is None and order_data.variant_id:
        try:
            variant = catalog.get_variant(order_data.variant_id, mutation=True)
        except ApiError:
            logger.warning('Variant %s not found', order_data.variant_id)

    backgrounds = []
    for background_id in order_data.selected_background_ids:
        try:
            backgrounds.append(catalog.get_background(background_id, mutation=True))
        except ApiError:
            logger.warning('Background %s not found', background_id)

    categories = {}
    product_customs = {}
    for category_id, choice in order_data.category_choices():
        if category_id not in categories:
            try:
                categories[category_id] = catalog.get_category(category_id, mutation=True)
            except ApiError:
                logger.warning('Category %s not found', category_id)
                categories[category_id] = None
        custom_id = choice.product_custom_id
        if custom_id not in product_customs:
            try:
                product_customs[custom_id] = catalog.get_product_custom(custom_id, mutation=True)
            except ApiError:
                logger.warning('Product custom %s not found', custom_id)
                product_customs[custom_id] = None

    return OrderDetails(
        product=product,
        variant=variant,
        backgrounds=backgrounds,
        product_customs={k: v for k, v in product_customs.items() if v},
        categories={k: v for k, v in categories.items() if v},
    )


# --- Building blocks ---

def option_index(option_id: str) -> Optional[int]:
    try:
        return int(option_id.split('-')[1])
    except (IndexError, ValueError):
        return None


def compose_selected_options(order_data: OrderData, details: OrderDetails) -> List[dict]:
    """Selected options labelled from the variant's purchase options."""
    purchase_options = (((details.variant or {}).get('option') or {}).get('purchaseOptions')) or []
    options = []
    for option in order_data.selected_options:
        name = f'Option {option.id}'
        description = ''
        index = option_index(option.id)
        if index is not None and 0 <= index < len(purchase_options):
            data = purchase_options[index] or {}
            name = data.get('name') or data.get('title') or name
            description = data.get('description') or ''
        options.append({
            'id': option.id,
            'name': name,
            'description': description,
            'price': float(option.price or 0),
        })
    return options


def _compose_category_group(category_id, choices, details: OrderDetails) -> dict:
    category = details.categories.get(category_id) or {}
    products = []
    for choice in choices:
        custom = details.product_customs.get(choice.product_custom_id) or {}
        price = float(custom.get('price') or 0)
        products.append({
            'productCustomId': choice.product_custom_id,
            'productCustomName': custom.get('name'),
            'productCustomImage': custom.get('imageUrl'),
            'productCustomDescription': custom.get('description'),
            'quantity': choice.quantity,
            'price': price,
            'totalPrice': price * choice.quantity,
        })
    return {
        'categoryId': category_id,
        'categoryName': category.get('name'),
        'products': products,
    }


def compose_category_products(order_data: OrderData, details: OrderDetails) -> Optional[dict]:
    if not order_data.selected_category_products:
        return None
    return {
        category_id: _compose_category_group(category_id, choices, details)
        for category_id, choices in order_data.selected_category_products.items()
    }


def compose_multi_item_customizations(order_data: OrderData, details: OrderDetails) -> Optional[dict]:
    if not order_data.multi_item_customizations:
        return None
    return {
        item_index: {
            category_id: _compose_category_group(category_id, choices, details)
            for category_id, choices in item_customs.items()
        }
        for item_index, item_customs in order_data.multi_item_customizations.items()
    }


def compose_background(order_data: OrderData, details: OrderDetails) -> Optional[dict]:
    """First selected background with its form config and labelled form values."""
    background = details.background
    if not background:
        return None

    fields = ((background.get('config') or {}).get('fields')) or []
    fields_by_id = {field.get('id'): field for field in fields}

    values = []
    for entry in ((order_data.background_form_data or {}).get('values')) or []:
        field = fields_by_id.get(entry.get('fieldId')) or {}
        value = {
            'fieldId': entry.get('fieldId'),
            'fieldTitle': field.get('title') or entry.get('fieldId'),
            'fieldType': field.get('type') or 'text',
            'value': entry.get('value'),
        }
        if entry.get('otherValue') is not None:
            value['otherValue'] = entry['otherValue']
        values.append(value)

    composed = {
        'backgroundId': background.get('id'),
        'backgroundName': background.get('name'),
        'backgroundDescription': background.get('description'),
        'backgroundImageUrl': background.get('imageUrl'),
        'backgroundPrice': 0,
        'formData': {'values': values},
    }
    if background.get('config'):
        composed['formConfig'] = {
            'fields': [
                {key: field.get(key) for key in
                 ('id', 'type', 'title', 'placeholder', 'required', 'validation', 'options')
                 if field.get(key) is not None}
                for field in fields
            ]
        }
    return composed


def compose_collection(details: OrderDetails) -> Optional[dict]:
    collection = (details.product or {}).get('collection')
    if not collection:
        return None
    return {
        'id': collection.get('id'),
        'name': collection.get('name'),
        'imageUrl': collection.get('imageUrl'),
        'routeName': collection.get('routeName'),
    }


def _item_fields(order_data: OrderData, details: OrderDetails, metadata: OrderMetadata) -> dict:
    product = details.product or {}
    variant = details.variant or {}
    return dict(
        collection=compose_collection(details),
        product={
            'id': product.get('id') or order_data.product_id,
            'name': product.get('name'),
            'hasBg': product.get('hasBg'),
        },
        variant={
            'id': variant.get('id') or order_data.variant_id,
            'name': variant.get('name'),
            'description': variant.get('description'),
            'price': details.variant_price,
            'endow': variant.get('endow'),
            'option': variant.get('option'),
            'config': variant.get('config'),
        },
        selected_options=compose_selected_options(order_data, details),
        custom_quantities=order_data.custom_quantities,
        selected_category_products=compose_category_products(order_data, details),
        multi_item_customizations=compose_multi_item_customizations(order_data, details),
        background=compose_background(order_data, details),
        metadata=metadata,
    )


def build_metadata(order_source='web', user_agent=None, ip_address=None) -> OrderMetadata:
    return OrderMetadata(order_source=order_source, user_agent=user_agent, ip_address=ip_address)


# --- Payloads ---

def compose_order_submission(order_data: OrderData, details: OrderDetails,
                             shipping: Optional[ShippingFee], promotion: Optional[Promotion],
                             metadata: Optional[OrderMetadata] = None) -> OrderSubmissionData:
    """Single-order payload for ``POST /orders``."""
    shipping_fee = shipping.shipping_fee if shipping else 0
    pricing = build_pricing(order_data, details.variant_price, details.custom_prices,
                            shipping_fee, promotion)
    return OrderSubmissionData(
        **_item_fields(order_data, details, metadata or build_metadata()),
        shipping=ShippingSelection.from_fee(shipping) if shipping else None,
        promotion=PromotionSelection.from_promotion(promotion, pricing.discount_amount) if promotion else None,
        pricing=pricing,
    )


def compose_batch_item(cart_item: CartItem, details: OrderDetails,
                       metadata: Optional[OrderMetadata] = None) -> BatchOrderItem:
    order_data = cart_item.order_data
    return BatchOrderItem(
        **_item_fields(order_data, details, metadata or build_metadata()),
        pricing=BatchItemPricing(
            product_price=details.variant_price,
            options_price=calculate_options_price(order_data),
            custom_products_price=calculate_custom_products_price(order_data, details.custom_prices),
            background_price=0,
            item_subtotal=cart_item.subtotal,
        ),
    )


def compose_batch_order(cart_items: Iterable[CartItem], details_map: Dict[str, OrderDetails],
                        customer_info: CustomerInfo, shipping: ShippingFee,
                        promotion: Optional[Promotion] = None,
                        metadata: Optional[OrderMetadata] = None,
                        user_id: Optional[str] = None) -> BatchOrderSubmissionData:
    """Batch payload for ``POST /orders/batch``: many items, one customer, one shipping."""
    cart_items = list(cart_items)
    metadata = metadata or build_metadata()
    items_subtotal = calculate_items_subtotal(cart_items)
    discount = calculate_discount(promotion, items_subtotal)
    return BatchOrderSubmissionData(
        customer_info=customer_info,
        shipping=ShippingSelection.from_fee(shipping),
        promotion=PromotionSelection.from_promotion(promotion, discount) if promotion else None,
        items=[
            compose_batch_item(item, details_map.get(item.id) or OrderDetails(), metadata)
            for item in cart_items
        ],
        pricing=BatchPricing(
            items_subtotal=items_subtotal,
            shipping_fee=shipping.shipping_fee,
            discount_amount=discount,
            total=calculate_total(items_subtotal, shipping.shipping_fee, discount),
        ),
        user_id=user_id,
        metadata=metadata,
    )
