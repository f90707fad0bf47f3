"""Wire schemas shared with the remote API.

The API speaks camelCase JSON; every model here accepts either the camelCase
alias or the Python field name and dumps back to camelCase.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


# --- Order data captured from the product configuration screens ---

class SelectedOption(WireModel):
    id: str
    price: float = 0


class CategoryProductChoice(WireModel):
    product_custom_id: str
    quantity: int = 1


class OrderData(WireModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    product_id: str
    variant_id: str
    selected_options: List[SelectedOption] = Field(default_factory=list)
    custom_quantities: Dict[str, int] = Field(default_factory=dict)
    selected_category_products: Optional[Dict[str, List[CategoryProductChoice]]] = None
    multi_item_customizations: Optional[Dict[int, Dict[str, List[CategoryProductChoice]]]] = None
    product_total_price: float = 0
    selected_background_ids: List[str] = Field(default_factory=list)
    background_form_data: Optional[Dict[str, Any]] = None
    background_total_price: float = 0
    total_price: float = 0

    def category_choices(self):
        """Yield every (category_id, choice) pair, multi-item customizations included."""
        for category_id, choices in (self.selected_category_products or {}).items():
            for choice in choices:
                yield category_id, choice
        for item_customs in (self.multi_item_customizations or {}).values():
            for category_id, choices in item_customs.items():
                for choice in choices:
                    yield category_id, choice


class CustomerInfo(WireModel):
    name: str
    phone: str
    email: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None


class CartItem(WireModel):
    id: str
    order_data: OrderData
    customer_info: Optional[CustomerInfo] = None
    shipping_fee: float = 0
    selected_shipping_id: Optional[str] = None
    applied_promotion_code: Optional[str] = None
    discount: float = 0
    subtotal: float = 0
    total: float = 0
    created_at: str


# --- Read-only reference data ---

class PromotionType(str, Enum):
    PERCENTAGE = "PERCENTAGE"
    FIXED_AMOUNT = "FIXED_AMOUNT"


class Promotion(WireModel):
    id: str
    title: Optional[str] = None
    description: Optional[str] = None
    promo_code: Optional[str] = None
    type: PromotionType
    value: float
    min_order_value: float = 0
    max_discount_amount: Optional[float] = None
    start_date: datetime
    end_date: Optional[datetime] = None
    usage_limit: Optional[int] = None
    usage_count: int = 0
    is_active: bool = True


class ShippingFee(WireModel):
    id: str
    shipping_type: Optional[str] = None
    area: Optional[str] = None
    estimated_delivery_time: Optional[str] = None
    shipping_fee: float = 0
    notes_or_remarks: Optional[str] = None


# --- Submission payloads ---

class ShippingSelection(WireModel):
    shipping_id: str
    shipping_type: Optional[str] = None
    area: Optional[str] = None
    estimated_delivery_time: Optional[str] = None
    shipping_fee: float = 0
    notes: Optional[str] = None

    @classmethod
    def from_fee(cls, fee: ShippingFee) -> "ShippingSelection":
        return cls(
            shipping_id=fee.id,
            shipping_type=fee.shipping_type,
            area=fee.area,
            estimated_delivery_time=fee.estimated_delivery_time,
            shipping_fee=fee.shipping_fee,
            notes=fee.notes_or_remarks,
        )


class PromotionSelection(WireModel):
    promotion_id: str
    promo_code: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    value: Optional[float] = None
    discount_amount: float = 0

    @classmethod
    def from_promotion(cls, promotion: Promotion, discount_amount: float) -> "PromotionSelection":
        return cls(
            promotion_id=promotion.id,
            promo_code=promotion.promo_code,
            title=promotion.title,
            description=promotion.description,
            type=promotion.type.value,
            value=promotion.value,
            discount_amount=discount_amount,
        )


class OrderPricing(WireModel):
    product_price: float = 0
    options_price: float = 0
    custom_products_price: float = 0
    background_price: float = 0
    subtotal: float = 0
    shipping_fee: float = 0
    discount_amount: float = 0
    total: float = 0


class BatchItemPricing(WireModel):
    product_price: float = 0
    options_price: float = 0
    custom_products_price: float = 0
    background_price: float = 0
    item_subtotal: float = 0


class BatchPricing(WireModel):
    items_subtotal: float = 0
    shipping_fee: float = 0
    discount_amount: float = 0
    total: float = 0


class OrderMetadata(WireModel):
    order_source: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


class OrderItemDetails(WireModel):
    """Product configuration enriched with names, images and descriptions."""
    collection: Optional[Dict[str, Any]] = None
    product: Dict[str, Any]
    variant: Dict[str, Any]
    selected_options: Optional[List[Dict[str, Any]]] = None
    custom_quantities: Optional[Dict[str, int]] = None
    selected_category_products: Optional[Dict[str, Dict[str, Any]]] = None
    multi_item_customizations: Optional[Dict[int, Dict[str, Dict[str, Any]]]] = None
    background: Optional[Dict[str, Any]] = None
    metadata: Optional[OrderMetadata] = None


class OrderSubmissionData(OrderItemDetails):
    shipping: Optional[ShippingSelection] = None
    promotion: Optional[PromotionSelection] = None
    pricing: OrderPricing


class BatchOrderItem(OrderItemDetails):
    pricing: BatchItemPricing


class BatchOrderSubmissionData(WireModel):
    customer_info: CustomerInfo
    shipping: ShippingSelection
    promotion: Optional[PromotionSelection] = None
    items: List[BatchOrderItem]
    pricing: BatchPricing
    user_id: Optional[str] = None
    metadata: Optional[OrderMetadata] = None
