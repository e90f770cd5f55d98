"""Cart models"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum

from .product import Product, ProductVariant


class DiscountKind(str, Enum):
    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"
    FREE_SHIPPING = "free_shipping"


class LineItemVariant(BaseModel):
    """Variant snapshot stored on a line item"""
    id: str
    name: str
    sku: str
    attributes: dict[str, str] = {}
    price: float
    inventory: Optional[int] = None

    @classmethod
    def from_variant(cls, variant: ProductVariant) -> "LineItemVariant":
        return cls(
            id=variant.id,
            name=variant.name,
            sku=variant.sku,
            attributes=dict(variant.attributes),
            price=variant.price,
            inventory=variant.inventory,
        )


def make_item_id(product_id: str, variant_id: Optional[str] = None) -> str:
    """Derive the line item key for a product/variant pair"""
    return f"{product_id}-{variant_id or 'default'}"


class LineItem(BaseModel):
    """One product/variant combination in the cart"""
    id: str
    product_id: str
    product: Product
    variant: Optional[LineItemVariant] = None
    quantity: int = Field(ge=1)
    unit_price: float
    total: float

    @classmethod
    def create(
        cls,
        product: Product,
        quantity: int = 1,
        variant: Optional[LineItemVariant] = None,
    ) -> "LineItem":
        """Build a line item from a catalog snapshot"""
        unit_price = variant.price if variant else product.price
        return cls(
            id=make_item_id(product.id, variant.id if variant else None),
            product_id=product.id,
            product=product,
            variant=variant,
            quantity=quantity,
            unit_price=unit_price,
            total=round(unit_price * quantity, 2),
        )

    @property
    def variant_id(self) -> Optional[str]:
        return self.variant.id if self.variant else None

    def matches(self, product_id: str, variant_id: Optional[str] = None) -> bool:
        return self.product_id == product_id and self.variant_id == variant_id

    def set_quantity(self, quantity: int) -> None:
        """Update quantity and keep total in step with it"""
        self.quantity = quantity
        self.total = round(self.unit_price * quantity, 2)


class Discount(BaseModel):
    """Promotional adjustment applied to the cart.

    The meaning of ``value`` depends on ``kind``: a percentage of the
    subtotal, a fixed currency amount, or ignored for free shipping.
    Bounds are checked by the discount policy, not here.
    """
    code: str = Field(min_length=1)
    kind: DiscountKind
    value: float
    description: str = ""
    applied_at: Optional[datetime] = None


class ShippingSelection(BaseModel):
    """Chosen delivery method"""
    method: str
    cost: float = Field(ge=0)
    estimated_days: int = Field(ge=0)
    carrier: Optional[str] = None


class CartSummary(BaseModel):
    """Derived rollup of the cart"""
    subtotal: float = 0.0
    tax_amount: float = 0.0
    shipping_amount: float = 0.0
    discount_amount: float = 0.0
    total: float = 0.0
    item_count: int = 0
    weight: float = 0.0


class CartSnapshot(BaseModel):
    """Durable part of the cart state"""
    items: list[LineItem] = []
    discounts: list[Discount] = []
    shipping: Optional[ShippingSelection] = None
    summary: CartSummary = Field(default_factory=CartSummary)


class CartState(CartSnapshot):
    """Cart aggregate, including transient UI/session flags"""
    is_initialized: bool = False
    is_loading: bool = False
    error: Optional[str] = None

    def to_snapshot(self) -> CartSnapshot:
        """Copy of the durable fields only"""
        return CartSnapshot.model_validate(
            self.model_dump(include=set(CartSnapshot.model_fields))
        )

    @classmethod
    def from_snapshot(cls, snapshot: CartSnapshot) -> "CartState":
        return cls.model_validate(snapshot.model_dump())


class AddToCartRequest(BaseModel):
    """Request to add item to cart"""
    product_id: str
    variant_id: Optional[str] = None
    quantity: int = Field(default=1, gt=0)


class UpdateCartItemRequest(BaseModel):
    """Request to update cart item quantity (0 removes the item)"""
    quantity: int = Field(ge=0)


class CartResponse(BaseModel):
    """Cart API response"""
    cart_id: str
    cart: CartState
    message: Optional[str] = None


class CartValidation(BaseModel):
    """Result of checking cart contents against the catalog"""
    is_valid: bool
    errors: list[str] = []


class CartStats(BaseModel):
    total_items: int
    total_weight: float
    is_empty: bool
    subtotal: float
    total: float
    tax_amount: float
    shipping_amount: float
    discount_amount: float
    applied_discounts: int


class CategoryShare(BaseModel):
    category: str
    count: int
    value: float


class DiscountUsage(BaseModel):
    total_saved: float
    discount_codes: list[str]


class CartAnalytics(BaseModel):
    """Aggregate figures about the cart contents"""
    total_value: float
    average_item_price: float
    most_expensive_item: Optional[LineItem] = None
    cheapest_item: Optional[LineItem] = None
    category_distribution: list[CategoryShare] = []
    discount_usage: DiscountUsage
