"""Catalog product models"""

from pydantic import BaseModel, Field
from typing import Optional


class ProductVariant(BaseModel):
    """Purchasable variant of a product (size, colour, ...)"""
    id: str
    name: str
    sku: str
    price: float = Field(gt=0)
    inventory: int = Field(ge=0, default=0)
    weight: Optional[float] = None
    attributes: dict[str, str] = {}


class Product(BaseModel):
    """Product in the catalog.

    Carts keep a denormalized copy of this model taken at add-time, so
    nothing here is re-read from the catalog unless the cart is validated.
    """
    id: str
    name: str
    slug: str
    description: str = ""
    sku: str
    price: float = Field(gt=0)
    currency: str = "USD"
    categories: list[str] = []
    shipping_weight: Optional[float] = Field(default=None, ge=0)
    is_active: bool = True
    is_in_stock: bool = True
    inventory_quantity: int = Field(ge=0, default=100)
    featured: bool = False
    variants: list[ProductVariant] = []
    # Open-ended key space; pricing never looks at it
    metadata: dict[str, str] = {}

    class Config:
        from_attributes = True

    def get_variant(self, variant_id: str) -> Optional[ProductVariant]:
        """Get a variant by ID"""
        return next((v for v in self.variants if v.id == variant_id), None)


class ProductSearchResponse(BaseModel):
    """Response from product search"""
    products: list[Product]
    total: int
    limit: int
    offset: int
