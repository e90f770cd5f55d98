from typing import Optional

from storefront.models.cart import Discount, DiscountKind, LineItem, LineItemVariant
from storefront.models.product import Product


def make_product(**overrides) -> Product:
    data = {
        "id": "p-1",
        "name": "Widget",
        "slug": "widget",
        "sku": "W-1",
        "price": 20.0,
        "categories": ["tools"],
        "shipping_weight": 1.5,
        "inventory_quantity": 10,
    }
    data.update(overrides)
    return Product(**data)


def make_variant(**overrides) -> LineItemVariant:
    data = {
        "id": "v-1",
        "name": "Large",
        "sku": "W-1-L",
        "price": 25.0,
        "inventory": 5,
        "attributes": {"size": "L"},
    }
    data.update(overrides)
    return LineItemVariant(**data)


def make_item(
    quantity: int = 1,
    variant: Optional[LineItemVariant] = None,
    **product_overrides,
) -> LineItem:
    return LineItem.create(make_product(**product_overrides), quantity, variant)


def make_discount(code: str = "SAVE10", kind: DiscountKind = DiscountKind.PERCENTAGE, value: float = 10) -> Discount:
    return Discount(code=code, kind=kind, value=value, description=f"{code} promotion")
