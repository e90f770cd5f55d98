# Storefront Models

from .product import Product, ProductVariant, ProductSearchResponse
from .cart import (
    AddToCartRequest,
    CartAnalytics,
    CartResponse,
    CartSnapshot,
    CartState,
    CartStats,
    CartSummary,
    CartValidation,
    CategoryShare,
    Discount,
    DiscountKind,
    DiscountUsage,
    LineItem,
    LineItemVariant,
    ShippingSelection,
    UpdateCartItemRequest,
    make_item_id,
)

__all__ = [
    "Product",
    "ProductVariant",
    "ProductSearchResponse",
    "AddToCartRequest",
    "CartAnalytics",
    "CartResponse",
    "CartSnapshot",
    "CartState",
    "CartStats",
    "CartSummary",
    "CartValidation",
    "CategoryShare",
    "Discount",
    "DiscountKind",
    "DiscountUsage",
    "LineItem",
    "LineItemVariant",
    "ShippingSelection",
    "UpdateCartItemRequest",
    "make_item_id",
]
