"""Seed product catalog"""

from typing import Iterable, Optional
from ..models.product import Product, ProductVariant

# Demo catalog
PRODUCTS: dict[str, Product] = {
    "prod-001": Product(
        id="prod-001",
        name="Sony WH-1000XM5 Wireless Headphones",
        slug="sony-wh-1000xm5-wireless-headphones",
        description="Noise cancelling over-ear headphones with 30-hour battery life.",
        sku="SONY-WH1000XM5",
        price=349.99,
        categories=["electronics", "audio"],
        shipping_weight=0.25,
        inventory_quantity=50,
        featured=True,
        variants=[
            ProductVariant(
                id="var-001-blk",
                name="Black",
                sku="SONY-WH1000XM5-BLK",
                price=349.99,
                inventory=30,
                attributes={"color": "black"},
            ),
            ProductVariant(
                id="var-001-slv",
                name="Silver",
                sku="SONY-WH1000XM5-SLV",
                price=369.99,
                inventory=5,
                attributes={"color": "silver"},
            ),
        ],
    ),
    "prod-002": Product(
        id="prod-002",
        name="Patagonia Better Sweater Jacket",
        slug="patagonia-better-sweater-jacket",
        description="Classic fleece jacket made with recycled polyester.",
        sku="PATA-BSJKT",
        price=139.00,
        categories=["clothing"],
        shipping_weight=0.6,
        inventory_quantity=75,
        variants=[
            ProductVariant(
                id="var-002-m",
                name="Medium / Navy",
                sku="PATA-BSJKT-NVY-M",
                price=139.00,
                inventory=40,
                attributes={"size": "M", "color": "navy"},
            ),
            ProductVariant(
                id="var-002-l",
                name="Large / Navy",
                sku="PATA-BSJKT-NVY-L",
                price=139.00,
                inventory=0,
                attributes={"size": "L", "color": "navy"},
            ),
        ],
    ),
    "prod-003": Product(
        id="prod-003",
        name="KitchenAid Stand Mixer",
        slug="kitchenaid-stand-mixer",
        description="5.5-Quart bowl-lift stand mixer with 11 speeds.",
        sku="KA-MIXER-RED-55",
        price=449.99,
        categories=["home", "kitchen"],
        shipping_weight=12.5,
        inventory_quantity=40,
        featured=True,
    ),
    "prod-004": Product(
        id="prod-004",
        name="Yeti Tundra 45 Cooler",
        slug="yeti-tundra-45-cooler",
        description="Rotomolded cooler with PermaFrost insulation.",
        sku="YETI-T45-WHT",
        price=325.00,
        categories=["sports", "outdoor"],
        shipping_weight=10.4,
        inventory_quantity=35,
    ),
    "prod-005": Product(
        id="prod-005",
        name="Atomic Habits by James Clear",
        slug="atomic-habits",
        description="An Easy & Proven Way to Build Good Habits & Break Bad Ones. Hardcover.",
        sku="BOOK-ATOMIC-HC",
        price=24.99,
        categories=["books"],
        shipping_weight=0.5,
        inventory_quantity=200,
    ),
    "prod-006": Product(
        id="prod-006",
        name="Garmin Forerunner 965",
        slug="garmin-forerunner-965",
        description="GPS running watch with AMOLED display.",
        sku="GARM-FR965-BLK",
        price=599.99,
        categories=["electronics", "sports"],
        shipping_weight=0.1,
        is_in_stock=False,
        inventory_quantity=0,
    ),
    "prod-007": Product(
        id="prod-007",
        name="Polaroid Now Instant Camera",
        slug="polaroid-now-instant-camera",
        description="Discontinued autofocus instant camera.",
        sku="POLA-NOW-WHT",
        price=119.99,
        categories=["electronics"],
        shipping_weight=0.45,
        is_active=False,
        inventory_quantity=10,
    ),
}


class ProductCatalog:
    """In-memory product catalog"""

    def __init__(self, products: Optional[Iterable[Product]] = None):
        if products is None:
            products = PRODUCTS.values()
        self.products = {p.id: p.model_copy(deep=True) for p in products}

    def get_product(self, product_id: str) -> Optional[Product]:
        """Get a product by ID"""
        return self.products.get(product_id)

    def search_products(
        self,
        query: Optional[str] = None,
        category: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        in_stock_only: bool = True,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Product], int]:
        """
        Search active products with filters.

        Returns:
            Tuple of (matching products, total count)
        """
        results = [p for p in self.products.values() if p.is_active]

        # Filter by search query
        if query:
            query_lower = query.lower()
            results = [
                p for p in results
                if query_lower in p.name.lower() or query_lower in p.description.lower()
            ]

        if category:
            results = [p for p in results if category in p.categories]

        # Filter by price range
        if min_price is not None:
            results = [p for p in results if p.price >= min_price]
        if max_price is not None:
            results = [p for p in results if p.price <= max_price]

        if in_stock_only:
            results = [p for p in results if p.is_in_stock and p.inventory_quantity > 0]

        # Get total before pagination
        total = len(results)

        results = results[offset : offset + limit]

        return results, total

    def list_categories(self) -> list[str]:
        """List categories used by active products"""
        return sorted({c for p in self.products.values() if p.is_active for c in p.categories})

    def update_stock(self, product_id: str, quantity: int) -> bool:
        """
        Set product stock.

        Args:
            product_id: Product to update
            quantity: New stock level

        Returns:
            True if successful
        """
        product = self.products.get(product_id)
        if not product or quantity < 0:
            return False

        product.inventory_quantity = quantity
        product.is_in_stock = quantity > 0
        return True
