"""Product API routes"""

from typing import Optional
from fastapi import APIRouter, HTTPException, Query, Depends

from ..core.context import AppContext, get_context
from ..models.product import Product, ProductSearchResponse

router = APIRouter(prefix="/api/products", tags=["Products"])


@router.get("", response_model=ProductSearchResponse)
async def search_products(
    query: Optional[str] = Query(None, description="Search query"),
    category: Optional[str] = Query(None, description="Filter by category"),
    min_price: Optional[float] = Query(None, ge=0, description="Minimum price"),
    max_price: Optional[float] = Query(None, ge=0, description="Maximum price"),
    in_stock_only: bool = Query(True, description="Only show in-stock items"),
    limit: int = Query(20, ge=1, le=100, description="Max results"),
    offset: int = Query(0, ge=0, description="Offset for pagination"),
    context: AppContext = Depends(get_context),
):
    """Search products in the catalog"""
    products, total = context.catalog.search_products(
        query=query,
        category=category,
        min_price=min_price,
        max_price=max_price,
        in_stock_only=in_stock_only,
        limit=limit,
        offset=offset,
    )

    return ProductSearchResponse(
        products=products,
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/categories", response_model=list[str])
async def list_categories(context: AppContext = Depends(get_context)):
    """List all product categories"""
    return context.catalog.list_categories()


@router.get("/{product_id}", response_model=Product)
async def get_product(product_id: str, context: AppContext = Depends(get_context)):
    """Get a product by ID"""
    product = context.catalog.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product
