"""
Products Router — CRUD for the product catalog and the product launch workflow.
"""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from api.deps import get_current_user, get_product_service
from catalog.products import ProductService
from catalog.schemas import ProductCreate, ProductResponse, StockAdjustment
from core.exceptions import EntityNotFoundError
from launch.schemas import LaunchRequest, LaunchResult, UserSummary

router = APIRouter(prefix="/api/v1/products", tags=["products"])


@router.get("/", response_model=list[ProductResponse])
async def list_products(
    category: str | None = None,
    user_id: int | None = None,
    available: bool = Query(False, description="Only available products with stock"),
    service: ProductService = Depends(get_product_service),
):
    """List products, filtered by availability, owner or category (first match wins)."""
    if available:
        return await service.get_available()
    if user_id is not None:
        return await service.get_by_user_id(user_id)
    if category:
        return await service.get_by_category(category)
    return await service.get_all()


@router.post(
    "/launch",
    response_model=LaunchResult,
    responses={400: {"model": LaunchResult, "description": "Launch rejected or failed"}},
)
async def launch_product(
    request: LaunchRequest,
    service: ProductService = Depends(get_product_service),
    user: UserSummary = Depends(get_current_user),
):
    """Create or relaunch a product with pricing, inventory, campaigns and suppliers in one transaction."""
    result = await service.launch_product(request, user)
    if not result.success:
        return JSONResponse(status_code=400, content=result.model_dump(mode="json"))
    return result


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: int,
    service: ProductService = Depends(get_product_service),
):
    product = await service.get_by_id(product_id)
    if product is None:
        raise EntityNotFoundError("Product", product_id)
    return product


@router.post("/", response_model=ProductResponse, status_code=201)
async def create_product(
    product: ProductCreate,
    service: ProductService = Depends(get_product_service),
):
    """Create a new product for an existing user."""
    return await service.create(product)


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: int,
    product: ProductCreate,
    service: ProductService = Depends(get_product_service),
):
    return await service.update(product_id, product)


@router.patch("/{product_id}/stock", response_model=ProductResponse)
async def adjust_stock(
    product_id: int,
    adjustment: StockAdjustment,
    service: ProductService = Depends(get_product_service),
):
    """Apply a signed stock delta."""
    return await service.update_stock(product_id, adjustment.quantity)


@router.delete("/{product_id}", status_code=204)
async def delete_product(
    product_id: int,
    service: ProductService = Depends(get_product_service),
):
    await service.delete(product_id)
