"""Product CRUD endpoints for authenticated users."""

from fastapi import APIRouter, Depends, Query
from fastapi import status as http_status

from src.marketplace.api.http.deps import get_current_claims, get_product_service
from src.marketplace.api.http.schemas import (
    MessageResponse,
    ProductCreateRequest,
    ProductResponse,
    ProductUpdateRequest,
)
from src.marketplace.core.models import (
    PaginatedResponse,
    PaginationParams,
    ProductFilter,
    TokenClaims,
)
from src.marketplace.core.services import ProductService
from src.marketplace.entities.product import Product

router = APIRouter(
    prefix="/products",
    tags=["products"],
    dependencies=[Depends(get_current_claims)],
)


@router.post("", response_model=ProductResponse, status_code=http_status.HTTP_201_CREATED)
def create_product(
    body: ProductCreateRequest,
    claims: TokenClaims = Depends(get_current_claims),
    product_service: ProductService = Depends(get_product_service),
) -> Product:
    """Create a product owned by ``user_id``, or by the caller when omitted."""
    owner_id = body.user_id if body.user_id is not None else claims.user_id
    product = Product(
        code=body.code,
        name=body.name,
        description=body.description,
        price=body.price,
        status=body.status,
        user_id=owner_id,
    )
    return product_service.create_product(product)


@router.get("", response_model=PaginatedResponse[ProductResponse])
def list_products(
    page: int = Query(1),
    page_size: int = Query(0),
    code: str | None = Query(None, description="Substring match on code"),
    name: str | None = Query(None, description="Substring match on name"),
    status: str | None = Query(None, description="Exact status"),
    user_id: int | None = Query(None, description="Owner id"),
    product_service: ProductService = Depends(get_product_service),
) -> PaginatedResponse[Product]:
    return product_service.list_products(
        ProductFilter(code=code, name=name, status=status, user_id=user_id),
        PaginationParams(page=page, page_size=page_size),
    )


@router.get("/code/{code}", response_model=ProductResponse)
def get_product_by_code(
    code: str,
    product_service: ProductService = Depends(get_product_service),
) -> Product:
    return product_service.get_product_by_code(code)


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(
    product_id: int,
    product_service: ProductService = Depends(get_product_service),
) -> Product:
    return product_service.get_product(product_id)


@router.patch("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: int,
    body: ProductUpdateRequest,
    product_service: ProductService = Depends(get_product_service),
) -> Product:
    return product_service.update_product(product_id, body.to_updates())


@router.delete("/{product_id}", response_model=MessageResponse)
def delete_product(
    product_id: int,
    product_service: ProductService = Depends(get_product_service),
) -> MessageResponse:
    product_service.delete_product(product_id)
    return MessageResponse(message="product deleted successfully")
