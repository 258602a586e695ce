"""Product API router with CRUD operations."""

from fastapi import APIRouter, Depends, Response, status

from src.storefront.api.http.deps import get_current_claims, get_product_repository
from src.storefront.core.exceptions import NotFoundError, ValidationError
from src.storefront.entities.service.product import (
    Product,
    ProductCreate,
    ProductRepository,
)

router = APIRouter(tags=["products"], dependencies=[Depends(get_current_claims)])


@router.get("", response_model=list[Product])
def list_products(
    repository: ProductRepository = Depends(get_product_repository),
) -> list[Product]:
    """List all products."""
    return repository.list()


@router.get("/{product_id}", response_model=Product)
def get_product(
    product_id: int,
    repository: ProductRepository = Depends(get_product_repository),
) -> Product:
    """Get a product by ID."""
    product = repository.get_by_id(product_id)
    if product is None:
        raise NotFoundError("Product not found")
    return product


@router.post("", response_model=Product, status_code=status.HTTP_201_CREATED)
def create_product(
    body: ProductCreate,
    response: Response,
    repository: ProductRepository = Depends(get_product_repository),
) -> Product:
    """Create a new product."""
    created = repository.add(Product(**body.model_dump()))
    response.headers["Location"] = f"/api/products/{created.id}"
    return created


@router.put("/{product_id}", response_class=Response)
def update_product(
    product_id: int,
    body: Product,
    repository: ProductRepository = Depends(get_product_repository),
) -> Response:
    """Replace a product. The body id must match the path id."""
    if body.id != product_id:
        raise ValidationError(f"Body id {body.id} does not match path id {product_id}")
    repository.update(body)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{product_id}", response_class=Response)
def delete_product(
    product_id: int,
    repository: ProductRepository = Depends(get_product_repository),
) -> Response:
    """Delete a product."""
    product = repository.get_by_id(product_id)
    if product is None:
        raise NotFoundError("Product not found")
    repository.delete(product)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
