from typing import Any

from loguru import logger
from pydantic import ValidationError

from src.marketplace.core.errors import (
    ConflictError,
    InvalidInputError,
    NotFoundError,
    QuotaExceededError,
)
from src.marketplace.core.models.pagination import (
    PaginatedResponse,
    PaginationParams,
    ProductFilter,
    normalize_pagination,
)
from src.marketplace.entities.product.entity import Product
from src.marketplace.entities.product.repository import ProductRepository
from src.marketplace.entities.user.repository import UserRepository
from src.marketplace.runtime.config.config_data import ConstantsConfig


class ProductService:
    """Business rules for products: owner existence, quota, unique codes.

    The quota and code checks run before the insert without locking, so
    concurrent creates can exceed the quota by the number of racing requests.
    Duplicate codes are still rejected by the unique index.
    """

    def __init__(
        self,
        product_repo: ProductRepository,
        user_repo: UserRepository,
        constants: ConstantsConfig,
    ):
        self._product_repo = product_repo
        self._user_repo = user_repo
        self._constants = constants

    def create_product(self, product: Product) -> Product:
        if self._user_repo.get(product.user_id) is None:
            raise NotFoundError("user not found")

        limit = self._constants.business_rules.max_products_per_user
        if self._product_repo.count_by_user(product.user_id) >= limit:
            logger.info("Product quota reached", user_id=product.user_id, limit=limit)
            raise QuotaExceededError("user has reached maximum products limit")

        if self._product_repo.get_by_code(product.code) is not None:
            raise ConflictError(f"product with code {product.code} already exists")

        if not product.status:
            product = product.model_copy(
                update={"status": self._constants.business_rules.default_product_status}
            )

        created = self._product_repo.create(product)
        logger.info("Product created", product_id=created.id, user_id=created.user_id)
        return created

    def get_product(self, product_id: int) -> Product:
        product = self._product_repo.get(product_id)
        if product is None:
            raise NotFoundError("product not found")
        return product

    def get_product_by_code(self, code: str) -> Product:
        product = self._product_repo.get_by_code(code)
        if product is None:
            raise NotFoundError("product not found")
        return product

    def list_products(
        self,
        filter: ProductFilter | None = None,
        pagination: PaginationParams | None = None,
    ) -> PaginatedResponse[Product]:
        params = normalize_pagination(pagination, self._constants.pagination)
        products, total = self._product_repo.list(filter, params)
        return PaginatedResponse[Product].build(products, params, total)

    def update_product(self, product_id: int, updates: dict[str, Any]) -> Product:
        """Apply a partial update; the product as a whole must stay valid."""
        current = self._product_repo.get(product_id)
        if current is None:
            raise NotFoundError("product not found")

        try:
            merged = Product.model_validate(
                {**current.model_dump(exclude={"user"}), **updates}
            )
        except ValidationError as e:
            raise InvalidInputError.from_validation(e) from e
        updates = {
            field: getattr(merged, field) if field in Product.model_fields else value
            for field, value in updates.items()
        }

        if "code" in updates:
            existing = self._product_repo.get_by_code(updates["code"])
            if existing is not None and existing.id != product_id:
                raise ConflictError(f"product with code {updates['code']} already exists")

        updated = self._product_repo.update(product_id, updates)
        if updated is None:
            raise NotFoundError("product not found")
        logger.info("Product updated", product_id=product_id, fields=sorted(updates))
        return updated

    def delete_product(self, product_id: int) -> None:
        if self._product_repo.get(product_id) is None:
            raise NotFoundError("product not found")

        self._product_repo.delete(product_id)
        logger.info("Product deleted", product_id=product_id)
