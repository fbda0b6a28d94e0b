"""Product data access layer."""

from typing import Any

from loguru import logger
from sqlalchemy import and_, func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from src.marketplace.core.errors import ConflictError, InvalidInputError
from src.marketplace.core.models.pagination import PaginationParams, ProductFilter
from src.marketplace.entities._base import is_unique_violation, utcnow
from src.marketplace.entities.product.entity import Product
from src.marketplace.entities.product.table import ProductTable
from src.marketplace.entities.user.entity import User
from src.marketplace.entities.user.table import UserTable

UPDATABLE_FIELDS = frozenset({"code", "name", "description", "price", "status"})


class ProductRepository:
    """Data-access layer for products.

    Every read skips soft-deleted rows. Writes commit immediately. Products
    are returned with their owner attached, unless the owner is deleted.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def _active(self):
        owner_visible = and_(
            UserTable.id == ProductTable.user_id, col(UserTable.deleted_at).is_(None)
        )
        return (
            select(ProductTable, UserTable)
            .outerjoin(UserTable, owner_visible)
            .where(col(ProductTable.deleted_at).is_(None))
        )

    def _get_row(self, product_id: int) -> ProductTable | None:
        return self._session.exec(
            select(ProductTable).where(
                ProductTable.id == product_id, col(ProductTable.deleted_at).is_(None)
            )
        ).first()

    @staticmethod
    def _to_entity(row: ProductTable, owner: UserTable | None) -> Product:
        product = Product.model_validate(row, from_attributes=True)
        if owner is not None:
            product.user = User.model_validate(owner, from_attributes=True)
        return product

    def _with_owner(self, row: ProductTable) -> Product:
        owner = self._session.get(UserTable, row.user_id)
        if owner is not None and owner.deleted_at is not None:
            owner = None
        return self._to_entity(row, owner)

    def _commit(self, code: str) -> None:
        try:
            self._session.commit()
        except IntegrityError as e:
            self._session.rollback()
            logger.warning("Integrity error writing product {}: {}", code, e.orig)
            if is_unique_violation(e):
                raise ConflictError(f"product with code {code} already exists") from e
            raise InvalidInputError("product violates a data constraint") from e

    def create(self, product: Product) -> Product:
        row = ProductTable(
            code=product.code,
            name=product.name,
            description=product.description,
            price=product.price,
            status=product.status,
            user_id=product.user_id,
        )
        self._session.add(row)
        self._commit(product.code)
        self._session.refresh(row)
        return self._with_owner(row)

    def get(self, product_id: int) -> Product | None:
        result = self._session.exec(self._active().where(ProductTable.id == product_id)).first()
        if result is None:
            return None
        return self._to_entity(*result)

    def get_by_code(self, code: str) -> Product | None:
        result = self._session.exec(self._active().where(ProductTable.code == code)).first()
        if result is None:
            return None
        return self._to_entity(*result)

    def count_by_user(self, user_id: int) -> int:
        return self._session.exec(
            select(func.count())
            .select_from(ProductTable)
            .where(ProductTable.user_id == user_id, col(ProductTable.deleted_at).is_(None))
        ).one()

    def list(
        self, filter: ProductFilter | None, pagination: PaginationParams
    ) -> tuple[list[Product], int]:
        conditions = [col(ProductTable.deleted_at).is_(None)]
        if filter is not None:
            if filter.code:
                conditions.append(col(ProductTable.code).contains(filter.code, autoescape=True))
            if filter.name:
                conditions.append(col(ProductTable.name).contains(filter.name, autoescape=True))
            if filter.status:
                conditions.append(ProductTable.status == filter.status)
            if filter.user_id:
                conditions.append(ProductTable.user_id == filter.user_id)

        total = self._session.exec(
            select(func.count()).select_from(ProductTable).where(*conditions)
        ).one()
        rows = self._session.exec(
            self._active()
            .where(*conditions)
            .order_by(col(ProductTable.id))
            .offset(pagination.offset)
            .limit(pagination.page_size)
        ).all()
        return [self._to_entity(row, owner) for row, owner in rows], total

    def update(self, product_id: int, updates: dict[str, Any]) -> Product | None:
        unknown = set(updates) - UPDATABLE_FIELDS
        if unknown:
            raise InvalidInputError(
                f"cannot update product fields: {', '.join(sorted(unknown))}"
            )

        row = self._get_row(product_id)
        if row is None:
            return None
        for field, value in updates.items():
            setattr(row, field, value)
        row.updated_at = utcnow()
        self._session.add(row)
        self._commit(updates.get("code", row.code))
        self._session.refresh(row)
        return self._with_owner(row)

    def delete(self, product_id: int) -> bool:
        """Soft-delete the product. Returns False when no active row matched."""
        row = self._get_row(product_id)
        if row is None:
            return False
        row.deleted_at = utcnow()
        self._session.add(row)
        self._session.commit()
        return True
