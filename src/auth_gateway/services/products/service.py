"""Product CRUD service.

A thin layer over the configured ``ProductStore``. It is only reached after
a route guard has attached a principal, and it behaves the same whichever
scheme authenticated the caller.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from auth_gateway.observability.logging import get_logger
from auth_gateway.services.products.exceptions import ProductNotFoundError


if TYPE_CHECKING:
    from auth_gateway.database.models import Product
    from auth_gateway.database.protocols import ProductStore
    from auth_gateway.schemas.product import ProductCreate, ProductUpdate

logger = get_logger(__name__)


class ProductService:
    """Create, list, update and delete products."""

    def __init__(self, store: ProductStore) -> None:
        self.store = store

    async def create(self, data: ProductCreate) -> Product:
        product = await self.store.create(data.model_dump())
        logger.info("Product created", product_id=product.id)
        return product

    async def list_all(self) -> list[Product]:
        return await self.store.list_all()

    async def update_by_id(self, product_id: str, data: ProductUpdate) -> Product:
        """Apply the fields present in ``data``.

        Raises:
            ProductNotFoundError: If the id is unknown.
        """
        fields = data.model_dump(exclude_unset=True, exclude_none=True)
        product = await self.store.update(product_id, fields)
        if product is None:
            raise ProductNotFoundError(product_id)
        logger.info("Product updated", product_id=product_id, fields=sorted(fields))
        return product

    async def delete_by_id(self, product_id: str) -> None:
        """Remove a product.

        Raises:
            ProductNotFoundError: If the id is unknown.
        """
        if not await self.store.delete(product_id):
            raise ProductNotFoundError(product_id)
        logger.info("Product deleted", product_id=product_id)
