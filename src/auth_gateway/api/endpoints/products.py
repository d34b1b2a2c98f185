"""Product CRUD endpoints.

The same four operations are mounted once per authentication scheme; each
mount is guarded by exactly one verifier.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from auth_gateway.api.dependencies import get_product_service
from auth_gateway.auth.dependencies import Authenticate, get_principal
from auth_gateway.auth.providers.models import AuthScheme, Principal
from auth_gateway.core.exceptions import NotFoundException
from auth_gateway.schemas.auth import PrincipalResponse
from auth_gateway.schemas.product import (
    DeleteResponse,
    Product,
    ProductCreate,
    ProductUpdate,
)
from auth_gateway.services.products import ProductNotFoundError, ProductService


ServiceDep = Annotated[ProductService, Depends(get_product_service)]


def create_product_router(scheme: AuthScheme, prefix: str, tag: str) -> APIRouter:
    """Build the product routes for one scheme under ``prefix``."""
    router = APIRouter(
        prefix=prefix,
        tags=[tag],
        dependencies=[Depends(Authenticate(scheme))],
    )

    @router.post(
        "/add",
        response_model=Product,
        summary="Create a product",
        operation_id=f"{scheme.value}_add_product",
    )
    async def add_product(data: ProductCreate, service: ServiceDep) -> Product:
        return await service.create(data)

    @router.get(
        "/get",
        response_model=list[Product],
        summary="List all products",
        operation_id=f"{scheme.value}_list_products",
    )
    async def list_products(service: ServiceDep) -> list[Product]:
        return await service.list_all()

    @router.patch(
        "/update/{product_id}",
        response_model=Product,
        summary="Update a product",
        operation_id=f"{scheme.value}_update_product",
    )
    async def update_product(
        product_id: str,
        data: ProductUpdate,
        service: ServiceDep,
    ) -> Product:
        try:
            return await service.update_by_id(product_id, data)
        except ProductNotFoundError:
            raise NotFoundException("Product", product_id) from None

    @router.delete(
        "/delete/{product_id}",
        response_model=DeleteResponse,
        summary="Delete a product",
        operation_id=f"{scheme.value}_delete_product",
    )
    async def delete_product(product_id: str, service: ServiceDep) -> DeleteResponse:
        try:
            await service.delete_by_id(product_id)
        except ProductNotFoundError:
            raise NotFoundException("Product", product_id) from None
        return DeleteResponse(message="Product deleted")

    @router.get(
        "/me",
        response_model=PrincipalResponse,
        summary="Current principal",
        operation_id=f"{scheme.value}_current_principal",
    )
    async def current_principal(
        principal: Annotated[Principal, Depends(get_principal)],
    ) -> PrincipalResponse:
        return PrincipalResponse(**principal.model_dump())

    return router
