"""Product request and response schemas."""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, Field, StringConstraints

from auth_gateway.database.models import Product


NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class ProductCreate(BaseModel):
    """Fields required to create a product. Unknown fields are ignored."""

    name: NonEmptyStr = Field(..., description="Product name", examples=["Laptop"])
    category: NonEmptyStr = Field(
        ..., description="Product category", examples=["Electronics"]
    )
    price: float = Field(..., ge=0, description="Unit price", examples=[999.99])


class ProductUpdate(BaseModel):
    """Any subset of the product fields."""

    name: NonEmptyStr | None = Field(default=None, description="Product name")
    category: NonEmptyStr | None = Field(default=None, description="Product category")
    price: float | None = Field(default=None, ge=0, description="Unit price")


class DeleteResponse(BaseModel):
    """Confirmation returned after a delete."""

    message: str = Field(..., examples=["Product deleted"])


__all__ = ["DeleteResponse", "Product", "ProductCreate", "ProductUpdate"]
