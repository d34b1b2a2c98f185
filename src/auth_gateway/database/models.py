"""Records held by the stores."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Product(BaseModel):
    """A catalog product."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Product identifier")
    name: str = Field(..., description="Product name")
    category: str = Field(..., description="Product category")
    price: float = Field(..., description="Unit price")


class UserRecord(BaseModel):
    """A Basic/login credential source entry."""

    model_config = ConfigDict(frozen=True)

    username: str
    password_hash: str = Field(repr=False)


class ApiKeyRecord(BaseModel):
    """A provisioned API key.

    Keys are deactivated by clearing ``active``; they are never deleted.
    """

    model_config = ConfigDict(frozen=True)

    key: str = Field(repr=False)
    owner: str
    active: bool = True
