"""Product catalog service."""

from auth_gateway.services.products.exceptions import (
    ProductNotFoundError,
    ProductServiceError,
)
from auth_gateway.services.products.service import ProductService


__all__ = ["ProductNotFoundError", "ProductService", "ProductServiceError"]
