"""Product service exceptions."""

from __future__ import annotations


class ProductServiceError(Exception):
    """Base exception for product service errors."""


class ProductNotFoundError(ProductServiceError):
    """No product exists with the requested id."""

    def __init__(self, product_id: str) -> None:
        self.product_id = product_id
        super().__init__(f"Product '{product_id}' not found")
