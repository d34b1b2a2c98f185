"""PostgreSQL repositories."""

from auth_gateway.database.repositories.api_keys import ApiKeyRepository
from auth_gateway.database.repositories.products import ProductRepository
from auth_gateway.database.repositories.users import UserRepository


__all__ = ["ApiKeyRepository", "ProductRepository", "UserRepository"]
