"""Storage for products, users and API keys."""

from auth_gateway.database.models import ApiKeyRecord, Product, UserRecord
from auth_gateway.database.protocols import ApiKeyStore, ProductStore, UserStore
from auth_gateway.database.stores import Stores, close_stores, open_stores


__all__ = [
    "ApiKeyRecord",
    "ApiKeyStore",
    "Product",
    "ProductStore",
    "Stores",
    "UserRecord",
    "UserStore",
    "close_stores",
    "open_stores",
]
