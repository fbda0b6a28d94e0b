"""Entities organized by business concept.

Each entity package holds its domain model (entity.py), its persistence
model (table.py) and its data access layer (repository.py).
"""

from .product import Product, ProductRepository, ProductTable
from .user import Role, User, UserRepository, UserTable

__all__ = [
    "Product",
    "ProductRepository",
    "ProductTable",
    "Role",
    "User",
    "UserRepository",
    "UserTable",
]
