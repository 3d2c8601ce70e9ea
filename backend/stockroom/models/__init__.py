"""SQLAlchemy ORM models for Stockroom.

All models are exported from this module for convenient imports:
    from stockroom.models import User, Category, Product, ...

Models are organized by domain:
- user.py: User, UserRole
- category.py: Category
- supplier.py: Supplier
- product.py: Product, product_categories association table
"""

from stockroom.models.base import Base, TimestampMixin
from stockroom.models.category import Category
from stockroom.models.product import Product, product_categories
from stockroom.models.supplier import Supplier
from stockroom.models.user import User, UserRole

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    # Identity
    "User",
    "UserRole",
    # Catalogue
    "Category",
    "Supplier",
    "Product",
    "product_categories",
]
