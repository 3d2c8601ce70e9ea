"""Category model - product grouping."""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stockroom.models.base import Base, TimestampMixin
from stockroom.models.user import UID_LENGTH

if TYPE_CHECKING:
    from stockroom.models.product import Product
    from stockroom.models.user import User


class Category(Base, TimestampMixin):
    """Named group of products.

    Attributes:
        id: Integer primary key.
        name: Unique category name.
        created_by_id: User who created the category.
    """

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    created_by_id: Mapped[str | None] = mapped_column(
        String(UID_LENGTH),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    created_by: Mapped["User | None"] = relationship(
        "User", back_populates="categories"
    )
    products: Mapped[list["Product"]] = relationship(
        "Product",
        secondary="product_categories",
        back_populates="categories",
        passive_deletes=True,
    )
