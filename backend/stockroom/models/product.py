"""Product model and its category association table."""

from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stockroom.models.base import Base, TimestampMixin
from stockroom.models.user import UID_LENGTH

if TYPE_CHECKING:
    from stockroom.models.category import Category
    from stockroom.models.supplier import Supplier
    from stockroom.models.user import User

product_categories = Table(
    "product_categories",
    Base.metadata,
    Column(
        "product_id",
        Integer,
        ForeignKey("products.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "category_id",
        Integer,
        ForeignKey("categories.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Product(Base, TimestampMixin):
    """Stock-keeping item.

    Attributes:
        id: Integer primary key.
        name: Product name.
        quantity: Units in stock (never negative).
        supplier_id: Supplier the product is sourced from (optional).
        created_by_id: User who registered the product.
    """

    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_products_quantity_non_negative"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    supplier_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("suppliers.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    created_by_id: Mapped[str | None] = mapped_column(
        String(UID_LENGTH),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    categories: Mapped[list["Category"]] = relationship(
        "Category",
        secondary=product_categories,
        back_populates="products",
        lazy="selectin",
        order_by="Category.id",
    )
    supplier: Mapped["Supplier | None"] = relationship(
        "Supplier", back_populates="products", lazy="selectin"
    )
    created_by: Mapped["User | None"] = relationship("User", back_populates="products")
