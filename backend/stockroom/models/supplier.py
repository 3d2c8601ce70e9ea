"""Supplier model - where products are sourced from."""

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stockroom.models.base import Base, TimestampMixin
from stockroom.models.user import UID_LENGTH

if TYPE_CHECKING:
    from stockroom.models.product import Product
    from stockroom.models.user import User


class Supplier(Base, TimestampMixin):
    """Company that supplies products.

    Attributes:
        id: Integer primary key.
        name: Supplier name.
        nif: Unique tax identification number (optional).
        created_by_id: User who registered the supplier.
    """

    __tablename__ = "suppliers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(150), nullable=False)
    nif: Mapped[str | None] = mapped_column(String(20), unique=True, nullable=True)
    created_by_id: Mapped[str | None] = mapped_column(
        String(UID_LENGTH),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    created_by: Mapped["User | None"] = relationship(
        "User", back_populates="suppliers"
    )
    products: Mapped[list["Product"]] = relationship(
        "Product", back_populates="supplier", passive_deletes=True
    )
