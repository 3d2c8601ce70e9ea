"""User model - local record for an identity-provider account.

The primary key is the uid issued by the identity provider, so local rows
and login accounts share one identifier. Roles live in user_roles.
"""

from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stockroom.models.base import Base, TimestampMixin

if TYPE_CHECKING:
    from stockroom.models.category import Category
    from stockroom.models.product import Product
    from stockroom.models.supplier import Supplier

# Identity-provider uids: Firebase uses up to 128 characters
UID_LENGTH = 128


class User(Base, TimestampMixin):
    """Staff member allowed to use the inventory API.

    Attributes:
        id: Identity-provider uid (primary key).
        email: Unique, lowercased email address.
        first_name: Given name.
        last_name: Family name.
        nif: Tax identification number.
        created_by_id: User who registered this user. NULL for the
            bootstrap admin or when the creator was deleted.
        created_at: Creation timestamp (from TimestampMixin).
        updated_at: Last modification timestamp (from TimestampMixin).
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(UID_LENGTH), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    nif: Mapped[str | None] = mapped_column(String(20), nullable=True)
    created_by_id: Mapped[str | None] = mapped_column(
        String(UID_LENGTH),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Relationships
    role_links: Mapped[list["UserRole"]] = relationship(
        "UserRole",
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
        order_by="UserRole.role",
    )
    created_by: Mapped["User | None"] = relationship(
        "User",
        remote_side="User.id",
        lazy="selectin",
    )
    categories: Mapped[list["Category"]] = relationship(
        "Category", back_populates="created_by", passive_deletes=True
    )
    products: Mapped[list["Product"]] = relationship(
        "Product", back_populates="created_by", passive_deletes=True
    )
    suppliers: Mapped[list["Supplier"]] = relationship(
        "Supplier", back_populates="created_by", passive_deletes=True
    )

    @property
    def roles(self) -> list[str]:
        """Role tags held by this user, sorted."""
        return [link.role for link in self.role_links]


class UserRole(Base):
    """Role assignment for a user (one row per role held).

    Attributes:
        user_id: Owning user.
        role: Role tag ('admin' or 'employee').
    """

    __tablename__ = "user_roles"
    __table_args__ = (
        CheckConstraint("role IN ('admin', 'employee')", name="ck_user_roles_role"),
    )

    user_id: Mapped[str] = mapped_column(
        String(UID_LENGTH),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    )
    role: Mapped[str] = mapped_column(String(20), primary_key=True)

    user: Mapped["User"] = relationship("User", back_populates="role_links")
