"""Create inventory tables: users, roles, categories, suppliers, products.

Revision ID: 001_inventory_schema
Revises:
Create Date: 2026-10-19

Users are keyed by identity-provider uid. Deleting a user keeps the records
they created (created_by_id SET NULL); deleting a product or category drops
their links in product_categories (CASCADE); deleting a supplier detaches
its products (SET NULL).
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "001_inventory_schema"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

_UID = sa.String(128)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
    ]


def _created_by() -> sa.Column:
    return sa.Column(
        "created_by_id",
        _UID,
        sa.ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )


def upgrade() -> None:
    # Users - local record for each identity-provider account
    op.create_table(
        "users",
        sa.Column("id", _UID, primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("nif", sa.String(20), nullable=True),
        _created_by(),
        *_timestamps(),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    # Roles - one row per role held
    op.create_table(
        "user_roles",
        sa.Column(
            "user_id",
            _UID,
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column("role", sa.String(20), primary_key=True),
        sa.CheckConstraint("role IN ('admin', 'employee')", name="ck_user_roles_role"),
    )

    op.create_table(
        "categories",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(100), nullable=False),
        _created_by(),
        *_timestamps(),
        sa.UniqueConstraint("name", name="uq_categories_name"),
    )
    op.create_index("ix_categories_created_by_id", "categories", ["created_by_id"])

    op.create_table(
        "suppliers",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("nif", sa.String(20), nullable=True),
        _created_by(),
        *_timestamps(),
        sa.UniqueConstraint("nif", name="uq_suppliers_nif"),
    )
    op.create_index("ix_suppliers_created_by_id", "suppliers", ["created_by_id"])

    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "supplier_id",
            sa.Integer(),
            sa.ForeignKey("suppliers.id", ondelete="SET NULL"),
            nullable=True,
        ),
        _created_by(),
        *_timestamps(),
        sa.CheckConstraint("quantity >= 0", name="ck_products_quantity_non_negative"),
    )
    op.create_index("ix_products_supplier_id", "products", ["supplier_id"])
    op.create_index("ix_products_created_by_id", "products", ["created_by_id"])

    op.create_table(
        "product_categories",
        sa.Column(
            "product_id",
            sa.Integer(),
            sa.ForeignKey("products.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "category_id",
            sa.Integer(),
            sa.ForeignKey("categories.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )
    # Reverse lookups for the category filter on GET /products
    op.create_index(
        "ix_product_categories_category_id", "product_categories", ["category_id"]
    )


def downgrade() -> None:
    op.drop_index("ix_product_categories_category_id", table_name="product_categories")
    op.drop_table("product_categories")
    op.drop_index("ix_products_created_by_id", table_name="products")
    op.drop_index("ix_products_supplier_id", table_name="products")
    op.drop_table("products")
    op.drop_index("ix_suppliers_created_by_id", table_name="suppliers")
    op.drop_table("suppliers")
    op.drop_index("ix_categories_created_by_id", table_name="categories")
    op.drop_table("categories")
    op.drop_table("user_roles")
    op.drop_table("users")
