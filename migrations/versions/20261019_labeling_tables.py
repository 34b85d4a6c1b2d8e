"""Add label, category and membership tables for post labeling

Revision ID: 20261019_labeling_tables
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "20261019_labeling_tables"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "labels",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("namespace", sa.String(length=120), nullable=False),
        sa.Column("label", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("namespace", "label", name="uq_labels_namespace_label"),
    )
    op.create_index("ix_labels_namespace", "labels", ["namespace"])
    op.create_index("ix_labels_label", "labels", ["label"])

    op.create_table(
        "label_items",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("label_id", sa.Integer(), nullable=False),
        sa.Column("item_id", sa.String(length=255), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(["label_id"], ["labels.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("label_id", "item_id", name="uq_label_items_label_item"),
    )
    op.create_index("ix_label_items_label_id", "label_items", ["label_id"])
    op.create_index("ix_label_items_item_id", "label_items", ["item_id"])

    op.create_table(
        "label_categories",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("namespace", sa.String(length=120), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("namespace", "name", name="uq_label_categories_namespace_name"),
    )
    op.create_index("ix_label_categories_namespace", "label_categories", ["namespace"])
    op.create_index("ix_label_categories_name", "label_categories", ["name"])

    op.create_table(
        "category_labels",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("category_id", sa.Integer(), nullable=False),
        sa.Column("label_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["category_id"], ["label_categories.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["label_id"], ["labels.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("category_id", "label_id", name="uq_category_labels_category_label"),
    )
    op.create_index("ix_category_labels_category_id", "category_labels", ["category_id"])
    op.create_index("ix_category_labels_label_id", "category_labels", ["label_id"])


def downgrade() -> None:
    op.drop_index("ix_category_labels_label_id", table_name="category_labels")
    op.drop_index("ix_category_labels_category_id", table_name="category_labels")
    op.drop_table("category_labels")

    op.drop_index("ix_label_categories_name", table_name="label_categories")
    op.drop_index("ix_label_categories_namespace", table_name="label_categories")
    op.drop_table("label_categories")

    op.drop_index("ix_label_items_item_id", table_name="label_items")
    op.drop_index("ix_label_items_label_id", table_name="label_items")
    op.drop_table("label_items")

    op.drop_index("ix_labels_label", table_name="labels")
    op.drop_index("ix_labels_namespace", table_name="labels")
    op.drop_table("labels")
