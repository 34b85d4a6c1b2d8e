from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from infrastructure.database.database import Base


class Label(Base):
    __tablename__ = "labels"

    id = Column(Integer, primary_key=True, autoincrement=True)
    namespace = Column(String(120), nullable=False, index=True)
    label = Column(String(255), nullable=False, index=True)
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    items = relationship(
        "LabelItem",
        back_populates="label",
        cascade="all, delete-orphan",
        order_by="LabelItem.id",
    )

    __table_args__ = (
        UniqueConstraint("namespace", "label", name="uq_labels_namespace_label"),
    )


class LabelItem(Base):
    """One (label, item) membership; the unique constraint keeps item sets duplicate-free."""

    __tablename__ = "label_items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    label_id = Column(Integer, ForeignKey("labels.id", ondelete="CASCADE"), nullable=False, index=True)
    item_id = Column(String(255), nullable=False, index=True)
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    label = relationship("Label", back_populates="items")

    __table_args__ = (
        UniqueConstraint("label_id", "item_id", name="uq_label_items_label_item"),
    )


class LabelCategory(Base):
    __tablename__ = "label_categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    namespace = Column(String(120), nullable=False, index=True)
    name = Column(String(120), nullable=False, index=True)
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    members = relationship(
        "CategoryLabel",
        back_populates="category",
        cascade="all, delete-orphan",
        order_by="CategoryLabel.id",
    )

    __table_args__ = (
        UniqueConstraint("namespace", "name", name="uq_label_categories_namespace_name"),
    )


class CategoryLabel(Base):
    __tablename__ = "category_labels"

    id = Column(Integer, primary_key=True, autoincrement=True)
    category_id = Column(
        Integer,
        ForeignKey("label_categories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    label_id = Column(Integer, ForeignKey("labels.id", ondelete="CASCADE"), nullable=False, index=True)

    category = relationship("LabelCategory", back_populates="members")
    label = relationship("Label")

    __table_args__ = (
        UniqueConstraint("category_id", "label_id", name="uq_category_labels_category_label"),
    )
