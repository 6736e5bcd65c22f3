# backend/models/warehouse_category.py
from sqlalchemy import Column, Integer, String, ForeignKey, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship
from backend.db import Base


class Category(Base):
    """Категория склада (раздел запчастей или МО)"""
    __tablename__ = "categories"
    __table_args__ = (
        UniqueConstraint("name", "kind", name="uq_categories_name_kind"),
        CheckConstraint("kind IN ('spare_parts', 'mo')", name="ck_categories_kind"),
    )

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)

    # spare_parts | mo (см. InventoryKind)
    kind = Column(String(20), nullable=False, index=True)

    subcategories = relationship(
        "Subcategory",
        back_populates="category",
        cascade="all, delete-orphan",
        order_by="Subcategory.id",
    )


class Subcategory(Base):
    __tablename__ = "subcategories"
    __table_args__ = (
        UniqueConstraint("name", "category_id", name="uq_subcategories_name_category"),
    )

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    category_id = Column(
        Integer,
        ForeignKey("categories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    category = relationship("Category", back_populates="subcategories")
    items = relationship(
        "Item",
        back_populates="subcategory",
        cascade="all, delete-orphan",
        order_by="Item.id",
    )
