# backend/models/warehouse_item.py
"""
Складская позиция (запчасть или МО).

quantity: кэш текущего остатка. Пересчитывается из движений после
каждого изменения движений (WarehouseService.recalculate_item),
напрямую не пишется.
"""
from sqlalchemy import Column, Integer, String, Date, DECIMAL, ForeignKey
from sqlalchemy.orm import relationship
from backend.db import Base


class Item(Base):
    __tablename__ = "items"

    id = Column(Integer, primary_key=True)

    # Внешний идентификатор (из импорта), опционально
    code = Column(String(100), unique=True, nullable=True)

    name = Column(String(255), nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    unit = Column(String(20), nullable=False, default="pcs")
    price = Column(DECIMAL(14, 2), nullable=False, default=0)
    supplier = Column(String(255), nullable=True)
    ttn_number = Column(String(100), nullable=True)

    # Дата последнего движения (для МО: дата последнего использования)
    last_movement_date = Column(Date, nullable=True)

    status = Column(String(20), nullable=False, default="in stock")

    # Дата полного списания: только для отображения
    written_off_date = Column(Date, nullable=True)

    subcategory_id = Column(
        Integer,
        ForeignKey("subcategories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    subcategory = relationship("Subcategory", back_populates="items")
    movements = relationship(
        "Movement",
        back_populates="item",
        cascade="all, delete-orphan",
        order_by="Movement.date",
    )
    corrections = relationship(
        "ItemQuantityCorrection",
        back_populates="item",
        cascade="all, delete-orphan",
    )
