# backend/models/item_quantity_correction.py
"""
Журнал ручных корректировок количества позиции.

При корректировке сохраняется:
- qty: количество, которое ввёл пользователь
- calculated_qty: остаток по движениям до корректировки
- discrepancy: qty - calculated_qty (положительное = излишек, отрицательное = недостача)
- method: как выровняли движения (initial_receipt | adjustment_movement)
"""
from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from backend.db import Base


class ItemQuantityCorrection(Base):
    __tablename__ = "item_quantity_corrections"

    id = Column(Integer, primary_key=True)

    item_id = Column(
        Integer,
        ForeignKey("items.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    qty = Column(Integer, nullable=False)
    calculated_qty = Column(Integer, nullable=False)
    discrepancy = Column(Integer, nullable=False)

    method = Column(String(30), nullable=False)

    # Движение, которое изменили или создали (без FK: движение могут удалить позже)
    movement_id = Column(Integer, nullable=True)

    comment = Column(Text, nullable=True)
    created_by = Column(String, nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )

    item = relationship("Item", back_populates="corrections")
