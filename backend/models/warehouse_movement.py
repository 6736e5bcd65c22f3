# backend/models/warehouse_movement.py
from sqlalchemy import Column, Integer, String, Date, Text, DECIMAL, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from backend.db import Base


class Movement(Base):
    """Движение по позиции: приход, выдача, перемещение, списание"""
    __tablename__ = "movements"
    __table_args__ = (
        CheckConstraint(
            "type IN ('incoming', 'outgoing', 'transfer', 'write-off')",
            name="ck_movements_type",
        ),
        CheckConstraint("quantity > 0", name="ck_movements_quantity_positive"),
    )

    id = Column(Integer, primary_key=True)
    item_id = Column(
        Integer,
        ForeignKey("items.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    date = Column(Date, nullable=False, index=True)
    type = Column(String(20), nullable=False)
    quantity = Column(Integer, nullable=False)

    price_per_unit = Column(DECIMAL(14, 2), nullable=True)
    supplier = Column(String(255), nullable=True)
    ttn_number = Column(String(100), nullable=True)

    # Свободный текст; для выдачи/списания: причина
    notes = Column(Text, nullable=True)

    item = relationship("Item", back_populates="movements")
