# backend/models/__init__.py
from .warehouse_category import Category, Subcategory
from .warehouse_item import Item
from .warehouse_movement import Movement
from .item_quantity_correction import ItemQuantityCorrection

__all__ = [
    "Category",
    "Subcategory",
    "Item",
    "Movement",
    "ItemQuantityCorrection",
]
