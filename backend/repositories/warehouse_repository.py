from typing import Optional, List

from sqlalchemy.orm import Session

from backend.models.warehouse_category import Category, Subcategory
from backend.models.warehouse_item import Item
from backend.models.warehouse_movement import Movement


def get_item(db: Session, item_id: int, *, for_update: bool = False) -> Optional[Item]:
    """
    Позиция по id. for_update=True блокирует строку до конца транзакции
    (проверка остатка и запись движения не должны пересекаться).
    """
    q = db.query(Item).filter(Item.id == item_id)
    if for_update:
        q = q.with_for_update()
    return q.first()


def get_movement(db: Session, item_id: int, movement_id: int) -> Optional[Movement]:
    return (
        db.query(Movement)
        .filter(Movement.id == movement_id, Movement.item_id == item_id)
        .first()
    )


def list_item_movements(db: Session, item_id: int) -> List[Movement]:
    """
    История движений позиции, новые сверху.
    """
    return (
        db.query(Movement)
        .filter(Movement.item_id == item_id)
        .order_by(Movement.date.desc(), Movement.id.desc())
        .all()
    )


def get_subcategory_by_names(
    db: Session,
    kind: str,
    category_name: str,
    subcategory_name: str,
) -> Optional[Subcategory]:
    return (
        db.query(Subcategory)
        .join(Category, Subcategory.category_id == Category.id)
        .filter(
            Category.kind == kind,
            Category.name == category_name,
            Subcategory.name == subcategory_name,
        )
        .first()
    )


def get_or_create_subcategory(
    db: Session,
    kind: str,
    category_name: str,
    subcategory_name: str,
) -> Subcategory:
    """
    Находит подкатегорию или создаёт её вместе с категорией (без commit).
    """
    category = (
        db.query(Category)
        .filter(Category.kind == kind, Category.name == category_name)
        .first()
    )
    if category is None:
        category = Category(name=category_name, kind=kind)
        db.add(category)
        db.flush()

    sub = (
        db.query(Subcategory)
        .filter(
            Subcategory.category_id == category.id,
            Subcategory.name == subcategory_name,
        )
        .first()
    )
    if sub is None:
        sub = Subcategory(name=subcategory_name, category_id=category.id)
        db.add(sub)
        db.flush()
    return sub


def list_suppliers(db: Session) -> List[str]:
    """
    Уникальные поставщики по всем позициям (для выпадающего списка).
    """
    rows = (
        db.query(Item.supplier)
        .filter(Item.supplier.isnot(None), Item.supplier != "")
        .distinct()
        .order_by(Item.supplier)
        .all()
    )
    return [r[0] for r in rows]
