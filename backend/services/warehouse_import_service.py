# backend/services/warehouse_import_service.py
"""
Импорт склада из JSON.

Формат:
{
  "clearExisting": false,
  "defaultMovementDate": "01.01.2026",
  "spare_parts": [{"name": "Запчасти", "subcategories": [{"name": "Склад", "items": [...]}]}],
  "mo": [...]
}

Позиция ищется по внешнему id (Item.code). Движения из файла добавляются;
у существующей позиции совпадающие движения (дата, вид, количество, примечание)
пропускаются. Позиция без движений, но с quantity > 0 получает
«Первоначальное поступление» на lastMovementDate / lastUseDate / defaultMovementDate.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from backend.config.warehouse_config import DEFAULT_UNIT_BY_KIND, NOTE_INITIAL_RECEIPT
from backend.models.item_quantity_correction import ItemQuantityCorrection
from backend.models.warehouse_category import Category, Subcategory
from backend.models.warehouse_item import Item
from backend.models.warehouse_movement import Movement
from backend.repositories.warehouse_repository import (
    get_or_create_subcategory,
    get_subcategory_by_names,
)
from backend.schemas.warehouse import ImportCategory, ImportItem, ImportPayload
from backend.services.ledger.calculator import validate_quantity
from backend.services.ledger.errors import InvalidQuantity
from backend.services.ledger.months import parse_day
from backend.services.ledger.types import InventoryKind, MovementType
from backend.services.warehouse_service import WarehouseService
from backend.settings import settings

log = logging.getLogger(__name__)


@dataclass
class ImportRowError:
    """Ошибка импорта для одной позиции/движения."""
    path: str
    message: str


@dataclass
class ImportResult:
    """Результат импорта."""
    success: bool = False
    categories_created: int = 0
    subcategories_created: int = 0
    items_created: int = 0
    items_updated: int = 0
    movements_created: int = 0
    errors: List[ImportRowError] = field(default_factory=list)
    message: str = ""


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class WarehouseImportService:
    """Сервис импорта склада из JSON."""

    @staticmethod
    def import_from_file(db: Session, path: Path | str) -> ImportResult:
        path = Path(path)
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        return WarehouseImportService.import_from_json(db, data)

    @staticmethod
    def import_from_json(db: Session, data: dict) -> ImportResult:
        result = ImportResult()

        try:
            payload = ImportPayload.model_validate(data)
        except ValidationError as e:
            for err in e.errors():
                loc = ".".join(str(x) for x in err.get("loc", ()))
                result.errors.append(ImportRowError(path=loc, message=err.get("msg", "")))
            result.message = f"Файл не прошёл проверку: {len(result.errors)} ошибок"
            return result

        default_date = payload.default_movement_date or parse_day(settings.DEFAULT_MOVEMENT_DATE)

        try:
            if payload.clear_existing:
                WarehouseImportService._clear_existing(db)

            touched: List[Item] = []
            for kind, categories in (
                (InventoryKind.SPARE_PARTS, payload.spare_parts),
                (InventoryKind.MO, payload.mo),
            ):
                touched.extend(
                    WarehouseImportService._import_categories(
                        db, categories, kind, default_date, result
                    )
                )

            for item in touched:
                WarehouseService.recalculate_item(db, item)

            db.commit()
        except Exception:
            db.rollback()
            raise

        result.success = not result.errors
        result.message = (
            f"Импорт завершён: позиций создано {result.items_created}, "
            f"обновлено {result.items_updated}, движений {result.movements_created}"
        )
        log.info(result.message)
        return result

    # -------------------------------------------------------------------------

    @staticmethod
    def _clear_existing(db: Session) -> None:
        log.warning("Импорт: очистка существующих данных склада")
        db.query(Movement).delete(synchronize_session=False)
        db.query(ItemQuantityCorrection).delete(synchronize_session=False)
        db.query(Item).delete(synchronize_session=False)
        db.query(Subcategory).delete(synchronize_session=False)
        db.query(Category).delete(synchronize_session=False)
        db.flush()
        db.expunge_all()

    @staticmethod
    def _import_categories(
        db: Session,
        categories: List[ImportCategory],
        kind: InventoryKind,
        default_date: date,
        result: ImportResult,
    ) -> List[Item]:
        touched: List[Item] = []

        for category in categories:
            cat_exists = (
                db.query(Category.id)
                .filter(Category.kind == kind.value, Category.name == category.name)
                .first()
                is not None
            )
            if not cat_exists:
                result.categories_created += 1

            for sub_data in category.subcategories:
                if get_subcategory_by_names(db, kind.value, category.name, sub_data.name) is None:
                    result.subcategories_created += 1
                sub = get_or_create_subcategory(db, kind.value, category.name, sub_data.name)

                for idx, item_data in enumerate(sub_data.items):
                    path = f"{kind.value}.{category.name}.{sub_data.name}[{idx}]"
                    item = WarehouseImportService._import_item(
                        db, sub, kind, item_data, default_date, path, result
                    )
                    if item is not None:
                        touched.append(item)

        return touched

    @staticmethod
    def _import_item(
        db: Session,
        sub: Subcategory,
        kind: InventoryKind,
        data: ImportItem,
        default_date: date,
        path: str,
        result: ImportResult,
    ) -> Optional[Item]:
        supplier = _blank_to_none(data.supplier)
        ttn_number = _blank_to_none(data.ttn_number)

        item = None
        if data.id:
            item = db.query(Item).filter(Item.code == data.id).first()

        is_new = item is None
        if is_new:
            item = Item(code=data.id, quantity=0)
            db.add(item)
            result.items_created += 1
        else:
            result.items_updated += 1

        item.name = data.name.strip()
        item.unit = data.unit or DEFAULT_UNIT_BY_KIND[kind]
        item.price = data.price
        item.supplier = supplier
        item.ttn_number = ttn_number
        item.written_off_date = data.written_off_date
        item.subcategory = sub

        existing = {
            (m.date, m.type, m.quantity, m.notes or "")
            for m in (item.movements if not is_new else [])
        }

        if data.movements:
            for m_idx, m in enumerate(data.movements):
                try:
                    quantity = validate_quantity(m.quantity)
                except InvalidQuantity as e:
                    result.errors.append(ImportRowError(path=f"{path}.movements[{m_idx}]", message=str(e)))
                    continue

                key = (m.date, m.type.value, quantity, m.notes or "")
                if key in existing:
                    continue

                item.movements.append(
                    Movement(
                        date=m.date,
                        type=m.type.value,
                        quantity=quantity,
                        price_per_unit=m.price_per_unit,
                        supplier=_blank_to_none(m.supplier),
                        ttn_number=_blank_to_none(m.ttn_number),
                        notes=m.notes,
                    )
                )
                existing.add(key)
                result.movements_created += 1

        elif is_new and data.quantity > 0:
            movement_date = data.last_movement_date or data.last_use_date or default_date
            item.movements.append(
                Movement(
                    date=movement_date,
                    type=MovementType.INCOMING.value,
                    quantity=data.quantity,
                    price_per_unit=data.price or None,
                    supplier=supplier,
                    ttn_number=ttn_number,
                    notes=NOTE_INITIAL_RECEIPT,
                )
            )
            result.movements_created += 1

        elif is_new and data.quantity < 0:
            result.errors.append(ImportRowError(path=path, message=str(InvalidQuantity(data.quantity))))

        db.flush()
        return item
