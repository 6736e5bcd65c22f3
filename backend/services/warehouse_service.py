# backend/services/warehouse_service.py
"""
Операции со складом: движения, позиции, списание, ручная корректировка.

Все функции получают Session явно. Каждое изменение движений
заканчивается пересчётом позиции (recalculate_item): это единственное
место, где пишется кэш quantity/status/last_movement_date.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from backend.config.warehouse_config import (
    DEFAULT_UNIT_BY_KIND,
    DEPLETED_STATUS_BY_KIND,
    NOTE_INITIAL_RECEIPT,
    NOTE_QUANTITY_CORRECTION,
    outgoing_reasons_for,
)
from backend.models.item_quantity_correction import ItemQuantityCorrection
from backend.models.warehouse_item import Item
from backend.models.warehouse_movement import Movement
from backend.repositories.warehouse_repository import (
    get_item,
    get_movement,
    get_subcategory_by_names,
    list_item_movements,
)
from backend.schemas.warehouse import ItemCreate, ItemUpdate, MovementCreate, MovementUpdate
from backend.services.ledger.calculator import (
    BALANCE_SIGN,
    check_write_off,
    compute_monthly_balance,
    recalculate_current_quantity,
    resolve_write_off_reason,
    signed_total,
    validate_quantity,
    write_off_date_for_month,
)
from backend.services.ledger.errors import InvalidQuantity
from backend.services.ledger.months import current_month, format_day, format_month, month_of, to_month
from backend.services.ledger.types import InventoryKind, ItemStatus, MovementType

log = logging.getLogger(__name__)


class ItemNotFound(LookupError):
    def __init__(self, item_id):
        self.item_id = item_id
        super().__init__(f"Позиция не найдена: {item_id}")


class MovementNotFound(LookupError):
    def __init__(self, item_id, movement_id):
        self.item_id = item_id
        self.movement_id = movement_id
        super().__init__(f"Движение {movement_id} не найдено у позиции {item_id}")


class SubcategoryNotFound(LookupError):
    def __init__(self, category_name: str, subcategory_name: str):
        super().__init__(
            f"Категория или подкатегория не найдена: {category_name} / {subcategory_name}"
        )


def _item_kind(item: Item) -> InventoryKind:
    return InventoryKind(item.subcategory.category.kind)


def _require_item(db: Session, item_id: int, *, for_update: bool = False) -> Item:
    item = get_item(db, item_id, for_update=for_update)
    if item is None:
        raise ItemNotFound(item_id)
    return item


class WarehouseService:
    """
    Сервис складских операций поверх движка остатков
    """

    # =========================================================================
    # ПЕРЕСЧЁТ
    # =========================================================================

    @staticmethod
    def recalculate_item(db: Session, item: Item) -> int:
        """
        Пересчитывает кэш позиции из движений (без commit):
        quantity, last_movement_date, written_off_date, status.
        Возвращает новый quantity.
        """
        movements = list(item.movements)

        quantity = recalculate_current_quantity(movements)
        item.quantity = quantity
        item.last_movement_date = max((m.date for m in movements), default=None)

        # Дата списания не должна противоречить остатку своего месяца
        if item.written_off_date is not None:
            wo_month = month_of(item.written_off_date)
            balance = compute_monthly_balance(movements, wo_month)
            if balance.ending_qty > 0:
                log.info(
                    "Позиция %s: остаток на конец %s = %s, дата списания сброшена",
                    item.id, format_month(wo_month), balance.ending_qty,
                )
                item.written_off_date = None

        if quantity > 0:
            item.status = ItemStatus.IN_STOCK.value
        elif item.written_off_date is not None:
            item.status = ItemStatus.WRITTEN_OFF.value
        else:
            item.status = DEPLETED_STATUS_BY_KIND[_item_kind(item)].value

        db.flush()
        return quantity

    @staticmethod
    def recalculate_all_items(db: Session) -> int:
        """
        Пересчитывает все позиции (запуск приложения / обслуживание).
        """
        items = db.query(Item).order_by(Item.id).all()
        try:
            for item in items:
                WarehouseService.recalculate_item(db, item)
            db.commit()
        except Exception:
            db.rollback()
            raise

        log.info("Пересчитаны остатки: %s позиций", len(items))
        return len(items)

    # =========================================================================
    # ДВИЖЕНИЯ
    # =========================================================================

    @staticmethod
    def list_movements(db: Session, item_id: int) -> List[Movement]:
        _require_item(db, item_id)
        return list_item_movements(db, item_id)

    @staticmethod
    def add_movement(db: Session, item_id: int, data: MovementCreate) -> Movement:
        """
        Добавляет движение. Выдача и списание проходят проверку остатка
        за месяц даты движения.
        """
        try:
            item = _require_item(db, item_id, for_update=True)
            quantity = validate_quantity(data.quantity)
            kind = MovementType(data.type)

            if BALANCE_SIGN[kind] < 0:
                check_write_off(item.movements, quantity, month_of(data.date))

            movement = Movement(
                date=data.date,
                type=kind.value,
                quantity=quantity,
                price_per_unit=data.price_per_unit,
                supplier=data.supplier,
                ttn_number=data.ttn_number,
                notes=data.notes,
            )
            item.movements.append(movement)
            WarehouseService.recalculate_item(db, item)
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(movement)
        log.info(
            "Позиция %s: движение %s %s x%s от %s",
            item_id, movement.id, movement.type, movement.quantity, movement.date,
        )
        return movement

    @staticmethod
    def update_movement(
        db: Session,
        item_id: int,
        movement_id: int,
        data: MovementUpdate,
    ) -> Movement:
        """
        Правка движения: меняются только переданные поля.
        Проверка остатка не выполняется (административная правка).
        """
        try:
            item = _require_item(db, item_id, for_update=True)
            movement = get_movement(db, item_id, movement_id)
            if movement is None:
                raise MovementNotFound(item_id, movement_id)

            updates = data.model_dump(exclude_unset=True)
            # notes, supplier, ttn_number можно очистить; остальные поля обязательны
            for field_name in ("date", "type", "quantity"):
                if field_name in updates and updates[field_name] is None:
                    del updates[field_name]
            if "quantity" in updates:
                updates["quantity"] = validate_quantity(updates["quantity"])
            if "type" in updates:
                updates["type"] = MovementType(updates["type"]).value

            for field_name, value in updates.items():
                setattr(movement, field_name, value)

            WarehouseService.recalculate_item(db, item)
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(movement)
        return movement

    @staticmethod
    def delete_movement(db: Session, item_id: int, movement_id: int) -> None:
        try:
            item = _require_item(db, item_id, for_update=True)
            movement = get_movement(db, item_id, movement_id)
            if movement is None:
                raise MovementNotFound(item_id, movement_id)

            item.movements.remove(movement)
            WarehouseService.recalculate_item(db, item)
            db.commit()
        except Exception:
            db.rollback()
            raise

        log.info("Позиция %s: движение %s удалено", item_id, movement_id)

    # =========================================================================
    # ПОЗИЦИИ
    # =========================================================================

    @staticmethod
    def create_item(
        db: Session,
        kind: InventoryKind | str,
        category_name: str,
        subcategory_name: str,
        data: ItemCreate,
        today: Optional[date] = None,
    ) -> Item:
        """
        Создаёт позицию в подкатегории. Начальное количество > 0
        оформляется движением «Первоначальное поступление» сегодняшней датой.
        """
        kind = InventoryKind(kind)
        today = today or date.today()

        if isinstance(data.quantity, bool) or data.quantity < 0:
            raise InvalidQuantity(data.quantity)

        try:
            sub = get_subcategory_by_names(db, kind.value, category_name, subcategory_name)
            if sub is None:
                raise SubcategoryNotFound(category_name, subcategory_name)

            item = Item(
                name=data.name.strip(),
                unit=data.unit or DEFAULT_UNIT_BY_KIND[kind],
                price=data.price,
                supplier=data.supplier or "",
                ttn_number=data.ttn_number or "",
                quantity=0,
                status=ItemStatus.IN_STOCK.value,
            )
            sub.items.append(item)

            if data.quantity > 0:
                item.movements.append(
                    Movement(
                        date=today,
                        type=MovementType.INCOMING.value,
                        quantity=data.quantity,
                        price_per_unit=data.price,
                        supplier=data.supplier or "",
                        ttn_number=data.ttn_number or "",
                        notes=NOTE_INITIAL_RECEIPT,
                    )
                )

            db.flush()
            WarehouseService.recalculate_item(db, item)
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(item)
        log.info("Создана позиция %s «%s» (%s), остаток %s", item.id, item.name, kind.value, item.quantity)
        return item

    @staticmethod
    def update_item(
        db: Session,
        item_id: int,
        data: ItemUpdate,
        *,
        updated_by: Optional[str] = None,
        today: Optional[date] = None,
    ) -> Item:
        """
        Правка реквизитов позиции. Новое quantity оформляется
        ручной корректировкой (см. correct_item_quantity).
        """
        try:
            item = _require_item(db, item_id, for_update=True)
            updates = data.model_dump(exclude_unset=True, exclude_none=True)
            new_quantity = updates.pop("quantity", None)

            for field_name, value in updates.items():
                setattr(item, field_name, value)

            if new_quantity is not None and new_quantity != item.quantity:
                WarehouseService._apply_quantity_correction(
                    db, item, new_quantity,
                    created_by=updated_by,
                    comment="Правка позиции",
                    today=today,
                )

            WarehouseService.recalculate_item(db, item)
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(item)
        return item

    @staticmethod
    def delete_item(db: Session, item_id: int) -> None:
        """
        Удаляет позицию вместе с движениями и журналом корректировок.
        """
        try:
            item = _require_item(db, item_id, for_update=True)
            db.delete(item)
            db.commit()
        except Exception:
            db.rollback()
            raise

        log.info("Позиция %s удалена", item_id)

    # =========================================================================
    # СПИСАНИЕ
    # =========================================================================

    @staticmethod
    def write_off(
        db: Session,
        item_id: int,
        quantity: int,
        month: Optional[str] = None,
        notes: Optional[str] = None,
        today: Optional[date] = None,
    ) -> Movement:
        """
        Списание за месяц (по умолчанию: текущий).

        Логика:
        1. Доступно = остаток на начало + приход − расход месяца
        2. Больше доступного: InsufficientStock, ничего не пишем
        3. Дата движения: текущий месяц → сегодня, прошлый → последний день,
           будущий → первый день
        4. Причина из списка категории: единственная подставляется сама,
           из нескольких обязательно выбрать (InvalidWriteOffReason)
        5. Если остаток месяца стал 0: ставим дату полного списания
        """
        today = today or date.today()
        target = to_month(month) if month is not None else current_month(today)

        try:
            item = _require_item(db, item_id, for_update=True)
            reason = resolve_write_off_reason(notes, outgoing_reasons_for(item.subcategory.category.name))
            available = check_write_off(item.movements, quantity, target)

            day = write_off_date_for_month(target if month is not None else None, today)
            movement = Movement(
                date=day,
                type=MovementType.WRITE_OFF.value,
                quantity=quantity,
                notes=reason,
            )
            item.movements.append(movement)

            balance = compute_monthly_balance(item.movements, target)
            if balance.ending_qty == 0:
                item.written_off_date = day

            WarehouseService.recalculate_item(db, item)
            db.commit()
        except Exception:
            db.rollback()
            raise

        db.refresh(movement)
        log.info(
            "Позиция %s: списано %s из %s за %s, дата %s (%s)",
            item_id, quantity, available, format_month(target), format_day(movement.date), movement.notes,
        )
        return movement

    # =========================================================================
    # РУЧНАЯ КОРРЕКТИРОВКА КОЛИЧЕСТВА
    # =========================================================================

    @staticmethod
    def correct_item_quantity(
        db: Session,
        item_id: int,
        new_quantity: int,
        *,
        created_by: Optional[str] = None,
        comment: Optional[str] = None,
        today: Optional[date] = None,
    ) -> Optional[ItemQuantityCorrection]:
        """
        Ручная корректировка остатка позиции до new_quantity.

        Проверка доступного остатка НЕ выполняется: корректировка может
        дать обороты, которые не совпадают с естественным движением товара.
        Каждая корректировка пишется в item_quantity_corrections.
        Если количество не меняется: возвращает None.
        """
        try:
            item = _require_item(db, item_id, for_update=True)
            correction = WarehouseService._apply_quantity_correction(
                db, item, new_quantity,
                created_by=created_by,
                comment=comment,
                today=today,
            )
            WarehouseService.recalculate_item(db, item)
            db.commit()
        except Exception:
            db.rollback()
            raise

        if correction is not None:
            db.refresh(correction)
        return correction

    @staticmethod
    def _apply_quantity_correction(
        db: Session,
        item: Item,
        new_quantity: int,
        *,
        created_by: Optional[str],
        comment: Optional[str],
        today: Optional[date],
    ) -> Optional[ItemQuantityCorrection]:
        if isinstance(new_quantity, bool) or not isinstance(new_quantity, int) or new_quantity < 0:
            raise InvalidQuantity(new_quantity)

        today = today or date.today()
        movements = list(item.movements)
        calculated = recalculate_current_quantity(movements)
        # Разница считается от знаковой суммы, чтобы после правки остаток был ровно new_quantity
        diff = new_quantity - signed_total(movements)
        if diff == 0:
            return None

        initial = next(
            (
                m for m in sorted(movements, key=lambda x: x.id or 0)
                if m.type == MovementType.INCOMING.value and m.notes == NOTE_INITIAL_RECEIPT
            ),
            None,
        )

        if initial is not None and initial.quantity + diff > 0:
            initial.quantity = initial.quantity + diff
            method = "initial_receipt"
            movement = initial
        else:
            movement = Movement(
                date=today,
                type=(MovementType.INCOMING if diff > 0 else MovementType.OUTGOING).value,
                quantity=abs(diff),
                notes=NOTE_QUANTITY_CORRECTION,
            )
            item.movements.append(movement)
            method = "adjustment_movement"

        db.flush()

        correction = ItemQuantityCorrection(
            qty=new_quantity,
            calculated_qty=calculated,
            discrepancy=new_quantity - calculated,
            method=method,
            movement_id=movement.id,
            comment=comment,
            created_by=created_by,
        )
        item.corrections.append(correction)
        db.flush()

        log.warning(
            "Позиция %s: ручная корректировка %s → %s (%s, движение %s), проверка остатка не выполнялась",
            item.id, calculated, new_quantity, method, movement.id,
        )
        return correction
