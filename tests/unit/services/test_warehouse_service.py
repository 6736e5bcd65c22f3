"""
WarehouseService: движения, позиции, списание, ручная корректировка
"""
import logging
from datetime import date
from decimal import Decimal

import pytest

from backend.config.warehouse_config import (
    NOTE_INITIAL_RECEIPT,
    NOTE_QUANTITY_CORRECTION,
)
from backend.models.item_quantity_correction import ItemQuantityCorrection
from backend.models.warehouse_item import Item
from backend.models.warehouse_movement import Movement
from backend.schemas.warehouse import ItemCreate, ItemUpdate, MovementCreate, MovementUpdate
from backend.services.ledger.calculator import recalculate_current_quantity
from backend.repositories.warehouse_repository import get_or_create_subcategory
from backend.services.ledger.errors import (
    InsufficientStock,
    InvalidMonthFormat,
    InvalidQuantity,
    InvalidWriteOffReason,
)
from backend.services.warehouse_service import (
    ItemNotFound,
    MovementNotFound,
    SubcategoryNotFound,
    WarehouseService,
)


JAN_15 = date(2026, 1, 15)


def _create(db, quantity=10, name="Фильтр масляный", kind="spare_parts",
            category="Запчасти", subcategory="Склад", today=JAN_15, **kwargs):
    data = ItemCreate(name=name, quantity=quantity, price=Decimal("100.00"), **kwargs)
    return WarehouseService.create_item(db, kind, category, subcategory, data, today=today)


def _assert_cache_consistent(db, item_id):
    item = db.get(Item, item_id)
    assert item.quantity == recalculate_current_quantity(item.movements)


class TestCreateItem:
    """create_item"""

    def test_initial_receipt(self, db, spare_parts_sub):
        item = _create(db, quantity=10)

        assert item.quantity == 10
        assert item.unit == "pcs"
        assert item.status == "in stock"
        assert item.last_movement_date == JAN_15
        assert len(item.movements) == 1

        m = item.movements[0]
        assert m.type == "incoming"
        assert m.quantity == 10
        assert m.date == JAN_15
        assert m.notes == NOTE_INITIAL_RECEIPT

    def test_zero_quantity_has_no_movements(self, db, spare_parts_sub):
        item = _create(db, quantity=0)
        assert item.movements == []
        assert item.quantity == 0
        assert item.status == "out of stock"

    def test_mo_defaults(self, db, mo_sub):
        item = _create(db, quantity=0, name="Ведро", kind="mo",
                       category="Столовая/мастерские", subcategory="Инвентарь")
        assert item.unit == "шт"
        assert item.status == "consumed"

    def test_unknown_subcategory(self, db, spare_parts_sub):
        with pytest.raises(SubcategoryNotFound):
            _create(db, subcategory="Нет такой")

    def test_negative_quantity(self, db, spare_parts_sub):
        with pytest.raises(InvalidQuantity):
            _create(db, quantity=-1)
        assert db.query(Item).count() == 0


class TestMovements:
    """add / update / delete / list"""

    def test_add_outgoing(self, db, spare_parts_sub):
        item = _create(db, quantity=10)
        movement = WarehouseService.add_movement(
            db, item.id,
            MovementCreate(date="03.02.2026", type="outgoing", quantity=4, notes="КЗС 241009"),
        )
        assert movement.id is not None
        assert movement.date == date(2026, 2, 3)

        item = db.get(Item, item.id)
        assert item.quantity == 6
        assert item.last_movement_date == date(2026, 2, 3)
        _assert_cache_consistent(db, item.id)

    def test_add_outgoing_over_available_rejected(self, db, spare_parts_sub):
        item = _create(db, quantity=10)
        with pytest.raises(InsufficientStock) as exc:
            WarehouseService.add_movement(
                db, item.id, MovementCreate(date="03.02.2026", type="outgoing", quantity=11),
            )
        assert exc.value.available == 10
        assert db.query(Movement).count() == 1
        assert db.get(Item, item.id).quantity == 10

    def test_add_write_off_checks_month_of_movement(self, db, spare_parts_sub):
        item = _create(db, quantity=10)
        # Приход 01.03 не помогает списанию в феврале
        WarehouseService.add_movement(
            db, item.id, MovementCreate(date="01.03.2026", type="incoming", quantity=5),
        )
        with pytest.raises(InsufficientStock):
            WarehouseService.add_movement(
                db, item.id, MovementCreate(date="20.02.2026", type="write-off", quantity=12),
            )

    def test_add_zero_quantity(self, db, spare_parts_sub):
        item = _create(db, quantity=10)
        with pytest.raises(InvalidQuantity):
            WarehouseService.add_movement(
                db, item.id, MovementCreate(date="03.02.2026", type="incoming", quantity=0),
            )

    def test_add_transfer_keeps_quantity(self, db, spare_parts_sub):
        item = _create(db, quantity=10)
        WarehouseService.add_movement(
            db, item.id, MovementCreate(date="03.02.2026", type="transfer", quantity=50),
        )
        assert db.get(Item, item.id).quantity == 10

    def test_unknown_item(self, db, spare_parts_sub):
        with pytest.raises(ItemNotFound):
            WarehouseService.add_movement(
                db, 999, MovementCreate(date="03.02.2026", type="incoming", quantity=1),
            )

    def test_list_newest_first(self, db, spare_parts_sub):
        item = _create(db, quantity=10)
        WarehouseService.add_movement(
            db, item.id, MovementCreate(date="2026-03-01", type="incoming", quantity=1),
        )
        WarehouseService.add_movement(
            db, item.id, MovementCreate(date="2026-02-01", type="incoming", quantity=2),
        )
        dates = [m.date for m in WarehouseService.list_movements(db, item.id)]
        assert dates == [date(2026, 3, 1), date(2026, 2, 1), JAN_15]

    def test_update_partial(self, db, spare_parts_sub):
        item = _create(db, quantity=10)
        movement_id = item.movements[0].id

        updated = WarehouseService.update_movement(
            db, item.id, movement_id, MovementUpdate(quantity=7),
        )
        assert updated.quantity == 7
        assert updated.notes == NOTE_INITIAL_RECEIPT
        assert updated.date == JAN_15
        assert db.get(Item, item.id).quantity == 7

    def test_update_clears_optional_fields(self, db, spare_parts_sub):
        item = _create(db, quantity=10)
        movement_id = item.movements[0].id

        updated = WarehouseService.update_movement(
            db, item.id, movement_id, MovementUpdate(notes=None, supplier=None, quantity=None),
        )
        assert updated.notes is None
        assert updated.supplier is None
        assert updated.quantity == 10

    def test_update_invalid_quantity(self, db, spare_parts_sub):
        item = _create(db, quantity=10)
        with pytest.raises(InvalidQuantity):
            WarehouseService.update_movement(
                db, item.id, item.movements[0].id, MovementUpdate(quantity=0),
            )

    def test_update_missing_movement(self, db, spare_parts_sub):
        item = _create(db, quantity=10)
        with pytest.raises(MovementNotFound):
            WarehouseService.update_movement(db, item.id, 999, MovementUpdate(quantity=1))

    def test_delete(self, db, spare_parts_sub):
        item = _create(db, quantity=10)
        WarehouseService.add_movement(
            db, item.id, MovementCreate(date="03.02.2026", type="outgoing", quantity=4),
        )
        initial_id = db.get(Item, item.id).movements[0].id

        WarehouseService.delete_movement(db, item.id, initial_id)

        item = db.get(Item, item.id)
        assert len(item.movements) == 1
        assert item.quantity == 0
        assert item.status == "out of stock"


class TestWriteOff:
    """write_off"""

    def test_full_write_off_past_month(self, db, spare_parts_sub):
        item = _create(db, quantity=10)
        movement = WarehouseService.write_off(
            db, item.id, 10, month="2026-01", notes="КЗС 241009", today=date(2026, 3, 10),
        )
        assert movement.type == "write-off"
        assert movement.date == date(2026, 1, 31)
        assert movement.notes == "КЗС 241009"

        item = db.get(Item, item.id)
        assert item.quantity == 0
        assert item.written_off_date == date(2026, 1, 31)
        assert item.status == "written off"

    def test_partial_write_off_current_month(self, db, spare_parts_sub):
        item = _create(db, quantity=10)
        today = date(2026, 1, 20)
        movement = WarehouseService.write_off(db, item.id, 3, notes="Возврат", today=today)

        assert movement.date == today
        assert movement.notes == "Возврат"
        item = db.get(Item, item.id)
        assert item.quantity == 7
        assert item.written_off_date is None
        assert item.status == "in stock"

    def test_future_month_first_day(self, db, spare_parts_sub):
        item = _create(db, quantity=10)
        movement = WarehouseService.write_off(
            db, item.id, 2, month="2026-04", notes="Возврат", today=date(2026, 1, 20),
        )
        assert movement.date == date(2026, 4, 1)

    def test_over_available(self, db, spare_parts_sub):
        item = _create(db, quantity=10)
        with pytest.raises(InsufficientStock) as exc:
            WarehouseService.write_off(
                db, item.id, 11, month="2026-02", notes="Возврат", today=date(2026, 2, 5),
            )
        assert exc.value.available == 10
        assert "(10)" in str(exc.value)
        assert db.query(Movement).count() == 1

    def test_receipt_in_same_month_clears_written_off_date(self, db, spare_parts_sub):
        item = _create(db, quantity=10)
        WarehouseService.write_off(
            db, item.id, 10, month="2026-01", notes="Возврат", today=date(2026, 3, 10),
        )
        WarehouseService.add_movement(
            db, item.id, MovementCreate(date="25.01.2026", type="incoming", quantity=3),
        )
        item = db.get(Item, item.id)
        assert item.written_off_date is None
        assert item.quantity == 3
        assert item.status == "in stock"

    def test_receipt_in_later_month_keeps_written_off_date(self, db, spare_parts_sub):
        item = _create(db, quantity=10)
        WarehouseService.write_off(
            db, item.id, 10, month="2026-01", notes="Возврат", today=date(2026, 3, 10),
        )
        WarehouseService.add_movement(
            db, item.id, MovementCreate(date="05.03.2026", type="incoming", quantity=5),
        )
        item = db.get(Item, item.id)
        assert item.written_off_date == date(2026, 1, 31)
        assert item.quantity == 5
        assert item.status == "in stock"

    def test_reason_required_when_category_has_several(self, db, spare_parts_sub):
        item = _create(db, quantity=10)
        with pytest.raises(InvalidWriteOffReason) as exc:
            WarehouseService.write_off(db, item.id, 2, today=date(2026, 1, 20))
        assert "КЗС 241009" in exc.value.allowed
        assert db.query(Movement).count() == 1

    def test_reason_outside_category_list(self, db, spare_parts_sub):
        item = _create(db, quantity=10)
        with pytest.raises(InvalidWriteOffReason):
            WarehouseService.write_off(db, item.id, 2, notes="Брак", today=date(2026, 1, 20))
        assert db.get(Item, item.id).quantity == 10

    def test_single_reason_is_default(self, db):
        get_or_create_subcategory(db, "spare_parts", "Б.У. Запчасти", "Склад")
        db.commit()
        item = _create(db, quantity=5, category="Б.У. Запчасти")

        movement = WarehouseService.write_off(db, item.id, 5, today=date(2026, 1, 20))

        assert movement.notes == "Выдача"
        assert db.get(Item, item.id).status == "written off"

    def test_empty_month_string_rejected(self, db, spare_parts_sub):
        item = _create(db, quantity=10)
        with pytest.raises(InvalidMonthFormat):
            WarehouseService.write_off(
                db, item.id, 2, month="", notes="Возврат", today=date(2026, 1, 20),
            )
        assert db.query(Movement).count() == 1


class TestQuantityCorrection:
    """correct_item_quantity / update_item"""

    def test_adjusts_initial_receipt(self, db, spare_parts_sub):
        item = _create(db, quantity=10)
        correction = WarehouseService.correct_item_quantity(
            db, item.id, 7, created_by="кладовщик", comment="Инвентаризация",
            today=date(2026, 2, 1),
        )
        assert correction.method == "initial_receipt"
        assert correction.qty == 7
        assert correction.calculated_qty == 10
        assert correction.discrepancy == -3
        assert correction.created_by == "кладовщик"

        item = db.get(Item, item.id)
        assert item.quantity == 7
        assert len(item.movements) == 1
        assert item.movements[0].quantity == 7
        assert correction.movement_id == item.movements[0].id

    def test_creates_adjustment_when_initial_cannot_absorb(self, db, spare_parts_sub):
        item = _create(db, quantity=10)
        correction = WarehouseService.correct_item_quantity(db, item.id, 0, today=date(2026, 2, 1))
        assert correction.method == "adjustment_movement"

        item = db.get(Item, item.id)
        assert item.quantity == 0
        adjustment = [m for m in item.movements if m.notes == NOTE_QUANTITY_CORRECTION]
        assert len(adjustment) == 1
        assert adjustment[0].type == "outgoing"
        assert adjustment[0].quantity == 10
        assert adjustment[0].date == date(2026, 2, 1)

    def test_incoming_adjustment_without_initial_receipt(self, db, spare_parts_sub):
        item = _create(db, quantity=0)
        WarehouseService.add_movement(
            db, item.id, MovementCreate(date="10.01.2026", type="incoming", quantity=4),
        )
        WarehouseService.correct_item_quantity(db, item.id, 12, today=date(2026, 2, 1))

        item = db.get(Item, item.id)
        assert item.quantity == 12
        adjustment = [m for m in item.movements if m.notes == NOTE_QUANTITY_CORRECTION]
        assert adjustment[0].type == "incoming"
        assert adjustment[0].quantity == 8

    def test_bypasses_admission_check(self, db, spare_parts_sub):
        item = _create(db, quantity=10)
        WarehouseService.add_movement(
            db, item.id, MovementCreate(date="03.02.2026", type="outgoing", quantity=10),
        )
        WarehouseService.correct_item_quantity(db, item.id, 5, today=date(2026, 3, 1))

        item = db.get(Item, item.id)
        assert item.quantity == 5
        initial = [m for m in item.movements if m.notes == NOTE_INITIAL_RECEIPT][0]
        assert initial.quantity == 15

    def test_no_change_returns_none(self, db, spare_parts_sub):
        item = _create(db, quantity=10)
        assert WarehouseService.correct_item_quantity(db, item.id, 10) is None
        assert db.query(ItemQuantityCorrection).count() == 0

    def test_negative_rejected(self, db, spare_parts_sub):
        item = _create(db, quantity=10)
        with pytest.raises(InvalidQuantity):
            WarehouseService.correct_item_quantity(db, item.id, -1)

    def test_logs_warning(self, db, spare_parts_sub, caplog):
        item = _create(db, quantity=10)
        with caplog.at_level(logging.WARNING):
            WarehouseService.correct_item_quantity(db, item.id, 8, today=date(2026, 2, 1))
        assert "ручная корректировка" in caplog.text

    def test_update_item_routes_quantity_to_correction(self, db, spare_parts_sub):
        item = _create(db, quantity=10)
        updated = WarehouseService.update_item(
            db, item.id, ItemUpdate(name="Фильтр топливный", quantity=3),
            updated_by="operator", today=date(2026, 2, 1),
        )
        assert updated.name == "Фильтр топливный"
        assert updated.quantity == 3

        corrections = db.query(ItemQuantityCorrection).all()
        assert len(corrections) == 1
        assert corrections[0].created_by == "operator"

    def test_update_item_without_quantity(self, db, spare_parts_sub):
        item = _create(db, quantity=10)
        WarehouseService.update_item(db, item.id, ItemUpdate(supplier="ООО Ромашка"))
        assert db.get(Item, item.id).supplier == "ООО Ромашка"
        assert db.query(ItemQuantityCorrection).count() == 0


class TestItemLifecycle:
    def test_delete_cascades_movements(self, db, spare_parts_sub):
        item = _create(db, quantity=10)
        WarehouseService.correct_item_quantity(db, item.id, 5, today=date(2026, 2, 1))

        WarehouseService.delete_item(db, item.id)

        assert db.query(Item).count() == 0
        assert db.query(Movement).count() == 0
        assert db.query(ItemQuantityCorrection).count() == 0

    def test_delete_missing(self, db, spare_parts_sub):
        with pytest.raises(ItemNotFound):
            WarehouseService.delete_item(db, 999)

    def test_recalculate_all_items_repairs_cache(self, db, spare_parts_sub):
        item = _create(db, quantity=10)
        other = _create(db, quantity=4, name="Ремень")

        db.get(Item, item.id).quantity = 999
        db.get(Item, other.id).status = "written off"
        db.commit()

        assert WarehouseService.recalculate_all_items(db) == 2
        assert db.get(Item, item.id).quantity == 10
        assert db.get(Item, other.id).status == "in stock"
