# backend/services/monthly_report_service.py
"""
Оборотная ведомость склада за месяц.

Категория → подкатегории (показываются всегда, даже пустые, чтобы в них
можно было добавить позицию) → видимые за месяц позиции с остатками.
"""
from __future__ import annotations

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List

from sqlalchemy.orm import Session, selectinload

from backend.config.status_registry import color_by_code, label_by_code
from backend.config.warehouse_config import DEFAULT_OUTGOING_REASON, DEPLETED_STATUS_BY_KIND
from backend.models.warehouse_category import Category, Subcategory
from backend.models.warehouse_item import Item
from backend.repositories.warehouse_repository import get_item, list_suppliers
from backend.services.ledger.calculator import (
    compute_monthly_balance,
    get_item_status_for_month,
    issued_by_reason,
    should_item_be_visible,
    status_label,
)
from backend.services.ledger.months import MonthInput, format_month, to_month
from backend.services.ledger.types import InventoryKind

log = logging.getLogger(__name__)

CENT = Decimal("0.01")


def _amount(qty: int, price) -> float:
    """Сумма = количество × цена, округление до копеек."""
    value = Decimal(qty) * Decimal(str(price or 0))
    return float(value.quantize(CENT, rounding=ROUND_HALF_UP))


def build_item_row(item, target_month: MonthInput, kind: InventoryKind | str) -> Dict:
    """
    Строка оборотки по одной позиции.
    item: ORM Item или любой объект с теми же полями и movements.
    """
    target = to_month(target_month)
    kind = InventoryKind(kind)
    movements = list(item.movements)

    balance = compute_monthly_balance(movements, target)
    state = get_item_status_for_month(item, target)
    status = status_label(state, DEPLETED_STATUS_BY_KIND[kind])
    price = getattr(item, "price", 0) or 0

    return {
        "id": getattr(item, "id", None),
        "code": getattr(item, "code", None),
        "name": getattr(item, "name", None),
        "unit": getattr(item, "unit", None),
        "price": float(price),
        "supplier": getattr(item, "supplier", None),
        "ttn_number": getattr(item, "ttn_number", None),
        "last_movement_date": getattr(item, "last_movement_date", None),
        "written_off_date": item.written_off_date,
        "month": format_month(target),
        "status": status.value,
        "status_label": label_by_code(status.value),
        "status_color": color_by_code(status.value),
        "opening_qty": balance.opening_qty,
        "incoming_qty": balance.incoming_qty,
        "issued_qty": balance.issued_qty,
        "ending_qty": balance.ending_qty,
        "opening_amount": _amount(balance.opening_qty, price),
        "incoming_amount": _amount(balance.incoming_qty, price),
        "issued_amount": _amount(balance.issued_qty, price),
        "ending_amount": _amount(balance.ending_qty, price),
        "issued_by_reason": issued_by_reason(movements, target, DEFAULT_OUTGOING_REASON),
    }


def filter_categories_by_month(
    categories: Iterable[Dict],
    target_month: MonthInput,
    kind: InventoryKind | str,
) -> List[Dict]:
    """
    Дерево {name, subcategories: [{name, items: [...]}]} → то же дерево,
    где items: строки оборотки только видимых за месяц позиций.
    Категории и подкатегории не скрываются.
    """
    target = to_month(target_month)

    result: List[Dict] = []
    for category in categories:
        subcategories = []
        for sub in category["subcategories"]:
            rows = [
                build_item_row(item, target, kind)
                for item in sub["items"]
                if should_item_be_visible(item, target)
            ]
            subcategories.append({"name": sub["name"], "items": rows})
        result.append({"name": category["name"], "subcategories": subcategories})
    return result


class MonthlyReportService:
    """
    Отчёты по складу за месяц
    """

    @staticmethod
    def build_month_report(
        db: Session,
        kind: InventoryKind | str,
        month: MonthInput,
    ) -> List[Dict]:
        """
        Оборотка раздела (запчасти / МО) за месяц YYYY-MM.
        """
        kind = InventoryKind(kind)
        target = to_month(month)

        categories = (
            db.query(Category)
            .filter(Category.kind == kind.value)
            .options(
                selectinload(Category.subcategories)
                .selectinload(Subcategory.items)
                .selectinload(Item.movements)
            )
            .order_by(Category.id)
            .all()
        )

        tree = [
            {
                "name": c.name,
                "subcategories": [
                    {"name": s.name, "items": list(s.items)} for s in c.subcategories
                ],
            }
            for c in categories
        ]

        report = filter_categories_by_month(tree, target, kind)
        log.debug(
            "Оборотка %s за %s: %s категорий",
            kind.value, format_month(target), len(report),
        )
        return report

    @staticmethod
    def get_item_ledger(db: Session, item_id: int, month: MonthInput) -> Dict | None:
        """
        Строка оборотки по одной позиции (для карточки / диалога списания).
        """
        item = get_item(db, item_id)
        if item is None:
            return None
        row = build_item_row(item, month, item.subcategory.category.kind)
        row["visible"] = should_item_be_visible(item, month)
        return row

    @staticmethod
    def get_suppliers(db: Session) -> List[str]:
        return list_suppliers(db)
