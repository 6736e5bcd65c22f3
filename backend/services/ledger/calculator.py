"""
Восстановление оборотной ведомости по истории движений.

Чистые функции: на входе список движений позиции и месяц (YYYY-MM),
на выходе остаток на начало, приход, расход, остаток на конец,
видимость позиции в отчёте за месяц и её статус.

Правила учёта:
- приход (incoming) увеличивает остаток;
- выдача (outgoing) и списание (write-off) уменьшают остаток одинаково;
- перемещение (transfer) на остаток не влияет.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Dict, Iterable, Optional, Sequence

from .errors import InsufficientStock, InvalidQuantity, InvalidWriteOffReason
from .months import (
    MonthInput,
    current_month,
    first_day,
    format_month,
    last_day,
    month_of,
    to_month,
)
from .types import (
    ItemLike,
    ItemStatus,
    MonthStatus,
    MonthlyBalance,
    MovementLike,
    MovementType,
)

log = logging.getLogger(__name__)


BALANCE_SIGN: Dict[MovementType, int] = {
    MovementType.INCOMING: 1,
    MovementType.OUTGOING: -1,
    MovementType.WRITE_OFF: -1,
    MovementType.TRANSFER: 0,
}

if set(BALANCE_SIGN) != set(MovementType):
    raise RuntimeError("BALANCE_SIGN должен покрывать все виды движений")


def _kind(movement: MovementLike) -> MovementType:
    return MovementType(movement.type)


def _signed_qty(movement: MovementLike) -> int:
    return BALANCE_SIGN[_kind(movement)] * int(movement.quantity)


def signed_balance_before(movements: Iterable[MovementLike], target_month: MonthInput) -> int:
    """Знаковая сумма движений строго до месяца (без обрезки нулём)."""
    target = to_month(target_month)
    return sum(_signed_qty(m) for m in movements if month_of(m.date) < target)


def signed_balance_through(movements: Iterable[MovementLike], target_month: MonthInput) -> int:
    """Знаковая сумма движений по конец месяца включительно."""
    target = to_month(target_month)
    return sum(_signed_qty(m) for m in movements if month_of(m.date) <= target)


def has_movement_in_month(movements: Iterable[MovementLike], target_month: MonthInput) -> bool:
    target = to_month(target_month)
    return any(month_of(m.date) == target for m in movements)


def compute_monthly_balance(
    movements: Iterable[MovementLike],
    target_month: MonthInput,
) -> MonthlyBalance:
    """
    Оборотка за месяц.

    Движения до месяца формируют остаток на начало, движения месяца
    дают приход и расход, более поздние игнорируются. Порядок движений
    значения не имеет.
    """
    target = to_month(target_month)

    opening = 0
    incoming = 0
    issued = 0

    for m in movements:
        m_month = month_of(m.date)
        if m_month > target:
            continue

        kind = _kind(m)
        qty = int(m.quantity)

        if m_month < target:
            opening += BALANCE_SIGN[kind] * qty
        elif kind is MovementType.INCOMING:
            incoming += qty
        elif BALANCE_SIGN[kind] < 0:
            issued += qty

    if opening < 0:
        # Отрицательный остаток = в истории не хватает движений
        log.warning(
            "Отрицательный остаток на начало %s: %s, обрезан до 0",
            format_month(target), opening,
        )

    opening_qty = max(0, opening)
    ending_qty = max(0, opening_qty + incoming - issued)

    return MonthlyBalance(
        opening_qty=opening_qty,
        incoming_qty=incoming,
        issued_qty=issued,
        ending_qty=ending_qty,
    )


def should_item_be_visible(item: ItemLike, target_month: MonthInput) -> bool:
    """
    Показывать ли позицию в отчёте за месяц.

    1. Есть любое движение в месяце → да.
    2. Остаток на начало (без обрезки) > 0 → да.
    3. Есть приход в месяце → да.
    4. Иначе → нет (всё израсходовано/списано, нового нет).
    """
    target = to_month(target_month)
    movements = list(item.movements)

    if has_movement_in_month(movements, target):
        return True

    if signed_balance_before(movements, target) > 0:
        return True

    if any(
        _kind(m) is MovementType.INCOMING and month_of(m.date) == target
        for m in movements
    ):
        return True

    return False


def get_item_status_for_month(item: ItemLike, target_month: MonthInput) -> MonthStatus:
    """Состояние позиции на конец месяца."""
    target = to_month(target_month)
    quantity = signed_balance_through(item.movements, target)

    written_off_date = item.written_off_date
    written_off = written_off_date is not None and month_of(written_off_date) == target

    return MonthStatus(written_off=written_off, depleted=quantity <= 0, quantity=quantity)


def status_label(
    state: MonthStatus,
    depleted_status: ItemStatus = ItemStatus.OUT_OF_STOCK,
) -> ItemStatus:
    """Подпись статуса; depleted_status: CONSUMED для МО, OUT_OF_STOCK для запчастей."""
    if state.written_off:
        return ItemStatus.WRITTEN_OFF
    if state.depleted:
        return depleted_status
    return ItemStatus.IN_STOCK


def signed_total(movements: Iterable[MovementLike]) -> int:
    return sum(_signed_qty(m) for m in movements)


def recalculate_current_quantity(movements: Iterable[MovementLike]) -> int:
    """Текущий остаток: весь приход минус весь расход и списания, не меньше 0."""
    return max(0, signed_total(movements))


def validate_quantity(quantity) -> int:
    """Количество движения: целое число больше 0."""
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidQuantity(quantity)
    if quantity <= 0:
        raise InvalidQuantity(quantity)
    return quantity


def check_write_off(
    movements: Iterable[MovementLike],
    quantity,
    target_month: MonthInput,
) -> int:
    """
    Проверка перед списанием/выдачей за месяц.

    Возвращает доступный остаток; InsufficientStock, если просят больше.
    """
    quantity = validate_quantity(quantity)
    balance = compute_monthly_balance(movements, target_month)
    available = balance.available_qty

    if quantity > available:
        raise InsufficientStock(available=available, requested=quantity)
    return available


def resolve_write_off_reason(notes: Optional[str], reasons: Sequence[str]) -> str:
    """
    Причина списания из списка причин категории.

    Одна причина подставляется сама; при нескольких причина обязательна
    и должна быть из списка.
    """
    reason = (notes or "").strip()
    if not reason and len(reasons) == 1:
        return reasons[0]
    if reason not in reasons:
        raise InvalidWriteOffReason(notes, reasons)
    return reason


def write_off_date_for_month(
    target_month: Optional[MonthInput] = None,
    today: Optional[date] = None,
) -> date:
    """
    Дата для автоматически созданного движения:
    - текущий месяц (или месяц не указан) → сегодня;
    - прошедший месяц → последний день месяца;
    - будущий месяц → первый день месяца.
    """
    today = today or date.today()
    if target_month is None:
        return today

    target = to_month(target_month)
    now = current_month(today)

    if target == now:
        return today
    if target < now:
        return last_day(target)
    return first_day(target)


def issued_by_reason(
    movements: Iterable[MovementLike],
    target_month: MonthInput,
    default_reason: str,
) -> Dict[str, int]:
    """Расход месяца в разрезе причин (notes движения)."""
    target = to_month(target_month)
    result: Dict[str, int] = {}

    for m in sorted(movements, key=lambda x: x.date):
        if month_of(m.date) != target or BALANCE_SIGN[_kind(m)] >= 0:
            continue
        reason = (getattr(m, "notes", None) or "").strip() or default_reason
        result[reason] = result.get(reason, 0) + int(m.quantity)

    return result
