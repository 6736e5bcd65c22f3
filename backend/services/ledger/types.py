"""
Типы складского учёта: виды движений, статусы, месячный баланс.

Все Enum наследуют str: значения хранятся в БД и отдаются наружу как есть.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional, Protocol


class MovementType(str, Enum):
    """Вид движения товара."""
    INCOMING = "incoming"    # приход
    OUTGOING = "outgoing"    # выдача / расход
    TRANSFER = "transfer"    # перемещение (на остаток не влияет)
    WRITE_OFF = "write-off"  # списание (как расход)


class ItemStatus(str, Enum):
    """Статус позиции для отображения за месяц."""
    IN_STOCK = "in stock"
    OUT_OF_STOCK = "out of stock"
    CONSUMED = "consumed"
    WRITTEN_OFF = "written off"


class InventoryKind(str, Enum):
    """Раздел склада: запчасти или МО (малоценные материалы)."""
    SPARE_PARTS = "spare_parts"
    MO = "mo"


class MovementLike(Protocol):
    date: dt.date
    type: str
    quantity: int


class ItemLike(Protocol):
    movements: Iterable[MovementLike]
    written_off_date: Optional[dt.date]


@dataclass(frozen=True)
class MovementRecord:
    """Движение в памяти (без ORM): для расчётов, импорта и тестов."""
    date: dt.date
    type: str
    quantity: int
    notes: Optional[str] = None
    id: Optional[int] = None


@dataclass(frozen=True)
class ItemSnapshot:
    """Позиция в памяти: история движений + дата полного списания."""
    movements: tuple = field(default_factory=tuple)
    written_off_date: Optional[dt.date] = None


@dataclass(frozen=True)
class MonthlyBalance:
    """
    Оборотка по позиции за месяц.

    opening_qty / ending_qty обрезаются снизу нулём,
    incoming_qty / issued_qty: «сырые» суммы за месяц.
    """
    opening_qty: int
    incoming_qty: int
    issued_qty: int
    ending_qty: int

    @property
    def available_qty(self) -> int:
        """Доступно к списанию в этом месяце (без обрезки нулём)."""
        return self.opening_qty + self.incoming_qty - self.issued_qty


@dataclass(frozen=True)
class MonthStatus:
    """Состояние позиции на конец месяца; подпись статуса выбирает вызывающий код."""
    written_off: bool
    depleted: bool
    quantity: int
