"""
Справочные константы склада: единицы по умолчанию, итоговые статусы
разделов, причины выдачи и служебные пометки движений.
"""
from backend.services.ledger.types import InventoryKind, ItemStatus


# Единица измерения по умолчанию для новой позиции
DEFAULT_UNIT_BY_KIND: dict[InventoryKind, str] = {
    InventoryKind.SPARE_PARTS: "pcs",
    InventoryKind.MO: "шт",
}

# Статус израсходованной позиции (остаток ≤ 0) по разделу
DEPLETED_STATUS_BY_KIND: dict[InventoryKind, ItemStatus] = {
    InventoryKind.SPARE_PARTS: ItemStatus.OUT_OF_STOCK,
    InventoryKind.MO: ItemStatus.CONSUMED,
}

# Служебные пометки (notes) автоматически созданных движений
NOTE_INITIAL_RECEIPT = "Первоначальное поступление"
NOTE_QUANTITY_CORRECTION = "Корректировка количества"

# Причина выдачи, если в движении не указана
DEFAULT_OUTGOING_REASON = "Выдача"

# Причины выдачи и списания по категориям (колонки расхода в оборотке)
OUTGOING_REASONS: dict[str, list[str]] = {
    # Запчасти
    "Запчасти": [
        "трактора 241006",
        "с/х техника 241007",
        "автомобили 231001",
        "кормоуб.тех.241008",
        "КЗС 241009",
        "Голосятина склад",
        "Возврат",
    ],
    "Б.У. Запчасти": ["Выдача"],
    "Шины, камеры, АКБ": [
        "трактора 105001",
        "с/х техника 105002",
        "автомобили 105000",
        "МТК",
    ],
    # МО
    "Столовая/мастерские": [
        "столовая",
        "р.м.городняны",
        "контора",
        "зерносклад",
        "МТК Городняны",
        "стройбригада",
        "под.очет",
        "МТФ Семенча",
        "р.м. Голосятина",
    ],
    "сч.101; 106": ["Выдача"],
    "сч.109; фермы": ["МТК Городняны"],
    "сч.120; спец.одежда": [
        "Р.м. Городняны",
        "Р.м. Голосятина",
        "МТК Городняны",
        "Столовая",
        "Стройбригада",
        "Под.отчет",
        "Зерносклад",
    ],
}


def outgoing_reasons_for(category_name: str) -> list[str]:
    """Причины выдачи категории; для неизвестной: только причина по умолчанию."""
    return OUTGOING_REASONS.get(category_name, [DEFAULT_OUTGOING_REASON])
