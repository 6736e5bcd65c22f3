import json
from pathlib import Path

# Папка, где лежит этот файл: backend/config
CONFIG_DIR = Path(__file__).parent

# backend/config/item_statuses.json
STATUS_FILE = CONFIG_DIR / "item_statuses.json"


def load_statuses() -> list[dict]:
    """
    Читает item_statuses.json и возвращает список словарей со статусами.
    Каждый элемент:
      {
        "code": "in stock",
        "label": "На складе",
        "color": "#10b981",
        "order": 10
      }
    """
    with STATUS_FILE.open("r", encoding="utf-8") as f:
        data = json.load(f)

    data.sort(key=lambda s: s.get("order", 0))
    return data


# Готовый список статусов
STATUS_LIST: list[dict] = load_statuses()

# Быстрый доступ по коду ("in stock" → {...}), код совпадает с ItemStatus.value
STATUS_BY_CODE: dict[str, dict] = {s["code"]: s for s in STATUS_LIST}

DEFAULT_STATUS_CODE = "in stock"


def label_by_code(code: str | None) -> str | None:
    """
    Из кода статуса ("written off") → подпись ("Списано").
    """
    if not code:
        return None
    s = STATUS_BY_CODE.get(str(code))
    return s["label"] if s else None


def color_by_code(code: str | None) -> str:
    s = STATUS_BY_CODE.get(str(code)) if code else None
    if s is None:
        s = STATUS_BY_CODE[DEFAULT_STATUS_CODE]
    return s["color"]

