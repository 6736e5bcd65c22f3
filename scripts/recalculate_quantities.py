#!/usr/bin/env python3
"""
Пересчёт кэша остатков (quantity / status / last_movement_date) по движениям.

Запуск:
    python -m scripts.recalculate_quantities
"""

import logging
import sys

from backend.db import SessionLocal
from backend.services.warehouse_service import WarehouseService
from backend.settings import settings

log = logging.getLogger("recalculate_quantities")


def main() -> int:
    db = SessionLocal()
    try:
        count = WarehouseService.recalculate_all_items(db)
        print(f"✅ Пересчитано позиций: {count}")
        return 0
    except Exception:
        log.exception("Пересчёт не выполнен")
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )
    sys.exit(main())
