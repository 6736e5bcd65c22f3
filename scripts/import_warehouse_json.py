#!/usr/bin/env python3
"""
Импорт склада из JSON-файла.

Запуск:
    python -m scripts.import_warehouse_json data/warehouse.json
"""

import logging
import sys

from backend.db import SessionLocal
from backend.services.warehouse_import_service import WarehouseImportService
from backend.settings import settings

log = logging.getLogger("import_warehouse_json")


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) != 1:
        print("Использование: python -m scripts.import_warehouse_json <file.json>")
        return 2

    db = SessionLocal()
    try:
        result = WarehouseImportService.import_from_file(db, argv[0])
        print(result.message)
        for err in result.errors:
            print(f"  ❌ {err.path}: {err.message}")
        return 0 if result.success else 1
    except Exception:
        log.exception("Импорт не выполнен")
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )
    sys.exit(main())
