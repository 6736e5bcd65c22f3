"""
Создание таблиц склада
"""
from sqlalchemy import create_engine, inspect

from backend.services import init_db as init_db_module


class TestInitDb:
    def test_creates_warehouse_tables(self, monkeypatch, tmp_path):
        engine = create_engine(f"sqlite:///{tmp_path / 'warehouse.db'}", future=True)
        monkeypatch.setattr(init_db_module, "engine", engine)

        init_db_module.init_db()

        tables = set(inspect(engine).get_table_names())
        assert {
            "categories",
            "subcategories",
            "items",
            "movements",
            "item_quantity_corrections",
        } <= tables
        engine.dispose()
