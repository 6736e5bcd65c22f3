"""
Общие фикстуры тестов склада.

БД: SQLite в памяти, отдельная на каждый тест.
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import backend.models  # noqa: F401  (модели регистрируются в Base.metadata)
from backend.db import Base
from backend.repositories.warehouse_repository import get_or_create_subcategory


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    """Session с теми же настройками, что и SessionLocal"""
    TestSession = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    session = TestSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def spare_parts_sub(db):
    """Запчасти / Склад"""
    sub = get_or_create_subcategory(db, "spare_parts", "Запчасти", "Склад")
    db.commit()
    return sub


@pytest.fixture
def mo_sub(db):
    """МО / Столовая/мастерские / Инвентарь"""
    sub = get_or_create_subcategory(db, "mo", "Столовая/мастерские", "Инвентарь")
    db.commit()
    return sub
