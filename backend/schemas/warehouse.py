# backend/schemas/warehouse.py
import datetime as dt
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from backend.services.ledger.months import parse_day
from backend.services.ledger.types import MovementType


def _day_or_none(value):
    if value is None or value == "":
        return None
    return parse_day(value)


class MovementBase(BaseModel):
    date: dt.date
    type: MovementType
    quantity: int
    price_per_unit: Decimal | None = None
    supplier: str | None = None
    ttn_number: str | None = None
    notes: str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, v):
        # ДД.ММ.ГГГГ или ГГГГ-ММ-ДД
        return parse_day(v)


class MovementCreate(MovementBase):
    """
    Схема для создания движения по позиции.
    """


class MovementUpdate(BaseModel):
    """
    Частичное обновление движения: меняются только переданные поля.
    """
    date: dt.date | None = None
    type: MovementType | None = None
    quantity: int | None = None
    price_per_unit: Decimal | None = None
    supplier: str | None = None
    ttn_number: str | None = None
    notes: str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, v):
        return _day_or_none(v)


class MovementRead(MovementBase):
    id: int
    item_id: int

    class Config:
        from_attributes = True


class ItemBase(BaseModel):
    name: str
    unit: str | None = None
    price: Decimal = Decimal("0")
    supplier: str | None = None
    ttn_number: str | None = None


class ItemCreate(ItemBase):
    """
    Новая позиция. quantity > 0 создаёт движение «Первоначальное поступление».
    """
    quantity: int = 0


class ItemUpdate(BaseModel):
    """
    Правка позиции. Изменение quantity идёт через ручную корректировку.
    """
    name: str | None = None
    quantity: int | None = None
    unit: str | None = None
    price: Decimal | None = None
    supplier: str | None = None
    ttn_number: str | None = None


class ItemRead(ItemBase):
    id: int
    quantity: int
    status: str
    last_movement_date: dt.date | None = None
    written_off_date: dt.date | None = None

    class Config:
        from_attributes = True


# =============================================================================
# ИМПОРТ ИЗ JSON
# =============================================================================

class _ImportModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


def _id_or_none(value):
    # В старых выгрузках id бывает числом
    return None if value is None else str(value)


class ImportMovement(_ImportModel):
    id: str | None = None
    date: dt.date
    type: MovementType
    quantity: int
    price_per_unit: Decimal | None = Field(None, alias="pricePerUnit")
    supplier: str | None = None
    ttn_number: str | None = Field(None, alias="ttnNumber")
    notes: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _parse_id(cls, v):
        return _id_or_none(v)

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, v):
        return parse_day(v)


class ImportItem(_ImportModel):
    id: str | None = None
    name: str
    quantity: int = 0
    unit: str | None = None
    price: Decimal = Decimal("0")
    supplier: str | None = None
    ttn_number: str | None = Field(None, alias="ttnNumber")
    written_off_date: dt.date | None = Field(None, alias="writtenOffDate")
    # lastMovementDate у запчастей, lastUseDate у МО
    last_movement_date: dt.date | None = Field(None, alias="lastMovementDate")
    last_use_date: dt.date | None = Field(None, alias="lastUseDate")
    movements: list[ImportMovement] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _parse_id(cls, v):
        return _id_or_none(v)

    @field_validator("written_off_date", "last_movement_date", "last_use_date", mode="before")
    @classmethod
    def _parse_optional_dates(cls, v):
        return _day_or_none(v)


class ImportSubcategory(_ImportModel):
    name: str
    items: list[ImportItem] = Field(default_factory=list)


class ImportCategory(_ImportModel):
    name: str
    subcategories: list[ImportSubcategory] = Field(default_factory=list)


class ImportPayload(_ImportModel):
    spare_parts: list[ImportCategory] = Field(default_factory=list)
    mo: list[ImportCategory] = Field(default_factory=list)
    clear_existing: bool = Field(False, alias="clearExisting")
    default_movement_date: dt.date | None = Field(None, alias="defaultMovementDate")

    @field_validator("default_movement_date", mode="before")
    @classmethod
    def _parse_default_date(cls, v):
        return _day_or_none(v)
