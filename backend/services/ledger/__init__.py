"""
Движок складского учёта по месяцам.

```python
from backend.services.ledger import compute_monthly_balance, should_item_be_visible

balance = compute_monthly_balance(item.movements, "2026-02")
if should_item_be_visible(item, "2026-02"):
    ...
```
"""
from .calculator import (
    BALANCE_SIGN,
    check_write_off,
    compute_monthly_balance,
    get_item_status_for_month,
    has_movement_in_month,
    issued_by_reason,
    recalculate_current_quantity,
    resolve_write_off_reason,
    should_item_be_visible,
    signed_balance_before,
    signed_balance_through,
    signed_total,
    status_label,
    validate_quantity,
    write_off_date_for_month,
)
from .errors import (
    InsufficientStock,
    InvalidMonthFormat,
    InvalidQuantity,
    InvalidWriteOffReason,
    LedgerError,
)
from .months import (
    current_month,
    first_day,
    format_day,
    format_month,
    last_day,
    month_of,
    next_month,
    parse_day,
    parse_month,
    previous_month,
    to_month,
)
from .types import (
    InventoryKind,
    ItemSnapshot,
    ItemStatus,
    MonthStatus,
    MonthlyBalance,
    MovementRecord,
    MovementType,
)

__all__ = [
    "BALANCE_SIGN",
    "check_write_off",
    "compute_monthly_balance",
    "get_item_status_for_month",
    "has_movement_in_month",
    "issued_by_reason",
    "recalculate_current_quantity",
    "resolve_write_off_reason",
    "should_item_be_visible",
    "signed_balance_before",
    "signed_balance_through",
    "signed_total",
    "status_label",
    "validate_quantity",
    "write_off_date_for_month",
    "InsufficientStock",
    "InvalidMonthFormat",
    "InvalidQuantity",
    "InvalidWriteOffReason",
    "LedgerError",
    "current_month",
    "first_day",
    "format_day",
    "format_month",
    "last_day",
    "month_of",
    "next_month",
    "parse_day",
    "parse_month",
    "previous_month",
    "to_month",
    "InventoryKind",
    "ItemSnapshot",
    "ItemStatus",
    "MonthStatus",
    "MonthlyBalance",
    "MovementRecord",
    "MovementType",
]
