"""Ошибки складского учёта. Все: ValueError, вызывающий код решает, как их показать."""


class LedgerError(ValueError):
    """Базовая ошибка расчёта остатков."""


class InvalidMonthFormat(LedgerError):
    def __init__(self, value):
        self.value = value
        super().__init__(f"Неверный формат месяца: {value!r}. Используйте YYYY-MM")


class InvalidQuantity(LedgerError):
    def __init__(self, value):
        self.value = value
        super().__init__(f"Некорректное количество: {value!r}. Нужно целое число больше 0")


class InsufficientStock(LedgerError):
    def __init__(self, available: int, requested: int):
        self.available = available
        self.requested = requested
        super().__init__(
            f"Количество списания ({requested}) превышает доступный остаток ({available})"
        )


class InvalidWriteOffReason(LedgerError):
    def __init__(self, value, allowed):
        self.value = value
        self.allowed = list(allowed)
        if not value:
            message = f"Выберите причину списания: {', '.join(self.allowed)}"
        else:
            message = f"Причина списания {value!r} не из списка: {', '.join(self.allowed)}"
        super().__init__(message)
