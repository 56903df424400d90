"""Errors — таксономия отказов продажи.

Любой отказ эквивалентен тому, что операция не выполнялась: состояние
продажи и балансы остаются неизменными.

SaleError
├── InvalidConfiguration    — нулевые идентификаторы, нулевой supply, P1 <= P0
├── OperationRejected       — пауза, sold out, нулевой платёж, lock, ставки > 100%
│   └── Unauthorized        — вызов governance не от оператора
├── ArithmeticFailure       — переполнение/underflow фиксированной точки
└── ExternalTransferFailure — отказ перевода в реестре активов
"""


class SaleError(Exception):
    """Базовая ошибка продажи."""

    pass


class InvalidConfiguration(SaleError):
    """Некорректная конфигурация (отклоняется до любого изменения состояния)."""

    pass


class OperationRejected(SaleError):
    """Операция отклонена политикой продажи.

    Attributes:
        reason: короткий код причины (snake_case), например "sold_out"
        details: человекочитаемые детали
    """

    def __init__(self, reason: str, details: str = ""):
        self.reason = reason
        self.details = details
        message = f"{reason}: {details}" if details else reason
        super().__init__(message)


class Unauthorized(OperationRejected):
    """Вызывающий не является оператором (или номинированным преемником)."""

    def __init__(self, caller: str, details: str = ""):
        self.caller = caller
        super().__init__("unauthorized", details or f"caller {caller!r} is not authorized")


class ArithmeticFailure(SaleError):
    """Нарушение арифметики фиксированной точки во время операции."""

    pass


class ExternalTransferFailure(SaleError):
    """Перевод в реестре активов не выполнен."""

    pass
