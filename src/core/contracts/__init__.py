"""
Contract Validation Module

Модуль для валидации JSON контрактов продажи (конфигурация, аудит-события).
"""

from .validators import (
    ContractValidator,
    PurchaseEventValidator,
    SaleConfigValidator,
    SchemaLoader,
    validate_purchase_event,
    validate_sale_config,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "SaleConfigValidator",
    "PurchaseEventValidator",
    # Functions
    "validate_sale_config",
    "validate_purchase_event",
]
