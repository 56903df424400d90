"""
Purchase — Запрос, котировка и результат покупки

PurchaseRequest — входные данные одного вызова покупки (Pydantic, frozen).
PurchaseQuote   — полностью вычисленная покупка до переводов (dataclass).
PurchaseResult  — итог успешной покупки (dataclass).

Все суммы в базовых единицах (18 знаков), прогресс — в Wad.
"""

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .identity import is_null_identity, validate_identity


class PurchaseRequest(BaseModel):
    """
    Запрос на покупку.

    Нулевой платёж допускается моделью и отклоняется оркестратором
    (zero_payment), чтобы отказ был частью таксономии ошибок продажи.
    """

    payer: str = Field(..., description="Плательщик (получатель ресурса и refund)")
    payment: int = Field(..., ge=0, description="Платёж в нативной валюте (базовые единицы)")
    referrer: Optional[str] = Field(None, description="Реферер (опционально)")

    model_config = {"frozen": True}

    @field_validator("payer")
    @classmethod
    def validate_payer(cls, v: str) -> str:
        return validate_identity(v, "payer")

    @field_validator("referrer")
    @classmethod
    def normalize_referrer(cls, v: Optional[str]) -> Optional[str]:
        """Нулевой реферер эквивалентен отсутствию реферера."""
        if is_null_identity(v):
            return None
        return v


@dataclass(frozen=True)
class PurchaseQuote:
    """Вычисленная покупка (до исполнения переводов)."""

    payer: str
    referrer: Optional[str]
    payment: int

    # Rails
    fund_cut: int
    share_cut: int
    referral_cut: int
    usable: int

    # Кривая
    x0: int
    x1: int
    exact_cost: int
    tokens_out: int
    reward_out: int

    # Итог
    refund: int
    new_tokens_sold: int

    @property
    def total_out(self) -> int:
        """Суммарная выдача ресурса покупателю (покупка + reward)."""
        return self.tokens_out + self.reward_out


@dataclass(frozen=True)
class PurchaseResult:
    """Результат успешной покупки."""

    tokens_out: int
    reward_out: int
    exact_cost: int
    refund_amount: int
    new_tokens_sold: int
