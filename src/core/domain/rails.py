"""
RevenueRails — Доли бенефициаров платежа

Immutable Pydantic модель: два обязательных бенефициара и три ставки
в basis points. Сумма ставок не превышает 10000 (100%).

Rails изменяются governance в любой момент, независимо от lock кривой.
"""

from typing import Final

from pydantic import BaseModel, Field, field_validator

from .identity import validate_identity

# 10000 bps = 100%
MAX_BPS_TOTAL: Final[int] = 10_000


class RevenueRails(BaseModel):
    """
    Бенефициары и ставки деления каждого платежа.
    """

    fund_treasury: str = Field(..., description="Бенефициар fund-доли")
    share_treasury: str = Field(..., description="Бенефициар share-доли (пул акционеров)")
    fund_bps: int = Field(0, ge=0, le=MAX_BPS_TOTAL, description="Ставка fund (bps)")
    share_bps: int = Field(0, ge=0, le=MAX_BPS_TOTAL, description="Ставка share (bps)")
    referrer_bps: int = Field(0, ge=0, le=MAX_BPS_TOTAL, description="Ставка реферера (bps)")

    model_config = {"frozen": True}

    @field_validator("fund_treasury", "share_treasury")
    @classmethod
    def validate_beneficiary(cls, v: str, info) -> str:
        """Бенефициар не может быть нулевым."""
        return validate_identity(v, info.field_name)

    @field_validator("referrer_bps")
    @classmethod
    def validate_total_bps(cls, v: int, info) -> int:
        """Сумма ставок <= 100%."""
        total = info.data.get("fund_bps", 0) + info.data.get("share_bps", 0) + v
        if total > MAX_BPS_TOTAL:
            raise ValueError(f"bps total {total} exceeds {MAX_BPS_TOTAL} (100%)")
        return v

    @property
    def total_bps(self) -> int:
        """Суммарная ставка всех rails."""
        return self.fund_bps + self.share_bps + self.referrer_bps
