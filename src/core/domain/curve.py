"""
CurveParameters — Параметры кривой продажи

Immutable Pydantic модель {P0, P1, K, R0, ALPHA}. Все значения —
неотрицательные скаляры с фиксированной точкой (масштаб 10**18, 1.0 == 10**18).

Инварианты:
- P1 > P0 (цена строго растёт)
- K > 0 (без K интеграл не определён в замкнутой форме)
- ALPHA > 0 (reward убывает до нуля)

Изменение параметров — только заменой целого экземпляра через governance.
"""

from pydantic import BaseModel, Field, field_validator


class CurveParameters(BaseModel):
    """
    Параметры кривой цены и reward-зеркала.

    p(x) = P0 + (P1 − P0)(1 − e^(−Kx)),  r(x) = R0(1 − x^ALPHA)
    """

    p0: int = Field(..., ge=0, description="Стартовая цена P0 (Wad)")
    p1: int = Field(..., ge=0, description="Асимптотическая цена P1 (Wad), P1 > P0")
    k: int = Field(..., gt=0, description="Крутизна кривой K (Wad)")
    r0: int = Field(..., ge=0, description="Стартовый reward-множитель R0 (Wad)")
    alpha: int = Field(..., gt=0, description="Показатель убывания reward ALPHA (Wad)")

    model_config = {"frozen": True}

    @field_validator("p1")
    @classmethod
    def validate_p1_above_p0(cls, v: int, info) -> int:
        """Проверка P1 > P0."""
        if "p0" in info.data and v <= info.data["p0"]:
            raise ValueError(f"p1 ({v}) must be greater than p0 ({info.data['p0']})")
        return v
