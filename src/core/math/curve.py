"""
Curve — Price, Reward Mirror & Closed-Form Integral

Модуль вычисляет чистые функции кривой продажи над прогрессом x ∈ [0, 1]:
- Цена за единицу p(x) (монотонно растёт от P0 к P1)
- Reward-множитель r(x) (монотонно убывает от R0 к 0)
- Первообразная цены I(x) (площадь под кривой, основа расчёта стоимости)

ФОРМУЛЫ:
    p(x) = P0 + (P1 − P0) · (1 − e^(−K·x))
    r(x) = R0 · (1 − x^ALPHA)            для x < 1
    r(x) = 0                              для x ≥ 1
    I(x) = P0·x + (P1 − P0) · (x − (1 − e^(−K·x)) / K)

    cost(x0 → x1) = saleSupply · (I(x1) − I(x0))

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. dI/dx = p(x) (проверяется численно в тестах)
2. Все значения в Wad, floor-округление; I(x) квантуется один раз
3. Никакого состояния: результат зависит только от (params, x)
"""

from decimal import Decimal
from typing import Final

from src.core.domain.curve import CurveParameters
from src.core.math.fixed_point import (
    MATH_CONTEXT,
    WAD,
    Wad,
    div_wad,
    exp_wad,
    from_wad,
    mul_wad,
    pow_wad,
    to_wad,
    validate_non_negative,
    validate_progress,
)

_ONE: Final[Decimal] = Decimal(1)


# =============================================================================
# ВСПОМОГАТЕЛЬНЫЕ
# =============================================================================


def _growth(params: CurveParameters, x: int) -> int:
    """1 − e^(−K·x) в Wad."""
    return WAD - exp_wad(-mul_wad(params.k, x))


# =============================================================================
# ЦЕНА И REWARD
# =============================================================================


def price(params: CurveParameters, x: int) -> Wad:
    """
    Цена за единицу ресурса на прогрессе x.

    Args:
        params: Параметры кривой
        x: Прогресс продажи в Wad, [0, WAD]

    Returns:
        p(x) в Wad (валюта за единицу ресурса)

    Raises:
        ValueError: Если x вне [0, WAD]

    Examples:
        >>> price(params, 0) == params.p0
        True
    """
    validate_progress(x)

    return Wad(params.p0 + mul_wad(params.p1 - params.p0, _growth(params, x)))


def reward_factor(params: CurveParameters, x: int) -> Wad:
    """
    Reward-множитель на прогрессе x.

    Для x >= 1 возвращается 0 (продажа завершена, бонус исчерпан).

    Args:
        params: Параметры кривой
        x: Прогресс продажи в Wad (>= 0)

    Returns:
        r(x) в Wad (бонусных единиц на одну купленную)
    """
    validate_non_negative(x, "x")

    if x >= WAD:
        return Wad(0)

    decay = WAD - pow_wad(x, params.alpha)
    return Wad(mul_wad(params.r0, decay))


# =============================================================================
# ИНТЕГРАЛ
# =============================================================================


def integral(params: CurveParameters, x: int) -> Wad:
    """
    Первообразная цены I(x), I(0) = 0.

    Вычисляется целиком в MATH_CONTEXT (60 значащих цифр) и квантуется
    floor один раз. Слагаемое x − (1 − e^(−Kx))/K близко к K·x²/2 и при
    малом K·x почти полностью сокращается, поэтому промежуточное
    округление к Wad здесь недопустимо.

    Args:
        params: Параметры кривой
        x: Прогресс продажи в Wad, [0, WAD]

    Returns:
        I(x) в Wad
    """
    validate_progress(x)

    if x == 0:
        return Wad(0)

    ctx = MATH_CONTEXT
    progress = from_wad(x)
    k = from_wad(params.k)

    growth = ctx.subtract(_ONE, ctx.exp(ctx.minus(ctx.multiply(k, progress))))
    lag = ctx.subtract(progress, ctx.divide(growth, k))
    area = ctx.add(
        ctx.multiply(from_wad(params.p0), progress),
        ctx.multiply(from_wad(params.p1 - params.p0), lag),
    )

    return Wad(max(to_wad(area), 0))


def curve_cost(params: CurveParameters, sale_supply: int, x0: int, x1: int) -> int:
    """
    Стоимость перемещения прогресса x0 → x1 в базовых единицах валюты.

    cost = floor(saleSupply · (I(x1) − I(x0)) / WAD)

    Raises:
        ValueError: Если x1 < x0
    """
    if x1 < x0:
        raise ValueError(f"x1 must be >= x0, got x0={x0}, x1={x1}")

    area = max(integral(params, x1) - integral(params, x0), 0)
    return mul_wad(sale_supply, area)


# =============================================================================
# ПРОГРЕСС <-> КОЛИЧЕСТВО
# =============================================================================


def progress_of(tokens_sold: int, sale_supply: int) -> Wad:
    """
    Прогресс продажи x = tokensSold / saleSupply (floor).

    Raises:
        ValueError: Если sale_supply <= 0
    """
    if sale_supply <= 0:
        raise ValueError(f"sale_supply must be positive, got {sale_supply}")

    return Wad(div_wad(tokens_sold, sale_supply))


def tokens_at(x: int, sale_supply: int) -> int:
    """Количество единиц, соответствующее прогрессу x: floor(x · saleSupply)."""
    return mul_wad(x, sale_supply)
