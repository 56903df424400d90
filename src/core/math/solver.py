"""
Solver — Inversion of the Curve Integral

Находит прогресс x1, до которого бюджет `usable` оплачивает площадь
под кривой начиная с текущего прогресса x0:

    saleSupply · (I(x1) − I(x0)) ≈ usable,   x1 ∈ [x0, 1]

АЛГОРИТМ: бисекция над [x0, WAD], ровно SOLVER_ITERATIONS шагов.
Инвариант цикла:
    I(lo) − I(x0) <  target
    I(hi) − I(x0) >= target,    target = usable / saleSupply
Возвращается hi — уровень прогресса, которого ДОСТАТОЧНО для покрытия
target. Поэтому стоимость на hi может превысить usable на остаток
бисекции; вызывающий код обязан это учесть.

Если usable превышает всю оставшуюся площадь, hi остаётся WAD (продажа
закрывается целиком, излишек возвращается покупателю).

Функция чистая: одинаковые (x0, usable, saleSupply, params) всегда дают
одинаковый x1.
"""

from typing import Final

from src.core.domain.curve import CurveParameters
from src.core.math.curve import integral
from src.core.math.fixed_point import (
    WAD,
    Wad,
    div_wad,
    validate_non_negative,
    validate_progress,
)

# Ширина [0, WAD] ≈ 2^59.8, 60 шагов сужают интервал до одной единицы Wad
SOLVER_ITERATIONS: Final[int] = 60


def solve_progress(
    x0: int,
    usable: int,
    sale_supply: int,
    params: CurveParameters,
    iterations: int = SOLVER_ITERATIONS,
) -> Wad:
    """
    Прогресс x1, достижимый на бюджет usable начиная с x0.

    Args:
        x0: Текущий прогресс в Wad, [0, WAD]
        usable: Бюджет на кривую (базовые единицы валюты)
        sale_supply: Общий объём продажи (базовые единицы ресурса)
        params: Параметры кривой
        iterations: Количество шагов бисекции (default: 60)

    Returns:
        x1 в Wad, x0 <= x1 <= WAD. Для usable == 0 возвращается x0.

    Raises:
        ValueError: Если x0 вне [0, WAD], usable < 0, sale_supply <= 0
    """
    validate_progress(x0, "x0")
    validate_non_negative(usable, "usable")

    if sale_supply <= 0:
        raise ValueError(f"sale_supply must be positive, got {sale_supply}")

    if iterations <= 0:
        raise ValueError(f"iterations must be positive, got {iterations}")

    target = div_wad(usable, sale_supply)
    if target == 0:
        return Wad(x0)

    base = integral(params, x0)
    lo, hi = x0, WAD

    for _ in range(iterations):
        mid = (lo + hi) // 2
        if integral(params, mid) - base >= target:
            hi = mid
        else:
            lo = mid

    return Wad(hi)
