"""
Core math modules

Математические примитивы продажи: фиксированная точка, кривая, solver, rails.
"""

# Fixed Point
from src.core.math.fixed_point import (
    MATH_CONTEXT,
    MAX_EXP_INPUT,
    WAD,
    FixedPointError,
    Wad,
    checked_sub,
    div_wad,
    exp_wad,
    from_wad,
    mul_div,
    mul_wad,
    pow_wad,
    to_wad,
    validate_non_negative,
    validate_progress,
)

# Curve
from src.core.math.curve import (
    curve_cost,
    integral,
    price,
    progress_of,
    reward_factor,
    tokens_at,
)

# Solver
from src.core.math.solver import SOLVER_ITERATIONS, solve_progress

# Revenue Split
from src.core.math.revenue_split import (
    BPS_DENOMINATOR,
    RevenueSplit,
    bps_cut,
    split_payment,
    validate_bps_total,
)

__all__ = [
    # Fixed Point: Constants & types
    "WAD",
    "MAX_EXP_INPUT",
    "MATH_CONTEXT",
    "Wad",
    "FixedPointError",
    # Fixed Point: Functions
    "checked_sub",
    "div_wad",
    "exp_wad",
    "from_wad",
    "mul_div",
    "mul_wad",
    "pow_wad",
    "to_wad",
    "validate_non_negative",
    "validate_progress",
    # Curve
    "curve_cost",
    "integral",
    "price",
    "progress_of",
    "reward_factor",
    "tokens_at",
    # Solver
    "SOLVER_ITERATIONS",
    "solve_progress",
    # Revenue Split
    "BPS_DENOMINATOR",
    "RevenueSplit",
    "bps_cut",
    "split_payment",
    "validate_bps_total",
]
