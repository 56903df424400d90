"""
Fixed Point — Scaled-Integer Arithmetic (Wad)

Модуль обеспечивает детерминированную арифметику с фиксированной точкой:
- Представление: целое число, масштабированное на WAD = 10**18 (1.0 == WAD)
- Умножение/деление всегда с округлением вниз (floor)
- Экспонента и степень вычисляются в ЕДИНСТВЕННОМ decimal-контексте
  и квантуются к WAD через ROUND_FLOOR
- Конверсия из/в десятичные строки и Decimal (float запрещён)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Float никогда не попадает в учётный путь (to_wad отвергает float)
2. Все операции округляют одинаково (floor) и воспроизводимы побитово
3. Деление на ноль и отрицательный остаток → FixedPointError
4. exp/pow для цены и для reward используют один и тот же контекст
"""

from decimal import (
    ROUND_FLOOR,
    ROUND_HALF_EVEN,
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
)
from typing import Final, NewType

# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Масштаб фиксированной точки: 1.0 == 10**18
WAD: Final[int] = 10**18

# Скалярное значение с фиксированной точкой (масштаб WAD)
Wad = NewType("Wad", int)

# Максимальный аргумент exp (e^130 ≈ 2.9e56, запас до переполнения прецизии)
MAX_EXP_INPUT: Final[int] = 130 * WAD

# Точность decimal-контекста (значащих цифр)
MATH_PRECISION: Final[int] = 60

# Каноничный контекст для exp/pow и интеграла кривой. Промежуточные
# результаты округляются half-even внутри 60 цифр, финальный результат
# всегда квантуется floor.
MATH_CONTEXT: Final[Context] = Context(
    prec=MATH_PRECISION,
    rounding=ROUND_HALF_EVEN,
    Emax=999_999,
    Emin=-999_999,
    traps=[InvalidOperation, DivisionByZero, Overflow],
)

_WAD_DECIMAL: Final[Decimal] = Decimal(WAD)


# =============================================================================
# EXCEPTIONS
# =============================================================================


class FixedPointError(ArithmeticError):
    """
    Нарушение домена арифметики с фиксированной точкой.

    Деление на ноль, отрицательный результат вычитания без знака,
    выход аргумента exp за MAX_EXP_INPUT, отрицательное основание степени.
    """

    pass


# =============================================================================
# КОНВЕРСИЯ
# =============================================================================


def to_wad(value: str | int | Decimal) -> Wad:
    """
    Конверсия десятичного значения в Wad (floor).

    Args:
        value: Десятичная строка ("0.0001"), целое число единиц или Decimal

    Returns:
        Значение, масштабированное на WAD (округление вниз)

    Raises:
        TypeError: Для float и bool (двоичное округление запрещено)
        ValueError: Для нечисловых строк, NaN/Inf

    Examples:
        >>> to_wad("0.0001")
        100000000000000
        >>> to_wad(2)
        2000000000000000000
    """
    if isinstance(value, bool) or isinstance(value, float):
        raise TypeError(f"to_wad does not accept {type(value).__name__}: {value!r}")

    if isinstance(value, int):
        return Wad(value * WAD)

    try:
        dec = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"Not a decimal number: {value!r}")

    if not dec.is_finite():
        raise ValueError(f"Value must be finite, got {value!r}")

    scaled = MATH_CONTEXT.multiply(dec, _WAD_DECIMAL)
    return Wad(int(scaled.to_integral_value(rounding=ROUND_FLOOR)))


def from_wad(value: int) -> Decimal:
    """
    Конверсия Wad в Decimal (точная).

    Examples:
        >>> from_wad(1500000000000000000)
        Decimal('1.5')
    """
    return MATH_CONTEXT.divide(Decimal(value), _WAD_DECIMAL)


def _quantize_floor(value: Decimal) -> Wad:
    """Квантование Decimal к WAD с округлением вниз."""
    scaled = MATH_CONTEXT.multiply(value, _WAD_DECIMAL)
    return Wad(int(scaled.to_integral_value(rounding=ROUND_FLOOR)))


# =============================================================================
# БАЗОВАЯ АРИФМЕТИКА (FLOOR)
# =============================================================================


def mul_div(a: int, b: int, denominator: int) -> int:
    """
    floor(a * b / denominator).

    Raises:
        FixedPointError: Если denominator == 0
    """
    if denominator == 0:
        raise FixedPointError("mul_div: division by zero")
    return (a * b) // denominator


def mul_wad(a: int, b: int) -> int:
    """
    Умножение двух Wad (или Wad на количество): floor(a * b / WAD).

    Examples:
        >>> mul_wad(3 * WAD, WAD // 2)
        1500000000000000000
    """
    return (a * b) // WAD


def div_wad(a: int, b: int) -> int:
    """
    Деление с сохранением масштаба: floor(a * WAD / b).

    Raises:
        FixedPointError: Если b == 0
    """
    if b == 0:
        raise FixedPointError("div_wad: division by zero")
    return (a * WAD) // b


def checked_sub(a: int, b: int) -> int:
    """
    Беззнаковое вычитание: a - b, запрещён отрицательный результат.

    Raises:
        FixedPointError: Если b > a (underflow)
    """
    if b > a:
        raise FixedPointError(f"checked_sub underflow: {a} - {b} < 0")
    return a - b


# =============================================================================
# ЭКСПОНЕНТА И СТЕПЕНЬ
# =============================================================================


def exp_wad(y: int) -> Wad:
    """
    e^y для y в Wad (знаковый аргумент), результат в Wad (floor).

    Args:
        y: Показатель степени, масштаб WAD (может быть отрицательным)

    Returns:
        floor(e^(y / WAD) * WAD)

    Raises:
        FixedPointError: Если y > MAX_EXP_INPUT

    Examples:
        >>> exp_wad(0)
        1000000000000000000
        >>> exp_wad(-100 * WAD)
        0
    """
    if y > MAX_EXP_INPUT:
        raise FixedPointError(f"exp_wad input too large: {y}")

    exponent = MATH_CONTEXT.divide(Decimal(y), _WAD_DECIMAL)
    return _quantize_floor(MATH_CONTEXT.exp(exponent))


def pow_wad(x: int, y: int) -> Wad:
    """
    x^y для x, y в Wad (x >= 0), результат в Wad (floor).

    0^y == 0 для y > 0, x^0 == 1.

    Raises:
        FixedPointError: Если x < 0 или (x == 0 и y < 0)

    Examples:
        >>> pow_wad(WAD // 4, WAD // 2)
        500000000000000000
    """
    if x < 0:
        raise FixedPointError(f"pow_wad base must be non-negative, got {x}")

    if y == 0:
        return Wad(WAD)

    if x == 0:
        if y < 0:
            raise FixedPointError("pow_wad: zero base with negative exponent")
        return Wad(0)

    if x == WAD:
        return Wad(WAD)

    base = MATH_CONTEXT.divide(Decimal(x), _WAD_DECIMAL)
    exponent = MATH_CONTEXT.divide(Decimal(y), _WAD_DECIMAL)
    try:
        result = MATH_CONTEXT.power(base, exponent)
    except (InvalidOperation, Overflow) as e:
        raise FixedPointError(f"pow_wad failed for x={x}, y={y}: {e}")

    return _quantize_floor(result)


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_non_negative(value: int, name: str) -> None:
    """
    Валидация, что целое значение неотрицательное.

    Raises:
        TypeError: Если value не int (bool тоже запрещён)
        ValueError: Если value < 0
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")

    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")


def validate_progress(value: int, name: str = "x") -> None:
    """
    Валидация прогресса продажи: 0 <= value <= WAD.

    Raises:
        TypeError: Если value не int
        ValueError: Если value вне [0, WAD]
    """
    validate_non_negative(value, name)

    if value > WAD:
        raise ValueError(f"{name} must be <= {WAD} (1.0), got {value}")
