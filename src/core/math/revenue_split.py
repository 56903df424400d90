"""
Revenue Split — Basis-Point Cuts of a Payment

Модуль делит платёж на доли бенефициаров (rails) и остаток для кривой:
- fund_cut     → fundTreasury
- share_cut    → shareTreasury
- referral_cut → referrer (ноль, если referrer не указан или referrer_bps == 0)
- usable       = payment − fund_cut − share_cut − referral_cut

Каждая доля округляется вниз, поэтому сумма долей никогда не превышает
платёж и usable >= 0 при сумме ставок <= 100%.
"""

from typing import Final, NamedTuple

from src.core.math.fixed_point import FixedPointError, checked_sub, mul_div, validate_non_negative

# 10000 bps = 100%
BPS_DENOMINATOR: Final[int] = 10_000


class RevenueSplit(NamedTuple):
    """Результат деления платежа."""

    fund_cut: int
    share_cut: int
    referral_cut: int
    usable: int

    @property
    def rails_total(self) -> int:
        """Сумма всех долей бенефициаров."""
        return self.fund_cut + self.share_cut + self.referral_cut


def bps_cut(amount: int, bps: int) -> int:
    """
    Доля amount в basis points: floor(amount · bps / 10000).

    Examples:
        >>> bps_cut(1000, 25)
        2
    """
    return mul_div(amount, bps, BPS_DENOMINATOR)


def validate_bps_total(*bps: int) -> None:
    """
    Проверка суммы ставок: каждая >= 0, сумма <= 10000.

    Raises:
        ValueError: Если ставка отрицательна или сумма превышает 100%
    """
    for value in bps:
        validate_non_negative(value, "bps")

    total = sum(bps)
    if total > BPS_DENOMINATOR:
        raise ValueError(f"bps total {total} exceeds {BPS_DENOMINATOR} (100%)")


def split_payment(
    payment: int,
    fund_bps: int,
    share_bps: int,
    referrer_bps: int,
    has_referrer: bool,
) -> RevenueSplit:
    """
    Деление платежа между rails и кривой.

    Args:
        payment: Платёж (базовые единицы валюты)
        fund_bps: Ставка fundTreasury
        share_bps: Ставка shareTreasury
        referrer_bps: Ставка реферера
        has_referrer: Указан ли реферер

    Returns:
        RevenueSplit(fund_cut, share_cut, referral_cut, usable)

    Raises:
        ValueError: Если payment < 0 или ставки некорректны
        FixedPointError: Если доли превысили платёж (невозможно при валидных ставках)
    """
    validate_non_negative(payment, "payment")
    validate_bps_total(fund_bps, share_bps, referrer_bps)

    fund_cut = bps_cut(payment, fund_bps)
    share_cut = bps_cut(payment, share_bps)
    referral_cut = bps_cut(payment, referrer_bps) if has_referrer else 0

    try:
        usable = checked_sub(payment, fund_cut + share_cut + referral_cut)
    except FixedPointError:
        raise FixedPointError(
            f"rails cuts exceed payment: payment={payment}, "
            f"cuts={fund_cut}+{share_cut}+{referral_cut}"
        )

    return RevenueSplit(
        fund_cut=fund_cut,
        share_cut=share_cut,
        referral_cut=referral_cut,
        usable=usable,
    )
