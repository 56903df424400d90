"""
Тесты для модуля Revenue Split (деление платежа в basis points)

Проверяет:
1. bps-доли с округлением вниз
2. Сохранение суммы: cuts + usable == payment
3. Реферальная доля только при указанном реферере
4. Валидацию ставок (<= 100%, неотрицательные)
"""

import pytest

from src.core.math.revenue_split import (
    BPS_DENOMINATOR,
    RevenueSplit,
    bps_cut,
    split_payment,
    validate_bps_total,
)

# =============================================================================
# BPS
# =============================================================================


class TestBps:
    """Тесты для bps_cut"""

    def test_denominator(self) -> None:
        assert BPS_DENOMINATOR == 10_000

    def test_bps_cut_exact(self) -> None:
        assert bps_cut(10**18, 500) == 5 * 10**16

    def test_bps_cut_floors(self) -> None:
        """1000 × 25 / 10000 = 2.5 → 2"""
        assert bps_cut(1000, 25) == 2
        assert bps_cut(1, 9_999) == 0

    def test_validate_total(self) -> None:
        validate_bps_total(5_000, 3_000, 2_000)
        with pytest.raises(ValueError, match="exceeds"):
            validate_bps_total(5_000, 3_000, 2_001)
        with pytest.raises(ValueError):
            validate_bps_total(-1, 0, 0)


# =============================================================================
# SPLIT
# =============================================================================


class TestSplitPayment:
    """Тесты для split_payment"""

    def test_no_rails(self) -> None:
        split = split_payment(10**18, 0, 0, 0, has_referrer=False)
        assert split == RevenueSplit(fund_cut=0, share_cut=0, referral_cut=0, usable=10**18)
        assert split.rails_total == 0

    def test_all_rails_with_referrer(self) -> None:
        split = split_payment(10**18, 500, 300, 200, has_referrer=True)

        assert split.fund_cut == 5 * 10**16
        assert split.share_cut == 3 * 10**16
        assert split.referral_cut == 2 * 10**16
        assert split.usable == 9 * 10**17
        assert split.rails_total == 10**17

    def test_referral_skipped_without_referrer(self) -> None:
        """Без реферера его доля остаётся в usable"""
        split = split_payment(10**18, 500, 300, 200, has_referrer=False)

        assert split.referral_cut == 0
        assert split.usable == 92 * 10**16

    @pytest.mark.parametrize("payment", [1, 7, 999, 10**18 + 3, 123456789012345678901])
    def test_conservation(self, payment: int) -> None:
        """cuts + usable == payment для любого платежа"""
        split = split_payment(payment, 333, 777, 1_111, has_referrer=True)
        assert split.rails_total + split.usable == payment
        assert split.usable >= 0

    def test_full_rails_leave_nothing(self) -> None:
        """Ставки 100%: usable == 0"""
        split = split_payment(10**18, 6_000, 4_000, 0, has_referrer=False)
        assert split.usable == 0

    def test_rates_over_100pct_rejected(self) -> None:
        with pytest.raises(ValueError, match="exceeds"):
            split_payment(10**18, 6_000, 4_000, 1, has_referrer=True)

    def test_negative_payment_rejected(self) -> None:
        with pytest.raises(ValueError):
            split_payment(-1, 0, 0, 0, has_referrer=False)
