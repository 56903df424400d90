"""
Тесты для Access Control и Guard

Проверяет:
1. Двухшаговую передачу роли оператора (Ownable2Step)
2. Флаг паузы и reentrancy guard (PauseGuard)
3. Передачу роли через CurveSale с аудит-событиями
"""

import pytest

from src.core.domain import (
    ZERO_ADDRESS,
    OwnershipTransferred,
    OwnershipTransferStarted,
)
from src.core.math.fixed_point import to_wad
from src.sale import (
    CurveSale,
    InvalidConfiguration,
    OperationRejected,
    Ownable2Step,
    PauseGuard,
    SaleConfig,
    Unauthorized,
)

# =============================================================================
# OWNABLE2STEP
# =============================================================================


class TestOwnable2Step:
    """Тесты для Ownable2Step"""

    @pytest.fixture
    def access(self) -> Ownable2Step:
        return Ownable2Step("governance")

    def test_initial_state(self, access: Ownable2Step) -> None:
        assert access.owner == "governance"
        assert access.pending_owner is None

    def test_null_owner_rejected(self) -> None:
        with pytest.raises(InvalidConfiguration):
            Ownable2Step(ZERO_ADDRESS)
        with pytest.raises(InvalidConfiguration):
            Ownable2Step("")

    def test_require_owner(self, access: Ownable2Step) -> None:
        access.require_owner("governance")
        with pytest.raises(Unauthorized):
            access.require_owner("mallory")

    def test_two_step_transfer(self, access: Ownable2Step) -> None:
        started = access.transfer_ownership("governance", "dao")

        assert isinstance(started, OwnershipTransferStarted)
        assert started.previous_owner == "governance"
        assert started.new_owner == "dao"
        # До подтверждения роль у текущего оператора
        assert access.owner == "governance"
        assert access.pending_owner == "dao"

        done = access.accept_ownership("dao")

        assert isinstance(done, OwnershipTransferred)
        assert done.previous_owner == "governance"
        assert done.new_owner == "dao"
        assert access.owner == "dao"
        assert access.pending_owner is None

    def test_accept_by_stranger(self, access: Ownable2Step) -> None:
        access.transfer_ownership("governance", "dao")

        with pytest.raises(Unauthorized, match="not the pending owner"):
            access.accept_ownership("mallory")
        assert access.owner == "governance"

    def test_accept_without_nomination(self, access: Ownable2Step) -> None:
        with pytest.raises(Unauthorized):
            access.accept_ownership("governance")

    def test_renomination_replaces_pending(self, access: Ownable2Step) -> None:
        access.transfer_ownership("governance", "dao")
        access.transfer_ownership("governance", "multisig")

        assert access.pending_owner == "multisig"
        with pytest.raises(Unauthorized):
            access.accept_ownership("dao")

    def test_null_nominee_cancels(self, access: Ownable2Step) -> None:
        access.transfer_ownership("governance", "dao")
        cancelled = access.transfer_ownership("governance", None)

        assert access.pending_owner is None
        assert cancelled.new_owner == ""

    def test_transfer_by_non_owner(self, access: Ownable2Step) -> None:
        with pytest.raises(Unauthorized):
            access.transfer_ownership("mallory", "mallory")
        assert access.pending_owner is None


# =============================================================================
# PAUSE GUARD
# =============================================================================


class TestPauseGuard:
    """Тесты для PauseGuard"""

    def test_pause_cycle(self) -> None:
        guard = PauseGuard()
        guard.require_not_paused()

        guard.pause()
        assert guard.paused
        with pytest.raises(OperationRejected, match="paused"):
            guard.require_not_paused()

        guard.unpause()
        assert not guard.paused

    def test_initially_paused(self) -> None:
        assert PauseGuard(paused=True).paused

    def test_non_reentrant(self) -> None:
        guard = PauseGuard()

        with guard.non_reentrant():
            assert guard.entered
            with pytest.raises(OperationRejected) as exc_info:
                with guard.non_reentrant():
                    pass
            assert exc_info.value.reason == "reentrant_call"
            assert guard.entered

        assert not guard.entered

    def test_released_after_exception(self) -> None:
        guard = PauseGuard()

        with pytest.raises(RuntimeError):
            with guard.non_reentrant():
                raise RuntimeError("boom")

        assert not guard.entered
        guard.require_not_entered()


# =============================================================================
# ПЕРЕДАЧА РОЛИ ЧЕРЕЗ CURVESALE
# =============================================================================


class TestSaleOwnership:
    """Передача роли оператора продажи"""

    @pytest.fixture
    def sale(self) -> CurveSale:
        config = SaleConfig.build(
            owner="governance",
            sale_token="RESOURCE",
            sale_account="sale",
            sale_supply=to_wad(1000),
            curve={"p0": 1, "p1": 2, "k": to_wad(1), "r0": 0, "alpha": to_wad(1)},
            fund_treasury="fund",
            share_treasury="share",
        )
        return CurveSale(config)

    def test_handover(self, sale: CurveSale) -> None:
        sale.transfer_ownership("governance", "dao")
        assert sale.pending_owner == "dao"
        assert sale.owner == "governance"

        # Номинант ещё не оператор
        with pytest.raises(Unauthorized):
            sale.pause("dao")

        sale.accept_ownership("dao")
        assert sale.owner == "dao"

        sale.pause("dao")
        with pytest.raises(Unauthorized):
            sale.unpause("governance")

        types = [e.event_type for e in sale.events]
        assert types == ["OwnershipTransferStarted", "OwnershipTransferred", "Paused"]

    def test_failed_accept_emits_nothing(self, sale: CurveSale) -> None:
        sale.transfer_ownership("governance", "dao")

        with pytest.raises(Unauthorized):
            sale.accept_ownership("mallory")

        assert len(sale.event_log) == 1
