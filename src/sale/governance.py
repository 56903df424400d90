"""Governance Controller — параметры кривой, rails, lock, пауза, аварийный вывод.

Все операции требуют авторизации оператора (Ownable2Step).

Асимметрия: после lock_params() кривая неизменна навсегда, но rails
остаются изменяемыми — ставки и бенефициары governance может менять
в любой момент.
"""

import logging
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from src.core.domain.curve import CurveParameters
from src.core.domain.events import (
    AssetRecovered,
    CurveUpdated,
    EventLog,
    ParamsLocked,
    Paused,
    RailsUpdated,
    Unpaused,
)
from src.core.domain.identity import is_null_identity
from src.core.domain.rails import MAX_BPS_TOTAL, RevenueRails

from .access_control import Ownable2Step
from .asset_ledger import AssetLedger
from .errors import InvalidConfiguration, OperationRejected
from .guard import PauseGuard
from .state import SaleState

log = logging.getLogger(__name__)


class GovernanceController:
    """Операции оператора над состоянием продажи."""

    def __init__(
        self,
        state: SaleState,
        access: Ownable2Step,
        guard: PauseGuard,
        ledger: AssetLedger,
        events: EventLog,
    ):
        self._state = state
        self._access = access
        self._guard = guard
        self._ledger = ledger
        self._events = events

    def _authorize(self, caller: str) -> None:
        self._access.require_owner(caller)
        # Governance не вмешивается в покупку, находящуюся в процессе
        self._guard.require_not_entered()

    # -------------------------------------------------------------------------
    # КРИВАЯ
    # -------------------------------------------------------------------------

    def update_curve(
        self, caller: str, params: Union[CurveParameters, Mapping[str, Any]]
    ) -> CurveParameters:
        """Замена параметров кривой целиком.

        Raises:
            Unauthorized: caller не оператор
            OperationRejected: params_locked
            InvalidConfiguration: P1 <= P0, K == 0, ALPHA == 0, отрицательные значения
        """
        self._authorize(caller)

        if self._state.locked:
            raise OperationRejected("params_locked", "curve parameters are locked")

        if isinstance(params, CurveParameters):
            new_curve = params
        else:
            try:
                new_curve = CurveParameters.model_validate(dict(params))
            except ValidationError as e:
                raise InvalidConfiguration(f"invalid curve parameters: {e}") from e

        self._state.curve = new_curve
        self._events.emit(CurveUpdated(curve=new_curve))
        log.info("curve updated: %s", new_curve.model_dump())
        return new_curve

    def lock_params(self, caller: str) -> None:
        """Одностороннее закрепление кривой (необратимо).

        Raises:
            OperationRejected: already_locked
        """
        self._authorize(caller)

        if self._state.locked:
            raise OperationRejected("already_locked")

        self._state.locked = True
        self._events.emit(ParamsLocked())
        log.info("curve parameters locked")

    # -------------------------------------------------------------------------
    # RAILS
    # -------------------------------------------------------------------------

    def update_rails(
        self,
        caller: str,
        fund_treasury: str,
        share_treasury: str,
        fund_bps: int,
        share_bps: int,
        referrer_bps: int,
    ) -> RevenueRails:
        """Замена rails целиком (не зависит от lock).

        Raises:
            InvalidConfiguration: нулевой или нестроковый бенефициар,
                нецелая или отрицательная ставка
            OperationRejected: rails_over_100pct
        """
        self._authorize(caller)

        for name, treasury in (("fund_treasury", fund_treasury), ("share_treasury", share_treasury)):
            if not isinstance(treasury, str) or is_null_identity(treasury):
                raise InvalidConfiguration(f"{name} must be a non-null identity, got {treasury!r}")

        for name, bps in (("fund_bps", fund_bps), ("share_bps", share_bps), ("referrer_bps", referrer_bps)):
            if isinstance(bps, bool) or not isinstance(bps, int):
                raise InvalidConfiguration(f"{name} must be an int, got {type(bps).__name__}")
            if bps < 0:
                raise InvalidConfiguration(f"{name} must be non-negative, got {bps}")

        total = fund_bps + share_bps + referrer_bps
        if total > MAX_BPS_TOTAL:
            raise OperationRejected("rails_over_100pct", f"bps total {total} > {MAX_BPS_TOTAL}")

        try:
            rails = RevenueRails(
                fund_treasury=fund_treasury,
                share_treasury=share_treasury,
                fund_bps=fund_bps,
                share_bps=share_bps,
                referrer_bps=referrer_bps,
            )
        except ValidationError as e:
            raise InvalidConfiguration(f"invalid rails: {e}") from e

        self._state.rails = rails
        self._events.emit(RailsUpdated(**rails.model_dump()))
        log.info(
            "rails updated: fund=%s (%d bps) share=%s (%d bps) referrer=%d bps",
            fund_treasury,
            fund_bps,
            share_treasury,
            share_bps,
            referrer_bps,
        )
        return rails

    # -------------------------------------------------------------------------
    # ПАУЗА
    # -------------------------------------------------------------------------

    def pause(self, caller: str) -> None:
        self._authorize(caller)
        self._guard.pause()
        self._events.emit(Paused(account=caller))
        log.info("sale paused by %s", caller)

    def unpause(self, caller: str) -> None:
        self._authorize(caller)
        self._guard.unpause()
        self._events.emit(Unpaused(account=caller))
        log.info("sale unpaused by %s", caller)

    # -------------------------------------------------------------------------
    # АВАРИЙНЫЙ ВЫВОД
    # -------------------------------------------------------------------------

    def recover_asset(
        self, caller: str, asset: str, to: Optional[str], amount: int
    ) -> None:
        """Вывод любого актива, КРОМЕ продаваемого ресурса.

        Raises:
            OperationRejected: sale_asset_not_recoverable, zero_amount
            InvalidConfiguration: нулевой получатель
            ExternalTransferFailure: недостаточный баланс / отказ получателя
        """
        self._authorize(caller)

        if asset == self._state.sale_token:
            raise OperationRejected(
                "sale_asset_not_recoverable", f"{asset} is the sold resource"
            )

        if is_null_identity(to):
            raise InvalidConfiguration("recovery recipient must be a non-null identity")

        if amount <= 0:
            raise OperationRejected("zero_amount", f"recovery amount must be positive, got {amount}")

        with self._ledger.transaction():
            self._ledger.transfer(asset, self._state.sale_account, to, amount)

        self._events.emit(AssetRecovered(asset=asset, to=to, amount=amount))
        log.info("recovered %d %s to %s", amount, asset, to)
