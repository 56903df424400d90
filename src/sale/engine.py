"""CurveSale — экземпляр продажи с фиксированным supply по кривой.

Связывает состояние, коллабораторов и оркестраторы:
- SaleState           — ledger продажи + rails (единственное изменяемое состояние)
- Ownable2Step        — оператор с двухшаговой передачей роли
- PauseGuard          — пауза + reentrancy guard
- AssetLedger         — реестр балансов (переводы, без эмиссии)
- PurchaseOrchestrator / GovernanceController
- EventLog            — аудит-события

Все изменяющие операции сериализуются одним RLock: каждая наблюдается
остальными вызывающими атомарно. Чтения состояния берут тот же lock,
поэтому незавершённая покупка другим потокам не видна. Повторный вход
в покупку из того же потока (receive-хук получателя) отклоняется
guard'ом, а не блокируется.
"""

import logging
import threading
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from pydantic import ValidationError

from src.core.domain.curve import CurveParameters
from src.core.domain.events import EventLog, SaleEvent
from src.core.domain.purchase import PurchaseQuote, PurchaseRequest, PurchaseResult
from src.core.domain.rails import RevenueRails
from src.core.math import curve as curve_math
from src.core.math.fixed_point import Wad, mul_wad

from .access_control import Ownable2Step
from .asset_ledger import AssetLedger, InMemoryAssetLedger
from .config import SaleConfig, load_sale_config
from .errors import OperationRejected, SaleError
from .governance import GovernanceController
from .guard import PauseGuard
from .purchase import PurchaseOrchestrator
from .state import SaleState

log = logging.getLogger(__name__)


class CurveSale:
    """Продажа ресурса по монотонной кривой цены."""

    def __init__(
        self,
        config: Union[SaleConfig, Mapping[str, Any]],
        ledger: Optional[AssetLedger] = None,
    ):
        """
        Args:
            config: SaleConfig или JSON документ sale_config
            ledger: реестр активов (default: новый InMemoryAssetLedger)

        Raises:
            InvalidConfiguration: некорректная конфигурация
        """
        if not isinstance(config, SaleConfig):
            config = SaleConfig.from_document(config)

        self._config = config
        self._ledger = ledger if ledger is not None else InMemoryAssetLedger()
        self._state = SaleState(
            sale_token=config.sale_token,
            sale_account=config.sale_account,
            sale_supply=config.sale_supply,
            curve=config.curve,
            rails=config.rails(),
        )
        self._access = Ownable2Step(config.owner)
        self._guard = PauseGuard()
        self._events = EventLog()
        self._purchases = PurchaseOrchestrator(self._ledger, self._events)
        self._governance = GovernanceController(
            self._state, self._access, self._guard, self._ledger, self._events
        )
        self._lock = threading.RLock()

        log.info(
            "curve sale created: token=%s supply=%d owner=%s",
            config.sale_token,
            config.sale_supply,
            config.owner,
        )

    @classmethod
    def from_config_file(
        cls, path: Union[str, Path], ledger: Optional[AssetLedger] = None
    ) -> "CurveSale":
        return cls(load_sale_config(path), ledger)

    # -------------------------------------------------------------------------
    # ПОКУПКА
    # -------------------------------------------------------------------------

    def buy(
        self, payer: str, payment: int, referrer: Optional[str] = None
    ) -> PurchaseResult:
        """Покупка ресурса на платёж payment (всё или ничего).

        Raises:
            OperationRejected: paused, reentrant_call, sold_out, zero_payment,
                payment_too_small, supply_exceeded, reward_reserve_insufficient
            ArithmeticFailure, ExternalTransferFailure
        """
        request = self._request(payer, payment, referrer)

        with self._lock:
            self._guard.require_not_paused()
            with self._guard.non_reentrant():
                try:
                    return self._purchases.execute(self._state, request)
                except SaleError as e:
                    log.warning("purchase rejected: payer=%s payment=%d: %s", payer, payment, e)
                    raise

    def quote(
        self, payer: str, payment: int, referrer: Optional[str] = None
    ) -> PurchaseQuote:
        """Предварительный расчёт покупки без изменения состояния."""
        request = self._request(payer, payment, referrer)
        with self._lock:
            return self._purchases.quote(self._state, request)

    @staticmethod
    def _request(payer: str, payment: int, referrer: Optional[str]) -> PurchaseRequest:
        try:
            return PurchaseRequest(payer=payer, payment=payment, referrer=referrer)
        except ValidationError as e:
            raise OperationRejected("invalid_request", str(e)) from e

    # -------------------------------------------------------------------------
    # GOVERNANCE
    # -------------------------------------------------------------------------

    def update_curve(
        self, caller: str, params: Union[CurveParameters, Mapping[str, Any]]
    ) -> CurveParameters:
        with self._lock:
            return self._governance.update_curve(caller, params)

    def lock_params(self, caller: str) -> None:
        with self._lock:
            self._governance.lock_params(caller)

    def update_rails(
        self,
        caller: str,
        fund_treasury: str,
        share_treasury: str,
        fund_bps: int,
        share_bps: int,
        referrer_bps: int,
    ) -> RevenueRails:
        with self._lock:
            return self._governance.update_rails(
                caller, fund_treasury, share_treasury, fund_bps, share_bps, referrer_bps
            )

    def pause(self, caller: str) -> None:
        with self._lock:
            self._governance.pause(caller)

    def unpause(self, caller: str) -> None:
        with self._lock:
            self._governance.unpause(caller)

    def recover_asset(self, caller: str, asset: str, to: str, amount: int) -> None:
        with self._lock:
            self._governance.recover_asset(caller, asset, to, amount)

    def transfer_ownership(self, caller: str, new_owner: Optional[str]) -> None:
        with self._lock:
            self._events.emit(self._access.transfer_ownership(caller, new_owner))

    def accept_ownership(self, caller: str) -> None:
        with self._lock:
            self._events.emit(self._access.accept_ownership(caller))

    # -------------------------------------------------------------------------
    # QUERIES (без побочных эффектов)
    # -------------------------------------------------------------------------

    def price(self, x: int) -> Wad:
        """p(x) для текущих параметров кривой."""
        with self._lock:
            return curve_math.price(self._state.curve, x)

    def reward_factor(self, x: int) -> Wad:
        """r(x) для текущих параметров кривой."""
        with self._lock:
            return curve_math.reward_factor(self._state.curve, x)

    def current_price(self) -> Wad:
        """Спот-цена на текущем прогрессе."""
        with self._lock:
            return curve_math.price(self._state.curve, self._state.progress)

    def reward_reserve(self) -> int:
        """Баланс ресурса, доступный для reward (сверх непроданного supply)."""
        with self._lock:
            return max(self._purchases.available_for_reward(self._state), 0)

    def funding_shortfall(self) -> int:
        """Сколько не хватает до worst-case обязательств: remaining · (1 + R0)."""
        with self._lock:
            remaining = self._state.remaining_supply
            required = remaining + mul_wad(remaining, self._state.curve.r0)
            balance = self._ledger.balance_of(self._state.sale_token, self._state.sale_account)
            return max(required - balance, 0)

    def balance_of(self, asset: str, holder: str) -> int:
        """Баланс holder в реестре, согласованный с состоянием продажи."""
        with self._lock:
            return self._ledger.balance_of(asset, holder)

    # Состояние читается под self._lock

    @property
    def sale_token(self) -> str:
        return self._state.sale_token

    @property
    def sale_account(self) -> str:
        return self._state.sale_account

    @property
    def sale_supply(self) -> int:
        return self._state.sale_supply

    @property
    def tokens_sold(self) -> int:
        with self._lock:
            return self._state.tokens_sold

    @property
    def remaining_supply(self) -> int:
        with self._lock:
            return self._state.remaining_supply

    @property
    def progress(self) -> Wad:
        with self._lock:
            return self._state.progress

    @property
    def curve(self) -> CurveParameters:
        with self._lock:
            return self._state.curve

    @property
    def rails(self) -> RevenueRails:
        with self._lock:
            return self._state.rails

    @property
    def locked(self) -> bool:
        with self._lock:
            return self._state.locked

    @property
    def paused(self) -> bool:
        with self._lock:
            return self._guard.paused

    @property
    def owner(self) -> str:
        with self._lock:
            return self._access.owner

    @property
    def pending_owner(self) -> Optional[str]:
        with self._lock:
            return self._access.pending_owner

    @property
    def ledger(self) -> AssetLedger:
        return self._ledger

    @property
    def events(self) -> list[SaleEvent]:
        with self._lock:
            return list(self._events)

    @property
    def event_log(self) -> EventLog:
        return self._events
