"""Asset Ledger — реестр балансов активов (внешний коллаборатор).

Продажа никогда не создаёт единицы: она только переводит то, чем её
заранее пополнили. Через реестр проходят:
- приём платежа от покупателя (нативная валюта)
- доли rails бенефициарам
- выдача ресурса покупателю
- refund
- аварийный вывод не-продаваемых активов

transaction() гарантирует атомарность группы переводов: при исключении
внутри блока все балансы восстанавливаются.
"""

import logging
from contextlib import contextmanager
from typing import Callable, Dict, Final, Iterator, Optional, Protocol, Tuple

from src.core.domain.identity import is_null_identity

from .errors import ExternalTransferFailure

log = logging.getLogger(__name__)

# Идентификатор нативной валюты платежа
NATIVE_ASSET: Final[str] = "NATIVE"

# Хук получателя: вызывается после зачисления (asset, sender, amount)
ReceiveHook = Callable[[str, str, int], None]


class AssetLedger(Protocol):
    """Минимальный интерфейс реестра, который потребляет продажа."""

    def balance_of(self, asset: str, holder: str) -> int:
        ...

    def transfer(self, asset: str, sender: str, recipient: str, amount: int) -> None:
        ...

    def transaction(self):
        ...


class InMemoryAssetLedger:
    """Реестр балансов в памяти.

    Балансы хранятся по ключу (asset, holder). Receive-хуки моделируют
    контракт-получатель: хук может отказать (исключение) или попытаться
    повторно войти в продажу.
    """

    def __init__(self):
        self._balances: Dict[Tuple[str, str], int] = {}
        self._hooks: Dict[str, ReceiveHook] = {}

    def balance_of(self, asset: str, holder: str) -> int:
        return self._balances.get((asset, holder), 0)

    def credit(self, asset: str, holder: str, amount: int) -> None:
        """Пополнение баланса извне (депозит/фандинг деплоера)."""
        if amount < 0:
            raise ValueError(f"credit amount must be non-negative, got {amount}")
        key = (asset, holder)
        self._balances[key] = self._balances.get(key, 0) + amount

    def register_hook(self, holder: str, hook: Optional[ReceiveHook]) -> None:
        """Установка (или снятие при None) receive-хука получателя."""
        if hook is None:
            self._hooks.pop(holder, None)
        else:
            self._hooks[holder] = hook

    def transfer(self, asset: str, sender: str, recipient: str, amount: int) -> None:
        """Перевод amount актива asset от sender к recipient.

        Нулевой перевод — no-op (хук не вызывается).

        Raises:
            ExternalTransferFailure: нулевой получатель, отрицательная сумма,
                недостаточный баланс, отказ хука получателя
        """
        if amount < 0:
            raise ExternalTransferFailure(f"negative transfer amount: {amount}")

        if is_null_identity(recipient):
            raise ExternalTransferFailure(f"transfer to null recipient ({asset}, {amount})")

        if amount == 0:
            return

        available = self.balance_of(asset, sender)
        if available < amount:
            raise ExternalTransferFailure(
                f"insufficient {asset} balance: {sender} has {available}, needs {amount}"
            )

        self._balances[(asset, sender)] = available - amount
        self._balances[(asset, recipient)] = self.balance_of(asset, recipient) + amount

        hook = self._hooks.get(recipient)
        if hook is not None:
            try:
                hook(asset, sender, amount)
            except Exception as e:
                raise ExternalTransferFailure(
                    f"recipient {recipient} rejected {asset} transfer: {e}"
                ) from e

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Атомарная группа переводов: откат всех балансов при исключении."""
        snapshot = dict(self._balances)
        try:
            yield
        except BaseException:
            self._balances = snapshot
            log.debug("ledger transaction rolled back")
            raise
