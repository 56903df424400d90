"""
Events — Аудит-события продажи

Immutable Pydantic модели событий. Каждое событие эмитится ровно один раз
на успешную операцию и никогда — на отклонённую/прерванную.

EventLog — упорядоченный журнал событий экземпляра продажи.
"""

from typing import Iterator, Optional, TypeVar

from pydantic import BaseModel, Field

from .curve import CurveParameters


class SaleEvent(BaseModel):
    """Базовое событие продажи."""

    sequence: int = Field(0, ge=0, description="Порядковый номер в журнале")

    model_config = {"frozen": True}

    @property
    def event_type(self) -> str:
        return type(self).__name__

    def to_contract(self) -> dict:
        """JSON-совместимое представление события."""
        data = self.model_dump(mode="json")
        data["event_type"] = self.event_type
        return data


class PurchaseCompleted(SaleEvent):
    """Покупка завершена."""

    buyer: str
    exact_cost: int = Field(..., ge=0)
    tokens_out: int = Field(..., gt=0)
    reward_out: int = Field(..., ge=0)
    new_tokens_sold: int = Field(..., gt=0)
    fund_cut: int = Field(..., ge=0)
    share_cut: int = Field(..., ge=0)
    referral_cut: int = Field(..., ge=0)
    referrer: Optional[str] = None
    refund: int = Field(..., ge=0)


class CurveUpdated(SaleEvent):
    """Параметры кривой заменены."""

    curve: CurveParameters


class ParamsLocked(SaleEvent):
    """Параметры кривой заблокированы навсегда."""

    pass


class RailsUpdated(SaleEvent):
    """Rails заменены."""

    fund_treasury: str
    share_treasury: str
    fund_bps: int
    share_bps: int
    referrer_bps: int


class Paused(SaleEvent):
    """Продажа приостановлена."""

    account: str


class Unpaused(SaleEvent):
    """Продажа возобновлена."""

    account: str


class AssetRecovered(SaleEvent):
    """Актив (не продаваемый ресурс) выведен governance."""

    asset: str
    to: str
    amount: int = Field(..., gt=0)


class OwnershipTransferStarted(SaleEvent):
    """Оператор номинировал преемника."""

    previous_owner: str
    new_owner: str


class OwnershipTransferred(SaleEvent):
    """Преемник принял роль оператора."""

    previous_owner: str
    new_owner: str


E = TypeVar("E", bound=SaleEvent)


class EventLog:
    """
    Журнал событий экземпляра продажи (append-only).

    emit() присваивает событию порядковый номер.
    """

    def __init__(self):
        self._events: list[SaleEvent] = []

    def emit(self, event: SaleEvent) -> SaleEvent:
        """Добавление события с присвоением sequence."""
        stamped = event.model_copy(update={"sequence": len(self._events)})
        self._events.append(stamped)
        return stamped

    def of_type(self, event_type: type[E]) -> list[E]:
        """Все события заданного типа, в порядке эмиссии."""
        return [e for e in self._events if isinstance(e, event_type)]

    def last(self) -> Optional[SaleEvent]:
        return self._events[-1] if self._events else None

    def __iter__(self) -> Iterator[SaleEvent]:
        return iter(list(self._events))

    def __len__(self) -> int:
        return len(self._events)
