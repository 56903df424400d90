"""Guard — флаг паузы и защита от повторного входа.

PauseGuard хранит бинарный флаг paused и маркер «операция в процессе».
non_reentrant() оборачивает покупку: вложенный вход (например, из
receive-хука получателя перевода) отклоняется с reason="reentrant_call".
"""

from contextlib import contextmanager
from typing import Iterator

from .errors import OperationRejected


class PauseGuard:
    """Пауза + reentrancy guard."""

    def __init__(self, paused: bool = False):
        self._paused = paused
        self._entered = False

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def entered(self) -> bool:
        """True пока выполняется защищённая операция."""
        return self._entered

    def pause(self) -> None:
        if self._paused:
            raise OperationRejected("already_paused")
        self._paused = True

    def unpause(self) -> None:
        if not self._paused:
            raise OperationRejected("not_paused")
        self._paused = False

    def require_not_paused(self) -> None:
        if self._paused:
            raise OperationRejected("paused", "sale is paused")

    def require_not_entered(self) -> None:
        if self._entered:
            raise OperationRejected("reentrant_call", "operation already in progress")

    @contextmanager
    def non_reentrant(self) -> Iterator[None]:
        """Эксклюзивный вход в защищённую секцию."""
        self.require_not_entered()
        self._entered = True
        try:
            yield
        finally:
            self._entered = False
