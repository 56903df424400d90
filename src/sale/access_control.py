"""Access Control — оператор с двухшаговой передачей роли.

Текущий оператор номинирует преемника (transfer_ownership), преемник
отдельно подтверждает (accept_ownership). До подтверждения роль остаётся
у текущего оператора; повторная номинация заменяет pending-преемника.
"""

from typing import Optional

from src.core.domain.events import OwnershipTransferred, OwnershipTransferStarted, SaleEvent
from src.core.domain.identity import is_null_identity

from .errors import InvalidConfiguration, Unauthorized


class Ownable2Step:
    """Роль оператора: holder + pending nominee."""

    def __init__(self, owner: str):
        if is_null_identity(owner):
            raise InvalidConfiguration(f"owner must be a non-null identity, got {owner!r}")
        self._owner = owner
        self._pending_owner: Optional[str] = None

    @property
    def owner(self) -> str:
        return self._owner

    @property
    def pending_owner(self) -> Optional[str]:
        return self._pending_owner

    def require_owner(self, caller: str) -> None:
        """Проверка авторизации governance-вызова.

        Raises:
            Unauthorized: если caller не оператор
        """
        if caller != self._owner:
            raise Unauthorized(caller)

    def transfer_ownership(self, caller: str, new_owner: Optional[str]) -> SaleEvent:
        """Шаг 1: номинация преемника.

        Нулевой new_owner отменяет текущую номинацию.
        """
        self.require_owner(caller)

        self._pending_owner = None if is_null_identity(new_owner) else new_owner
        return OwnershipTransferStarted(
            previous_owner=self._owner,
            new_owner=self._pending_owner or "",
        )

    def accept_ownership(self, caller: str) -> SaleEvent:
        """Шаг 2: преемник принимает роль.

        Raises:
            Unauthorized: если caller не номинированный преемник
        """
        if self._pending_owner is None or caller != self._pending_owner:
            raise Unauthorized(caller, f"caller {caller!r} is not the pending owner")

        previous = self._owner
        self._owner = caller
        self._pending_owner = None
        return OwnershipTransferred(previous_owner=previous, new_owner=caller)
