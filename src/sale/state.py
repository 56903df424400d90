"""Sale State — единственное изменяемое состояние экземпляра продажи.

Владелец — экземпляр CurveSale. Пишут только PurchaseOrchestrator
(tokens_sold) и GovernanceController (curve, locked, rails).

Инварианты:
- 0 <= tokens_sold <= sale_supply
- tokens_sold монотонно не убывает
- sale_supply неизменен после создания
- locked: одностороннее False → True
"""

from dataclasses import dataclass

from src.core.domain.curve import CurveParameters
from src.core.domain.rails import RevenueRails
from src.core.math.curve import progress_of

from .errors import ArithmeticFailure


@dataclass
class SaleState:
    """Ledger продажи + rails."""

    sale_token: str
    sale_account: str
    sale_supply: int
    curve: CurveParameters
    rails: RevenueRails
    tokens_sold: int = 0
    locked: bool = False

    @property
    def progress(self) -> int:
        """Текущий прогресс x0 в Wad."""
        return progress_of(self.tokens_sold, self.sale_supply)

    @property
    def remaining_supply(self) -> int:
        return self.sale_supply - self.tokens_sold

    @property
    def sold_out(self) -> bool:
        return self.tokens_sold >= self.sale_supply

    def record_sale(self, tokens_out: int) -> int:
        """Фиксация выданного количества.

        Raises:
            ArithmeticFailure: если tokens_out <= 0 или supply превышен
        """
        if tokens_out <= 0:
            raise ArithmeticFailure(f"tokens_out must be positive, got {tokens_out}")

        new_total = self.tokens_sold + tokens_out
        if new_total > self.sale_supply:
            raise ArithmeticFailure(
                f"tokens_sold {new_total} would exceed sale_supply {self.sale_supply}"
            )

        self.tokens_sold = new_total
        return new_total
