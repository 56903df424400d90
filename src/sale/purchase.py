"""Purchase Orchestrator — единственная изменяющая точка входа покупки.

Шаги (всё или ничего):
1. Отказ если продажа распродана или платёж нулевой
2. Деление платежа: fund_cut, share_cut, referral_cut, usable
3. Переводы долей бенефициарам
4. Solver: x1 по (x0 = tokensSold/saleSupply, usable, saleSupply)
5. exactCost = saleSupply·(I(x1) − I(x0)), tokensOut = x1·saleSupply − tokensSold
6. rewardOut = tokensOut · r(x1) (reward на прогрессе ПОСЛЕ покупки)
7. tokensSold += tokensOut
8. Перевод tokensOut + rewardOut покупателю из предфондированного баланса
9. Refund = payment − (cuts + exactCost)
10. Аудит-событие PurchaseCompleted

quote() выполняет шаги 1, 2, 4, 5, 6, 9 без побочных эффектов.
execute() исполняет переводы в одной транзакции реестра; при любом
отказе реестр откатывается и tokens_sold восстанавливается.

Остаток бисекции: стоимость на x1 может превысить usable на величину
порядка saleSupply · P1 · 2^-60; exactCost ограничивается сверху usable.
"""

import logging

from src.core.domain.events import EventLog, PurchaseCompleted
from src.core.domain.purchase import PurchaseQuote, PurchaseRequest, PurchaseResult
from src.core.math.curve import curve_cost, reward_factor, tokens_at
from src.core.math.fixed_point import FixedPointError, checked_sub, mul_wad
from src.core.math.revenue_split import split_payment
from src.core.math.solver import solve_progress

from .asset_ledger import NATIVE_ASSET, AssetLedger
from .errors import ArithmeticFailure, OperationRejected
from .state import SaleState

log = logging.getLogger(__name__)


class PurchaseOrchestrator:
    """Покупка по кривой: котировка + атомарное исполнение."""

    def __init__(self, ledger: AssetLedger, events: EventLog):
        self._ledger = ledger
        self._events = events

    # -------------------------------------------------------------------------
    # QUOTE
    # -------------------------------------------------------------------------

    def quote(self, state: SaleState, request: PurchaseRequest) -> PurchaseQuote:
        """Полный расчёт покупки без изменения состояния.

        Raises:
            OperationRejected: sold_out, zero_payment, payment_too_small,
                supply_exceeded, reward_reserve_insufficient
            ArithmeticFailure: нарушение арифметики фиксированной точки
        """
        # 1. Распродано / нулевой платёж
        if state.sold_out:
            raise OperationRejected("sold_out", f"all {state.sale_supply} units sold")

        if request.payment == 0:
            raise OperationRejected("zero_payment")

        try:
            return self._compute(state, request)
        except FixedPointError as e:
            raise ArithmeticFailure(str(e)) from e

    def _compute(self, state: SaleState, request: PurchaseRequest) -> PurchaseQuote:
        rails = state.rails

        # 2. Rails
        split = split_payment(
            request.payment,
            rails.fund_bps,
            rails.share_bps,
            rails.referrer_bps,
            has_referrer=request.referrer is not None,
        )
        if split.usable == 0:
            raise OperationRejected("payment_too_small", "payment fully consumed by rails")

        # 4. Solver
        x0 = state.progress
        x1 = solve_progress(x0, split.usable, state.sale_supply, state.curve)

        # 5. Стоимость и выдача
        exact_cost = min(curve_cost(state.curve, state.sale_supply, x0, x1), split.usable)
        tokens_out = tokens_at(x1, state.sale_supply) - state.tokens_sold

        if tokens_out <= 0 or exact_cost == 0:
            raise OperationRejected(
                "payment_too_small",
                f"usable={split.usable} does not move progress from x0={x0}",
            )

        if state.tokens_sold + tokens_out > state.sale_supply:
            raise OperationRejected(
                "supply_exceeded",
                f"tokens_out={tokens_out} exceeds remaining {state.remaining_supply}",
            )

        # 6. Reward на прогрессе после покупки
        reward_out = mul_wad(tokens_out, reward_factor(state.curve, x1))
        self._check_reward_reserve(state, reward_out)

        # 9. Refund
        refund = checked_sub(request.payment, split.rails_total + exact_cost)

        return PurchaseQuote(
            payer=request.payer,
            referrer=request.referrer,
            payment=request.payment,
            fund_cut=split.fund_cut,
            share_cut=split.share_cut,
            referral_cut=split.referral_cut,
            usable=split.usable,
            x0=x0,
            x1=x1,
            exact_cost=exact_cost,
            tokens_out=tokens_out,
            reward_out=reward_out,
            refund=refund,
            new_tokens_sold=state.tokens_sold + tokens_out,
        )

    def _check_reward_reserve(self, state: SaleState, reward_out: int) -> None:
        """Reward платится только из баланса сверх резерва непроданного supply."""
        available = self.available_for_reward(state)
        if reward_out > available:
            raise OperationRejected(
                "reward_reserve_insufficient",
                f"reward_out={reward_out} exceeds available reward reserve {max(available, 0)}",
            )

    def available_for_reward(self, state: SaleState) -> int:
        """Баланс ресурса сверх непроданного supply (может быть отрицательным)."""
        balance = self._ledger.balance_of(state.sale_token, state.sale_account)
        return balance - state.remaining_supply

    # -------------------------------------------------------------------------
    # EXECUTE
    # -------------------------------------------------------------------------

    def execute(self, state: SaleState, request: PurchaseRequest) -> PurchaseResult:
        """Исполнение покупки (всё или ничего).

        Raises:
            OperationRejected, ArithmeticFailure: из quote(), до любых переводов
            ExternalTransferFailure: отказ любого перевода (всё откатывается)
        """
        quote = self.quote(state, request)
        rails = state.rails
        tokens_sold_before = state.tokens_sold

        with self._ledger.transaction():
            try:
                # Приём платежа на счёт продажи
                self._ledger.transfer(NATIVE_ASSET, quote.payer, state.sale_account, quote.payment)

                # 3. Доли бенефициарам
                self._ledger.transfer(
                    NATIVE_ASSET, state.sale_account, rails.fund_treasury, quote.fund_cut
                )
                self._ledger.transfer(
                    NATIVE_ASSET, state.sale_account, rails.share_treasury, quote.share_cut
                )
                if quote.referral_cut > 0:
                    self._ledger.transfer(
                        NATIVE_ASSET, state.sale_account, quote.referrer, quote.referral_cut
                    )

                # 7. Ledger продажи
                state.record_sale(quote.tokens_out)

                # 8. Выдача ресурса
                self._ledger.transfer(
                    state.sale_token, state.sale_account, quote.payer, quote.total_out
                )

                # 9. Refund
                if quote.refund > 0:
                    self._ledger.transfer(
                        NATIVE_ASSET, state.sale_account, quote.payer, quote.refund
                    )
            except BaseException:
                state.tokens_sold = tokens_sold_before
                raise

        # 10. Аудит
        self._events.emit(
            PurchaseCompleted(
                buyer=quote.payer,
                exact_cost=quote.exact_cost,
                tokens_out=quote.tokens_out,
                reward_out=quote.reward_out,
                new_tokens_sold=quote.new_tokens_sold,
                fund_cut=quote.fund_cut,
                share_cut=quote.share_cut,
                referral_cut=quote.referral_cut,
                referrer=quote.referrer,
                refund=quote.refund,
            )
        )

        log.info(
            "purchase: buyer=%s cost=%d tokens_out=%d reward_out=%d refund=%d tokens_sold=%d",
            quote.payer,
            quote.exact_cost,
            quote.tokens_out,
            quote.reward_out,
            quote.refund,
            quote.new_tokens_sold,
        )

        return PurchaseResult(
            tokens_out=quote.tokens_out,
            reward_out=quote.reward_out,
            exact_cost=quote.exact_cost,
            refund_amount=quote.refund,
            new_tokens_sold=quote.new_tokens_sold,
        )
