"""
Bookkeeping service — one operation per real-world business event.

Each operation posts exactly one balanced pair through LedgerService:

    cash income            DEBIT cash on hand    CREDIT revenue
    owner draw             DEBIT owner equity    CREDIT cash on hand
    capital contribution   DEBIT cash on hand    CREDIT owner equity
    deposit cash to bank   DEBIT bank            CREDIT cash on hand
    ACH / wire to Kraken   DEBIT Kraken pending  CREDIT bank
    expense                DEBIT expense:<cat>   CREDIT cash or bank
    complete transfer      DEBIT Kraken          CREDIT Kraken pending

POST /ledger actions are dispatched through a closed table keyed by
LedgerAction; every member must have a handler.
"""

import logging
from typing import Callable

from sqlalchemy import select, func, delete
from sqlalchemy.orm import Session

from treasury_ledger.chart import (
    BANK_FULTON,
    CASH_ON_HAND,
    EXPENSE_CATEGORIES,
    KRAKEN,
    KRAKEN_PENDING,
    OWNER_EQUITY,
    REVENUE,
    expense_account_id,
)
from treasury_ledger.config import get_settings
from treasury_ledger.errors import (
    Forbidden,
    InvalidCategory,
    InvalidOperation,
)
from treasury_ledger.models.audit_log import AuditLog
from treasury_ledger.models.enums import (
    AccountType,
    ExpenseCategory,
    LedgerAction,
    PaidFrom,
    PostingKind,
    TransferMethod,
)
from treasury_ledger.models.base import new_id
from treasury_ledger.models.ledger_entry import LedgerEntry
from treasury_ledger.models.transfer import Transfer
from treasury_ledger.money import usd_to_cents
from treasury_ledger.schemas.ledger import (
    AccountBalance,
    CashPosition,
    ExpenseBreakdown,
    ExpenseCategoryResponse,
    LedgerActionRequest,
    LedgerActionResult,
    LedgerEntryResponse,
    LedgerSummary,
    LedgerTotals,
)
from treasury_ledger.schemas.transfer import TransferResponse
from treasury_ledger.services.ledger_service import LedgerService
from treasury_ledger.services.tax_estimate import estimate_taxes
from treasury_ledger.services.transfer_service import TransferService

logger = logging.getLogger(__name__)

# camelCase operation names accepted alongside the action values
ACTION_ALIASES: dict[str, LedgerAction] = {
    "recordCashIncome": LedgerAction.CASH_INCOME,
    "recordOwnerDraw": LedgerAction.OWNER_DRAW,
    "recordCapitalContribution": LedgerAction.CAPITAL_CONTRIBUTION,
    "depositCashToBank": LedgerAction.DEPOSIT_TO_BANK,
    "achToKraken": LedgerAction.ACH_TO_KRAKEN,
    "wireToKraken": LedgerAction.WIRE_TO_KRAKEN,
    "recordExpense": LedgerAction.EXPENSE,
    "completeTransfer": LedgerAction.COMPLETE_TRANSFER,
    "resetLedger": LedgerAction.RESET,
}

# Actions that do not move money and take no amount
AMOUNTLESS_ACTIONS = frozenset({LedgerAction.COMPLETE_TRANSFER, LedgerAction.RESET})


def parse_action(value) -> LedgerAction:
    if not value:
        raise InvalidOperation("action is required")
    if value in ACTION_ALIASES:
        return ACTION_ALIASES[value]
    try:
        return LedgerAction(value)
    except ValueError:
        raise InvalidOperation(f"Unknown action: {value}")


def parse_category(value) -> ExpenseCategory:
    if not value:
        raise InvalidCategory("category is required for expense")
    try:
        return ExpenseCategory(str(value).strip().lower())
    except ValueError:
        raise InvalidCategory(
            f"Unknown expense category: {value}. Must be one of: "
            + ", ".join(c.value for c in ExpenseCategory)
        )


def _describe(base: str, note: str | None, sep: str = ": ") -> str:
    return f"{base}{sep}{note}" if note else base


class BookkeepingService:

    def __init__(self, db: Session):
        self.db = db
        self.ledger_service = LedgerService(db)
        self.transfer_service = TransferService(db)
        self._handlers: dict[
            LedgerAction, Callable[[LedgerActionRequest, int, str | None], LedgerActionResult]
        ] = {
            LedgerAction.CASH_INCOME: self._handle_cash_income,
            LedgerAction.OWNER_DRAW: self._handle_owner_draw,
            LedgerAction.CAPITAL_CONTRIBUTION: self._handle_capital_contribution,
            LedgerAction.DEPOSIT_TO_BANK: self._handle_deposit_to_bank,
            LedgerAction.ACH_TO_KRAKEN: self._handle_ach_to_kraken,
            LedgerAction.WIRE_TO_KRAKEN: self._handle_wire_to_kraken,
            LedgerAction.EXPENSE: self._handle_expense,
            LedgerAction.COMPLETE_TRANSFER: self._handle_complete_transfer,
            LedgerAction.RESET: self._handle_reset,
        }
        unhandled = set(LedgerAction) - set(self._handlers)
        if unhandled:
            raise RuntimeError(
                f"No handler for ledger actions: {sorted(a.value for a in unhandled)}"
            )

    # --- Business operations ---

    def record_cash_income(
        self,
        amount_cents: int,
        client_name: str | None = None,
        note: str | None = None,
    ) -> list[LedgerEntry]:
        """Client paid in cash."""
        self.ledger_service.ensure_chart()
        description = "Cash income"
        if client_name:
            description += f" from {client_name}"
        return self.ledger_service.post_pair(
            PostingKind.CASH_INCOME,
            CASH_ON_HAND,
            REVENUE,
            amount_cents,
            _describe(description, note, sep=" - "),
            client_name=client_name,
            note=note,
        )

    def record_owner_draw(
        self, amount_cents: int, note: str | None = None
    ) -> list[LedgerEntry]:
        """Owner pays themself out of business cash."""
        self.ledger_service.ensure_chart()
        return self.ledger_service.post_pair(
            PostingKind.OWNER_DRAW,
            OWNER_EQUITY,
            CASH_ON_HAND,
            amount_cents,
            _describe("Owner draw", note),
            note=note,
        )

    def record_capital_contribution(
        self, amount_cents: int, note: str | None = None
    ) -> list[LedgerEntry]:
        """Owner adds personal funds to the business."""
        self.ledger_service.ensure_chart()
        return self.ledger_service.post_pair(
            PostingKind.CAPITAL_CONTRIBUTION,
            CASH_ON_HAND,
            OWNER_EQUITY,
            amount_cents,
            _describe("Capital contribution", note),
            note=note,
        )

    def deposit_cash_to_bank(
        self, amount_cents: int, note: str | None = None
    ) -> list[LedgerEntry]:
        self.ledger_service.ensure_chart()
        return self.ledger_service.post_pair(
            PostingKind.BANK_DEPOSIT,
            BANK_FULTON,
            CASH_ON_HAND,
            amount_cents,
            _describe("Cash deposit to Fulton", note),
            note=note,
        )

    def send_to_kraken(
        self,
        method: TransferMethod,
        amount_cents: int,
        note: str | None = None,
        actor: str | None = None,
    ) -> tuple[list[LedgerEntry], Transfer]:
        """
        Move money from the bank toward the exchange.

        The amount sits in KRAKEN_PENDING under a PLANNED transfer
        until complete_transfer settles it or the transfer is canceled.
        """
        self.ledger_service.ensure_chart()
        posting_id = new_id()
        transfer = self.transfer_service.open_ledger_transfer(
            method=method,
            amount_cents=amount_cents,
            pending_posting_id=posting_id,
            notes=note,
            created_by=actor,
        )
        label = "ACH" if method == TransferMethod.ACH else "Wire"
        entries = self.ledger_service.post_pair(
            PostingKind.TRANSFER_OUT,
            KRAKEN_PENDING,
            BANK_FULTON,
            amount_cents,
            _describe(f"{label} to Kraken", note),
            posting_id=posting_id,
            transfer_id=transfer.id,
            note=note,
        )
        return entries, transfer

    def ach_to_kraken(self, amount_cents: int, note: str | None = None, actor=None):
        return self.send_to_kraken(TransferMethod.ACH, amount_cents, note, actor)

    def wire_to_kraken(self, amount_cents: int, note: str | None = None, actor=None):
        return self.send_to_kraken(TransferMethod.WIRE, amount_cents, note, actor)

    def record_expense(
        self,
        amount_cents: int,
        category: str,
        description: str | None = None,
        paid_from: str | None = None,
        vendor: str | None = None,
        receipt_ref: str | None = None,
    ) -> list[LedgerEntry]:
        """Business expense paid from cash (default) or the bank."""
        expense_category = parse_category(category)
        try:
            source = PaidFrom((paid_from or PaidFrom.CASH.value).lower())
        except ValueError:
            raise InvalidOperation("paidFrom must be one of: cash, bank")

        self.ledger_service.ensure_chart()
        info = EXPENSE_CATEGORIES[expense_category]
        description = description or "Business expense"
        text = f"Expense: {info.name} - {description}"
        if vendor:
            text += f" ({vendor})"

        return self.ledger_service.post_pair(
            PostingKind.EXPENSE,
            expense_account_id(expense_category),
            BANK_FULTON if source == PaidFrom.BANK else CASH_ON_HAND,
            amount_cents,
            text,
            note=description,
            category=expense_category.value,
            vendor=vendor,
            receipt_ref=receipt_ref,
        )

    def complete_transfer(
        self,
        transfer_id: str,
        reference: str | None = None,
        actor: str | None = None,
    ) -> tuple[list[LedgerEntry], Transfer]:
        """Settle a pending Kraken transfer; returns the settlement legs."""
        self.ledger_service.ensure_chart()
        transfer = self.transfer_service.complete(
            transfer_id, reference=reference, actor=actor
        )
        entries = self.ledger_service.get_entries_by_transfer(
            transfer.id, kind=PostingKind.TRANSFER_SETTLEMENT
        )
        return entries, transfer

    def reset_ledger(self, actor: str | None = None) -> None:
        """
        Wipe the ledger back to the empty chart.

        Only allowed in development and test environments. Transfers
        the ledger created go too, since their pending amounts vanish
        with the entries.
        """
        environment = get_settings().ENVIRONMENT
        if environment not in get_settings().RESETTABLE_ENVIRONMENTS:
            raise Forbidden("Reset only available in development")

        self.ledger_service.ensure_chart()
        self.ledger_service.reset()
        self.db.execute(
            delete(Transfer).where(Transfer.pending_posting_id.is_not(None))
        )
        self.db.add(AuditLog.record("LEDGER_RESET", actor=actor))
        self.db.flush()
        self.db.expire_all()

    # --- Read model ---

    def get_ledger_summary(self) -> LedgerSummary:
        """Balances, recent entries and the dashboard figures."""
        settings = get_settings()
        accounts = self.ledger_service.ensure_chart()
        balances = {account.id: account.balance_cents for account in accounts}

        revenue = sum(
            a.balance_cents for a in accounts if a.account_type == AccountType.REVENUE
        )
        expenses = sum(
            a.balance_cents for a in accounts if a.account_type == AccountType.EXPENSE
        )
        pending = self.transfer_service.get_pending_ledger_transfers()

        cash_position = CashPosition(
            bank_cents=balances[BANK_FULTON],
            cash_on_hand_cents=balances[CASH_ON_HAND],
            kraken_cents=balances[KRAKEN],
            kraken_pending_cents=balances[KRAKEN_PENDING],
            total_liquid_cents=balances[BANK_FULTON] + balances[CASH_ON_HAND],
            total_all_cents=(
                balances[BANK_FULTON] + balances[CASH_ON_HAND]
                + balances[KRAKEN] + balances[KRAKEN_PENDING]
            ),
            pending_out_cents=sum(t.amount_cents for t in pending),
        )

        return LedgerSummary(
            accounts=[AccountBalance.model_validate(a) for a in accounts],
            recent_entries=[
                LedgerEntryResponse.model_validate(e)
                for e in self.ledger_service.get_entries(
                    limit=settings.LEDGER_RECENT_ENTRIES
                )
            ],
            cash_position=cash_position,
            pending_transfers=[TransferResponse.model_validate(t) for t in pending],
            totals=LedgerTotals(
                revenue_cents=revenue,
                expenses_cents=expenses,
                net_income_cents=revenue - expenses,
                owner_equity_cents=balances[OWNER_EQUITY],
            ),
            expenses_by_category=self._expenses_by_category(balances),
            tax_estimate=estimate_taxes(revenue, expenses),
            expense_categories=[
                ExpenseCategoryResponse(
                    id=category.value,
                    name=info.name,
                    schedule_c=info.schedule_c,
                    description=info.description,
                )
                for category, info in EXPENSE_CATEGORIES.items()
            ],
        )

    def _expenses_by_category(self, balances: dict[str, int]) -> list[ExpenseBreakdown]:
        counts = dict(self.db.execute(
            select(LedgerEntry.category, func.count(LedgerEntry.id))
            .where(LedgerEntry.kind == PostingKind.EXPENSE)
            .where(LedgerEntry.amount_cents > 0)
            .group_by(LedgerEntry.category)
        ).all())

        breakdown = []
        for category, info in EXPENSE_CATEGORIES.items():
            total = balances[expense_account_id(category)]
            if total <= 0:
                continue
            breakdown.append(ExpenseBreakdown(
                id=category.value,
                name=info.name,
                schedule_c=info.schedule_c,
                total_cents=total,
                item_count=counts.get(category.value, 0),
            ))
        return breakdown

    # --- POST /ledger dispatch ---

    def perform(
        self, request: LedgerActionRequest, actor: str | None = None
    ) -> LedgerActionResult:
        """
        Run one POST /ledger action.

        The amount is converted to cents here, once, before any
        handler sees it.
        """
        action = parse_action(request.action)
        amount_cents = 0
        if action not in AMOUNTLESS_ACTIONS:
            amount_cents = usd_to_cents(request.amount_usd)

        result = self._handlers[action](request, amount_cents, actor)
        logger.info("Ledger action %s by %s", action.value, actor)
        return result

    @staticmethod
    def _entries_result(entries, transfer=None) -> LedgerActionResult:
        return LedgerActionResult(
            entries=[LedgerEntryResponse.model_validate(e) for e in entries],
            transfer=TransferResponse.model_validate(transfer) if transfer else None,
        )

    def _handle_cash_income(self, request, amount_cents, actor):
        return self._entries_result(self.record_cash_income(
            amount_cents, request.client_name, request.note
        ))

    def _handle_owner_draw(self, request, amount_cents, actor):
        return self._entries_result(self.record_owner_draw(amount_cents, request.note))

    def _handle_capital_contribution(self, request, amount_cents, actor):
        return self._entries_result(
            self.record_capital_contribution(amount_cents, request.note)
        )

    def _handle_deposit_to_bank(self, request, amount_cents, actor):
        return self._entries_result(self.deposit_cash_to_bank(amount_cents, request.note))

    def _handle_ach_to_kraken(self, request, amount_cents, actor):
        return self._entries_result(
            *self.ach_to_kraken(amount_cents, request.note, actor)
        )

    def _handle_wire_to_kraken(self, request, amount_cents, actor):
        return self._entries_result(
            *self.wire_to_kraken(amount_cents, request.note, actor)
        )

    def _handle_expense(self, request, amount_cents, actor):
        return self._entries_result(self.record_expense(
            amount_cents,
            request.category,
            description=request.note,
            paid_from=request.paid_from,
            vendor=request.vendor,
            receipt_ref=request.receipt_ref,
        ))

    def _handle_complete_transfer(self, request, amount_cents, actor):
        if not request.transfer_id:
            raise InvalidOperation("transferId is required for complete_transfer")
        return self._entries_result(*self.complete_transfer(
            request.transfer_id, reference=request.reference, actor=actor
        ))

    def _handle_reset(self, request, amount_cents, actor):
        self.reset_ledger(actor=actor)
        return LedgerActionResult(message="Ledger reset to initial state")
