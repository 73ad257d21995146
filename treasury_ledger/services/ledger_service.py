"""
Ledger service — the core of the treasury back office.

This service enforces the fundamental rules:
1. Every posting must balance (debits = credits)
2. Entries are immutable (append-only)
3. Accounts must exist and be active
4. Running balances move only together with the entries behind them

No other service writes to the ledger directly.
All financial operations go through this service.
"""

import logging

from sqlalchemy import select, func, update, delete
from sqlalchemy.orm import Session

from treasury_ledger.chart import CHART_OF_ACCOUNTS
from treasury_ledger.config import get_settings
from treasury_ledger.errors import (
    InsufficientFunds,
    InvalidAmount,
    LedgerError,
    NotFound,
)
from treasury_ledger.models.ledger_account import LedgerAccount
from treasury_ledger.models.ledger_entry import LedgerEntry
from treasury_ledger.models.enums import AccountType, EntryType, PostingKind
from treasury_ledger.schemas.ledger import PostingLeg, PostingRequest

logger = logging.getLogger(__name__)


class LedgerService:
    """
    All ledger operations pass through this service.

    The service takes a database session as a constructor
    argument. This means the caller controls the transaction
    boundary — they decide when to commit or rollback.
    """

    def __init__(self, db: Session):
        self.db = db

    def ensure_chart(self) -> list[LedgerAccount]:
        """
        Get or create every account in the chart of accounts.

        Safe to call on every request; only missing accounts
        are inserted.
        """
        existing = {
            account.id: account
            for account in self.db.execute(select(LedgerAccount)).scalars()
        }
        created = False
        for definition in CHART_OF_ACCOUNTS:
            if definition.id in existing:
                continue
            account = LedgerAccount(
                id=definition.id,
                name=definition.name,
                account_type=definition.account_type,
                institution=definition.institution,
                is_external=definition.is_external,
                balance_cents=0,
            )
            self.db.add(account)
            existing[definition.id] = account
            created = True

        if created:
            self.db.flush()
        return [existing[d.id] for d in CHART_OF_ACCOUNTS]

    def get_account(self, account_id: str) -> LedgerAccount:
        account = self.db.get(LedgerAccount, account_id)
        if not account:
            raise NotFound(f"Account {account_id} not found")
        return account

    def post_entries(self, request: PostingRequest) -> list[LedgerEntry]:
        """
        Post a balanced set of entries as a single posting.

        This is the most critical method in the entire system.
        It enforces:
        - All referenced accounts exist and are active
        - Total debits equal total credits
        - Asset accounts stay non-negative when overdrafts are off

        If any check fails, nothing is written. The caller
        is responsible for calling db.commit() after this
        method returns successfully.
        """
        # --- Validate all accounts ---
        account_ids = {leg.account_id for leg in request.legs}
        accounts = self.db.execute(
            select(LedgerAccount)
            .where(LedgerAccount.id.in_(account_ids))
            .with_for_update()
        ).scalars().all()

        accounts_by_id = {a.id: a for a in accounts}

        missing = account_ids - set(accounts_by_id.keys())
        if missing:
            raise NotFound(f"Accounts not found: {sorted(missing)}")

        for account in accounts_by_id.values():
            if not account.is_active:
                raise LedgerError(f"Account {account.id} is not active")

        # --- Enforce balance rule ---
        total_debits = sum(
            leg.amount_cents for leg in request.legs
            if leg.entry_type == EntryType.DEBIT
        )
        total_credits = sum(
            leg.amount_cents for leg in request.legs
            if leg.entry_type == EntryType.CREDIT
        )

        if total_debits != total_credits:
            raise InvalidAmount(
                f"Posting does not balance: "
                f"debits={total_debits}, credits={total_credits}"
            )

        # --- Net movement per account ---
        deltas: dict[str, int] = {}
        for leg in request.legs:
            account = accounts_by_id[leg.account_id]
            deltas[leg.account_id] = deltas.get(leg.account_id, 0) + (
                account.balance_delta(leg.entry_type, leg.amount_cents)
            )

        if not get_settings().LEDGER_ALLOW_OVERDRAFT:
            for account_id, delta in deltas.items():
                account = accounts_by_id[account_id]
                if (
                    account.account_type == AccountType.ASSET
                    and account.balance_cents + delta < 0
                ):
                    raise InsufficientFunds(
                        f"Insufficient balance in {account.id}: "
                        f"available={account.balance_cents}, "
                        f"requested={-delta}"
                    )

        # --- Create entries ---
        ledger_entries = []
        for leg in request.legs:
            signed = (
                leg.amount_cents if leg.entry_type == EntryType.DEBIT
                else -leg.amount_cents
            )
            entry = LedgerEntry(
                posting_id=request.posting_id,
                account_id=leg.account_id,
                entry_type=leg.entry_type,
                amount_cents=signed,
                kind=request.kind,
                description=request.description,
                note=request.note,
                client_name=request.client_name,
                category=request.category,
                vendor=request.vendor,
                receipt_ref=request.receipt_ref,
                transfer_id=request.transfer_id,
            )
            self.db.add(entry)
            ledger_entries.append(entry)

        # --- Move running balances ---
        # Incremented in SQL so concurrent postings never lose an update.
        for account_id, delta in deltas.items():
            if delta:
                self.db.execute(
                    update(LedgerAccount)
                    .where(LedgerAccount.id == account_id)
                    .values(balance_cents=LedgerAccount.balance_cents + delta)
                )

        self.db.flush()
        logger.info(
            "Posted %s %s: %s cents across %s",
            request.kind.value, request.posting_id, total_debits,
            ", ".join(sorted(account_ids)),
        )
        return ledger_entries

    def post_pair(
        self,
        kind: PostingKind,
        debit_account: str,
        credit_account: str,
        amount_cents: int,
        description: str,
        **tags,
    ) -> list[LedgerEntry]:
        """Post the common two-leg case: one debit, one credit."""
        if not isinstance(amount_cents, int) or amount_cents <= 0:
            raise InvalidAmount("amount must be a positive number of cents")

        return self.post_entries(PostingRequest(
            kind=kind,
            description=description[:255],
            legs=[
                PostingLeg(
                    account_id=debit_account,
                    entry_type=EntryType.DEBIT,
                    amount_cents=amount_cents,
                ),
                PostingLeg(
                    account_id=credit_account,
                    entry_type=EntryType.CREDIT,
                    amount_cents=amount_cents,
                ),
            ],
            **tags,
        ))

    def get_account_balance(self, account_id: str) -> int:
        """Running balance of an account, on its normal side."""
        return self.get_account(account_id).balance_cents

    def compute_balance_from_entries(self, account_id: str) -> int:
        """
        Recalculate an account's balance from its entries.

        Must always equal the running balance; used to audit it.
        For ASSET and EXPENSE accounts: balance = debits - credits
        For LIABILITY, EQUITY, and REVENUE: balance = credits - debits
        """
        account = self.get_account(account_id)

        net = self.db.execute(
            select(func.coalesce(func.sum(LedgerEntry.amount_cents), 0))
            .where(LedgerEntry.account_id == account_id)
        ).scalar()

        return int(net) if account.is_debit_normal else -int(net)

    def total_of_entries(self) -> int:
        """Sum of every signed entry in the ledger. Always zero."""
        return int(self.db.execute(
            select(func.coalesce(func.sum(LedgerEntry.amount_cents), 0))
        ).scalar())

    def get_entries(self, limit: int = 100) -> list[LedgerEntry]:
        """Most recent entries, newest first."""
        entries = self.db.execute(
            select(LedgerEntry)
            .order_by(LedgerEntry.created_at.desc(), LedgerEntry.id)
            .limit(limit)
        ).scalars().all()
        return list(entries)

    def get_entries_by_posting(self, posting_id: str) -> list[LedgerEntry]:
        """Return all legs of a posting."""
        entries = self.db.execute(
            select(LedgerEntry)
            .where(LedgerEntry.posting_id == posting_id)
        ).scalars().all()
        return list(entries)

    def get_entries_by_transfer(
        self, transfer_id: str, kind: PostingKind | None = None
    ) -> list[LedgerEntry]:
        """Return the legs posted for a transfer, optionally of one kind."""
        query = select(LedgerEntry).where(LedgerEntry.transfer_id == transfer_id)
        if kind is not None:
            query = query.where(LedgerEntry.kind == kind)
        return list(self.db.execute(query).scalars().all())

    def reset(self) -> None:
        """
        Wipe every entry and zero every balance.

        Development and test only; the caller checks the environment.
        """
        deleted = self.db.execute(delete(LedgerEntry)).rowcount
        self.db.execute(update(LedgerAccount).values(balance_cents=0))
        self.db.flush()
        self.db.expire_all()
        logger.warning("Ledger reset: %s entries removed", deleted)
