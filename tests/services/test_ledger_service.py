"""
Tests for the LedgerService.

Tests cover:
- Chart of accounts seeding
- Balanced posting and running balances
- Unbalanced and invalid posting rejection
- Overdraft policy
- Entry immutability
- Reset
"""

import pytest
from sqlalchemy import select

from treasury_ledger.chart import (
    BANK_FULTON,
    CASH_ON_HAND,
    CHART_OF_ACCOUNTS,
    OWNER_EQUITY,
    REVENUE,
)
from treasury_ledger.errors import (
    InsufficientFunds,
    InvalidAmount,
    LedgerError,
    NotFound,
)
from treasury_ledger.models.enums import AccountType, EntryType, PostingKind
from treasury_ledger.models.ledger_account import LedgerAccount
from treasury_ledger.models.ledger_entry import LedgerEntry
from treasury_ledger.schemas.ledger import PostingLeg, PostingRequest
from treasury_ledger.services.ledger_service import LedgerService


def make_service(db_session):
    service = LedgerService(db_session)
    service.ensure_chart()
    db_session.commit()
    return service


# --- Chart Tests ---

class TestEnsureChart:

    def test_creates_every_account(self, db_session):
        accounts = LedgerService(db_session).ensure_chart()

        assert [a.id for a in accounts] == [d.id for d in CHART_OF_ACCOUNTS]
        assert all(a.balance_cents == 0 for a in accounts)

    def test_is_idempotent(self, db_session):
        service = LedgerService(db_session)
        service.ensure_chart()
        service.ensure_chart()
        db_session.commit()

        count = len(db_session.execute(select(LedgerAccount)).scalars().all())
        assert count == len(CHART_OF_ACCOUNTS)

    def test_kraken_is_external(self, db_session):
        service = make_service(db_session)
        assert service.get_account("KRAKEN").is_external is True
        assert service.get_account(CASH_ON_HAND).is_external is False

    def test_unknown_account_not_found(self, db_session):
        service = make_service(db_session)
        with pytest.raises(NotFound):
            service.get_account("NOPE")


# --- Posting Tests ---

class TestPostEntries:

    def test_pair_moves_both_balances(self, db_session):
        service = make_service(db_session)
        service.post_pair(
            PostingKind.CASH_INCOME, CASH_ON_HAND, REVENUE, 50000, "Cash income"
        )
        db_session.commit()

        assert service.get_account_balance(CASH_ON_HAND) == 50000
        assert service.get_account_balance(REVENUE) == 50000

    def test_entries_are_signed(self, db_session):
        service = make_service(db_session)
        entries = service.post_pair(
            PostingKind.CASH_INCOME, CASH_ON_HAND, REVENUE, 1234, "Cash income"
        )

        by_type = {e.entry_type: e for e in entries}
        assert by_type[EntryType.DEBIT].amount_cents == 1234
        assert by_type[EntryType.CREDIT].amount_cents == -1234
        assert entries[0].posting_id == entries[1].posting_id

    def test_ledger_sums_to_zero(self, db_session):
        service = make_service(db_session)
        service.post_pair(
            PostingKind.CAPITAL_CONTRIBUTION, CASH_ON_HAND, OWNER_EQUITY,
            10000, "Contribution",
        )
        service.post_pair(
            PostingKind.BANK_DEPOSIT, BANK_FULTON, CASH_ON_HAND, 7500, "Deposit"
        )
        db_session.commit()

        assert service.total_of_entries() == 0

    def test_running_balance_matches_entries(self, db_session):
        service = make_service(db_session)
        service.post_pair(
            PostingKind.CAPITAL_CONTRIBUTION, CASH_ON_HAND, OWNER_EQUITY,
            10000, "Contribution",
        )
        service.post_pair(
            PostingKind.OWNER_DRAW, OWNER_EQUITY, CASH_ON_HAND, 2500, "Draw"
        )
        db_session.commit()

        for account_id in (CASH_ON_HAND, OWNER_EQUITY):
            assert (
                service.get_account_balance(account_id)
                == service.compute_balance_from_entries(account_id)
            )
        assert service.get_account_balance(OWNER_EQUITY) == 7500

    def test_multi_leg_posting(self, db_session):
        service = make_service(db_session)
        service.post_entries(PostingRequest(
            kind=PostingKind.CASH_INCOME,
            description="Split receipt",
            legs=[
                PostingLeg(account_id=CASH_ON_HAND, entry_type=EntryType.DEBIT, amount_cents=300),
                PostingLeg(account_id=BANK_FULTON, entry_type=EntryType.DEBIT, amount_cents=700),
                PostingLeg(account_id=REVENUE, entry_type=EntryType.CREDIT, amount_cents=1000),
            ],
        ))
        db_session.commit()

        assert service.get_account_balance(REVENUE) == 1000
        assert service.total_of_entries() == 0

    def test_posting_legs_retrievable(self, db_session):
        service = make_service(db_session)
        entries = service.post_pair(
            PostingKind.BANK_DEPOSIT, BANK_FULTON, CASH_ON_HAND, 2500, "Deposit"
        )
        db_session.commit()

        legs = service.get_entries_by_posting(entries[0].posting_id)
        assert {leg.account_id for leg in legs} == {BANK_FULTON, CASH_ON_HAND}
        assert sum(leg.amount_cents for leg in legs) == 0

    def test_unbalanced_posting_rejected(self, db_session):
        service = make_service(db_session)
        with pytest.raises(InvalidAmount, match="does not balance"):
            service.post_entries(PostingRequest(
                kind=PostingKind.CASH_INCOME,
                description="Broken",
                legs=[
                    PostingLeg(account_id=CASH_ON_HAND, entry_type=EntryType.DEBIT, amount_cents=500),
                    PostingLeg(account_id=REVENUE, entry_type=EntryType.CREDIT, amount_cents=400),
                ],
            ))

        assert service.get_entries() == []

    def test_debit_only_posting_rejected(self):
        with pytest.raises(ValueError, match="at least one debit and one credit"):
            PostingRequest(
                kind=PostingKind.CASH_INCOME,
                description="One sided",
                legs=[
                    PostingLeg(account_id=CASH_ON_HAND, entry_type=EntryType.DEBIT, amount_cents=500),
                    PostingLeg(account_id=BANK_FULTON, entry_type=EntryType.DEBIT, amount_cents=500),
                ],
            )

    @pytest.mark.parametrize("amount", [0, -100])
    def test_non_positive_amount_rejected(self, db_session, amount):
        service = make_service(db_session)
        with pytest.raises(InvalidAmount):
            service.post_pair(
                PostingKind.CASH_INCOME, CASH_ON_HAND, REVENUE, amount, "Bad"
            )
        assert service.get_entries() == []

    def test_unknown_account_rejected(self, db_session):
        service = make_service(db_session)
        with pytest.raises(NotFound, match="MISSING"):
            service.post_pair(
                PostingKind.CASH_INCOME, "MISSING", REVENUE, 100, "Bad"
            )

    def test_inactive_account_rejected(self, db_session):
        service = make_service(db_session)
        service.get_account(BANK_FULTON).is_active = False
        db_session.commit()

        with pytest.raises(LedgerError, match="not active"):
            service.post_pair(
                PostingKind.BANK_DEPOSIT, BANK_FULTON, CASH_ON_HAND, 100, "Deposit"
            )


# --- Overdraft Policy ---

class TestOverdraft:

    def test_overdraft_allowed_by_default(self, db_session):
        service = make_service(db_session)
        service.post_pair(
            PostingKind.OWNER_DRAW, OWNER_EQUITY, CASH_ON_HAND, 5000, "Draw"
        )
        db_session.commit()

        assert service.get_account_balance(CASH_ON_HAND) == -5000

    def test_overdraft_rejected_when_disabled(self, db_session, settings, monkeypatch):
        monkeypatch.setattr(settings, "LEDGER_ALLOW_OVERDRAFT", False)
        service = make_service(db_session)

        with pytest.raises(InsufficientFunds, match=CASH_ON_HAND):
            service.post_pair(
                PostingKind.OWNER_DRAW, OWNER_EQUITY, CASH_ON_HAND, 5000, "Draw"
            )
        assert service.get_account_balance(CASH_ON_HAND) == 0

    def test_non_asset_may_go_negative_when_disabled(
        self, db_session, settings, monkeypatch
    ):
        monkeypatch.setattr(settings, "LEDGER_ALLOW_OVERDRAFT", False)
        service = make_service(db_session)
        service.post_pair(
            PostingKind.OWNER_DRAW, OWNER_EQUITY, REVENUE, 1000, "Reclass"
        )

        assert service.get_account_balance(OWNER_EQUITY) == -1000
        assert service.get_account(OWNER_EQUITY).account_type == AccountType.EQUITY


# --- Immutability and Reset ---

class TestImmutability:

    def test_entry_update_rejected(self, db_session):
        service = make_service(db_session)
        entry = service.post_pair(
            PostingKind.CASH_INCOME, CASH_ON_HAND, REVENUE, 100, "Cash income"
        )[0]
        db_session.commit()

        entry.description = "Rewritten"
        with pytest.raises(ValueError, match="immutable"):
            db_session.flush()


class TestReset:

    def test_reset_clears_entries_and_balances(self, db_session):
        service = make_service(db_session)
        service.post_pair(
            PostingKind.CASH_INCOME, CASH_ON_HAND, REVENUE, 100, "Cash income"
        )
        db_session.commit()

        service.reset()
        db_session.commit()

        assert db_session.execute(select(LedgerEntry)).scalars().all() == []
        assert service.get_account_balance(CASH_ON_HAND) == 0
        assert service.get_account_balance(REVENUE) == 0
