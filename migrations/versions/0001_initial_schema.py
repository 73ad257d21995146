"""initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-17
"""

from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

ACCOUNT_TYPES = ("ASSET", "LIABILITY", "EQUITY", "REVENUE", "EXPENSE")
ENTRY_TYPES = ("DEBIT", "CREDIT")
POSTING_KINDS = (
    "CASH_INCOME", "OWNER_DRAW", "CAPITAL_CONTRIBUTION", "BANK_DEPOSIT",
    "TRANSFER_OUT", "TRANSFER_SETTLEMENT", "TRANSFER_REVERSAL", "EXPENSE",
)
TRANSFER_SOURCES = ("FULTON_BANK", "STRIPE_BALANCE", "CASH_ON_HAND")
TRANSFER_DESTINATIONS = ("KRAKEN", "COINBASE", "OTHER")
TRANSFER_METHODS = ("ACH", "WIRE")
TRANSFER_STATUSES = ("PLANNED", "SUBMITTED", "CONFIRMED", "CANCELED")
RECEIPT_METHODS = ("STRIPE", "CASH", "ACH", "WIRE", "CHECK", "OTHER")
RECEIPT_STATUSES = ("PENDING", "RECEIVED", "FAILED", "REFUNDED")


def upgrade() -> None:
    op.create_table(
        "ledger_accounts",
        sa.Column("id", sa.String(40), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column(
            "account_type",
            sa.Enum(*ACCOUNT_TYPES, name="account_type_enum"),
            nullable=False,
        ),
        sa.Column("institution", sa.String(100), nullable=False),
        sa.Column("is_external", sa.Boolean(), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column("balance_cents", sa.BigInteger(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "ledger_entries",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("posting_id", sa.String(36), nullable=False),
        sa.Column(
            "account_id",
            sa.String(40),
            sa.ForeignKey("ledger_accounts.id"),
            nullable=False,
        ),
        sa.Column(
            "entry_type",
            sa.Enum(*ENTRY_TYPES, name="entry_type_enum"),
            nullable=False,
        ),
        sa.Column("amount_cents", sa.BigInteger(), nullable=False),
        sa.Column(
            "kind",
            sa.Enum(*POSTING_KINDS, name="posting_kind_enum"),
            nullable=False,
        ),
        sa.Column("description", sa.String(255), nullable=False),
        sa.Column("note", sa.String(500), nullable=True),
        sa.Column("client_name", sa.String(200), nullable=True),
        sa.Column("category", sa.String(40), nullable=True),
        sa.Column("vendor", sa.String(200), nullable=True),
        sa.Column("receipt_ref", sa.String(200), nullable=True),
        sa.Column("transfer_id", sa.String(36), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_ledger_entries_posting_id", "ledger_entries", ["posting_id"])
    op.create_index("ix_ledger_entries_account_id", "ledger_entries", ["account_id"])
    op.create_index("ix_ledger_entries_transfer_id", "ledger_entries", ["transfer_id"])

    op.create_table(
        "payment_receipts",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "method",
            sa.Enum(*RECEIPT_METHODS, name="receipt_method_enum", create_constraint=True),
            nullable=False,
        ),
        sa.Column("amount_cents", sa.BigInteger(), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column(
            "status",
            sa.Enum(*RECEIPT_STATUSES, name="receipt_status_enum", create_constraint=True),
            nullable=False,
        ),
        sa.Column("received_at", sa.DateTime(), nullable=True),
        sa.Column("client_name", sa.String(200), nullable=True),
        sa.Column("client_email", sa.String(255), nullable=True),
        sa.Column("description", sa.String(255), nullable=True),
        sa.Column("notes", sa.String(1000), nullable=True),
        sa.Column("external_ref", sa.String(200), nullable=True),
        sa.Column("created_by", sa.String(100), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "treasury_transfers",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "source_account",
            sa.Enum(*TRANSFER_SOURCES, name="transfer_source_enum", create_constraint=True),
            nullable=False,
        ),
        sa.Column(
            "destination_account",
            sa.Enum(
                *TRANSFER_DESTINATIONS,
                name="transfer_destination_enum",
                create_constraint=True,
            ),
            nullable=False,
        ),
        sa.Column(
            "method",
            sa.Enum(*TRANSFER_METHODS, name="transfer_method_enum", create_constraint=True),
            nullable=False,
        ),
        sa.Column("amount_cents", sa.BigInteger(), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False),
        sa.Column(
            "status",
            sa.Enum(*TRANSFER_STATUSES, name="transfer_status_enum", create_constraint=True),
            nullable=False,
        ),
        sa.Column("planned_at", sa.DateTime(), nullable=False),
        sa.Column("submitted_at", sa.DateTime(), nullable=True),
        sa.Column("confirmed_at", sa.DateTime(), nullable=True),
        sa.Column("bank_ref", sa.String(200), nullable=True),
        sa.Column("kraken_ref", sa.String(200), nullable=True),
        sa.Column("notes", sa.String(1000), nullable=True),
        sa.Column(
            "payment_receipt_id",
            sa.String(36),
            sa.ForeignKey("payment_receipts.id"),
            nullable=True,
        ),
        sa.Column("pending_posting_id", sa.String(36), nullable=True),
        sa.Column("created_by", sa.String(100), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_treasury_transfers_status", "treasury_transfers", ["status"])
    op.create_index(
        "ix_treasury_transfers_payment_receipt_id",
        "treasury_transfers",
        ["payment_receipt_id"],
    )

    op.create_table(
        "audit_log",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("event_type", sa.String(100), nullable=False),
        sa.Column("subject_id", sa.String(36), nullable=True),
        sa.Column("details", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_audit_log_subject_id", "audit_log", ["subject_id"])


def downgrade() -> None:
    op.drop_table("audit_log")
    op.drop_table("treasury_transfers")
    op.drop_table("payment_receipts")
    op.drop_table("ledger_entries")
    op.drop_table("ledger_accounts")
    bind = op.get_bind()
    for name in (
        "transfer_status_enum", "transfer_method_enum",
        "transfer_destination_enum", "transfer_source_enum",
        "receipt_status_enum", "receipt_method_enum",
        "posting_kind_enum", "entry_type_enum", "account_type_enum",
    ):
        sa.Enum(name=name).drop(bind, checkfirst=True)
