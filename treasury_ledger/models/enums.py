"""
Shared enumerations for database models.

Using Python enums mapped to database enums ensures that
only valid values can be stored. An invalid transfer status
or entry type is caught at the database level, not just
in Python validation.
"""

import enum


class AccountType(str, enum.Enum):
    """The five fundamental accounting categories."""
    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    REVENUE = "REVENUE"
    EXPENSE = "EXPENSE"


class EntryType(str, enum.Enum):
    """Direction of a ledger entry."""
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


class PostingKind(str, enum.Enum):
    """Business event a posting was made for."""
    CASH_INCOME = "CASH_INCOME"
    OWNER_DRAW = "OWNER_DRAW"
    CAPITAL_CONTRIBUTION = "CAPITAL_CONTRIBUTION"
    BANK_DEPOSIT = "BANK_DEPOSIT"
    TRANSFER_OUT = "TRANSFER_OUT"
    TRANSFER_SETTLEMENT = "TRANSFER_SETTLEMENT"
    TRANSFER_REVERSAL = "TRANSFER_REVERSAL"
    EXPENSE = "EXPENSE"


class LedgerAction(str, enum.Enum):
    """Actions accepted by POST /ledger."""
    CASH_INCOME = "cash_income"
    OWNER_DRAW = "owner_draw"
    CAPITAL_CONTRIBUTION = "capital_contribution"
    DEPOSIT_TO_BANK = "deposit_to_bank"
    ACH_TO_KRAKEN = "ach_to_kraken"
    WIRE_TO_KRAKEN = "wire_to_kraken"
    EXPENSE = "expense"
    COMPLETE_TRANSFER = "complete_transfer"
    RESET = "reset"


class ExpenseCategory(str, enum.Enum):
    HOME_OFFICE = "home_office"
    EQUIPMENT = "equipment"
    SOFTWARE = "software"
    INTERNET = "internet"
    EDUCATION = "education"
    TRAVEL = "travel"
    MEALS = "meals"
    PROFESSIONAL = "professional"
    INSURANCE = "insurance"
    BANK_FEES = "bank_fees"
    MARKETING = "marketing"
    OTHER = "other"


class PaidFrom(str, enum.Enum):
    CASH = "cash"
    BANK = "bank"


class TransferStatus(str, enum.Enum):
    PLANNED = "PLANNED"
    SUBMITTED = "SUBMITTED"
    CONFIRMED = "CONFIRMED"
    CANCELED = "CANCELED"


class TransferMethod(str, enum.Enum):
    ACH = "ACH"
    WIRE = "WIRE"


class SourceAccount(str, enum.Enum):
    FULTON_BANK = "FULTON_BANK"
    STRIPE_BALANCE = "STRIPE_BALANCE"
    CASH_ON_HAND = "CASH_ON_HAND"


class DestinationAccount(str, enum.Enum):
    KRAKEN = "KRAKEN"
    COINBASE = "COINBASE"
    OTHER = "OTHER"


class ReceiptMethod(str, enum.Enum):
    STRIPE = "STRIPE"
    CASH = "CASH"
    ACH = "ACH"
    WIRE = "WIRE"
    CHECK = "CHECK"
    OTHER = "OTHER"


class ReceiptStatus(str, enum.Enum):
    PENDING = "PENDING"
    RECEIVED = "RECEIVED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"
