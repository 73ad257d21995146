"""
Error taxonomy.

Business-rule violations are ValueErrors, like everywhere else in the
service layer. Each subclass carries the HTTP status the API layer
answers with, so routes can translate any LedgerError the same way.
"""


class LedgerError(ValueError):
    """Base class for every rejected ledger or treasury operation."""

    status_code: int = 400


class InvalidAmount(LedgerError):
    """Amount missing, non-numeric, non-finite or not positive."""


class InvalidOperation(LedgerError):
    """Unknown action, or an action missing a required argument."""


class InvalidCategory(LedgerError):
    """Expense category outside the fixed set."""


class InvalidStatus(LedgerError):
    """Transfer status outside the enumerated set."""


class InvalidTransition(LedgerError):
    """Transfer status change not allowed from the current status."""


class InsufficientFunds(LedgerError):
    """Posting would overdraw an asset account while overdrafts are off."""


class NoOp(LedgerError):
    """Update request carried no fields."""


class NotFound(LedgerError):
    status_code = 404


class Unauthorized(LedgerError):
    status_code = 401


class Forbidden(LedgerError):
    status_code = 403
