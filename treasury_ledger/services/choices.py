"""Parsing of enumerated request values and list limits."""

from treasury_ledger.errors import InvalidOperation

DEFAULT_LIST_LIMIT = 50
MAX_LIST_LIMIT = 200


def choices(enum_cls) -> str:
    return ", ".join(member.value for member in enum_cls)


def parse_choice(enum_cls, value, label: str, error=InvalidOperation):
    """Upper-case and match a request value against an enum."""
    try:
        return enum_cls(str(value).strip().upper())
    except ValueError:
        raise error(f"Invalid {label}. Must be one of: {choices(enum_cls)}")


def clamp_limit(limit: int | None) -> int:
    if limit is None:
        return DEFAULT_LIST_LIMIT
    return min(max(limit, 1), MAX_LIST_LIMIT)
