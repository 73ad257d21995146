"""
Audit log model.

Records treasury events (transfer planned, status changed, ledger
reset, receipt recorded) so every movement of money can be traced
back to who did it and when.
"""

import json
from datetime import datetime

from sqlalchemy import String, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column

from treasury_ledger.models.base import Base


class AuditLog(Base):
    """
    Immutable record of a treasury event.

    Like ledger entries, audit logs are append-only.
    """

    __tablename__ = "audit_log"

    id: Mapped[int] = mapped_column(primary_key=True)
    event_type: Mapped[str] = mapped_column(String(100), nullable=False)
    subject_id: Mapped[str | None] = mapped_column(
        String(36), nullable=True, index=True
    )
    details: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )

    @classmethod
    def record(cls, event_type: str, subject_id: str | None = None, **details):
        return cls(
            event_type=event_type,
            subject_id=subject_id,
            details=json.dumps(details, default=str, sort_keys=True),
        )

    def __repr__(self) -> str:
        return f"<AuditLog {self.event_type} {self.subject_id}>"
