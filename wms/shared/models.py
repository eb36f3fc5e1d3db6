"""Audit timestamp columns shared by the warehouse tables."""

from datetime import datetime

from sqlalchemy import DateTime, func
from sqlalchemy.orm import Mapped, mapped_column


def _stamp(*, touch: bool = False, index: bool = False) -> Mapped[datetime]:
    # Server-side clock so rows written by SQL scripts get the same stamps.
    return mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now() if touch else None,
        nullable=False,
        index=index,
    )


class CreatedAtMixin:
    """Insert-only rows: ledger movements and notifications.

    Indexed because both are read back newest-first.
    """

    created_at: Mapped[datetime] = _stamp(index=True)


class TimestampMixin:
    """Mutable rows whose status or quantity is edited after insert."""

    created_at: Mapped[datetime] = _stamp()
    updated_at: Mapped[datetime] = _stamp(touch=True)
