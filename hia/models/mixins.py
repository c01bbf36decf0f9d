# hia/models/mixins.py
"""Shared helpers for the in-memory record types."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def iso(ts: Optional[datetime]) -> Optional[str]:
    return ts.isoformat() if ts else None


class TimestampMixin:
    """Adds ISO helpers for a store-assigned `created_at`."""

    created_at: datetime

    @property
    def created_at_iso(self) -> Optional[str]:
        return iso(self.created_at)
