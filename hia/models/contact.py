"""
ContactSubmission: one "Get Involved" form entry.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict

from .mixins import TimestampMixin

INTEREST_CHOICES = (
    ("volunteering", "Volunteering"),
    ("donating", "Making a donation"),
    ("partnership", "Partnership opportunities"),
    ("receiving-help", "Receiving assistance"),
    ("other", "Other"),
)


@dataclass(frozen=True)
class ContactSubmission(TimestampMixin):
    id: int
    first_name: str
    last_name: str
    email: str
    interest: str
    message: str
    created_at: datetime

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    # ==========================================================
    # Serialization (camelCase wire format used by the website)
    # ==========================================================
    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "interest": self.interest,
            "message": self.message,
            "createdAt": self.created_at_iso,
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"<ContactSubmission {self.id} {self.full_name!r} interest={self.interest!r}>"
