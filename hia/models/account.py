"""
Account record: site login identity.

The credential secret is opaque to the store (the account service stores a
Werkzeug password hash there) and is never serialized.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class Account:
    id: int
    username: str
    secret: str

    def as_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "username": self.username}

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Account {self.id} {self.username!r}>"
