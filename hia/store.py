# hia/store.py
"""
In-memory domain store for accounts, contact submissions and donations.

One store instance is built by the app factory and shared by every request
handler (see ``hia.get_store``). Each record kind keeps:

- an append-only list (insertion order for listing)
- an ``id -> position`` index (O(1) lookup)
- its own id sequence, starting at 1, never reused

A lock per kind makes "advance sequence + append" one atomic step; the three
kinds never contend with each other. Records are frozen dataclasses and the
store exposes no update or delete path.

Precondition: callers validate input shape (required fields, types) before
calling ``create_*``. The store accepts arguments as given.
"""

from __future__ import annotations

import itertools
import logging
import threading
from datetime import datetime
from typing import Callable, Dict, Generic, List, Optional, TypeVar

from hia.models import Account, ContactSubmission, Donation
from hia.models.mixins import utcnow

log = logging.getLogger(__name__)

T = TypeVar("T")
Clock = Callable[[], datetime]


class StoreError(Exception):
    """Base class for store errors."""


class UsernameTakenError(StoreError):
    def __init__(self, username: str):
        super().__init__(f"username already taken: {username!r}")
        self.username = username


class _Table(Generic[T]):
    """Append-only record list with an id index and a private sequence."""

    def __init__(self, kind: str):
        self.kind = kind
        self.lock = threading.Lock()
        self._rows: List[T] = []
        self._pos: Dict[int, int] = {}
        self._seq = itertools.count(1)

    def next_id(self) -> int:
        return next(self._seq)

    def append(self, record_id: int, record: T) -> None:
        # row before index: an id visible in _pos always has its row
        self._rows.append(record)
        self._pos[record_id] = len(self._rows) - 1

    def get(self, record_id: int) -> Optional[T]:
        pos = self._pos.get(record_id)
        return None if pos is None else self._rows[pos]

    def snapshot(self) -> List[T]:
        with self.lock:
            return list(self._rows)

    def __len__(self) -> int:
        return len(self._rows)


class DomainStore:
    def __init__(self, clock: Optional[Clock] = None):
        self._clock: Clock = clock or utcnow
        self._accounts: _Table[Account] = _Table("account")
        self._contacts: _Table[ContactSubmission] = _Table("contact")
        self._donations: _Table[Donation] = _Table("donation")
        self._username_index: Dict[str, int] = {}
        self._total_cents = 0

    # ---------------- Accounts ----------------
    def get_account(self, account_id: int) -> Optional[Account]:
        return self._accounts.get(account_id)

    def get_account_by_username(self, username: str) -> Optional[Account]:
        account_id = self._username_index.get(username)
        if account_id is None:
            return None
        return self._accounts.get(account_id)

    def create_account(self, username: str, secret: str) -> Account:
        """Raises UsernameTakenError when ``username`` is already registered."""
        table = self._accounts
        with table.lock:
            if username in self._username_index:
                raise UsernameTakenError(username)
            account = Account(id=table.next_id(), username=username, secret=secret)
            table.append(account.id, account)
            self._username_index[username] = account.id
        log.info("account created id=%s", account.id)
        return account

    # ---------------- Contact submissions ----------------
    def create_contact(
        self,
        first_name: str,
        last_name: str,
        email: str,
        interest: str,
        message: str,
    ) -> ContactSubmission:
        table = self._contacts
        with table.lock:
            contact = ContactSubmission(
                id=table.next_id(),
                first_name=first_name,
                last_name=last_name,
                email=email,
                interest=interest,
                message=message,
                created_at=self._clock(),
            )
            table.append(contact.id, contact)
        log.info("contact submission stored id=%s interest=%s", contact.id, interest)
        return contact

    def get_contact(self, contact_id: int) -> Optional[ContactSubmission]:
        return self._contacts.get(contact_id)

    def list_contacts(self) -> List[ContactSubmission]:
        return self._contacts.snapshot()

    # ---------------- Donations ----------------
    def create_donation(
        self,
        amount: int,
        payment_intent_id: str,
        donor_email: Optional[str] = None,
        donor_name: Optional[str] = None,
        is_recurring: Optional[bool] = None,
    ) -> Donation:
        """``amount`` is in cents. ``is_recurring=None`` is stored as False."""
        table = self._donations
        with table.lock:
            donation = Donation(
                id=table.next_id(),
                amount=amount,
                payment_intent_id=payment_intent_id,
                donor_email=donor_email,
                donor_name=donor_name,
                is_recurring=bool(is_recurring),
                created_at=self._clock(),
            )
            table.append(donation.id, donation)
            self._total_cents += amount
        log.info("donation recorded id=%s amount_cents=%s", donation.id, amount)
        return donation

    def get_donation(self, donation_id: int) -> Optional[Donation]:
        return self._donations.get(donation_id)

    def list_donations(self) -> List[Donation]:
        return self._donations.snapshot()

    def total_donated(self) -> int:
        with self._donations.lock:
            return self._total_cents

    # ---------------- Introspection ----------------
    def counts(self) -> Dict[str, int]:
        return {
            "accounts": len(self._accounts),
            "contacts": len(self._contacts),
            "donations": len(self._donations),
        }


__all__ = ["DomainStore", "StoreError", "UsernameTakenError"]
