from __future__ import annotations

from hia.models.account import Account
from hia.models.contact import INTEREST_CHOICES, ContactSubmission
from hia.models.donation import Donation, cents_to_dollars, dollars_to_cents

__all__ = [
    "Account",
    "ContactSubmission",
    "Donation",
    "INTEREST_CHOICES",
    "cents_to_dollars",
    "dollars_to_cents",
]
