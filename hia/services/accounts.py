# hia/services/accounts.py
"""Account registration and password checks on top of the domain store."""

from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from hia.models import Account
from hia.store import DomainStore


class AccountService:
    def __init__(self, store: DomainStore):
        self.store = store

    def register(self, username: str, password: str) -> Account:
        """Store a new account; the credential secret is a Werkzeug hash, never plaintext."""
        username = (username or "").strip()
        if not username:
            raise ValueError("username required")
        if not password:
            raise ValueError("password required")
        return self.store.create_account(username, generate_password_hash(password))

    def authenticate(self, username: str, password: str) -> Optional[Account]:
        account = self.store.get_account_by_username((username or "").strip())
        if account is None or not password:
            return None
        return account if check_password_hash(account.secret, password) else None
