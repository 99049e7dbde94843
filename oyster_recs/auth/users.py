"""Demo login accounts, each linked to a taster in the seed dataset."""
from __future__ import annotations

from typing import Any, NamedTuple

import bcrypt


class Account(NamedTuple):
    user_id: str
    role: str
    password_hash: str


# username -> (store user id, role, plain password)
DEMO_ACCOUNTS: dict[str, tuple[str, str, str]] = {
    "ava": ("u-1", "user", "oyster123"),
    "dev": ("u-4", "user", "oyster123"),
    "admin": ("u-6", "admin", "admin123"),
}


def hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt()).decode()


def _accounts() -> dict[str, Account]:
    return {
        username: Account(user_id, role, hash_password(password))
        for username, (user_id, role, password) in DEMO_ACCOUNTS.items()
    }


_accounts_by_username = _accounts()


def authenticate(username: str, password: str) -> dict[str, Any] | None:
    """Check a login. Returns the session payload ``{id, username, role}`` or ``None``."""
    account = _accounts_by_username.get(username)
    if account is None:
        return None
    if not bcrypt.checkpw(password.encode(), account.password_hash.encode()):
        return None
    return {"id": account.user_id, "username": username, "role": account.role}
