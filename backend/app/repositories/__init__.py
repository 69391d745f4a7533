"""
JSON-file stores for users, passwords and cart items.
"""

from pathlib import Path

from app.repositories.cart import CartStore
from app.repositories.passwords import PasswordStore
from app.repositories.users import UserStore


class Database:
    """The three stores loaded from one data directory."""

    def __init__(self, data_dir: str | Path):
        data_dir = Path(data_dir)
        self.users = UserStore(data_dir / "users.json")
        self.cart = CartStore(data_dir / "cart.json")
        self.passwords = PasswordStore(data_dir / "passwords.json")


__all__ = ["Database", "UserStore", "CartStore", "PasswordStore"]
