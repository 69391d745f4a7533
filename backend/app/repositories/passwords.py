"""
Password store: userId -> hashed password, kept in passwords.json.
"""

from pathlib import Path
from typing import Optional

from app.core import security
from app.database import RecordStore


class PasswordStore:
    """Keyed hash storage, one entry per user."""

    def __init__(self, path: str | Path):
        self._store: RecordStore[str] = RecordStore(path, str)

    def get_one(self, user_id: str) -> Optional[str]:
        return self._store.get(user_id)

    async def create(self, user_id: str, password: str) -> None:
        """Hash and store `password`, replacing any existing entry."""
        hashed = security.get_password_hash(password)

        def _apply(data):
            data[user_id] = hashed

        await self._store.mutate(_apply)

    async def update(self, user_id: str, new_password: str) -> None:
        await self.create(user_id, new_password)

    def verify(self, user_id: str, password: str) -> bool:
        """Check `password` for `user_id`. False when the user has no password."""
        hashed = self.get_one(user_id)
        if not hashed:
            return False
        return security.verify_password(password, hashed)

    async def delete(self, user_id: str) -> None:
        def _apply(data):
            data.pop(user_id, None)

        await self._store.mutate(_apply)
