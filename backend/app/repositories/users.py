"""
User store backed by users.json.
"""

import uuid
from pathlib import Path
from typing import Callable, List, Optional

from app.core.exceptions import EmailAlreadyInUse
from app.database import RecordStore, now_ms
from app.models.user import User


class UserStore:
    def __init__(self, path: str | Path):
        self._store: RecordStore[User] = RecordStore(path, User)

    def get_one(self, user_id: str) -> Optional[User]:
        return self._store.get(user_id)

    def get_all(self) -> List[User]:
        return self._store.get_all()

    def find_one(self, predicate: Callable[[User], bool]) -> Optional[User]:
        return self._store.find_one(predicate)

    def find_by_email(self, email: str) -> Optional[User]:
        """Exact, case-sensitive email lookup."""
        return self.find_one(lambda user: user.email == email)

    async def create(self, username: str, email: str) -> User:
        """
        Create a user with a fresh id.

        Raises:
            EmailAlreadyInUse: another user has exactly this email.
        """

        def _apply(data):
            # Checked under the store lock so two registrations cannot both pass
            if any(existing.email == email for existing in data.values()):
                raise EmailAlreadyInUse(email)
            user = User(
                id=str(uuid.uuid4()),
                username=username,
                email=email,
                created_at=now_ms(),
            )
            data[user.id] = user
            return user.model_copy()

        return await self._store.mutate(_apply)

    async def update(
        self,
        user_id: str,
        username: Optional[str] = None,
        email: Optional[str] = None,
        exclusive_email: bool = False,
    ) -> Optional[User]:
        """
        Merge the given fields onto an existing user.

        Email uniqueness is only checked when `exclusive_email` is set.

        Raises:
            EmailAlreadyInUse: `exclusive_email` is set and another user
                already has `email`.
        """
        changes = {}
        if username is not None:
            changes["username"] = username
        if email is not None:
            changes["email"] = email

        def _apply(data):
            user = data.get(user_id)
            if user is None:
                return None
            if exclusive_email and email is not None:
                if any(
                    other_id != user_id and other.email == email
                    for other_id, other in data.items()
                ):
                    raise EmailAlreadyInUse(email)
            updated = user.model_copy(update=changes)
            data[user_id] = updated
            return updated.model_copy()

        return await self._store.mutate(_apply)

    async def delete(self, user_id: str) -> bool:
        if self.get_one(user_id) is None:
            return False

        def _apply(data):
            return data.pop(user_id, None) is not None

        return await self._store.mutate(_apply)
