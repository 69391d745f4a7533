"""
Account Service: registration, login and account removal.
"""

import logging
from typing import Optional

from app.models.user import User
from app.repositories import Database

logger = logging.getLogger(__name__)


class AccountService:
    async def register(self, db: Database, username: str, email: str, password: str) -> User:
        """
        Create a user and its password record.

        Raises:
            EmailAlreadyInUse: the email is already registered.
        """
        user = await db.users.create(username, email)
        await db.passwords.create(user.id, password)
        logger.info(f"User registered: {user.id}")
        return user

    def authenticate(self, db: Database, email: str, password: str) -> Optional[User]:
        """Authenticate a user by email and password."""
        user = db.users.find_by_email(email)
        if not user:
            return None
        if not db.passwords.verify(user.id, password):
            return None
        return user

    async def change_password(
        self, db: Database, user_id: str, current_password: str, new_password: str
    ) -> bool:
        """Replace the password if `current_password` verifies."""
        if not db.passwords.verify(user_id, current_password):
            return False
        await db.passwords.update(user_id, new_password)
        logger.info(f"Password changed for user {user_id}")
        return True

    async def delete_account(self, db: Database, user_id: str) -> bool:
        """
        Delete a user together with its cart items and password record.

        The three documents are written one after another, a failure part way
        through leaves the earlier deletions in place.
        """
        if db.users.get_one(user_id) is None:
            return False

        removed_items = await db.cart.clear_for_user(user_id)
        await db.passwords.delete(user_id)
        deleted = await db.users.delete(user_id)
        logger.info(f"Deleted user {user_id} ({removed_items} cart items removed)")
        return deleted


account_service = AccountService()
