"""
User record model.
"""

from app.database import RecordModel


class User(RecordModel):
    """User profile. Emails are unique across the users document."""

    id: str
    username: str
    email: str
    created_at: int
