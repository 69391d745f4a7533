"""
Domain errors raised by stores and services.

Routers translate these into HTTP responses.
"""


class StorageError(Exception):
    """A JSON document could not be written to disk."""


class EmailAlreadyInUse(Exception):
    """Another user is already registered with this email."""

    def __init__(self, email: str):
        super().__init__(f"Email already in use: {email}")
        self.email = email


class TelegramError(Exception):
    """Telegram rejected the message or could not be reached."""


class TelegramNotConfigured(TelegramError):
    """Bot token or chat id is missing from the configuration."""
