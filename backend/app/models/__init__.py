"""
Record models for the Flower Shop API.

Records are persisted by the stores in app.repositories.
"""

from app.models.user import User
from app.models.cart import CartItem

__all__ = [
    "User",
    "CartItem",
]
