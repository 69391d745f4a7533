"""
Cart item record model.
"""

from pydantic import Field

from app.database import RecordModel


class CartItem(RecordModel):
    """One line of a user's cart. At most one item per (user_id, product_id)."""

    id: str
    product_id: str
    name: str
    price: float = Field(..., gt=0, allow_inf_nan=False)
    image: str
    count: int = Field(..., ge=1)
    user_id: str
    created_at: int
