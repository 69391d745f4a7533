"""
Cart store backed by cart.json.
"""

import uuid
from pathlib import Path
from typing import List, Optional

from app.database import RecordStore, now_ms
from app.models.cart import CartItem


class CartStore:
    """Per-user cart lines, deduplicated on (user_id, product_id)."""

    def __init__(self, path: str | Path):
        self._store: RecordStore[CartItem] = RecordStore(path, CartItem)

    def get_all_for_user(self, user_id: str) -> List[CartItem]:
        """All items owned by `user_id`, newest first."""
        items = [item for item in self._store.get_all() if item.user_id == user_id]
        return sorted(items, key=lambda item: item.created_at, reverse=True)

    def get_one(self, item_id: str) -> Optional[CartItem]:
        return self._store.get(item_id)

    async def add_item(
        self,
        user_id: str,
        product_id: str,
        name: str,
        price: float,
        image: str,
        count: int = 1,
    ) -> CartItem:
        """
        Add `count` units of a product to the user's cart.

        If the product is already in the cart its count is increased and its
        image replaced; otherwise a new line is created.
        """

        def _apply(data):
            for item in data.values():
                if item.user_id == user_id and item.product_id == product_id:
                    item.count += count
                    item.image = image
                    return item.model_copy()

            item = CartItem(
                id=str(uuid.uuid4()),
                product_id=product_id,
                name=name,
                price=price,
                image=image,
                count=count,
                user_id=user_id,
                created_at=now_ms(),
            )
            data[item.id] = item
            return item.model_copy()

        return await self._store.mutate(_apply)

    async def update_count(self, item_id: str, count: int) -> bool:
        """Set an item's count. A count of zero or less removes the item."""
        if self.get_one(item_id) is None:
            return False

        if count <= 0:
            return await self.remove_item(item_id)

        def _apply(data):
            item = data.get(item_id)
            if item is None:
                return False
            item.count = count
            return True

        return await self._store.mutate(_apply)

    async def remove_item(self, item_id: str) -> bool:
        if self.get_one(item_id) is None:
            return False

        def _apply(data):
            return data.pop(item_id, None) is not None

        return await self._store.mutate(_apply)

    async def clear_for_user(self, user_id: str) -> int:
        """Remove every item owned by `user_id`. Returns the number removed."""

        def _apply(data):
            owned = [item_id for item_id, item in data.items() if item.user_id == user_id]
            for item_id in owned:
                del data[item_id]
            return len(owned)

        return await self._store.mutate(_apply)

    async def remove_ordered(self, ordered: List[CartItem]) -> int:
        """
        Take the ordered quantities out of the cart.

        Units added after `ordered` was read stay in the cart, both as new
        lines and as extra count on an ordered line. Returns the number of
        lines removed.
        """

        def _apply(data):
            removed = 0
            for line in ordered:
                item = data.get(line.id)
                if item is None:
                    continue
                item.count -= line.count
                if item.count <= 0:
                    del data[line.id]
                    removed += 1
            return removed

        return await self._store.mutate(_apply)

    def get_total_for_user(self, user_id: str) -> float:
        return sum(item.price * item.count for item in self.get_all_for_user(user_id))

    def get_count_for_user(self, user_id: str) -> int:
        return sum(item.count for item in self.get_all_for_user(user_id))
