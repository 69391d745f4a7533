"""
Static flower catalog loaded from db.json.

The document has the shape {"flowers": [{"id": 1, ...}, ...]}. Only ratings
are ever written back.
"""

import asyncio
import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from app.config import settings
from app.core.exceptions import StorageError

logger = logging.getLogger(__name__)


class CatalogService:
    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._lock = asyncio.Lock()
        self._document = self._load()

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            logger.warning(f"Catalog {self.path} not found, serving an empty catalog")
            return {"flowers": []}

        with open(self.path, "r", encoding="utf-8") as f:
            document = json.load(f)
        document.setdefault("flowers", [])
        return document

    def _write(self, document: Dict[str, Any]) -> None:
        try:
            tmp_path = self.path.with_name(self.path.name + ".tmp")
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(document, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error(f"Failed to write catalog {self.path}: {e}")
            raise StorageError(f"Could not write {self.path.name}") from e

    def list_flowers(self) -> List[Dict[str, Any]]:
        return copy.deepcopy(self._document["flowers"])

    def get_flower(self, flower_id: int) -> Optional[Dict[str, Any]]:
        for flower in self._document["flowers"]:
            if flower.get("id") == flower_id:
                return copy.deepcopy(flower)
        return None

    async def rate_flower(self, flower_id: int, rating: float) -> Optional[Dict[str, Any]]:
        """
        Fold a new rating into the flower's running average.

        Returns the updated flower, or None if no flower has this id.
        """
        async with self._lock:
            document = copy.deepcopy(self._document)
            flower = next(
                (f for f in document["flowers"] if f.get("id") == flower_id), None
            )
            if flower is None:
                return None

            rating_count = flower.get("ratingCount") or 0
            current_rating = flower.get("rating") or 0
            flower["ratingCount"] = rating_count + 1
            flower["rating"] = (current_rating * rating_count + rating) / flower["ratingCount"]

            await asyncio.to_thread(self._write, document)
            self._document = document
            return copy.deepcopy(flower)


_catalog: Optional[CatalogService] = None


def init_catalog(path: Optional[str] = None) -> CatalogService:
    global _catalog
    _catalog = CatalogService(path or settings.CATALOG_PATH)
    return _catalog


def get_catalog() -> CatalogService:
    """Dependency returning the loaded catalog."""
    if _catalog is None:
        init_catalog()
    return _catalog
