"""
Storage layer for the Flower Shop API.

Every entity type lives in its own JSON document on disk, a flat object
mapping entity id to record. Documents are loaded fully into memory at
startup and rewritten in full after every mutation.
"""

import asyncio
import copy
import logging
import os
import time
from pathlib import Path
from typing import Callable, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from app.config import settings
from app.core.exceptions import StorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


def now_ms() -> int:
    """Current time in milliseconds since the epoch (the on-disk timestamp format)."""
    return int(time.time() * 1000)


class RecordModel(BaseModel):
    """Base class for persisted records. Serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RecordStore(Generic[T]):
    """
    Durable mapping from string id to record, backed by one JSON file.

    Reads are served from memory. Writes go through `mutate`, which holds
    the store lock for the whole read-modify-write cycle, so concurrent
    mutations are applied one after another.
    """

    def __init__(self, path: str | Path, record_type: Type[T]):
        self.path = Path(path)
        self._adapter = TypeAdapter(Dict[str, record_type])
        self._lock = asyncio.Lock()
        self._data: Dict[str, T] = self._load()

    def _load(self) -> Dict[str, T]:
        if not self.path.exists():
            logger.info(f"{self.path} not found, starting with an empty document")
            return {}

        raw = self.path.read_bytes()
        if not raw.strip():
            return {}

        try:
            return self._adapter.validate_json(raw)
        except ValidationError as e:
            raise StorageError(f"Malformed document {self.path}: {e}") from e

    def _write(self, data: Dict[str, T]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            payload = self._adapter.dump_json(data, by_alias=True, indent=2)
            tmp_path = self.path.with_name(self.path.name + ".tmp")
            tmp_path.write_bytes(payload)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error(f"Failed to write {self.path}: {e}")
            raise StorageError(f"Could not write {self.path.name}") from e

    def get(self, record_id: str) -> Optional[T]:
        record = self._data.get(record_id)
        return copy.copy(record) if record is not None else None

    def get_all(self) -> List[T]:
        return [copy.copy(record) for record in self._data.values()]

    def find_one(self, predicate: Callable[[T], bool]) -> Optional[T]:
        for record in self._data.values():
            if predicate(record):
                return copy.copy(record)
        return None

    async def mutate(self, fn: Callable[[Dict[str, T]], R]) -> R:
        """
        Apply `fn` to a working copy of the document and persist it.

        The in-memory document is replaced only after the file write
        succeeds; a failed write raises StorageError and leaves both the
        file and the in-memory state as they were.
        """
        async with self._lock:
            draft = copy.deepcopy(self._data)
            result = fn(draft)
            await asyncio.to_thread(self._write, draft)
            self._data = draft
            return result


_db = None


def init_db(data_dir: Optional[str] = None):
    """
    Load all JSON documents from the data directory.
    """
    # Imported here, the stores depend on RecordStore above
    from app.repositories import Database

    global _db
    _db = Database(data_dir or settings.DATA_DIR)
    return _db


def get_db():
    """
    Dependency returning the loaded stores.
    Use in FastAPI route dependencies.
    """
    if _db is None:
        init_db()
    return _db
