"""
Storage module for the curtail link store (in-memory implementation).

Responsibilities:
    - Persist links keyed by short_code and record_id
    - Provide count, lookup and diagnostic listing
    - Make check-and-insert atomic so concurrent inserts of one short_code
      produce exactly one winner

Design:
    - This is an in-memory reference implementation of the BaseStorage contract.
    - It is intentionally simple to keep unit/integration tests fast and deterministic.
    - A single lock stands in for the database's unique index.
"""

import threading
from typing import Dict, List, Optional

from ..errors import InvalidTarget
from ..manager.validation import validate_target
from ..models import Link
from .base import BaseStorage, StorageError, UniqueViolation


class Storage(BaseStorage):
    def __init__(self):
        """
        Initialize empty storage.

        Internal schema:
            self.links = { short_code: Link }      # insertion ordered
            self.record_ids = { record_id: short_code }
        """
        self.links: Dict[str, Link] = {}
        self.record_ids: Dict[str, str] = {}
        self._lock = threading.Lock()

    def count_links(self) -> int:
        with self._lock:
            return len(self.links)

    def insert_link(self, link: Link) -> None:
        """
        Insert a link if its short_code is free.

        Rules:
            - short_code already stored -> UniqueViolation (caller may retry).
            - record_id already stored -> StorageError (primary key clash).
            - target breaking the validation rules -> StorageError, so no
              invalid link is ever persisted even if a caller skips validation.
        """
        try:
            validate_target(link.target)
        except InvalidTarget as e:
            raise StorageError(f"rejected target for {link.short_code}: {e}") from e

        with self._lock:
            if link.short_code in self.links:
                raise UniqueViolation(f"short_code {link.short_code!r} already exists")
            if link.record_id in self.record_ids:
                raise StorageError(f"record_id {link.record_id!r} already exists")
            self.links[link.short_code] = link
            self.record_ids[link.record_id] = link.short_code

    def get_link(self, short_code: str) -> Optional[Link]:
        with self._lock:
            return self.links.get(short_code)

    def list_links(self) -> List[Link]:
        """Return a snapshot of all links in insertion order."""
        with self._lock:
            return list(self.links.values())
