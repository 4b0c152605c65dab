"""
Base storage interface for the curtail link store.

Purpose:
    Define a small, stable contract that multiple storage backends
    (in-memory, PostgreSQL) implement without requiring changes to the
    allocation logic.

Error contract:
    Backends raise `UniqueViolation` only when a `short_code` is already
    taken, and `StorageError` for every other fault (timeouts, lost
    connections, duplicate record ids, constraint failures). The allocation
    controller retries the first and aborts on the second, so this split must
    hold regardless of which database sits underneath.

Testing & Coverage:
    These are abstract methods and are not executed directly in tests.
    We annotate them with `# pragma: no cover` so coverage tools don't
    penalize the project for un-runnable abstract declarations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models import Link


class StorageError(Exception):
    """Generic storage fault (anything other than a short_code collision)."""


class UniqueViolation(StorageError):
    """Raised by insert_link when the short_code is already stored."""


class BaseStorage(ABC):
    """Abstract base class for link storage backends."""

    @abstractmethod  # pragma: no cover
    def count_links(self) -> int:
        """
        Return the total number of persisted links.

        Raises:
            StorageError: If the count cannot be read.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def insert_link(self, link: Link) -> None:
        """
        Atomically insert a new link, conditioned on short_code uniqueness.

        Two concurrent inserts of the same short_code must end with exactly
        one success and one `UniqueViolation`; never an overwrite.

        Raises:
            UniqueViolation: If the short_code is already stored.
            StorageError: On any other storage fault.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def get_link(self, short_code: str) -> Optional[Link]:
        """
        Retrieve a link by its short code.

        Returns:
            Optional[Link]: The stored link or None if no such code exists.

        Raises:
            StorageError: If the lookup fails.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def list_links(self) -> List[Link]:
        """
        Return every stored link. Diagnostic only; not paginated.

        Raises:
            StorageError: If the listing fails.
        """
        raise NotImplementedError

    def bootstrap(self) -> None:
        """Prepare the backend (create schema). No-op unless overridden."""
