"""
LinkService: the single entry point used by the HTTP layer.

Wraps the allocation controller and the store behind create/get/list and
makes sure every failure leaving this module is a `LinkError`. Holds no
state beyond the injected store and the manager built on top of it.
"""

import logging
from typing import List, Optional

from .errors import NotFound, StoreError
from .manager.generator import BaseGenerator
from .manager.link_manager import LinkManager
from .models import Link
from .storage.base import BaseStorage, StorageError

log = logging.getLogger("curtail.service")


class LinkService:
    def __init__(self, storage: BaseStorage, generator: Optional[BaseGenerator] = None):
        self.storage = storage
        self.manager = LinkManager(storage=storage, generator=generator)

    def create(self, target: str) -> Link:
        """Allocate a short code for target. Raises LinkError subclasses."""
        return self.manager.create_link(target)

    def get(self, short_code: str) -> Link:
        """
        Look up a link by short code.

        Raises:
            NotFound: If no link has this code.
            StoreError: If the store fails (detail is logged, not returned).
        """
        try:
            link = self.storage.get_link(short_code)
        except StorageError as e:
            log.error("Failed to get short link due to unhandled storage error: %r", e)
            raise StoreError(str(e)) from e
        if link is None:
            raise NotFound(f"no link for short code {short_code!r}")
        return link

    def list(self) -> List[Link]:
        """Every stored link. For debugging only; enumerating all links is not a production API."""
        try:
            return self.storage.list_links()
        except StorageError as e:
            log.error("Failed to list links due to unhandled storage error: %r", e)
            raise StoreError(str(e)) from e
