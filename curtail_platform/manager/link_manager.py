"""
LinkManager module for curtail_platform.

Responsibilities:
    - Validate the target before any allocation work
    - Enforce the capacity guard against the current link count
    - Allocate a collision-free short code: generate -> insert -> retry on collision
    - Translate storage faults into StoreError without masking them as collisions

Design notes:
    - Only `UniqueViolation` from the store is retried. Any other storage fault
      aborts at once so a real outage never looks like a run of collisions.
    - Each row is fully formed before insertion, so success on the first
      non-colliding attempt needs no cleanup.
    - Generator and storage are injected; nothing here is process-global.
"""

import logging
from typing import Optional

from ..errors import StoreError, TooManyCollisions
from ..models import Link
from ..storage.base import BaseStorage, StorageError, UniqueViolation
from .capacity import CAPACITY_THRESHOLD, check_capacity
from .generator import BaseGenerator, TimeOrderedGenerator
from .validation import validate_target

log = logging.getLogger("curtail.manager")

# How many times to try inserting a new link when the short_code index rejects it.
MAX_ATTEMPTS = 1000


class LinkManager:
    """
    Coordinates creation of links on top of an injected store.
    """

    def __init__(
        self,
        storage: BaseStorage,
        generator: Optional[BaseGenerator] = None,
        max_attempts: int = MAX_ATTEMPTS,
        capacity_threshold: int = CAPACITY_THRESHOLD,
    ):
        """
        Args:
            storage (BaseStorage): Backend storage instance.
            generator (Optional[BaseGenerator]): Code generator; defaults to TimeOrderedGenerator.
            max_attempts (int): Insert attempts before giving up with TooManyCollisions.
            capacity_threshold (int): Link count at which creation is refused.
        """
        self.storage = storage
        self.generator = generator or TimeOrderedGenerator()
        self.max_attempts = max_attempts
        self.capacity_threshold = capacity_threshold

    def create_link(self, target: str) -> Link:
        """
        Create a new link for `target`.

        Steps:
            1) Validate target (EmptyTarget / TargetTooLong / BadProtocol).
            2) Count stored links; a store fault becomes StoreError.
            3) Capacity guard (CapacityExceeded).
            4) Up to max_attempts times: generate (record_id, short_code) and
               insert. UniqueViolation -> retry with a fresh id; any other
               StorageError -> StoreError immediately.
            5) Budget exhausted -> TooManyCollisions.

        Returns:
            Link: The stored link.
        """
        validate_target(target)

        try:
            existing = self.storage.count_links()
        except StorageError as e:
            log.error("Link creation failed due to unhandled storage error: %r", e)
            raise StoreError(str(e)) from e

        check_capacity(existing, self.capacity_threshold)

        collisions = 0
        short_code = ""
        while collisions < self.max_attempts:
            record_id, short_code = self.generator.generate()
            link = Link(record_id=record_id, short_code=short_code, target=target)
            try:
                self.storage.insert_link(link)
            except UniqueViolation:
                collisions += 1
                log.debug("Collision %d on short code %s", collisions, short_code)
                continue
            except StorageError as e:
                log.error("Link creation failed due to unhandled storage error: %r", e)
                raise StoreError(str(e)) from e

            if collisions:
                log.info(
                    "Link for %s created after %d collision%s",
                    short_code,
                    collisions,
                    "" if collisions == 1 else "s",
                )
            return link

        log.error("Too many collisions (%d) on short link (%s)", collisions, short_code)
        raise TooManyCollisions(f"{collisions} consecutive short_code collisions")
