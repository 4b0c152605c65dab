"""
Startup phase for the curtail server.

`bootstrap` checks configuration, builds the store and prepares its schema,
returning a `SetupResult` instead of raising. The process entry point decides
what to do with a failure (log it and exit non-zero); the service never
starts on top of a half-initialized store.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .config import validate_settings
from .storage.base import BaseStorage, StorageError
from .storage.storage_factory import get_storage

log = logging.getLogger("curtail.bootstrap")


@dataclass(frozen=True)
class SetupResult:
    ok: bool
    error: Optional[str] = None
    storage: Optional[BaseStorage] = None


def bootstrap(conf, storage: Optional[BaseStorage] = None) -> SetupResult:
    """
    Validate settings, build the store (unless one is injected) and create its schema.

    Returns:
        SetupResult: ok=True with the ready store, or ok=False with an error message.
    """
    problem = validate_settings(conf)
    if problem:
        return SetupResult(ok=False, error=f"Config error: {problem}")

    if storage is None:
        try:
            storage = get_storage(conf.STORAGE_BACKEND, dsn=conf.DB_DSN)
        except ValueError as e:
            return SetupResult(ok=False, error=f"Config error: {e}")

    try:
        storage.bootstrap()
    except StorageError as e:
        return SetupResult(ok=False, error=f"Storage setup failed: {e}")

    log.info("Storage backend %s ready", type(storage).__name__)
    return SetupResult(ok=True, storage=storage)
