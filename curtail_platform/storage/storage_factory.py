"""
Storage factory - switch storage backend from config (lazy env version)
======================================================================

Centralizes selection of the link store (in-memory vs PostgreSQL) so the
rest of the app stays ignorant of where data lives. The store is built once
by the caller and injected into LinkService; nothing here caches instances.

Environment variables
---------------------
- CURTAIL_STORAGE_BACKEND: "memory" (default) or "postgres"
- CURTAIL_DB_DSN:          DSN string if backend=="postgres"
"""

import logging
import os
from typing import Optional

from curtail_platform.storage.base import BaseStorage
from curtail_platform.storage.storage import Storage

log = logging.getLogger("curtail.storage")


def get_storage(backend: Optional[str] = None, **kwargs) -> BaseStorage:
    """
    Return a BaseStorage implementation based on configuration.

    Parameters
    ----------
    backend : str, optional
        "memory" (default) or "postgres". If omitted, reads CURTAIL_STORAGE_BACKEND.
    kwargs : dict
        Extra args passed to the backend constructor. For postgres, use dsn="...".

    Raises
    ------
    ValueError
        If the backend is unknown or postgres is selected without a DSN.
    """
    # Read env now to avoid capturing stale values at import time
    be = (backend or os.getenv("CURTAIL_STORAGE_BACKEND", "memory")).strip().lower()
    log.info("Selected storage backend: %r", be)

    if be == "memory":
        return Storage()

    if be == "postgres":
        dsn = kwargs.get("dsn") or os.getenv("CURTAIL_DB_DSN", "")
        if not dsn:
            raise ValueError("DB_DSN is required for postgres backend (env CURTAIL_DB_DSN)")
        # Local import to avoid hard dependency when not using postgres
        from curtail_platform.storage.db_storage import DBStorage
        return DBStorage(dsn=dsn)

    raise ValueError(f"Unknown storage backend: {be!r}")
