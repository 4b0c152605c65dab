"""
Main API module for curtail.

Responsibilities:
    - Expose REST endpoints for creating, resolving and listing short links
    - Map LinkError subclasses to JSON error bodies with a request id
    - Run the startup phase and refuse to serve if it fails

Architecture:
    - App Factory pattern (create_app) for test isolation and DI.
    - The store is built once and injected into a LinkService; routes only
      talk to the service.
    - In-memory store by default; CURTAIL_STORAGE_BACKEND=postgres switches backend.

Run:
    python main.py                  # validates config, bootstraps, serves on CURTAIL_LISTEN_ON
    uvicorn main:app --reload       # bootstrap runs in the app lifespan
"""

import logging
import sys
import uuid
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from curtail_platform.bootstrap import bootstrap
from curtail_platform.config import settings, split_listen_on
from curtail_platform.errors import LinkError
from curtail_platform.service import LinkService
from curtail_platform.storage.base import BaseStorage

log = logging.getLogger("curtail.api")


class LinkForCreate(BaseModel):
    """Request payload for creating a new short link."""
    target: str


def create_app(storage: Optional[BaseStorage] = None, conf=settings) -> FastAPI:
    """
    Factory function to build and configure a new FastAPI app instance.

    Args:
        storage: Store to serve from. Built from configuration when omitted.
        conf: Settings object used by the startup phase.

    Returns:
        FastAPI: A configured application with its own store and service.
    """
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=getattr(logging, conf.LOG_LEVEL, logging.INFO),
            format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        result = bootstrap(conf, storage=storage)
        if not result.ok:
            log.critical(result.error)
            raise RuntimeError(result.error)
        if storage is None:
            app.state.service = LinkService(result.storage)
        yield

    app = FastAPI(
        title="curtail",
        description="Short link service with a collision-checked 16-bit code namespace",
        docs_url="/docs",
        lifespan=lifespan,
    )
    if storage is not None:
        app.state.service = LinkService(storage)

    def get_service(request: Request) -> LinkService:
        return request.app.state.service

    @app.exception_handler(LinkError)
    async def link_error_handler(request: Request, exc: LinkError) -> JSONResponse:
        req_uuid = str(uuid.uuid4())
        log.warning("%s - %s %s - Error: %r", req_uuid, request.method, request.url.path, exc)
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": {
                    "req_uuid": req_uuid,
                    "type": exc.client_error,
                    "description": exc.description,
                }
            },
        )

    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/link", status_code=201)
    def create_link(req: LinkForCreate, service: LinkService = Depends(get_service)) -> Dict[str, Any]:
        """Create a short link for `target`; 201 with the stored link."""
        return service.create(req.target).to_dict()

    @app.get("/api/link/{short_code}")
    def get_link(short_code: str, service: LinkService = Depends(get_service)) -> Dict[str, Any]:
        """Resolve a short code to its link, 404 if unknown."""
        return service.get(short_code).to_dict()

    # For debugging only. Enumerating all links is not a production API.
    @app.get("/api/all")
    def list_links(service: LinkService = Depends(get_service)) -> List[Dict[str, Any]]:
        return [link.to_dict() for link in service.list()]

    return app


def run() -> None:
    """Process entry point: exit non-zero if the startup phase fails."""
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    result = bootstrap(settings)
    if not result.ok:
        log.critical(result.error)
        sys.exit(1)

    host, port = split_listen_on(settings.LISTEN_ON)
    log.info("Listening on http://%s:%d", host, port)
    uvicorn.run(create_app(storage=result.storage, conf=settings), host=host, port=port)


# `uvicorn main:app` and `from main import app` continue to work.
app = create_app()

if __name__ == "__main__":
    run()
