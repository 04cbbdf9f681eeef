"""
gh_proximity/api/cache_service.py - FastAPI cache service for repo descriptors.

Stores the RepoDescriptor list fetched for each GitHub user so that repeat
runs and overlapping contributor sets skip the GitHub API.

Endpoint summary:
    GET    /cache/all           - Every entry as [{username, filteredData}].
    GET    /cache/{username}    - RepoDescriptor list, or null if absent.
    POST   /cache               - Upsert {username, filteredData}.
    DELETE /cache/{username}    - Remove one entry.
    DELETE /cache               - Remove every entry.
    GET    /health              - Liveness probe.

/cache/all is registered before /cache/{username} so the literal path wins.
"""

import logging
from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from gh_proximity import __version__
from gh_proximity.exceptions import CacheError
from gh_proximity.models import RepoDescriptor
from gh_proximity.storage.cache_store import CacheStore

logger = logging.getLogger(__name__)


# ── Request / Response models ──────────────────────────────────────────────────

class RepoPayload(BaseModel):
    """One repository as sent to and returned by the cache."""
    name: str
    languages: Optional[list[str]] = None
    contributors: Optional[list[str]] = None

    def to_descriptor(self) -> RepoDescriptor:
        return RepoDescriptor.from_dict(self.model_dump())


class CacheRequest(BaseModel):
    """Request body for POST /cache."""
    username: str = Field(min_length=1)
    filteredData: list[RepoPayload] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    entries: int


def create_app(store: Optional[CacheStore] = None) -> FastAPI:
    """
    Create and return the cache service application.

    Args:
        store: CacheStore to serve. A fresh empty store is created when None;
               tests inject their own to inspect state directly.

    Returns:
        Configured FastAPI application instance. The store is available as
        app.state.store.
    """
    store = store if store is not None else CacheStore()

    app = FastAPI(
        title="gh-proximity cache",
        version=__version__,
        description="Per-user cache of GitHub repository descriptors.",
    )
    app.state.store = store

    @app.get("/health", response_model=HealthResponse, tags=["system"])
    async def health() -> dict:
        """Liveness probe with the service version and entry count."""
        return {"status": "ok", "version": __version__, "entries": len(store)}

    @app.get("/cache/all", tags=["cache"])
    async def get_all() -> list[dict]:
        """Return every cached entry."""
        return [
            {"username": username, "filteredData": [r.to_dict() for r in repos]}
            for username, repos in store.all()
        ]

    @app.get("/cache/{username}", tags=["cache"])
    async def get_cached(username: str) -> Optional[list[dict]]:
        """Return the cached RepoDescriptor list for *username*, or null."""
        repos = store.get(username)
        if repos is None:
            return None
        return [r.to_dict() for r in repos]

    @app.post("/cache", tags=["cache"])
    async def put_cached(request: CacheRequest) -> dict:
        """Upsert the entry for request.username, replacing any previous one."""
        try:
            store.upsert(request.username, [r.to_descriptor() for r in request.filteredData])
        except CacheError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        logger.info("Cached %d repos for %s", len(request.filteredData), request.username)
        return {"message": f"Data cached for user: {request.username}"}

    @app.delete("/cache/{username}", tags=["cache"])
    async def delete_cached(username: str) -> dict:
        """Remove the entry for *username*. Succeeds whether or not it existed."""
        store.delete(username)
        return {"message": f"Data deleted for user: {username}"}

    @app.delete("/cache", tags=["cache"])
    async def clear_cache() -> dict:
        """Remove every entry."""
        store.clear()
        return {"message": "All cached data deleted"}

    logger.info("Cache service application created.")
    return app
