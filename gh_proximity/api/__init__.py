"""
gh_proximity.api - FastAPI cache service.

Modules:
    cache_service - create_app() exposing GET/POST/DELETE /cache endpoints.
"""
