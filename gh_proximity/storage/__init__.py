"""
gh_proximity.storage - In-memory storage behind the cache service.

Modules:
    cache_store - Thread-safe username → RepoDescriptor list upsert store.
"""
