"""
gh_proximity.ingestion - HTTP clients for data acquisition.

Modules:
    github_client  - GitHub REST API: repos, languages, contributors.
    cache_client   - Cache service gateway (lookup/store, best effort).
"""
