"""
gh_proximity/config.py - All tunable parameters for the proximity pipeline.

Visual constants, gradient endpoints, concurrency limits and service URLs live
here so that no module hardcodes them.
"""

import os
from dataclasses import dataclass, replace


@dataclass(frozen=True)
class ProximityConfig:
    """
    Immutable configuration for the proximity pipeline.

    Override by constructing a new ProximityConfig with the desired values,
    or with ProximityConfig.from_env() for deployment overrides.
    """

    # ── Node styling (proximity + repository graphs) ──────────────────────────
    target_radius: float = 25.0
    contributor_radius: float = 15.0
    language_radius: float = 10.0
    repository_radius: float = 15.0
    repo_contributor_radius: float = 12.0
    # Contributors in the repository overview graph are drawn smaller than
    # contributors in the proximity graph.

    target_color: str = "#3366cc"
    contributor_color: str = "#7cb5ec"
    language_color: str = "#90ee7e"
    repository_color: str = "#7cb5ec"
    repo_contributor_color: str = "#f7a35c"
    # Retarget candidates in the repository graph carry this color.

    target_edge_color: str = "#3366cc"

    # ── Centrality gradient ───────────────────────────────────────────────────
    centrality_low_rgb: tuple[int, int, int] = (144, 238, 126)
    centrality_high_rgb: tuple[int, int, int] = (255, 0, 0)
    centrality_radius_factor: float = 5.0
    centrality_min_radius: float = 10.0
    # Nodes with zero centrality fall back to this radius.

    # ── Community palette ─────────────────────────────────────────────────────
    community_saturation: int = 100
    community_lightness: int = 50

    # ── Acquisition ───────────────────────────────────────────────────────────
    max_concurrent_fetches: int = 4
    # Upper bound on contributors fetched at once. GitHub allows 5000 req/hr
    # authenticated and 60 req/hr without a token; each contributor costs
    # 1 + 2 × repos requests on a cache miss.

    github_api_base: str = "https://api.github.com"
    github_per_page: int = 100
    http_timeout_seconds: float = 30.0

    cache_service_url: str = "http://localhost:5000"

    @classmethod
    def from_env(cls, base: "ProximityConfig | None" = None) -> "ProximityConfig":
        """Return a copy of *base* with overrides read from the environment."""
        base = base or cls()
        overrides: dict = {}
        if os.environ.get("GH_PROXIMITY_CACHE_URL"):
            overrides["cache_service_url"] = os.environ["GH_PROXIMITY_CACHE_URL"]
        if os.environ.get("GH_PROXIMITY_MAX_CONCURRENCY"):
            overrides["max_concurrent_fetches"] = int(os.environ["GH_PROXIMITY_MAX_CONCURRENCY"])
        if os.environ.get("GITHUB_API_BASE"):
            overrides["github_api_base"] = os.environ["GITHUB_API_BASE"]
        return replace(base, **overrides)


# Singleton default, imported everywhere instead of constructing anew.
DEFAULT_CONFIG = ProximityConfig()
