"""
gh_proximity/pipeline.py - Single-call proximity pipeline.

Dependency order:
    1. Target repositories       (cache → GitHub fallback, fetched once)
    2. Target language profile
    3. Contributor discovery     (target's repos, discovery order)
    4. Contributor repositories  (cache → GitHub, bounded concurrency)
    5. Contributor profiles
    6. Similarity records        (ranked by aggregate score)
    7. BFS distances
    8. Proximity graph
    9. Centrality-styled graph
   10. Community-styled graph + series
   11. Repository overview graph

Steps 1 and 4 are the only I/O. They run the blocking urllib clients through
asyncio.to_thread; every other step is a pure function of the fetched data
(compute_proximity), so output depends only on the inputs and never on the
order in which fetches complete.

Usage:
    result = asyncio.run(run_proximity_pipeline("alice", CacheGateway(), GitHubClient()))
    print(records_to_dataframe(result.records))
"""

import asyncio
import copy
import logging
from dataclasses import dataclass, field
from typing import Optional, Protocol

import networkx as nx

from gh_proximity.config import DEFAULT_CONFIG, ProximityConfig
from gh_proximity.exceptions import PartialFetchError, ProximityError, RateLimitedError
from gh_proximity.graph.builder import (
    build_proximity_graph,
    build_repository_graph,
    to_render_payload,
)
from gh_proximity.graph.distance import resolve_distances
from gh_proximity.ingestion.github_client import filter_profile_repo
from gh_proximity.metrics.centrality import apply_centrality_styling
from gh_proximity.metrics.community import apply_community_styling, build_community_series
from gh_proximity.metrics.language_profile import build_language_profile
from gh_proximity.metrics.similarity import SIMILARITY_POLICY, score_contributors
from gh_proximity.models import LanguageProfile, ProximityRecord, RepoDescriptor

logger = logging.getLogger(__name__)


class RepoCache(Protocol):
    def lookup(self, username: str) -> Optional[list[RepoDescriptor]]: ...

    def store(self, username: str, repos: list[RepoDescriptor]) -> bool: ...


class RepoSource(Protocol):
    def fetch_repos_details(self, username: str) -> list[RepoDescriptor]: ...


@dataclass
class PipelineResult:
    """
    Complete output of one pipeline run for one target user.

    Graphs are independent copies: styling one view never changes another.
    """

    target: str
    target_repos: list[RepoDescriptor]
    target_profile: LanguageProfile
    contributor_profiles: dict[str, LanguageProfile]

    records: list[ProximityRecord]
    distances: dict[str, int]

    proximity_graph: nx.MultiDiGraph
    centrality_graph: nx.MultiDiGraph
    centrality: dict[str, int]
    community_graph: nx.MultiDiGraph
    communities: dict[str, list[str]]
    community_series: list[dict]
    repository_graph: nx.MultiDiGraph

    # Contributors left out of scoring, with the reason.
    skipped: dict[str, str] = field(default_factory=dict)
    rate_limited: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """JSON-ready export of everything the renderer and table need."""
        return {
            "target": self.target,
            "similarity_policy": SIMILARITY_POLICY,
            "target_profile": self.target_profile.percentages,
            "records": [r.to_dict() for r in self.records],
            "distances": self.distances,
            "proximity": to_render_payload(self.proximity_graph),
            "centrality": to_render_payload(self.centrality_graph),
            "communities": self.community_series,
            "repositories": to_render_payload(self.repository_graph),
            "skipped": self.skipped,
            "rate_limited": self.rate_limited,
        }


def discover_contributors(repos: list[RepoDescriptor], target: str) -> list[str]:
    """Distinct contributor logins across *repos*, in first-seen order, minus the target."""
    seen: dict[str, None] = {}
    for repo in repos:
        for contributor in repo.contributors:
            if contributor != target:
                seen.setdefault(contributor, None)
    return list(seen)


async def acquire_repos(
    username: str,
    cache: RepoCache,
    github: RepoSource,
    drop_profile_repo: bool = False,
) -> list[RepoDescriptor]:
    """
    Return *username*'s descriptors from the cache, or from GitHub on a miss.

    A GitHub result is stored back to the cache only when it is complete and
    non-empty. A PartialFetchError result is used for this run but not cached.

    Raises:
        RateLimitedError: GitHub answered 403. Nothing is cached.
        GitHubAPIError:   GitHub could not list the user's repositories.
    """
    cached = await asyncio.to_thread(cache.lookup, username)
    if cached is not None:
        logger.debug("Using cached data for %s (%d repos)", username, len(cached))
        return cached

    complete = True
    try:
        repos = await asyncio.to_thread(github.fetch_repos_details, username)
    except PartialFetchError as exc:
        logger.warning("Incomplete data for %s (%s); not caching", username, exc)
        repos = exc.repos
        complete = False

    if drop_profile_repo:
        repos = filter_profile_repo(repos, username)

    if repos and complete:
        stored = await asyncio.to_thread(cache.store, username, repos)
        if not stored:
            logger.warning("Could not cache data for %s; continuing", username)
    return repos


async def acquire_contributor_repos(
    contributors: list[str],
    cache: RepoCache,
    github: RepoSource,
    config: ProximityConfig = DEFAULT_CONFIG,
) -> tuple[dict[str, list[RepoDescriptor]], dict[str, str], list[str]]:
    """
    Fetch every contributor's descriptors with at most
    config.max_concurrent_fetches acquisitions in flight.

    Returns:
        (repos_by_contributor, skipped, rate_limited)
        repos_by_contributor keeps the order of *contributors*. A contributor
        whose acquisition failed is absent from it and present in skipped
        (and in rate_limited if GitHub answered 403).
    """
    semaphore = asyncio.Semaphore(max(1, config.max_concurrent_fetches))

    async def _one(contributor: str) -> list[RepoDescriptor]:
        async with semaphore:
            return await acquire_repos(contributor, cache, github)

    results = await asyncio.gather(
        *(_one(c) for c in contributors), return_exceptions=True
    )

    repos_by_contributor: dict[str, list[RepoDescriptor]] = {}
    skipped: dict[str, str] = {}
    rate_limited: list[str] = []
    for contributor, result in zip(contributors, results):
        if isinstance(result, RateLimitedError):
            logger.warning("Rate limited while fetching %s; skipped", contributor)
            skipped[contributor] = "rate_limited"
            rate_limited.append(contributor)
        elif isinstance(result, ProximityError):
            logger.warning("Could not fetch %s (%s); skipped", contributor, result)
            skipped[contributor] = "fetch_failed"
        elif isinstance(result, Exception):
            logger.warning("Unhandled error fetching %s: %s; skipped", contributor, result)
            skipped[contributor] = "error"
        elif isinstance(result, BaseException):
            raise result
        else:
            repos_by_contributor[contributor] = result

    logger.info(
        "Acquired %d/%d contributors (%d rate limited).",
        len(repos_by_contributor),
        len(contributors),
        len(rate_limited),
    )
    return repos_by_contributor, skipped, rate_limited


def compute_proximity(
    target: str,
    target_repos: list[RepoDescriptor],
    contributor_repos: dict[str, list[RepoDescriptor]],
    config: ProximityConfig = DEFAULT_CONFIG,
) -> PipelineResult:
    """
    Run every computation step on already-fetched data.

    Args:
        target:            Target username.
        target_repos:      Target's RepoDescriptors.
        contributor_repos: contributor → RepoDescriptors, in discovery order.
        config:            ProximityConfig.

    Returns:
        PipelineResult (skipped / rate_limited left empty).
    """
    target_profile = build_language_profile(target_repos)
    contributor_profiles = {
        contributor: build_language_profile(repos)
        for contributor, repos in contributor_repos.items()
    }

    records = score_contributors(target_profile, contributor_profiles)
    distances = resolve_distances(records, target)

    proximity_graph = build_proximity_graph(records, target, distances, config)

    centrality_graph = copy.deepcopy(proximity_graph)
    centrality_graph.graph["view"] = "centrality"
    centrality = apply_centrality_styling(centrality_graph, config)

    community_graph = copy.deepcopy(proximity_graph)
    community_graph.graph["view"] = "community"
    communities = apply_community_styling(community_graph, config)
    community_series = build_community_series(community_graph, config)

    repository_graph = build_repository_graph(target_repos, target, config)

    return PipelineResult(
        target=target,
        target_repos=list(target_repos),
        target_profile=target_profile,
        contributor_profiles=contributor_profiles,
        records=records,
        distances=distances,
        proximity_graph=proximity_graph,
        centrality_graph=centrality_graph,
        centrality=centrality,
        community_graph=community_graph,
        communities=communities,
        community_series=community_series,
        repository_graph=repository_graph,
    )


async def run_proximity_pipeline(
    target: str,
    cache: RepoCache,
    github: RepoSource,
    config: ProximityConfig = DEFAULT_CONFIG,
) -> PipelineResult:
    """
    Execute the full proximity pipeline for *target*.

    Raises:
        RateLimitedError: GitHub rate-limited the target's own fetch.
        GitHubAPIError:   the target's repositories could not be fetched.
    """
    logger.info("Proximity pipeline starting for %s.", target)

    target_repos = await acquire_repos(target, cache, github, drop_profile_repo=True)
    contributors = discover_contributors(target_repos, target)
    logger.info("%s: %d repos, %d contributors.", target, len(target_repos), len(contributors))

    contributor_repos, skipped, rate_limited = await acquire_contributor_repos(
        contributors, cache, github, config
    )

    result = compute_proximity(target, target_repos, contributor_repos, config)
    result.skipped = skipped
    result.rate_limited = rate_limited

    logger.info(
        "Proximity pipeline complete for %s: %d records, %d nodes.",
        target,
        len(result.records),
        result.proximity_graph.number_of_nodes(),
    )
    return result

