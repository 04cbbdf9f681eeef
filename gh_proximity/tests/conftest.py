"""
gh_proximity/tests/conftest.py - Shared pytest fixtures for the test suite.

Fixtures:
    alice_repos     - Target repos of the worked example (alice, bob).
    sample_records  - Hand-built ProximityRecords over two contributors.
    memory_cache    - Empty in-process CacheStore used as the cache gateway.
    fake_github     - Factory for FakeGitHub doubles.
    github_token    - GitHub PAT from GITHUB_TOKEN env var (or None).
"""

import os
import threading
import time

import pytest

from gh_proximity.exceptions import GitHubAPIError, PartialFetchError, RateLimitedError
from gh_proximity.models import ProximityRecord, RepoDescriptor
from gh_proximity.storage.cache_store import CacheStore


# ── Pytest configuration hooks ────────────────────────────────────────────────

def pytest_configure(config):
    """Register the integration marker."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests that call the real GitHub API (deselected by default, "
        "pass --run-integration or -m integration to enable)",
    )


def pytest_addoption(parser):
    """Add --run-integration CLI flag to enable integration tests."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="Run integration tests that call the real GitHub API.",
    )


def pytest_collection_modifyitems(config, items):
    """Skip integration tests unless --run-integration or -m integration is used."""
    markexpr = config.getoption("-m", default="")
    if "integration" in markexpr:
        return

    if config.getoption("--run-integration"):
        return

    skip_integration = pytest.mark.skip(
        reason="Integration test -- pass --run-integration or -m integration to run"
    )
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip_integration)


# ── Test doubles ──────────────────────────────────────────────────────────────

class FakeGitHub:
    """
    In-memory stand-in for GitHubClient.

    Args:
        repos:        username → list of RepoDescriptor.
        rate_limited: usernames that raise RateLimitedError.
        failing:      usernames that raise GitHubAPIError.
        partial:      usernames whose repos come back in a PartialFetchError.
        delays:       username → seconds to sleep before answering.
        gates:        username → threading.Event to wait on before answering.
    """

    def __init__(self, repos=None, rate_limited=(), failing=(), partial=(), delays=None, gates=None):
        self.repos = dict(repos or {})
        self.rate_limited = set(rate_limited)
        self.failing = set(failing)
        self.partial = set(partial)
        self.delays = dict(delays or {})
        self.gates = dict(gates or {})
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def fetch_repos_details(self, username):
        with self._lock:
            self.calls.append(username)
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if username in self.gates:
                self.gates[username].wait(timeout=5)
            if username in self.delays:
                time.sleep(self.delays[username])
            if username in self.rate_limited:
                raise RateLimitedError(f"rate limited: {username}")
            if username in self.failing or username not in self.repos:
                raise GitHubAPIError(f"not found: {username}", status=404)
            if username in self.partial:
                raise PartialFetchError(f"incomplete: {username}", repos=list(self.repos[username]))
            return list(self.repos[username])
        finally:
            with self._lock:
                self.in_flight -= 1


def repo(name, languages=(), contributors=()):
    return RepoDescriptor(name=name, languages=tuple(languages), contributors=tuple(contributors))


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def alice_repos():
    """alice owns r1 (js, js, py) with bob as the only other contributor."""
    return [repo("r1", ["js", "js", "py"], ["alice", "bob"])]


@pytest.fixture
def bob_repos():
    return [repo("b1", ["js"], ["bob"]), repo("b2", ["java"], ["bob"])]


@pytest.fixture
def sample_records():
    """
    carol shares js and py with the target, dave shares only js.

    Adjacency: target → carol → {js, py}; target → dave → {js}.
    """
    return [
        ProximityRecord("carol", "js", 60.0, 50.0, 90.0),
        ProximityRecord("carol", "py", 40.0, 50.0, 90.0),
        ProximityRecord("dave", "js", 60.0, 100.0, 60.0),
    ]


@pytest.fixture
def memory_cache():
    return CacheStore()


@pytest.fixture
def fake_github():
    """Factory: fake_github(repos={...}, rate_limited=[...], ...) → FakeGitHub."""
    return FakeGitHub


@pytest.fixture
def make_repo():
    return repo


@pytest.fixture(scope="session")
def github_token():
    """GitHub PAT from the environment, or None."""
    return os.environ.get("GITHUB_TOKEN")
