"""
GitHub REST client - repository descriptors for a user.

Combines three endpoints into a RepoDescriptor list:

    GET /users/{user}/repos                  repository names
    GET /repos/{user}/{repo}/languages       language names (API order)
    GET /repos/{user}/{repo}/contributors    contributor logins

HTTP 403 from any call raises RateLimitedError so callers can tell a
rate-limit condition apart from other failures. Any other failure of the repo
list raises GitHubAPIError. Any other failure of a per-repo call leaves that
field empty for that repo, and fetch_repos_details then raises
PartialFetchError carrying the incomplete list so it is used but not cached.

Uses only Python stdlib (urllib.request). No retry or backoff is attempted.
"""
import http.client
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Optional

from gh_proximity.config import DEFAULT_CONFIG, ProximityConfig
from gh_proximity.exceptions import GitHubAPIError, PartialFetchError, RateLimitedError
from gh_proximity.models import RepoDescriptor

logger = logging.getLogger(__name__)

_FAILED = object()


class GitHubClient:
    """Fetches a user's repositories with their languages and contributors.

    Args:
        token:  Optional personal access token, sent as the Authorization
                header. Unauthenticated access is limited to 60 req/hr.
        config: ProximityConfig with API base URL, page size and timeout.
    """

    def __init__(self, token: Optional[str] = None, config: ProximityConfig = DEFAULT_CONFIG) -> None:
        self._token = token
        self._base = config.github_api_base.rstrip("/")
        self._per_page = config.github_per_page
        self._timeout = config.http_timeout_seconds

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self._token:
            headers["Authorization"] = (
                self._token if " " in self._token else f"Bearer {self._token}"
            )
        return headers

    def _get(self, path: str) -> dict | list | None:
        """GET *path* and decode the JSON body. An empty body (HTTP 204) is None.

        Raises:
            RateLimitedError: on HTTP 403.
            GitHubAPIError:   on any other HTTP, network, read or decode error.
        """
        url = f"{self._base}{path}"
        try:
            req = urllib.request.Request(url, headers=self._headers())
            with urllib.request.urlopen(req, timeout=self._timeout) as resp:
                raw = resp.read()
                return json.loads(raw) if raw else None
        except urllib.error.HTTPError as exc:
            if exc.code == 403:
                logger.warning("Rate limited or forbidden (HTTP 403): %s", path)
                raise RateLimitedError(f"GitHub API rate limit hit on {path}") from exc
            logger.warning("HTTP %d error on %s: %s", exc.code, path, exc.reason)
            raise GitHubAPIError(
                f"GitHub API HTTP {exc.code} on {path}", status=exc.code
            ) from exc
        except urllib.error.URLError as exc:
            logger.warning("Network error on %s: %s", path, exc.reason)
            raise GitHubAPIError(f"GitHub API unreachable for {path}: {exc.reason}") from exc
        except (OSError, http.client.HTTPException) as exc:
            # Read-phase failures: socket timeouts, truncated bodies.
            logger.warning("Read error on %s: %r", path, exc)
            raise GitHubAPIError(f"GitHub API read failed for {path}: {exc!r}") from exc
        except ValueError as exc:
            logger.warning("Invalid JSON from %s: %s", path, exc)
            raise GitHubAPIError(f"GitHub API returned invalid JSON for {path}") from exc

    def _get_optional(self, path: str):
        """Like _get, but non-403 failures return the _FAILED sentinel."""
        try:
            return self._get(path)
        except RateLimitedError:
            raise
        except GitHubAPIError:
            return _FAILED

    def fetch_repo_names(self, username: str) -> list[str]:
        user = urllib.parse.quote(username, safe="")
        data = self._get(f"/users/{user}/repos?per_page={self._per_page}")
        if not isinstance(data, list):
            raise GitHubAPIError(f"Unexpected repo list payload for {username}")
        return [str(repo["name"]) for repo in data if isinstance(repo, dict) and repo.get("name")]

    def fetch_repo_languages(self, username: str, repo: str) -> Optional[list[str]]:
        """Language names for one repo, in the order the API lists them.

        Returns None if the call failed, [] if the repo has no languages.
        """
        user = urllib.parse.quote(username, safe="")
        name = urllib.parse.quote(repo, safe="")
        data = self._get_optional(f"/repos/{user}/{name}/languages")
        if data is _FAILED:
            return None
        if not isinstance(data, dict):
            return []
        return list(data.keys())

    def fetch_repo_contributors(self, username: str, repo: str) -> Optional[list[str]]:
        """Contributor logins for one repo; None if the call failed."""
        user = urllib.parse.quote(username, safe="")
        name = urllib.parse.quote(repo, safe="")
        data = self._get_optional(
            f"/repos/{user}/{name}/contributors?per_page={self._per_page}"
        )
        if data is _FAILED:
            return None
        if not isinstance(data, list):
            return []
        return [str(c["login"]) for c in data if isinstance(c, dict) and c.get("login")]

    def fetch_repos_details(self, username: str) -> list[RepoDescriptor]:
        """Fetch every repository of *username* as a RepoDescriptor.

        Raises:
            RateLimitedError:  if any call is rate limited. No partial result
                               is returned.
            PartialFetchError: if some per-repo call failed. exc.repos holds
                               every descriptor, with failed fields empty.
            GitHubAPIError:    if the repository list cannot be fetched.
        """
        names = self.fetch_repo_names(username)
        logger.info("GitHub: %s has %d repos", username, len(names))

        repos: list[RepoDescriptor] = []
        failed: list[str] = []
        for name in names:
            languages = self.fetch_repo_languages(username, name)
            contributors = self.fetch_repo_contributors(username, name)
            if languages is None or contributors is None:
                failed.append(name)
            repos.append(
                RepoDescriptor(
                    name=name,
                    languages=tuple(languages or ()),
                    contributors=tuple(dict.fromkeys(contributors or ())),
                )
            )

        if failed:
            raise PartialFetchError(
                f"{len(failed)} of {len(names)} repos of {username} fetched incompletely",
                repos=repos,
                failed=failed,
            )
        return repos


def filter_profile_repo(repos: list[RepoDescriptor], username: str) -> list[RepoDescriptor]:
    """Drop the profile README repository, which is named after its owner."""
    return [repo for repo in repos if repo.name != username]
