"""
Cache service client - best-effort lookup/store of RepoDescriptor lists.

Talks to the cache service (gh_proximity.api.cache_service) over HTTP. The
cache is an optimization only: if the service is down, answers with an error
status, or returns something unparseable, a WARNING is logged and the call
reports a miss (lookup → None) or a failed store (store → False). Nothing
here raises.

Uses only Python stdlib (urllib.request).
"""
import http.client
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Any, Optional

from gh_proximity.config import DEFAULT_CONFIG, ProximityConfig
from gh_proximity.models import RepoDescriptor, parse_repo_list

logger = logging.getLogger(__name__)

_MISSING = object()


class CacheGateway:
    """HTTP gateway to the cache service.

    Args:
        base_url: Cache service root, e.g. "http://localhost:5000".
                  Defaults to config.cache_service_url.
        config:   ProximityConfig with the HTTP timeout.
    """

    def __init__(self, base_url: Optional[str] = None, config: ProximityConfig = DEFAULT_CONFIG) -> None:
        self._base = (base_url or config.cache_service_url).rstrip("/")
        self._timeout = config.http_timeout_seconds

    def _request(self, method: str, path: str, body: Any = None) -> Any:
        """Send a request; return the decoded JSON body or _MISSING on any error."""
        url = f"{self._base}{path}"
        data = None
        headers = {"Accept": "application/json"}
        if body is not None:
            data = json.dumps(body).encode("utf-8")
            headers["Content-Type"] = "application/json"
        try:
            req = urllib.request.Request(url, data=data, headers=headers, method=method)
            with urllib.request.urlopen(req, timeout=self._timeout) as resp:
                raw = resp.read()
                return json.loads(raw) if raw else None
        except urllib.error.HTTPError as exc:
            logger.warning("Cache HTTP %d error on %s %s", exc.code, method, path)
            return _MISSING
        except urllib.error.URLError as exc:
            logger.warning("Cache unreachable on %s %s: %s", method, path, exc.reason)
            return _MISSING
        except (OSError, http.client.HTTPException, ValueError) as exc:
            logger.warning("Cache error on %s %s: %s", method, path, exc)
            return _MISSING

    def lookup(self, username: str) -> Optional[list[RepoDescriptor]]:
        """Cached descriptors for *username*, or None on miss or cache failure."""
        user = urllib.parse.quote(username, safe="")
        payload = self._request("GET", f"/cache/{user}")
        if payload is _MISSING or payload is None:
            logger.debug("Cache miss: %s", username)
            return None
        repos = parse_repo_list(payload)
        if repos is None:
            logger.warning(
                "Cache: unexpected payload type %s for %s, treating as miss",
                type(payload).__name__,
                username,
            )
            return None
        logger.debug("Cache hit: %s (%d repos)", username, len(repos))
        return repos

    def store(self, username: str, repos: list[RepoDescriptor]) -> bool:
        """Upsert descriptors for *username*. Returns False if the cache failed."""
        body = {"username": username, "filteredData": [r.to_dict() for r in repos]}
        result = self._request("POST", "/cache", body)
        if result is _MISSING:
            return False
        logger.debug("Cached %d repos for %s", len(repos), username)
        return True
