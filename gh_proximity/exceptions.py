"""
Exceptions raised by the proximity pipeline's data acquisition layer.

Computation modules never raise these; they are produced at the HTTP
boundaries (GitHub client, cache client) and handled by the pipeline.
"""


class ProximityError(Exception):
    """Base exception for all gh_proximity errors."""

    def __init__(self, message: str, stage: str = None, details: dict = None):
        super().__init__(message)
        self.stage = stage
        self.details = details or {}

    def __str__(self):
        base_msg = super().__str__()
        if self.stage:
            return f"[{self.stage}] {base_msg}"
        return base_msg


class GitHubAPIError(ProximityError):
    """Raised when the GitHub API cannot produce a user's repositories."""

    def __init__(self, message: str, status: int = None, details: dict = None):
        super().__init__(message, stage="GitHub", details=details)
        self.status = status


class RateLimitedError(GitHubAPIError):
    """Raised when the GitHub API answers 403 (rate limit or forbidden)."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, status=403, details=details)


class CacheError(ProximityError):
    """Raised by the cache store on invalid payloads."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, stage="Cache", details=details)


class PartialFetchError(GitHubAPIError):
    """Raised when a repo list was fetched but some per-repo calls failed.

    The descriptors are still usable for one run; fields whose call failed
    are empty. They must not be cached.
    """

    def __init__(self, message: str, repos: list, failed: list = None):
        super().__init__(message, details={"failed": list(failed or [])})
        self.repos = repos
