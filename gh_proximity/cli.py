"""
gh_proximity/cli.py - Command-line interface.

Usage:
    python -m gh_proximity proximity alice                 # proximity table
    python -m gh_proximity proximity alice -o graph.json   # + render payload
    python -m gh_proximity proximity alice --no-cache      # in-process cache only
    python -m gh_proximity serve-cache --port 5000         # run the cache service

GITHUB_TOKEN is read from .env in the repo root (or --env-file) before
falling back to the environment variable.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from dataclasses import replace
from pathlib import Path

from gh_proximity.config import DEFAULT_CONFIG, ProximityConfig


# ── .env loader (stdlib only, no python-dotenv required) ─────────────────────

def _find_env_file() -> Path | None:
    """Nearest .env walking up from the package's parent directory."""
    start = Path(__file__).resolve().parent.parent
    return next(
        (d / ".env" for d in (start, *start.parents) if (d / ".env").is_file()),
        None,
    )


def _parse_env_line(line: str) -> tuple[str, str] | None:
    """Split one KEY=value line. Comments, blanks and malformed lines give None.

    Accepts an optional leading 'export ' and strips one pair of matching
    quotes around the value.
    """
    line = line.strip()
    if line.startswith("export "):
        line = line[len("export "):].lstrip()
    if not line or line.startswith("#"):
        return None
    key, sep, value = (part.strip() for part in line.partition("="))
    if not sep or not key:
        return None
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        value = value[1:-1]
    return key, value


def _load_dotenv(env_file: str | None = None) -> dict[str, str]:
    """Inject .env values into os.environ without overriding existing ones.

    Args:
        env_file: Explicit path. If None, the nearest .env above the package
                  is used.

    Returns:
        The key/value pairs that were newly set.
    """
    path = Path(env_file) if env_file else _find_env_file()
    if path is None or not path.is_file():
        return {}

    pairs = filter(None, map(_parse_env_line, path.read_text(encoding="utf-8").splitlines()))
    loaded = {key: value for key, value in pairs if key not in os.environ}
    os.environ.update(loaded)
    return loaded


# ── Logging setup ─────────────────────────────────────────────────────────────

def _setup_logging(level: str = "INFO") -> None:
    """Configure root logger with timestamps on stderr."""
    numeric = getattr(logging, level.upper(), logging.INFO)
    fmt = "%(asctime)s  %(levelname)-8s  %(name)s - %(message)s"
    logging.basicConfig(level=numeric, format=fmt, datefmt="%H:%M:%S", stream=sys.stderr)
    logging.getLogger("urllib.request").setLevel(logging.WARNING)


logger = logging.getLogger("gh_proximity.cli")


def _build_config(args: argparse.Namespace) -> ProximityConfig:
    config = ProximityConfig.from_env(DEFAULT_CONFIG)
    overrides: dict = {}
    if getattr(args, "cache_url", None):
        overrides["cache_service_url"] = args.cache_url
    if getattr(args, "workers", None):
        overrides["max_concurrent_fetches"] = args.workers
    return replace(config, **overrides) if overrides else config


# ── Subcommand: proximity ─────────────────────────────────────────────────────

def cmd_proximity(args: argparse.Namespace) -> int:
    """Run the pipeline for one user and print the proximity table."""
    _load_dotenv(args.env_file)
    _setup_logging(args.log_level)

    from gh_proximity.exceptions import GitHubAPIError, RateLimitedError
    from gh_proximity.ingestion.cache_client import CacheGateway
    from gh_proximity.ingestion.github_client import GitHubClient
    from gh_proximity.metrics.similarity import records_to_dataframe
    from gh_proximity.pipeline import run_proximity_pipeline
    from gh_proximity.storage.cache_store import CacheStore

    config = _build_config(args)
    token = args.token or os.environ.get("GITHUB_TOKEN")
    if not token:
        logger.warning(
            "GITHUB_TOKEN not set. Unauthenticated GitHub rate limit is 60 req/hr. "
            "Set it in .env or pass --token."
        )

    cache = CacheStore() if args.no_cache else CacheGateway(config=config)
    github = GitHubClient(token=token, config=config)

    try:
        result = asyncio.run(run_proximity_pipeline(args.username, cache, github, config))
    except RateLimitedError as exc:
        logger.error("GitHub rate limit reached: %s", exc)
        return 3
    except GitHubAPIError as exc:
        logger.error("Could not fetch repositories for %s: %s", args.username, exc)
        return 1

    df = records_to_dataframe(result.records)
    if df.empty:
        print(f"No contributors of {args.username} share a language with them.")
    else:
        print(f"Language proximity for {args.username}")
        print(df.to_string(index=False, float_format=lambda v: f"{v:.2f}"))

    if result.rate_limited:
        logger.warning(
            "%d contributors skipped due to rate limiting: %s",
            len(result.rate_limited),
            ", ".join(result.rate_limited),
        )

    if args.output:
        with open(args.output, "w", encoding="utf-8") as fh:
            json.dump(result.to_dict(), fh, indent=2)
        logger.info("Graph payload written to %s", args.output)

    return 0


# ── Subcommand: serve-cache ───────────────────────────────────────────────────

def cmd_serve_cache(args: argparse.Namespace) -> int:
    """Run the cache service with uvicorn."""
    _setup_logging(args.log_level)

    import uvicorn

    from gh_proximity.api.cache_service import create_app

    logger.info("Cache service listening on %s:%d", args.host, args.port)
    uvicorn.run(create_app(), host=args.host, port=args.port, log_level=args.log_level.lower())
    return 0


# ── Parser ────────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gh_proximity",
        description="Language proximity graphs for GitHub users.",
    )
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO).")
    sub = parser.add_subparsers(dest="command", required=True)

    p_prox = sub.add_parser("proximity", help="Compute the proximity graph for a user.")
    p_prox.add_argument("username", help="Target GitHub username.")
    p_prox.add_argument("--token", default=None, help="GitHub personal access token.")
    p_prox.add_argument("--env-file", default=None, help="Path to a .env file.")
    p_prox.add_argument("--cache-url", default=None, help="Cache service base URL.")
    p_prox.add_argument("--no-cache", action="store_true", help="Use an in-process cache only.")
    p_prox.add_argument("--workers", type=int, default=None, help="Max concurrent contributor fetches.")
    p_prox.add_argument("-o", "--output", default=None, help="Write the JSON render payload here.")
    p_prox.set_defaults(func=cmd_proximity)

    p_serve = sub.add_parser("serve-cache", help="Run the cache service.")
    p_serve.add_argument("--host", default="127.0.0.1")
    p_serve.add_argument("--port", type=int, default=5000)
    p_serve.set_defaults(func=cmd_serve_cache)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
