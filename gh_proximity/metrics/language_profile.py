"""
gh_proximity/metrics/language_profile.py - Language usage profile of a user.

A profile is a histogram of language occurrences across all of a user's
repositories. Each repository lists the languages GitHub reports for it, so a
language used in five repositories counts five times.
"""

import logging
from collections import Counter
from typing import Iterable

from gh_proximity.models import LanguageProfile, RepoDescriptor

logger = logging.getLogger(__name__)


def build_language_profile(repos: Iterable[RepoDescriptor]) -> LanguageProfile:
    """
    Count language occurrences across a user's repositories.

    Args:
        repos: RepoDescriptor sequence for one user. Repos without languages
               contribute nothing.

    Returns:
        LanguageProfile whose counts preserve first-seen language order.
        Percentages are derived lazily and are 0 for an empty profile.
    """
    counts: Counter[str] = Counter()
    repo_count = 0
    for repo in repos:
        repo_count += 1
        counts.update(repo.languages)

    profile = LanguageProfile(counts=dict(counts))
    logger.debug(
        "Language profile built from %d repos: %d languages, %d occurrences.",
        repo_count,
        len(profile),
        profile.total,
    )
    return profile
