"""
gh_proximity/metrics/similarity.py - Contributor similarity scoring.

Compares the target user's language profile against each contributor's.
For every language both profiles use, one ProximityRecord is produced:

    similarity_score = 100 − |user_percentage − contributor_percentage|

A score of 100 means both users spend the same share of their work on the
language; the score falls linearly as the shares diverge. Because both
percentages lie in [0, 100], the score always lies in [0, 100].

Contributors are ranked by aggregate score (sum over shared languages). The
sort is stable, so contributors with equal aggregates keep the order in which
they were discovered in the target's repositories.
"""

import logging
from typing import Mapping

import pandas as pd

from gh_proximity.models import LanguageProfile, ProximityRecord

logger = logging.getLogger(__name__)

# Name of the one scoring formula in use. Bump it if the formula changes so
# cached or exported scores can be told apart.
SIMILARITY_POLICY = "absolute_difference"

RECORD_COLUMNS = [
    "contributor",
    "language",
    "user_percentage",
    "contributor_percentage",
    "similarity_score",
]


def similarity_score(user_percentage: float, contributor_percentage: float) -> float:
    """Score two usage shares of the same language; 100 = identical share."""
    return 100.0 - abs(user_percentage - contributor_percentage)


def score_contributor(
    target_profile: LanguageProfile,
    contributor: str,
    contributor_profile: LanguageProfile,
) -> list[ProximityRecord]:
    """
    Build one record per language shared by the target and *contributor*.

    Languages are visited in the target profile's order. A contributor with
    no shared language yields an empty list.
    """
    user_pcts = target_profile.percentages
    contrib_pcts = contributor_profile.percentages

    records: list[ProximityRecord] = []
    for language, user_pct in user_pcts.items():
        if language not in contrib_pcts:
            continue
        contrib_pct = contrib_pcts[language]
        records.append(
            ProximityRecord(
                contributor=contributor,
                language=language,
                user_percentage=user_pct,
                contributor_percentage=contrib_pct,
                similarity_score=similarity_score(user_pct, contrib_pct),
            )
        )
    return records


def aggregate_scores(records: list[ProximityRecord]) -> dict[str, float]:
    """Sum similarity scores per contributor, keyed in first-seen order."""
    totals: dict[str, float] = {}
    for record in records:
        totals[record.contributor] = totals.get(record.contributor, 0.0) + record.similarity_score
    return totals


def score_contributors(
    target_profile: LanguageProfile,
    contributor_profiles: Mapping[str, LanguageProfile],
) -> list[ProximityRecord]:
    """
    Score every contributor against the target and rank the results.

    Args:
        target_profile:       Profile of the target user.
        contributor_profiles: contributor → profile, in discovery order.
                              The iteration order is the tie-break order.

    Returns:
        ProximityRecords grouped by contributor. Groups are ordered by
        descending aggregate score with ties in discovery order; records
        within a group follow the target profile's language order.
        Contributors sharing no language with the target are absent.
    """
    per_contributor: list[tuple[str, list[ProximityRecord], float]] = []
    for contributor, profile in contributor_profiles.items():
        records = score_contributor(target_profile, contributor, profile)
        if not records:
            logger.debug("No shared languages with %s; skipped.", contributor)
            continue
        aggregate = sum(r.similarity_score for r in records)
        per_contributor.append((contributor, records, aggregate))

    # sorted() is stable: equal aggregates keep discovery order.
    ranked = sorted(per_contributor, key=lambda item: item[2], reverse=True)

    result: list[ProximityRecord] = []
    for _, records, _ in ranked:
        result.extend(records)

    logger.info(
        "Scored %d contributors (%d with shared languages), %d records.",
        len(contributor_profiles),
        len(ranked),
        len(result),
    )
    return result


def rank_contributors(records: list[ProximityRecord]) -> list[tuple[str, float]]:
    """Return (contributor, aggregate score) pairs in record order."""
    return list(aggregate_scores(records).items())


def records_to_dataframe(records: list[ProximityRecord]) -> pd.DataFrame:
    """
    Tabulate records for display or export.

    Columns: contributor, language, user_percentage, contributor_percentage,
    similarity_score. Row order matches *records*.
    """
    if not records:
        return pd.DataFrame(columns=RECORD_COLUMNS)
    return pd.DataFrame([r.to_dict() for r in records], columns=RECORD_COLUMNS)
