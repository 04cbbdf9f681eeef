"""
gh_proximity/models.py - Data model shared by every pipeline stage.

RepoDescriptor is the only type that crosses a process boundary (GitHub API,
cache service); its dict form matches the cache service's JSON payloads.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Optional

# Node kinds carried in the 'kind' node attribute.
KIND_TARGET = "target"
KIND_CONTRIBUTOR = "contributor"
KIND_LANGUAGE = "language"
KIND_REPOSITORY = "repository"


@dataclass(frozen=True)
class RepoDescriptor:
    """One repository: its name, language occurrences and contributor logins."""

    name: str
    languages: tuple[str, ...] = ()
    contributors: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RepoDescriptor":
        """
        Parse the JSON form used by the cache service.

        Missing or null 'languages' / 'contributors' fields become empty, so a
        malformed repo contributes nothing instead of failing the whole list.
        """
        languages = data.get("languages") or []
        contributors = data.get("contributors") or []
        return cls(
            name=str(data.get("name", "")),
            languages=tuple(str(lang) for lang in languages),
            contributors=tuple(dict.fromkeys(str(c) for c in contributors)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "languages": list(self.languages),
            "contributors": list(self.contributors),
        }


def parse_repo_list(payload: Any) -> Optional[list[RepoDescriptor]]:
    """Parse a JSON array of repo dicts; None for anything that is not a list."""
    if not isinstance(payload, list):
        return None
    return [RepoDescriptor.from_dict(item) for item in payload if isinstance(item, dict)]


@dataclass
class LanguageProfile:
    """
    Language usage histogram for one user.

    Attributes:
        counts: language → occurrence count, in first-seen order.
    """

    counts: dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    @property
    def percentages(self) -> dict[str, float]:
        """language → share of all occurrences in [0, 100]; 0 when empty."""
        total = self.total
        if total == 0:
            return {lang: 0.0 for lang in self.counts}
        return {lang: count / total * 100.0 for lang, count in self.counts.items()}

    def percentage(self, language: str) -> float:
        total = self.total
        if total == 0:
            return 0.0
        return self.counts.get(language, 0) / total * 100.0

    def __contains__(self, language: str) -> bool:
        return language in self.counts

    def __len__(self) -> int:
        return len(self.counts)


@dataclass(frozen=True)
class ProximityRecord:
    """Similarity between the target and one contributor for one shared language."""

    contributor: str
    language: str
    user_percentage: float
    contributor_percentage: float
    similarity_score: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class GraphNode:
    """Render-ready node. 'visual_weight' is the marker radius."""

    id: str
    kind: str
    visual_weight: float
    color: str


@dataclass
class GraphEdge:
    """Render-ready edge. Parallel edges between the same pair are allowed."""

    source: str
    target: str
    weight: float
    color: Optional[str] = None
