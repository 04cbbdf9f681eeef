"""
gh_proximity/metrics/community.py - Language communities.

Every language node defines one community: the nodes joined to it by an edge
in either direction. In the proximity graph these are the contributors who
share that language with the target.

Communities are given evenly spaced hues so they can be told apart:

    hue(index) = index / total_languages × 360
"""

import logging

import networkx as nx

from gh_proximity.config import DEFAULT_CONFIG, ProximityConfig
from gh_proximity.models import KIND_LANGUAGE

logger = logging.getLogger(__name__)


def community_color(index: int, total: int, config: ProximityConfig = DEFAULT_CONFIG) -> str:
    """HSL color for the index-th of total communities."""
    hue = index / total * 360 if total else 0
    # :g keeps 6 significant digits (51.4286, not 51.42857142857143).
    return f"hsl({hue:g}, {config.community_saturation}%, {config.community_lightness}%)"


def find_language_communities(G: nx.MultiDiGraph) -> dict[str, list[str]]:
    """
    Group nodes around each language node.

    Returns:
        communities: language id → member ids, in graph node order. Members
                     are the language's neighbors over incoming and outgoing
                     edges, deduplicated in first-seen order. A language with
                     no edges has an empty member list.
    """
    communities: dict[str, list[str]] = {}
    for node, data in G.nodes(data=True):
        if data.get("kind") != KIND_LANGUAGE:
            continue
        members: dict[str, None] = {}
        for u, _ in G.in_edges(node):
            members.setdefault(u, None)
        for _, v in G.out_edges(node):
            members.setdefault(v, None)
        communities[node] = list(members)

    logger.debug("Found %d language communities.", len(communities))
    return communities


def build_community_series(
    G: nx.MultiDiGraph,
    config: ProximityConfig = DEFAULT_CONFIG,
) -> list[dict]:
    """
    One render group per language community.

    Each group:
        {name, color, members, edges: [{source, target, color}, ...]}
    where 'edges' lists every edge (parallel edges included) touching the
    language, colored with the group's color.
    """
    communities = find_language_communities(G)
    total = len(communities)

    series: list[dict] = []
    for index, (language, members) in enumerate(communities.items()):
        color = community_color(index, total, config)
        edges = [
            {"source": u, "target": v, "color": color}
            for u, v in G.edges()
            if u == language or v == language
        ]
        series.append({"name": language, "color": color, "members": members, "edges": edges})
    return series


def apply_community_styling(
    G: nx.MultiDiGraph,
    config: ProximityConfig = DEFAULT_CONFIG,
) -> dict[str, list[str]]:
    """
    Color each language node and its incident edges with its community hue.

    Mutates G in-place. Member nodes keep their own color; only the language
    node and the edges touching it change.

    Returns:
        The communities mapping from find_language_communities().
    """
    communities = find_language_communities(G)
    total = len(communities)

    for index, language in enumerate(communities):
        color = community_color(index, total, config)
        G.nodes[language]["color"] = color
        G.nodes[language]["community"] = index
        for _, _, data in G.in_edges(language, data=True):
            data["color"] = color
        for _, _, data in G.out_edges(language, data=True):
            data["color"] = color

    return communities
