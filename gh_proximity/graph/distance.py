"""
gh_proximity/graph/distance.py - Shortest-hop distance from the target user.

The adjacency is a layered tree built only from ProximityRecords:

    target → contributor → language

Breadth-first search from the target assigns distance 0 to the target,
1 to every contributor and 2 to every language. Similarity weights play no
part; the distance is a structural signal used as an alternate edge weight.
Nodes that cannot be reached from the target are left out of the result.
"""

import logging
from typing import Iterable

import networkx as nx

from gh_proximity.models import ProximityRecord

logger = logging.getLogger(__name__)


def build_adjacency(
    records: Iterable[ProximityRecord],
    target: str,
) -> dict[str, list[str]]:
    """
    Build the directed target → contributors → languages adjacency.

    Neighbor lists are deduplicated and keep first-seen order. Language
    nodes have no outgoing entries.
    """
    adjacency: dict[str, list[str]] = {target: []}
    for record in records:
        if record.contributor not in adjacency[target]:
            adjacency[target].append(record.contributor)
        neighbors = adjacency.setdefault(record.contributor, [])
        if record.language not in neighbors:
            neighbors.append(record.language)
    return adjacency


def bfs_distances(adjacency: dict[str, list[str]], start: str) -> dict[str, int]:
    """
    Hop count from *start* to every node reachable in *adjacency*.

    Standard BFS: each node keeps the distance at which it was first reached.
    The result contains *start* at distance 0 and omits unreachable nodes.
    """
    G = nx.DiGraph()
    G.add_node(start)
    for node, neighbors in adjacency.items():
        G.add_node(node)
        G.add_edges_from((node, n) for n in neighbors)

    distances: dict[str, int] = dict(nx.single_source_shortest_path_length(G, start))
    logger.debug(
        "BFS from %s reached %d of %d nodes (max depth %d).",
        start,
        len(distances),
        G.number_of_nodes(),
        max(distances.values(), default=0),
    )
    return distances


def resolve_distances(records: Iterable[ProximityRecord], target: str) -> dict[str, int]:
    """Hop distance from *target* to every node named in *records*."""
    return bfs_distances(build_adjacency(records, target), target)
