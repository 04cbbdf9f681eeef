"""
gh_proximity/metrics/centrality.py - Degree centrality and its visual mapping.

Degree centrality here is the raw count of edge endpoints touching a node.
Parallel edges are not collapsed: two edges between the same pair add two to
both endpoints. The handshake lemma therefore holds over the full edge
multiset:

    sum(centrality.values()) == 2 × G.number_of_edges()

Visual mapping:
    radius = centrality × 5, or 10 for nodes with no edges
    color  = per-channel linear blend from green (low) to red (high),
             by centrality / max_centrality
"""

import logging

import networkx as nx
import numpy as np

from gh_proximity.config import DEFAULT_CONFIG, ProximityConfig

logger = logging.getLogger(__name__)


def compute_degree_centrality(G: nx.MultiDiGraph) -> dict[str, int]:
    """
    Count edge endpoints per node, parallel edges included.

    Args:
        G: Any networkx graph. For MultiDiGraph, G.degree already sums
           in- and out-edges and counts every parallel edge.

    Returns:
        centrality: node → endpoint count. Every node is present; isolated
                    nodes score 0.
    """
    centrality: dict[str, int] = {n: int(deg) for n, deg in G.degree()}
    logger.debug(
        "Degree centrality for %d nodes. Max: %d.",
        len(centrality),
        max(centrality.values(), default=0),
    )
    return centrality


def centrality_radius(value: int, config: ProximityConfig = DEFAULT_CONFIG) -> float:
    """Marker radius for a node with the given centrality."""
    if value > 0:
        return value * config.centrality_radius_factor
    return config.centrality_min_radius


def centrality_color(value: int, max_value: int, config: ProximityConfig = DEFAULT_CONFIG) -> str:
    """
    Interpolate between the low and high gradient colors.

    Channels are rounded half-up to integers. When max_value is 0 (a graph
    with no edges) every node gets the low color.
    """
    low = np.array(config.centrality_low_rgb, dtype=float)
    high = np.array(config.centrality_high_rgb, dtype=float)
    ratio = value / max_value if max_value > 0 else 0.0

    channels = np.floor(low + ratio * (high - low) + 0.5).astype(int)
    return "rgb({})".format(",".join(str(c) for c in channels))


def apply_centrality_styling(
    G: nx.MultiDiGraph,
    config: ProximityConfig = DEFAULT_CONFIG,
) -> dict[str, int]:
    """
    Write centrality, visual_weight and color onto every node of G.

    Mutates G in-place.

    Returns:
        The centrality mapping from compute_degree_centrality().
    """
    centrality = compute_degree_centrality(G)
    max_centrality = max(centrality.values(), default=0)

    for node, value in centrality.items():
        attrs = G.nodes[node]
        attrs["centrality"] = value
        attrs["visual_weight"] = centrality_radius(value, config)
        attrs["color"] = centrality_color(value, max_centrality, config)

    G.graph["max_centrality"] = max_centrality
    return centrality
