"""
gh_proximity/graph/builder.py - NetworkX graph construction layer.

Builds the graphs that the rendering collaborator draws. All graphs are
networkx MultiDiGraphs: node ids are strings, node order is insertion order,
and parallel edges between the same pair are kept as separate edges.

Node attributes:
    kind           'target' | 'contributor' | 'language' | 'repository'
    visual_weight  marker radius
    color          CSS color string

Edge attributes:
    edge_type      'proximity' | 'uses_language' | 'owns' | 'contributed_by'
    weight         numeric strength (similarity score, hop distance, or 1)
    color          optional CSS color string

Two graphs are built:
    Proximity graph   - target → contributors → shared languages, from
                        ProximityRecords.
    Repository graph  - target → repositories → {languages, contributors},
                        straight from the target's RepoDescriptors.
"""

import logging
from typing import Iterable, Optional

import networkx as nx

from gh_proximity.config import DEFAULT_CONFIG, ProximityConfig
from gh_proximity.models import (
    KIND_CONTRIBUTOR,
    KIND_LANGUAGE,
    KIND_REPOSITORY,
    KIND_TARGET,
    GraphEdge,
    GraphNode,
    ProximityRecord,
    RepoDescriptor,
)

logger = logging.getLogger(__name__)


def _add_node(G: nx.MultiDiGraph, node_id: str, kind: str, visual_weight: float, color: str) -> None:
    """Add a node unless one with the same id exists (first write wins)."""
    if node_id in G:
        return
    G.add_node(node_id, kind=kind, visual_weight=visual_weight, color=color)


def build_proximity_graph(
    records: Iterable[ProximityRecord],
    target: str,
    distances: Optional[dict[str, int]] = None,
    config: ProximityConfig = DEFAULT_CONFIG,
) -> nx.MultiDiGraph:
    """
    Materialize ProximityRecords as a target/contributor/language graph.

    Nodes:
        - one target node
        - one node per distinct contributor
        - one node per distinct language

    Edges:
        - target → contributor, once per record, so a contributor sharing k
          languages has k parallel edges from the target. Weight is the
          contributor's BFS distance when *distances* is given, else 1.
        - contributor → language, once per record. Weight is the record's
          similarity score.

    Args:
        records:   Ranked output of score_contributors().
        target:    Target username.
        distances: Optional output of resolve_distances().
        config:    ProximityConfig with node radii and colors.

    Returns:
        G: nx.MultiDiGraph. With no records, G holds only the target node.
    """
    G = nx.MultiDiGraph()
    G.graph["target"] = target
    G.graph["view"] = "proximity"

    _add_node(G, target, KIND_TARGET, config.target_radius, config.target_color)

    for record in records:
        _add_node(G, record.contributor, KIND_CONTRIBUTOR, config.contributor_radius, config.contributor_color)
        _add_node(G, record.language, KIND_LANGUAGE, config.language_radius, config.language_color)

        weight = distances.get(record.contributor, 1) if distances else 1
        G.add_edge(
            target,
            record.contributor,
            edge_type="proximity",
            weight=weight,
            color=config.target_edge_color,
        )

        G.add_edge(
            record.contributor,
            record.language,
            edge_type="uses_language",
            weight=record.similarity_score,
        )

    logger.info(
        "Proximity graph for %s: %d nodes, %d edges.",
        target,
        G.number_of_nodes(),
        G.number_of_edges(),
    )
    return G


def build_repository_graph(
    repos: Iterable[RepoDescriptor],
    target: str,
    config: ProximityConfig = DEFAULT_CONFIG,
) -> nx.MultiDiGraph:
    """
    Build the overview graph of the target's own repositories.

    Edges: target → repo, repo → each language occurrence, repo → each
    contributor. A language listed twice for one repo produces two parallel
    edges. Contributor nodes carry config.repo_contributor_color, which marks
    them as retarget candidates (see retarget_candidates()).
    """
    G = nx.MultiDiGraph()
    G.graph["target"] = target
    G.graph["view"] = "repository"

    _add_node(G, target, KIND_TARGET, config.target_radius, config.target_color)

    repo_count = 0
    for repo in repos:
        repo_count += 1
        _add_node(G, repo.name, KIND_REPOSITORY, config.repository_radius, config.repository_color)
        G.add_edge(target, repo.name, edge_type="owns", weight=1)

        for language in repo.languages:
            _add_node(G, language, KIND_LANGUAGE, config.language_radius, config.language_color)
            G.add_edge(repo.name, language, edge_type="uses_language", weight=1)

        for contributor in repo.contributors:
            _add_node(
                G,
                contributor,
                KIND_CONTRIBUTOR,
                config.repo_contributor_radius,
                config.repo_contributor_color,
            )
            G.add_edge(repo.name, contributor, edge_type="contributed_by", weight=1)

    logger.info(
        "Repository graph for %s: %d repos, %d nodes, %d edges.",
        target,
        repo_count,
        G.number_of_nodes(),
        G.number_of_edges(),
    )
    return G


def retarget_candidates(G: nx.MultiDiGraph) -> list[str]:
    """Contributor node ids that a click can promote to the new target."""
    target = G.graph.get("target")
    return [
        n for n, d in G.nodes(data=True)
        if d.get("kind") == KIND_CONTRIBUTOR and n != target
    ]


def graph_nodes(G: nx.MultiDiGraph) -> list[GraphNode]:
    return [
        GraphNode(
            id=n,
            kind=d.get("kind", ""),
            visual_weight=d.get("visual_weight", 0.0),
            color=d.get("color", ""),
        )
        for n, d in G.nodes(data=True)
    ]


def graph_edges(G: nx.MultiDiGraph) -> list[GraphEdge]:
    return [
        GraphEdge(source=u, target=v, weight=d.get("weight", 1), color=d.get("color"))
        for u, v, d in G.edges(data=True)
    ]


def to_render_payload(G: nx.MultiDiGraph) -> dict:
    """
    Serialize G into the {nodes, edges} structure the renderer consumes.

    Node dicts: {id, kind, visual_weight, color}.
    Edge dicts: {source, target, weight} plus 'color' when one is set.
    """
    nodes = [vars(node).copy() for node in graph_nodes(G)]
    edges = []
    for edge in graph_edges(G):
        item = {"source": edge.source, "target": edge.target, "weight": edge.weight}
        if edge.color is not None:
            item["color"] = edge.color
        edges.append(item)
    return {"nodes": nodes, "edges": edges}
