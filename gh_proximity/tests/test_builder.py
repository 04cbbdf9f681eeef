"""
gh_proximity/tests/test_builder.py - Tests for gh_proximity.graph.builder.

Tests verify:
- Proximity graph node set: one target, distinct contributors, distinct languages.
- Node kinds, radii and colors from ProximityConfig.
- target → contributor edges once per record (parallel per shared language).
- contributor → language edges once per record, weighted by similarity.
- First write wins when ids collide.
- Repository graph structure and retarget candidates.
- Render payload shape.
"""

import networkx as nx

from gh_proximity.config import DEFAULT_CONFIG, ProximityConfig
from gh_proximity.graph.builder import (
    build_proximity_graph,
    build_repository_graph,
    retarget_candidates,
    to_render_payload,
)
from gh_proximity.graph.distance import resolve_distances
from gh_proximity.models import ProximityRecord


def edges_of(G, edge_type):
    return [(u, v, d) for u, v, d in G.edges(data=True) if d.get("edge_type") == edge_type]


# ── Proximity graph ───────────────────────────────────────────────────────────

class TestProximityGraph:

    def test_returns_multidigraph(self, sample_records):
        G = build_proximity_graph(sample_records, "me")
        assert isinstance(G, nx.MultiDiGraph)

    def test_node_set(self, sample_records):
        G = build_proximity_graph(sample_records, "me")
        assert list(G.nodes) == ["me", "carol", "js", "py", "dave"]

    def test_node_styling(self, sample_records):
        G = build_proximity_graph(sample_records, "me")
        assert G.nodes["me"] == {
            "kind": "target",
            "visual_weight": DEFAULT_CONFIG.target_radius,
            "color": DEFAULT_CONFIG.target_color,
        }
        assert G.nodes["carol"]["kind"] == "contributor"
        assert G.nodes["carol"]["visual_weight"] == 15
        assert G.nodes["js"]["kind"] == "language"
        assert G.nodes["js"]["visual_weight"] == 10

    def test_target_edges_once_per_record(self, sample_records):
        G = build_proximity_graph(sample_records, "me")
        target_edges = edges_of(G, "proximity")
        assert [(u, v) for u, v, _ in target_edges] == [
            ("me", "carol"),
            ("me", "carol"),
            ("me", "dave"),
        ]

    def test_shared_languages_make_parallel_target_edges(self, sample_records):
        # carol shares js and py, so she is linked to the target twice.
        G = build_proximity_graph(sample_records, "me")
        assert G.number_of_edges("me", "carol") == 2
        assert G.number_of_edges("me", "dave") == 1

    def test_language_edges_per_record(self, sample_records):
        G = build_proximity_graph(sample_records, "me")
        lang_edges = edges_of(G, "uses_language")
        assert [(u, v, d["weight"]) for u, v, d in lang_edges] == [
            ("carol", "js", 90.0),
            ("carol", "py", 90.0),
            ("dave", "js", 60.0),
        ]

    def test_target_edge_weight_from_distances(self, sample_records):
        distances = resolve_distances(sample_records, "me")
        G = build_proximity_graph(sample_records, "me", distances)
        for _, _, d in edges_of(G, "proximity"):
            assert d["weight"] == 1

    def test_target_edge_weight_uses_given_distance(self, sample_records):
        G = build_proximity_graph(sample_records, "me", {"carol": 3, "dave": 2})
        weights = {v: d["weight"] for _, v, d in edges_of(G, "proximity")}
        assert weights == {"carol": 3, "dave": 2}

    def test_no_records_only_target(self):
        G = build_proximity_graph([], "me")
        assert list(G.nodes) == ["me"]
        assert G.number_of_edges() == 0

    def test_worked_example_shape(self):
        records = [ProximityRecord("bob", "js", 66.67, 50.0, 83.33)]
        G = build_proximity_graph(records, "alice")
        assert list(G.nodes) == ["alice", "bob", "js"]
        assert [(u, v) for u, v in G.edges()] == [("alice", "bob"), ("bob", "js")]

    def test_first_write_wins_on_id_collision(self):
        # A contributor who happens to share a name with a language.
        records = [
            ProximityRecord("go", "js", 50, 50, 100),
            ProximityRecord("ann", "go", 50, 50, 100),
        ]
        G = build_proximity_graph(records, "me")
        assert G.nodes["go"]["kind"] == "contributor"

    def test_custom_config(self, sample_records):
        config = ProximityConfig(contributor_radius=20.0, contributor_color="#000000")
        G = build_proximity_graph(sample_records, "me", config=config)
        assert G.nodes["dave"]["visual_weight"] == 20.0
        assert G.nodes["dave"]["color"] == "#000000"


# ── Repository graph ──────────────────────────────────────────────────────────

class TestRepositoryGraph:

    def test_structure(self, make_repo):
        repos = [
            make_repo("r1", ["js", "py"], ["bob"]),
            make_repo("r2", ["js"], ["bob", "eve"]),
        ]
        G = build_repository_graph(repos, "alice")
        assert G.nodes["alice"]["kind"] == "target"
        assert G.nodes["r1"]["kind"] == "repository"
        assert G.nodes["bob"]["visual_weight"] == 12
        assert G.nodes["bob"]["color"] == DEFAULT_CONFIG.repo_contributor_color
        assert len(edges_of(G, "owns")) == 2
        assert len(edges_of(G, "uses_language")) == 3
        assert len(edges_of(G, "contributed_by")) == 3

    def test_duplicate_languages_make_parallel_edges(self, make_repo):
        G = build_repository_graph([make_repo("r1", ["js", "js"])], "alice")
        assert G.number_of_edges("r1", "js") == 2

    def test_retarget_candidates(self, make_repo):
        repos = [make_repo("r1", ["js"], ["alice", "bob", "eve"])]
        G = build_repository_graph(repos, "alice")
        assert retarget_candidates(G) == ["bob", "eve"]


# ── Render payload ────────────────────────────────────────────────────────────

def test_render_payload_shape(sample_records):
    G = build_proximity_graph(sample_records, "me")
    payload = to_render_payload(G)
    assert set(payload) == {"nodes", "edges"}
    assert payload["nodes"][0] == {
        "id": "me",
        "kind": "target",
        "visual_weight": 25.0,
        "color": "#3366cc",
    }
    assert payload["edges"][0] == {
        "source": "me",
        "target": "carol",
        "weight": 1,
        "color": "#3366cc",
    }
    # Language edges carry no color until a styling pass sets one.
    language_edges = [e for e in payload["edges"] if e["source"] == "carol"]
    assert language_edges[0] == {"source": "carol", "target": "js", "weight": 90.0}
    assert len(payload["edges"]) == G.number_of_edges()
