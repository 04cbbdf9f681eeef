"""
gh_proximity/tests/test_community.py - Tests for language communities.

Tests verify:
- One community per language node, members over edges in either direction.
- Evenly spaced HSL hues.
- Community series carry every incident edge with the group color.
- Styling colors language nodes and their incident edges only.
"""

import networkx as nx

from gh_proximity.graph.builder import build_proximity_graph
from gh_proximity.metrics.community import (
    apply_community_styling,
    build_community_series,
    community_color,
    find_language_communities,
)


def test_communities_from_proximity_graph(sample_records):
    G = build_proximity_graph(sample_records, "me")
    communities = find_language_communities(G)
    assert communities == {"js": ["carol", "dave"], "py": ["carol"]}


def test_direction_agnostic_membership():
    G = nx.MultiDiGraph()
    G.add_node("rust", kind="language")
    G.add_node("in", kind="contributor")
    G.add_node("out", kind="contributor")
    G.add_edge("in", "rust")
    G.add_edge("rust", "out")
    assert find_language_communities(G) == {"rust": ["in", "out"]}


def test_isolated_language_has_empty_community():
    G = nx.MultiDiGraph()
    G.add_node("ada", kind="language")
    assert find_language_communities(G) == {"ada": []}


def test_no_languages_no_communities():
    G = build_proximity_graph([], "me")
    assert find_language_communities(G) == {}
    assert build_community_series(G) == []


def test_hues_evenly_spaced():
    assert community_color(0, 3) == "hsl(0, 100%, 50%)"
    assert community_color(1, 3) == "hsl(120, 100%, 50%)"
    assert community_color(2, 3) == "hsl(240, 100%, 50%)"
    assert community_color(1, 4) == "hsl(90, 100%, 50%)"


def test_series(sample_records):
    G = build_proximity_graph(sample_records, "me")
    series = build_community_series(G)
    assert [s["name"] for s in series] == ["js", "py"]

    js = series[0]
    assert js["color"] == "hsl(0, 100%, 50%)"
    assert js["members"] == ["carol", "dave"]
    assert [(e["source"], e["target"]) for e in js["edges"]] == [("carol", "js"), ("dave", "js")]
    assert all(e["color"] == js["color"] for e in js["edges"])

    py = series[1]
    assert py["color"] == "hsl(180, 100%, 50%)"
    assert [(e["source"], e["target"]) for e in py["edges"]] == [("carol", "py")]


def test_apply_styling(sample_records):
    G = build_proximity_graph(sample_records, "me")
    contributor_color = G.nodes["carol"]["color"]
    apply_community_styling(G)

    assert G.nodes["js"]["color"] == "hsl(0, 100%, 50%)"
    assert G.nodes["py"]["color"] == "hsl(180, 100%, 50%)"
    assert G.nodes["carol"]["color"] == contributor_color

    for u, v, d in G.edges(data=True):
        if v == "js":
            assert d["color"] == "hsl(0, 100%, 50%)"
        elif v == "py":
            assert d["color"] == "hsl(180, 100%, 50%)"
        else:
            # target → contributor edges keep their own color
            assert d["color"] == "#3366cc"
