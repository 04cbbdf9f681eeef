"""
gh_proximity.graph - NetworkX graph construction layer.

Modules:
    builder   - Proximity graph and repository overview graph, render payloads.
    distance  - BFS hop distance from the target user.

All graphs are NetworkX MultiDiGraphs (parallel edges allowed) with node
kinds target, contributor, language and repository.
"""
