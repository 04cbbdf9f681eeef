"""
gh_proximity - Language proximity graphs for GitHub users.

Given a target user, the package builds a language profile from their
repositories, compares it against the profile of every contributor to those
repositories, and turns the result into graph data for visualization:

- Language profiles     (gh_proximity.metrics.language_profile)
- Similarity records    (gh_proximity.metrics.similarity)
- Proximity graph       (gh_proximity.graph.builder)
- BFS hop distances     (gh_proximity.graph.distance)
- Degree centrality     (gh_proximity.metrics.centrality)
- Language communities  (gh_proximity.metrics.community)

Data acquisition goes through the cache service (gh_proximity.api) first and
falls back to the GitHub REST API (gh_proximity.ingestion).
"""

__version__ = "0.1.0"
