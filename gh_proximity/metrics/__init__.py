"""
gh_proximity.metrics - Profile, similarity and graph metric computation.

Modules:
    language_profile  - Language occurrence histogram per user.
    similarity        - Per-language similarity records, ranked by contributor.
    centrality        - Degree centrality + radius/color gradient.
    community         - Language communities + hue assignment.

None of these modules performs I/O.
"""
