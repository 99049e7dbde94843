"""
Oyster recommendation engine.

Responsibilities:
- Derive a user's taste profile from a baseline or their positive reviews.
- Rank unreviewed oysters by attribute distance to that profile.
- Rank unreviewed oysters by user-based collaborative filtering.
- Blend both rankings and find users with similar rating patterns.
"""
