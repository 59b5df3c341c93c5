"""
Smart destination suggestions.

Responsibilities:
- Fetch a user's destination preferences (cached per user).
- Assemble candidate destinations from popular, AI-generated and seeded sources.
- Score candidates against preferences and request filters, with match reasons.
- Rank, truncate, and fall back to a popularity-only ranking on failure.
"""
