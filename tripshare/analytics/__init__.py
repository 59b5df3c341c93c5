"""
Usage analytics for smart suggestions.

Responsibilities:
- Keep an in-memory log of suggestion requests and destination likes.
- Aggregate the log into an admin report (traffic, filters, degraded rate, likes).
"""
