"""Unit tests for individual components in isolation.

Coverage:
    - claims/: Store ordering, ids and status transitions
    - agent/: Configuration, API client, polling and fraud assistant
    - ui/: HTML rendering
"""
