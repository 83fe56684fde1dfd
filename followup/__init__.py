"""Follow-up reminder tracking with exactly-once notification dispatch."""

__version__ = "1.0.0"
