"""
Activity Pulse

Normalization and freshness checks for OpenActive activity feeds.
"""

__version__ = "0.1.0"
