"""Memory Lane backend - personal memory journaling service."""

__version__ = "0.1.0"
