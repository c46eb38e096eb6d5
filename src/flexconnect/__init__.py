"""flexconnect - connector discovery and requests for flexibility services."""

__version__ = "0.1.0"
