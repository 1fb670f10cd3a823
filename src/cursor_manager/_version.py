"""Version information for cursor-manager."""

__version__ = "1.1.0"
