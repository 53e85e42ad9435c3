"""SnapLink: URL shortener with per-visit analytics."""

__version__ = "0.1.0"
