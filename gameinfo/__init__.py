"""Steam store game info enrichment."""

__version__ = "0.1.0"
