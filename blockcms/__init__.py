"""Block-based page composition CMS."""

__version__ = "0.1.0"
