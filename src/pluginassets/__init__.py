"""Script registration helpers for CMS plugins."""

__version__ = "0.1.0"
