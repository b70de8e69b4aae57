"""Local geocode request broker."""

__version__ = "1.0.0"
