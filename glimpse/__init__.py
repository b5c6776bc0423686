"""Glimpse photo-sharing client."""

__version__ = "1.0.0"
