"""Cally account manager: link and manage third-party integration accounts."""

__version__ = "0.1.0"
