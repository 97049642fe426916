"""Solplace: a fee-based, coordinate-addressed logo registry."""

__version__ = "0.1.0"
