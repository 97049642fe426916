"""Data access helpers."""

from .account_repo import AccountRepository

__all__ = ["AccountRepository"]
