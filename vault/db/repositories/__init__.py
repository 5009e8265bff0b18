"""Repositories for the account store."""

from .account import AccountRepository
from .base import BaseRepository, QueryResult
from .category import CategoryRepository

__all__ = [
    "AccountRepository",
    "BaseRepository",
    "CategoryRepository",
    "QueryResult",
]
