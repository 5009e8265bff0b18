"""Request, filter and response schemas."""

from .account import AccountPasswordRequest, AccountRequest
from .category import CategoryData
from .search import AccountSearchFilter, AccountSearchResponse, ItemSearchData, SortOrder

__all__ = [
    "AccountPasswordRequest",
    "AccountRequest",
    "AccountSearchFilter",
    "AccountSearchResponse",
    "CategoryData",
    "ItemSearchData",
    "SortOrder",
]
