"""Search request and response schemas."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from vault.db.models import AccountSearchRow


class ItemSearchData(BaseModel):
    """Free-text search with offset/limit paging."""

    search_string: str = ""
    limit_start: int = Field(default=0, ge=0)
    limit_count: int | None = Field(default=None, ge=0, description="None returns every match")


class SortOrder(StrEnum):
    """Sort keys accepted by account filter searches."""

    DEFAULT = "default"
    NAME = "name"
    CATEGORY = "category"
    LOGIN = "login"
    URL = "url"
    CLIENT = "client"


class AccountSearchFilter(BaseModel):
    """Composable account search predicates.

    Every predicate left at its default imposes no filtering; the ones that
    are set combine with AND. The same filter object can be reused between
    searches by calling :meth:`reset`.
    """

    model_config = ConfigDict(validate_assignment=True)

    category_id: int | None = None
    client_id: int | None = None
    txt_search: str | None = None
    search_favorites: bool = False
    user_id: int | None = Field(
        default=None, description="User whose favorites are searched (any user if None)"
    )
    tags_id: list[int] = Field(default_factory=list)
    sort_order: SortOrder = SortOrder.DEFAULT
    sort_reverse: bool = False
    limit_start: int = Field(default=0, ge=0)
    limit_count: int | None = Field(default=None, ge=0)

    def reset(self) -> None:
        """Restore every field to its default value."""
        for name, field in type(self).model_fields.items():
            setattr(self, name, field.get_default(call_default_factory=True))


class AccountSearchResponse(BaseModel):
    """Result of an account filter search.

    ``count`` is the number of matching accounts before offset/limit.
    """

    count: int
    data: list[AccountSearchRow]
