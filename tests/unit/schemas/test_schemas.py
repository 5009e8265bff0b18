"""Unit tests for request and search schemas."""

import pytest
from pydantic import ValidationError

from vault.schemas import (
    AccountRequest,
    AccountSearchFilter,
    CategoryData,
    ItemSearchData,
    SortOrder,
)


class TestAccountSearchFilter:
    """Tests for AccountSearchFilter."""

    def test_defaults(self) -> None:
        """Test that a fresh filter does not restrict results."""
        search_filter = AccountSearchFilter()

        assert search_filter.category_id is None
        assert search_filter.tags_id == []
        assert search_filter.search_favorites is False
        assert search_filter.sort_order == SortOrder.DEFAULT
        assert search_filter.limit_count is None

    def test_reset_restores_defaults(self) -> None:
        """Test that reset clears every field, lists included."""
        search_filter = AccountSearchFilter(
            category_id=1,
            client_id=2,
            txt_search="apple",
            search_favorites=True,
            tags_id=[1, 2],
            sort_order=SortOrder.URL,
            sort_reverse=True,
            limit_start=5,
            limit_count=10,
        )
        search_filter.reset()

        assert search_filter == AccountSearchFilter()
        search_filter.tags_id.append(3)
        assert AccountSearchFilter().tags_id == []

    def test_assignment_is_validated(self) -> None:
        """Test that assigned values are validated."""
        search_filter = AccountSearchFilter()

        with pytest.raises(ValidationError):
            search_filter.limit_start = -1

        search_filter.sort_order = "client"  # type: ignore[assignment]
        assert search_filter.sort_order == SortOrder.CLIENT


class TestItemSearchData:
    """Tests for ItemSearchData."""

    def test_defaults(self) -> None:
        """Test that the default search matches everything."""
        data = ItemSearchData()

        assert data.search_string == ""
        assert data.limit_start == 0
        assert data.limit_count is None

    def test_rejects_negative_limit(self) -> None:
        """Test that negative limits are invalid."""
        with pytest.raises(ValidationError):
            ItemSearchData(limit_count=-1)


class TestRequests:
    """Tests for write requests."""

    def test_account_request_defaults(self) -> None:
        """Test that ownership changes are off by default."""
        request = AccountRequest(name="Google", client_id=1, category_id=1)

        assert request.change_owner is False
        assert request.change_user_group is False
        assert request.is_private is False

    def test_account_request_requires_name(self) -> None:
        """Test that an empty name is invalid."""
        with pytest.raises(ValidationError):
            AccountRequest(name="", client_id=1, category_id=1)

    def test_category_data(self) -> None:
        """Test category payload defaults."""
        data = CategoryData(name="Web")

        assert data.id is None
        assert data.description is None
