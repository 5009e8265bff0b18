"""Unit tests for CategoryRepository."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.ext.asyncio import AsyncConnection

from vault.core.exceptions import DuplicatedItemError
from vault.db.repositories.category import CategoryRepository
from vault.schemas import CategoryData
from vault.utils.hashing import make_item_hash


@pytest.mark.asyncio
class TestCategoryRepository:
    """Unit tests for CategoryRepository."""

    async def test_initialization(self) -> None:
        """Test repository initializes correctly."""
        mock_conn = MagicMock(spec=AsyncConnection)
        repo = CategoryRepository(mock_conn)

        assert repo.conn == mock_conn
        assert repo.name == "category"

    async def test_create_rejects_duplicate_before_insert(self) -> None:
        """Test that a duplicated name never reaches the insert."""
        mock_conn = MagicMock(spec=AsyncConnection)
        mock_conn.execute = AsyncMock()
        repo = CategoryRepository(mock_conn)
        repo.check_duplicated_on_add = AsyncMock(return_value=True)  # type: ignore[method-assign]

        with pytest.raises(DuplicatedItemError) as exc_info:
            await repo.create(CategoryData(name="Web"))

        assert exc_info.value.item_type == "category"
        assert exc_info.value.name == "Web"
        mock_conn.execute.assert_not_called()

    async def test_create_stores_name_hash(self) -> None:
        """Test that the insert carries the normalized name hash."""
        mock_result = MagicMock()
        mock_result.inserted_primary_key = (7,)
        mock_conn = MagicMock(spec=AsyncConnection)
        mock_conn.execute = AsyncMock(return_value=mock_result)
        repo = CategoryRepository(mock_conn)
        repo.check_duplicated_on_add = AsyncMock(return_value=False)  # type: ignore[method-assign]

        category_id = await repo.create(CategoryData(name=" Web. ", description="Web sites"))

        assert category_id == 7
        statement = mock_conn.execute.call_args.args[0]
        params = statement.compile().params
        assert params["hash"] == make_item_hash("web")
        assert params["name"] == " Web. "

    async def test_update_rejects_duplicate(self) -> None:
        """Test that renaming onto another category's name fails."""
        mock_conn = MagicMock(spec=AsyncConnection)
        mock_conn.execute = AsyncMock()
        repo = CategoryRepository(mock_conn)
        repo.check_duplicated_on_update = AsyncMock(return_value=True)  # type: ignore[method-assign]

        with pytest.raises(DuplicatedItemError):
            await repo.update(CategoryData(id=1, name=" linux."))

        mock_conn.execute.assert_not_called()

    async def test_get_by_id_converts_string_id(self) -> None:
        """Test that get_by_id converts string ids."""
        mock_result = MagicMock()
        mock_result.first.return_value = None
        mock_conn = MagicMock(spec=AsyncConnection)
        mock_conn.execute = AsyncMock(return_value=mock_result)
        repo = CategoryRepository(mock_conn)

        assert await repo.get_by_id("3") is None

        statement = mock_conn.execute.call_args.args[0]
        assert 3 in statement.compile().params.values()

    async def test_empty_batches_skip_the_database(self) -> None:
        """Test that empty id batches return without a query."""
        mock_conn = MagicMock(spec=AsyncConnection)
        mock_conn.execute = AsyncMock()
        repo = CategoryRepository(mock_conn)

        assert await repo.get_by_id_batch([]) == []
        assert await repo.delete_by_id_batch([]) == 0
        mock_conn.execute.assert_not_called()
