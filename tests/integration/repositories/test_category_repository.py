"""Integration tests for CategoryRepository."""

import pytest
from sqlalchemy.ext.asyncio import AsyncConnection

from tests.dataset import row_count
from vault.core.exceptions import ConstraintError, DuplicatedItemError
from vault.db import tables
from vault.db.models import Category
from vault.db.repositories import CategoryRepository
from vault.schemas import CategoryData, ItemSearchData


@pytest.mark.asyncio
class TestCategoryRepository:
    """Tests for CategoryRepository."""

    async def test_get_by_name(self, category_repo: CategoryRepository) -> None:
        """Test lookups by name use the normalized name hash."""
        assert await category_repo.get_by_name("Prueba") is None

        category = await category_repo.get_by_name("Web")
        assert category is not None
        assert category.id == 1
        assert category.description == "Web sites"

        category = await category_repo.get_by_name("Linux")
        assert category is not None
        assert category.id == 2
        assert category.description == "Linux server"

        # Same hash as 'Web'
        category = await category_repo.get_by_name(" web. ")
        assert category is not None
        assert category.id == 1
        assert category.description == "Web sites"

    async def test_search(self, category_repo: CategoryRepository) -> None:
        """Test searching by name or description."""
        result = await category_repo.search(ItemSearchData(search_string="linux", limit_count=10))

        assert result.num_rows == 1
        assert len(result.rows) == 1
        assert result.rows[0].id == 2
        assert result.rows[0].description == "Linux server"

        result = await category_repo.search(ItemSearchData(search_string="prueba", limit_count=10))

        assert result.num_rows == 0
        assert len(result.rows) == 0

    async def test_search_matches_description(self, category_repo: CategoryRepository) -> None:
        """Test that descriptions are searched case-insensitively."""
        result = await category_repo.search(ItemSearchData(search_string="SHELL"))

        assert [category.name for category in result] == ["SSH"]

    async def test_search_pages(self, category_repo: CategoryRepository) -> None:
        """Test that paging keeps the total match count."""
        result = await category_repo.search(ItemSearchData(limit_start=1, limit_count=1))

        assert result.num_rows == 1
        assert result.total_rows == 3
        assert result.rows[0].name == "SSH"

    async def test_get_by_id(self, category_repo: CategoryRepository) -> None:
        """Test lookups by id."""
        assert await category_repo.get_by_id(10) is None
        assert await category_repo.get_by_id(0) is None

        category = await category_repo.get_by_id(1)
        assert category is not None
        assert category.name == "Web"
        assert category.description == "Web sites"

        category = await category_repo.get_by_id(2)
        assert category is not None
        assert category.name == "Linux"
        assert category.description == "Linux server"

    async def test_get_all(
        self, category_repo: CategoryRepository, db_connection: AsyncConnection
    ) -> None:
        """Test getting every category ordered by name."""
        count = await row_count(db_connection, tables.category)

        results = await category_repo.get_all()

        assert len(results) == count
        assert isinstance(results[0], Category)
        assert [category.name for category in results] == ["Linux", "SSH", "Web"]

    async def test_update(self, category_repo: CategoryRepository) -> None:
        """Test updating a category, then renaming it onto an existing name."""
        data = CategoryData(id=1, name="Web prueba", description="Descripción web prueba")

        assert await category_repo.update(data) == 1

        category = await category_repo.get_by_id(1)
        assert category is not None
        assert category.name == data.name
        assert category.description == data.description

        # ' linux.' hashes like 'Linux'
        with pytest.raises(DuplicatedItemError):
            await category_repo.update(CategoryData(id=1, name=" linux."))

        category = await category_repo.get_by_id(1)
        assert category is not None
        assert category.name == "Web prueba"

    async def test_update_keeps_own_name(self, category_repo: CategoryRepository) -> None:
        """Test that a category may be renamed to a variant of its own name."""
        assert await category_repo.update(CategoryData(id=1, name="WEB", description="")) == 1

    async def test_update_missing_category(self, category_repo: CategoryRepository) -> None:
        """Test updating an unknown category affects no rows."""
        assert await category_repo.update(CategoryData(id=100, name="Nothing")) == 0

    async def test_update_requires_id(self, category_repo: CategoryRepository) -> None:
        """Test that updates need an id."""
        with pytest.raises(ValueError):
            await category_repo.update(CategoryData(name="Nothing"))

    async def test_delete_by_id_batch(
        self, category_repo: CategoryRepository, db_connection: AsyncConnection
    ) -> None:
        """Test batch deletion, then deleting categories in use."""
        count_before = await row_count(db_connection, tables.category)

        assert await category_repo.delete_by_id_batch([3]) == 1

        count_after = await row_count(db_connection, tables.category)
        assert count_after == count_before - 1

        # Categories 1 and 2 are used by accounts
        with pytest.raises(ConstraintError):
            await category_repo.delete_by_id_batch([1, 2, 3])

        # Nothing was deleted
        assert await row_count(db_connection, tables.category) == count_after

    async def test_delete_by_id_batch_is_all_or_nothing(
        self, category_repo: CategoryRepository
    ) -> None:
        """Test that one referenced id keeps the unreferenced ones too."""
        with pytest.raises(ConstraintError):
            await category_repo.delete_by_id_batch([2, 3])

        assert await category_repo.get_by_id(2) is not None
        assert await category_repo.get_by_id(3) is not None

    async def test_delete_by_id_batch_empty(self, category_repo: CategoryRepository) -> None:
        """Test that an empty batch deletes nothing."""
        assert await category_repo.delete_by_id_batch([]) == 0

    async def test_create(
        self, category_repo: CategoryRepository, db_connection: AsyncConnection
    ) -> None:
        """Test creating a category."""
        count_before = await row_count(db_connection, tables.category)

        data = CategoryData(name="Categoría prueba", description="Descripción prueba")
        category_id = await category_repo.create(data)

        category = await category_repo.get_by_id(category_id)
        assert category is not None
        assert category.name == data.name

        assert await row_count(db_connection, tables.category) == count_before + 1

    async def test_create_duplicate(
        self, category_repo: CategoryRepository, db_connection: AsyncConnection
    ) -> None:
        """Test that an equivalent name is rejected."""
        count_before = await row_count(db_connection, tables.category)

        with pytest.raises(DuplicatedItemError):
            await category_repo.create(CategoryData(name="S.S.H"))

        assert await row_count(db_connection, tables.category) == count_before

    @pytest.mark.parametrize("name", ["Web", " web. ", "WEB"])
    async def test_name_variants_collide(
        self, category_repo: CategoryRepository, name: str
    ) -> None:
        """Test that every variant of an existing name is rejected the same way."""
        with pytest.raises(DuplicatedItemError):
            await category_repo.create(CategoryData(name=name))

        with pytest.raises(DuplicatedItemError):
            await category_repo.update(CategoryData(id=2, name=name))

    async def test_delete(
        self, category_repo: CategoryRepository, db_connection: AsyncConnection
    ) -> None:
        """Test deleting a category, then deleting one in use."""
        count_before = await row_count(db_connection, tables.category)

        assert await category_repo.delete(3) == 1

        count_after = await row_count(db_connection, tables.category)
        assert count_after == count_before - 1

        assert await category_repo.delete(100) == 0
        assert await category_repo.delete(-1) == 0

        with pytest.raises(ConstraintError):
            await category_repo.delete(2)

    async def test_get_by_id_batch(self, category_repo: CategoryRepository) -> None:
        """Test batch lookups ignore unknown ids."""
        assert len(await category_repo.get_by_id_batch([1, 2, 3])) == 3
        assert len(await category_repo.get_by_id_batch([1, 2, 3, 4, 5])) == 3
        assert len(await category_repo.get_by_id_batch([])) == 0
        assert [category.id for category in await category_repo.get_by_id_batch([1, 0])] == [1]

    async def test_check_duplicated(self, category_repo: CategoryRepository) -> None:
        """Test duplicate checks on add and update."""
        repo = category_repo

        assert await repo.check_duplicated_on_add(CategoryData(name="linux")) is True
        assert await repo.check_duplicated_on_add(CategoryData(name="Linuxes")) is False

        assert await repo.check_duplicated_on_update(CategoryData(id=2, name="Linux")) is False
        assert await repo.check_duplicated_on_update(CategoryData(id=1, name="Linux")) is True
