"""Category repository."""

from collections.abc import Iterable

from sqlalchemy import delete, insert, or_, select, update

from vault.core.exceptions import DuplicatedItemError
from vault.core.logging import get_logger
from vault.db import tables
from vault.db.models import Category
from vault.schemas.category import CategoryData
from vault.schemas.search import ItemSearchData
from vault.utils.hashing import make_item_hash

from .base import BaseRepository, QueryResult, to_id, to_id_list

logger = get_logger(__name__)

_category = tables.category
_columns = (_category.c.id, _category.c.name, _category.c.description)


class CategoryRepository(BaseRepository):
    """Repository for category operations.

    Names are unique by their normalized hash: ``"Web"``, ``" web. "`` and
    ``"WEB"`` are the same category.
    """

    name = "category"

    async def create(self, data: CategoryData) -> int:
        """Create a new category.

        Args:
            data: Category data

        Returns:
            Id of the created category

        Raises:
            DuplicatedItemError: If another category has an equivalent name
        """
        async with self.conn.begin_nested():
            if await self.check_duplicated_on_add(data):
                logger.warning("duplicate_category_name", category_name=data.name)
                raise DuplicatedItemError("category", data.name)

            result = await self._execute(
                insert(_category).values(
                    name=data.name,
                    description=data.description,
                    hash=make_item_hash(data.name),
                ),
                "category_create",
            )

        category_id = result.inserted_primary_key[0]
        logger.info("category_created", category_id=category_id)
        return category_id

    async def update(self, data: CategoryData) -> int:
        """Update a category name and description.

        Returns:
            Number of updated rows (0 if the category does not exist)

        Raises:
            ValueError: If the data carries no id
            DuplicatedItemError: If a different category has an equivalent name
        """
        if data.id is None:
            raise ValueError("Category id is required for updates")

        async with self.conn.begin_nested():
            if await self.check_duplicated_on_update(data):
                logger.warning(
                    "duplicate_category_name", category_id=data.id, category_name=data.name
                )
                raise DuplicatedItemError("category", data.name)

            result = await self._execute(
                update(_category)
                .where(_category.c.id == data.id)
                .values(
                    name=data.name,
                    description=data.description,
                    hash=make_item_hash(data.name),
                ),
                "category_update",
            )

        return result.rowcount

    async def delete(self, category_id: int | str) -> int:
        """Delete a category.

        Returns:
            Number of deleted rows (0 if not found)

        Raises:
            ConstraintError: If an account uses the category
        """
        count = await self._write(
            delete(_category).where(_category.c.id == to_id(category_id)), "category_delete"
        )
        logger.info("category_deleted", category_id=category_id, count=count)
        return count

    async def delete_by_id_batch(self, ids: Iterable[int | str]) -> int:
        """Delete several categories in one statement.

        Nothing is deleted if any of them is in use.

        Returns:
            Number of deleted rows; unknown ids are skipped

        Raises:
            ConstraintError: If an account uses any of the categories
        """
        id_list = to_id_list(ids)
        if not id_list:
            return 0

        count = await self._write(
            delete(_category).where(_category.c.id.in_(id_list)), "category_delete_batch"
        )
        logger.info("categories_deleted", ids=id_list, count=count)
        return count

    async def get_by_id(self, category_id: int | str) -> Category | None:
        """Get category by ID."""
        return await self._fetch_one(
            select(*_columns).where(_category.c.id == to_id(category_id)),
            Category,
            "category_get_by_id",
        )

    async def get_by_name(self, name: str) -> Category | None:
        """Get category by any name equivalent to ``name``."""
        return await self._fetch_one(
            select(*_columns).where(_category.c.hash == make_item_hash(name)),
            Category,
            "category_get_by_name",
        )

    async def get_by_id_batch(self, ids: Iterable[int | str]) -> list[Category]:
        """Get the categories matching the given ids; unknown ids are ignored."""
        id_list = to_id_list(ids)
        if not id_list:
            return []

        return await self._fetch_all(
            select(*_columns).where(_category.c.id.in_(id_list)).order_by(_category.c.id),
            Category,
            "category_get_by_id_batch",
        )

    async def get_all(self) -> list[Category]:
        """Get every category ordered by name."""
        return await self._fetch_all(
            select(*_columns).order_by(_category.c.name, _category.c.id),
            Category,
            "category_get_all",
        )

    async def search(self, item_search_data: ItemSearchData) -> QueryResult[Category]:
        """Search categories by name or description (case-insensitive).

        Returns:
            Matching categories ordered by name; ``total_rows`` ignores the limit
        """
        statement = select(*_columns).order_by(_category.c.name, _category.c.id)

        if item_search_data.search_string:
            text = item_search_data.search_string
            statement = statement.where(
                or_(
                    _category.c.name.icontains(text, autoescape=True),
                    _category.c.description.icontains(text, autoescape=True),
                )
            )

        return await self._fetch_page(
            statement,
            Category,
            "category_search",
            limit_start=item_search_data.limit_start,
            limit_count=item_search_data.limit_count,
        )

    async def check_duplicated_on_add(self, data: CategoryData) -> bool:
        """Check whether a category with an equivalent name exists."""
        found = await self._scalar(
            select(_category.c.id).where(_category.c.hash == make_item_hash(data.name)).limit(1),
            "category_check_duplicated",
        )
        return found is not None

    async def check_duplicated_on_update(self, data: CategoryData) -> bool:
        """Check whether another category has an equivalent name."""
        found = await self._scalar(
            select(_category.c.id)
            .where(
                _category.c.hash == make_item_hash(data.name),
                _category.c.id != data.id,
            )
            .limit(1),
            "category_check_duplicated",
        )
        return found is not None
