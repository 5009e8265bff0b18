"""Account repository."""

import time
from collections.abc import Iterable
from typing import Any

from sqlalchemy import ColumnElement, and_, delete, func, insert, or_, select, update

from vault.core import metrics
from vault.core.logging import get_logger
from vault.db import tables
from vault.db.conditions import QueryCondition
from vault.db.models import (
    Account,
    AccountItem,
    AccountLinkData,
    AccountPassData,
    AccountSearchRow,
    AccountView,
)
from vault.schemas.account import AccountPasswordRequest, AccountRequest
from vault.schemas.search import (
    AccountSearchFilter,
    AccountSearchResponse,
    ItemSearchData,
    SortOrder,
)

from .base import BaseRepository, QueryResult, to_id, to_id_list

logger = get_logger(__name__)

_account = tables.account
_history = tables.account_history
_client = tables.client
_category = tables.category
_user = tables.user
_user_group = tables.user_group
_user_edit = tables.user.alias("user_edit")

# Columns callers may reference in query conditions
FILTER_COLUMNS: dict[str, ColumnElement[Any]] = {
    column.name: column
    for column in _account.c
    if column.name not in ("password", "password_key")
}

_VIEW_COLUMNS = (
    _account.c.id,
    _account.c.name,
    _account.c.login,
    _account.c.url,
    _account.c.notes,
    _account.c.client_id,
    _client.c.name.label("client_name"),
    _account.c.category_id,
    _category.c.name.label("category_name"),
    _account.c.user_id,
    _user.c.name.label("user_name"),
    _user.c.login.label("user_login"),
    _account.c.user_group_id,
    _user_group.c.name.label("user_group_name"),
    _account.c.user_edit_id,
    _user_edit.c.name.label("user_edit_name"),
    _user_edit.c.login.label("user_edit_login"),
    _account.c.is_private,
    _account.c.is_private_group,
    _account.c.count_view,
    _account.c.count_decrypt,
    _account.c.pass_date,
    _account.c.pass_date_change,
    _account.c.parent_id,
    _account.c.date_add,
    _account.c.date_edit,
)

_SEARCH_COLUMNS = (
    _account.c.id,
    _account.c.name,
    _account.c.login,
    _account.c.url,
    _account.c.notes,
    _account.c.client_id,
    _client.c.name.label("client_name"),
    _account.c.category_id,
    _category.c.name.label("category_name"),
    _account.c.user_id,
    _account.c.user_group_id,
    _user_group.c.name.label("user_group_name"),
    _account.c.is_private,
    _account.c.is_private_group,
    _account.c.pass_date,
    _account.c.pass_date_change,
    _account.c.parent_id,
    _account.c.count_view,
    _account.c.date_edit,
)

_PASS_COLUMNS = (
    _account.c.id,
    _account.c.name,
    _account.c.password,
    _account.c.password_key,
    _account.c.parent_id,
)

# Columns copied back from a history row on restore
_RESTORE_COLUMNS = (
    "client_id",
    "category_id",
    "name",
    "login",
    "url",
    "notes",
    "password",
    "password_key",
    "user_id",
    "user_group_id",
    "is_private",
    "is_private_group",
    "pass_date",
    "pass_date_change",
    "parent_id",
)

_SORT_COLUMNS: dict[SortOrder, tuple[ColumnElement[Any], ...]] = {
    SortOrder.DEFAULT: (_account.c.name, _client.c.name),
    SortOrder.NAME: (_account.c.name,),
    SortOrder.CATEGORY: (_category.c.name,),
    SortOrder.LOGIN: (_account.c.login,),
    SortOrder.URL: (_account.c.url,),
    SortOrder.CLIENT: (_client.c.name,),
}


def _view_from() -> Any:
    return (
        _account.join(_client, _client.c.id == _account.c.client_id)
        .join(_category, _category.c.id == _account.c.category_id)
        .join(_user, _user.c.id == _account.c.user_id)
        .join(_user_group, _user_group.c.id == _account.c.user_group_id)
        .outerjoin(_user_edit, _user_edit.c.id == _account.c.user_edit_id)
    )


def _search_from() -> Any:
    return (
        _account.join(_client, _client.c.id == _account.c.client_id)
        .join(_category, _category.c.id == _account.c.category_id)
        .join(_user_group, _user_group.c.id == _account.c.user_group_id)
    )


def _text_match(text: str, *columns: ColumnElement[Any]) -> ColumnElement[bool]:
    return or_(*(column.icontains(text, autoescape=True) for column in columns))


class AccountRepository(BaseRepository):
    """Repository for account operations.

    Encrypted passwords and their keys are stored and returned as opaque
    blobs; see :mod:`vault.core.crypt` for producing and reading them.
    """

    name = "account"

    async def create(self, request: AccountRequest) -> int:
        """Create a new account.

        Args:
            request: Account data, including the encrypted password and its key

        Returns:
            Id of the created account

        Raises:
            ValueError: If the password pair or the owner is missing
            ConstraintError: If a referenced client, category, user or group does not exist
        """
        if request.password is None or request.password_key is None:
            raise ValueError("Account password and key are required")
        if request.user_id is None or request.user_group_id is None:
            raise ValueError("Account owner user and group are required")

        async with self.conn.begin_nested():
            result = await self._execute(
                insert(_account).values(
                    client_id=request.client_id,
                    category_id=request.category_id,
                    name=request.name,
                    login=request.login,
                    url=request.url,
                    notes=request.notes,
                    password=request.password,
                    password_key=request.password_key,
                    user_id=request.user_id,
                    user_group_id=request.user_group_id,
                    user_edit_id=request.user_edit_id,
                    is_private=request.is_private,
                    is_private_group=request.is_private_group,
                    pass_date=int(time.time()),
                    pass_date_change=request.pass_date_change,
                    parent_id=request.parent_id,
                ),
                "account_create",
            )

        account_id = result.inserted_primary_key[0]
        logger.info("account_created", account_id=account_id, user_id=request.user_id)
        return account_id

    async def update(self, request: AccountRequest) -> int:
        """Update an account's editable fields.

        The owner and owning group are only changed when the request's
        ``change_owner`` / ``change_user_group`` flags are set.

        Returns:
            Number of updated rows (0 if the account does not exist)
        """
        if request.id is None:
            raise ValueError("Account id is required for updates")

        values: dict[str, Any] = {
            "client_id": request.client_id,
            "category_id": request.category_id,
            "name": request.name,
            "login": request.login,
            "url": request.url,
            "notes": request.notes,
            "user_edit_id": request.user_edit_id,
            "pass_date_change": request.pass_date_change,
            "is_private": request.is_private,
            "is_private_group": request.is_private_group,
            "parent_id": request.parent_id,
            "date_edit": func.now(),
        }
        if request.change_owner and request.user_id is not None:
            values["user_id"] = request.user_id
        if request.change_user_group and request.user_group_id is not None:
            values["user_group_id"] = request.user_group_id

        count = await self._write(
            update(_account).where(_account.c.id == request.id).values(**values),
            "account_update",
        )
        logger.info("account_updated", account_id=request.id, count=count)
        return count

    async def edit_password(self, request: AccountRequest) -> int:
        """Replace an account's password, key and expiry date.

        Returns:
            Number of updated rows
        """
        if request.id is None:
            raise ValueError("Account id is required for updates")
        if request.password is None or request.password_key is None:
            raise ValueError("Account password and key are required")

        count = await self._write(
            update(_account)
            .where(_account.c.id == request.id)
            .values(
                password=request.password,
                password_key=request.password_key,
                user_edit_id=request.user_edit_id,
                pass_date=int(time.time()),
                pass_date_change=request.pass_date_change,
                date_edit=func.now(),
            ),
            "account_edit_password",
        )
        logger.info("account_password_changed", account_id=request.id, count=count)
        return count

    async def update_password(self, request: AccountPasswordRequest) -> bool:
        """Replace an account's password, key and password date (used when re-encrypting)."""
        count = await self._write(
            update(_account)
            .where(_account.c.id == request.id)
            .values(
                password=request.password,
                password_key=request.password_key,
                pass_date=int(time.time()),
            ),
            "account_update_password",
        )
        return count == 1

    async def edit_restore(self, history_id: int | str, user_id: int) -> bool:
        """Restore an account to the state saved in a history row.

        Args:
            history_id: Id of the ``account_history`` row
            user_id: User performing the restore

        Returns:
            True if an account was restored
        """
        async with self.conn.begin_nested():
            result = await self._execute(
                select(_history).where(_history.c.id == to_id(history_id)),
                "account_history_get",
            )
            row = result.first()
            if row is None:
                return False

            values = {column: row._mapping[column] for column in _RESTORE_COLUMNS}
            result = await self._execute(
                update(_account)
                .where(_account.c.id == row.account_id)
                .values(**values, user_edit_id=user_id, date_edit=func.now()),
                "account_edit_restore",
            )

        restored = result.rowcount == 1
        logger.info(
            "account_restored",
            account_id=row.account_id,
            history_id=history_id,
            restored=restored,
        )
        return restored

    async def delete(self, account_id: int | str) -> int:
        """Delete an account.

        Returns:
            Number of deleted rows (0 if not found)
        """
        count = await self._write(
            delete(_account).where(_account.c.id == to_id(account_id)), "account_delete"
        )
        logger.info("account_deleted", account_id=account_id, count=count)
        return count

    async def delete_by_id_batch(self, ids: Iterable[int | str]) -> int:
        """Delete several accounts in one statement.

        Returns:
            Number of deleted rows; unknown ids are skipped
        """
        id_list = to_id_list(ids)
        if not id_list:
            return 0

        count = await self._write(
            delete(_account).where(_account.c.id.in_(id_list)), "account_delete_batch"
        )
        logger.info("accounts_deleted", ids=id_list, count=count)
        return count

    async def get_by_id(self, account_id: int | str) -> QueryResult[AccountView]:
        """Get an account with the names of its client, category, owner and group."""
        return await self._fetch_result(
            select(*_VIEW_COLUMNS)
            .select_from(_view_from())
            .where(_account.c.id == to_id(account_id)),
            AccountView,
            "account_get_by_id",
        )

    async def get_data_for_link(self, account_id: int | str) -> QueryResult[AccountLinkData]:
        """Get the data published through an account link."""
        return await self._fetch_result(
            select(
                _account.c.id,
                _account.c.name,
                _account.c.login,
                _account.c.password,
                _account.c.password_key,
                _account.c.url,
                _account.c.notes,
                _client.c.name.label("client_name"),
                _category.c.name.label("category_name"),
            )
            .select_from(
                _account.join(_client, _client.c.id == _account.c.client_id).join(
                    _category, _category.c.id == _account.c.category_id
                )
            )
            .where(_account.c.id == to_id(account_id)),
            AccountLinkData,
            "account_get_data_for_link",
        )

    async def get_by_id_batch(self, ids: Iterable[int | str]) -> QueryResult[Account]:
        """Get the accounts matching the given ids; unknown ids are ignored."""
        id_list = to_id_list(ids)
        if not id_list:
            return QueryResult()

        return await self._fetch_result(
            select(_account).where(_account.c.id.in_(id_list)).order_by(_account.c.id),
            Account,
            "account_get_by_id_batch",
        )

    async def get_all(self) -> QueryResult[Account]:
        """Get every account ordered by id."""
        return await self._fetch_result(
            select(_account).order_by(_account.c.id), Account, "account_get_all"
        )

    async def get_password_for_id(
        self, account_id: int | str, query_condition: QueryCondition | None = None
    ) -> QueryResult[AccountPassData]:
        """Get an account's encrypted password and key.

        Args:
            account_id: Account ID
            query_condition: Optional visibility restriction

        Returns:
            Result with zero or one row
        """
        statement = select(*_PASS_COLUMNS).where(_account.c.id == to_id(account_id))
        if query_condition is not None and query_condition.has_filters():
            statement = statement.where(query_condition.to_clause(FILTER_COLUMNS))

        return await self._fetch_result(statement, AccountPassData, "account_get_password")

    async def get_password_history_for_id(
        self, history_id: int | str
    ) -> QueryResult[AccountPassData]:
        """Get the encrypted password and key saved in a history row."""
        return await self._fetch_result(
            select(
                _history.c.id,
                _history.c.name,
                _history.c.password,
                _history.c.password_key,
                _history.c.parent_id,
            ).where(_history.c.id == to_id(history_id)),
            AccountPassData,
            "account_get_password_history",
        )

    async def get_accounts_pass_data(self) -> list[AccountPassData]:
        """Get every account's encrypted password and key."""
        return await self._fetch_all(
            select(*_PASS_COLUMNS).order_by(_account.c.id),
            AccountPassData,
            "account_get_pass_data",
        )

    async def get_linked(self, query_condition: QueryCondition) -> QueryResult[AccountItem]:
        """Get the accounts matching a link condition (e.g. ``Eq("parent_id", 1)``).

        Raises:
            QueryError: If the condition has no filters
        """
        return await self._fetch_result(
            select(_account.c.id, _account.c.name, _client.c.name.label("client_name"))
            .select_from(_account.join(_client, _client.c.id == _account.c.client_id))
            .where(query_condition.to_clause(FILTER_COLUMNS))
            .order_by(_account.c.name, _account.c.id),
            AccountItem,
            "account_get_linked",
        )

    async def get_for_user(
        self, query_condition: QueryCondition | None = None
    ) -> QueryResult[AccountItem]:
        """Get the accounts visible under a caller supplied condition."""
        statement = (
            select(_account.c.id, _account.c.name, _client.c.name.label("client_name"))
            .select_from(_account.join(_client, _client.c.id == _account.c.client_id))
            .order_by(_account.c.name, _account.c.id)
        )
        if query_condition is not None and query_condition.has_filters():
            statement = statement.where(query_condition.to_clause(FILTER_COLUMNS))

        return await self._fetch_result(statement, AccountItem, "account_get_for_user")

    async def search(self, item_search_data: ItemSearchData) -> QueryResult[AccountItem]:
        """Search accounts by name, url or notes (case-insensitive).

        Returns:
            ``id``/``name`` rows ordered by name; ``total_rows`` ignores the limit
        """
        statement = select(_account.c.id, _account.c.name).order_by(
            _account.c.name, _account.c.id
        )
        if item_search_data.search_string:
            statement = statement.where(
                _text_match(
                    item_search_data.search_string,
                    _account.c.name,
                    _account.c.url,
                    _account.c.notes,
                )
            )

        return await self._fetch_page(
            statement,
            AccountItem,
            "account_search",
            limit_start=item_search_data.limit_start,
            limit_count=item_search_data.limit_count,
        )

    async def get_by_filter(
        self,
        search_filter: AccountSearchFilter,
        query_condition: QueryCondition | None = None,
    ) -> AccountSearchResponse:
        """Search accounts with the predicates set on a filter.

        Args:
            search_filter: Category, client, text, favorites and tag predicates
            query_condition: Optional visibility restriction added by the caller

        Returns:
            Response with the total match count and the requested page of rows
        """
        clauses: list[ColumnElement[bool]] = []

        if search_filter.category_id is not None:
            clauses.append(_account.c.category_id == search_filter.category_id)

        if search_filter.client_id is not None:
            clauses.append(_account.c.client_id == search_filter.client_id)

        if search_filter.txt_search:
            clauses.append(
                _text_match(
                    search_filter.txt_search,
                    _account.c.name,
                    _account.c.login,
                    _account.c.url,
                    _account.c.notes,
                )
            )

        if search_filter.search_favorites:
            favorites = select(tables.account_to_favorite.c.account_id)
            if search_filter.user_id is not None:
                favorites = favorites.where(
                    tables.account_to_favorite.c.user_id == search_filter.user_id
                )
            clauses.append(_account.c.id.in_(favorites))

        if search_filter.tags_id:
            tagged = select(tables.account_to_tag.c.account_id).where(
                tables.account_to_tag.c.tag_id.in_(search_filter.tags_id)
            )
            clauses.append(_account.c.id.in_(tagged))

        if query_condition is not None and query_condition.has_filters():
            clauses.append(query_condition.to_clause(FILTER_COLUMNS))

        statement = select(*_SEARCH_COLUMNS).select_from(_search_from())
        if clauses:
            statement = statement.where(and_(*clauses))

        sort_columns = (*_SORT_COLUMNS[search_filter.sort_order], _account.c.id)
        if search_filter.sort_reverse:
            statement = statement.order_by(*(column.desc() for column in sort_columns))
        else:
            statement = statement.order_by(*sort_columns)

        page = await self._fetch_page(
            statement,
            AccountSearchRow,
            "account_get_by_filter",
            limit_start=search_filter.limit_start,
            limit_count=search_filter.limit_count,
        )
        return AccountSearchResponse(count=page.total_rows or 0, data=page.rows)

    async def increment_view_counter(self, account_id: int | str) -> bool:
        """Add one to an account's view counter."""
        count = await self._write(
            update(_account)
            .where(_account.c.id == to_id(account_id))
            .values(count_view=_account.c.count_view + 1),
            "account_increment_view",
        )
        if count == 1:
            metrics.account_views_total.inc()
        return count == 1

    async def increment_decrypt_counter(self, account_id: int | str) -> bool:
        """Add one to an account's decrypt counter."""
        count = await self._write(
            update(_account)
            .where(_account.c.id == to_id(account_id))
            .values(count_decrypt=_account.c.count_decrypt + 1),
            "account_increment_decrypt",
        )
        if count == 1:
            metrics.account_decrypts_total.inc()
        return count == 1

    async def get_total_num_accounts(self) -> int:
        """Count every stored account version: live accounts plus history rows."""
        total = await self._scalar(
            select(
                select(func.count()).select_from(_account).scalar_subquery()
                + select(func.count()).select_from(_history).scalar_subquery()
            ),
            "account_total",
        )
        return total or 0

    async def check_duplicated_on_add(self, request: AccountRequest) -> bool:
        """Check whether the client already has an account with the same name."""
        found = await self._scalar(
            select(_account.c.id)
            .where(
                func.lower(_account.c.name) == request.name.lower(),
                _account.c.client_id == request.client_id,
            )
            .limit(1),
            "account_check_duplicated",
        )
        return found is not None

    async def check_duplicated_on_update(self, request: AccountRequest) -> bool:
        """Check whether another account of the client has the same name."""
        found = await self._scalar(
            select(_account.c.id)
            .where(
                func.lower(_account.c.name) == request.name.lower(),
                _account.c.client_id == request.client_id,
                _account.c.id != request.id,
            )
            .limit(1),
            "account_check_duplicated",
        )
        return found is not None
