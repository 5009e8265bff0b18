"""Row models returned by the repositories."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class Row(BaseModel):
    """Base for row models built from SQLAlchemy result rows."""

    model_config = ConfigDict(from_attributes=True)


class Account(Row):
    """A stored account as held in the ``account`` table."""

    id: int
    client_id: int
    category_id: int
    name: str
    login: str | None = None
    url: str | None = None
    notes: str | None = None
    password: bytes
    password_key: bytes
    user_id: int
    user_group_id: int
    user_edit_id: int | None = None
    is_private: bool = False
    is_private_group: bool = False
    count_view: int = 0
    count_decrypt: int = 0
    pass_date: int | None = None
    pass_date_change: int | None = None
    parent_id: int | None = None
    date_add: datetime | None = None
    date_edit: datetime | None = None


class AccountView(Row):
    """Account details joined with the names of the referenced records."""

    id: int
    name: str
    login: str | None = None
    url: str | None = None
    notes: str | None = None
    client_id: int
    client_name: str
    category_id: int
    category_name: str
    user_id: int
    user_name: str
    user_login: str
    user_group_id: int
    user_group_name: str
    user_edit_id: int | None = None
    user_edit_name: str | None = None
    user_edit_login: str | None = None
    is_private: bool = False
    is_private_group: bool = False
    count_view: int = 0
    count_decrypt: int = 0
    pass_date: int | None = None
    pass_date_change: int | None = None
    parent_id: int | None = None
    date_add: datetime | None = None
    date_edit: datetime | None = None


class AccountLinkData(Row):
    """Data needed to publish an account through a link."""

    id: int
    name: str
    login: str | None = None
    password: bytes
    password_key: bytes
    url: str | None = None
    notes: str | None = None
    client_name: str
    category_name: str


class AccountPassData(Row):
    """Encrypted password and its secured key."""

    id: int
    name: str
    password: bytes
    password_key: bytes
    parent_id: int | None = None


class AccountItem(Row):
    """Lightweight account row used in listings."""

    id: int
    name: str
    client_name: str | None = None


class AccountSearchRow(Row):
    """Account row returned by filter searches."""

    id: int
    name: str
    login: str | None = None
    url: str | None = None
    notes: str | None = None
    client_id: int
    client_name: str
    category_id: int
    category_name: str
    user_id: int
    user_group_id: int
    user_group_name: str
    is_private: bool = False
    is_private_group: bool = False
    pass_date: int | None = None
    pass_date_change: int | None = None
    parent_id: int | None = None
    count_view: int = 0
    date_edit: datetime | None = None


class Category(Row):
    """A stored category."""

    id: int
    name: str
    description: str | None = None
