"""Table definitions for the account store.

The alembic migrations in ``alembic/versions`` create the same schema; tests
build it directly from :data:`metadata`.
"""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    LargeBinary,
    MetaData,
    String,
    Table,
    Text,
    func,
)

metadata = MetaData(
    naming_convention={
        "ix": "ix_%(table_name)s_%(column_0_name)s",
        "uq": "uq_%(table_name)s_%(column_0_name)s",
        "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

user_group = Table(
    "user_group",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(50), nullable=False, unique=True),
    Column("description", String(255)),
)

user = Table(
    "user",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(80), nullable=False),
    Column("login", String(50), nullable=False, unique=True),
    Column("user_group_id", Integer, ForeignKey("user_group.id"), nullable=False),
)

client = Table(
    "client",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(100), nullable=False),
    Column("description", String(255)),
    Column("hash", String(64), nullable=False, unique=True),
)

category = Table(
    "category",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(50), nullable=False),
    Column("description", String(255)),
    Column("hash", String(64), nullable=False, unique=True),
)

tag = Table(
    "tag",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(45), nullable=False),
    Column("hash", String(64), nullable=False, unique=True),
)

account = Table(
    "account",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("client_id", Integer, ForeignKey("client.id"), nullable=False, index=True),
    Column("category_id", Integer, ForeignKey("category.id"), nullable=False, index=True),
    Column("name", String(100), nullable=False),
    Column("login", String(50)),
    Column("url", String(255)),
    Column("notes", Text),
    Column("password", LargeBinary, nullable=False),
    Column("password_key", LargeBinary, nullable=False),
    Column("user_id", Integer, ForeignKey("user.id"), nullable=False, index=True),
    Column("user_group_id", Integer, ForeignKey("user_group.id"), nullable=False, index=True),
    Column("user_edit_id", Integer, ForeignKey("user.id")),
    Column("is_private", Boolean, nullable=False, server_default="0"),
    Column("is_private_group", Boolean, nullable=False, server_default="0"),
    Column("count_view", Integer, nullable=False, server_default="0"),
    Column("count_decrypt", Integer, nullable=False, server_default="0"),
    Column("pass_date", Integer),
    Column("pass_date_change", Integer),
    Column("parent_id", Integer, ForeignKey("account.id", ondelete="SET NULL"), index=True),
    Column("date_add", DateTime(timezone=True), nullable=False, server_default=func.now()),
    Column("date_edit", DateTime(timezone=True)),
)

account_to_tag = Table(
    "account_to_tag",
    metadata,
    Column(
        "account_id", Integer, ForeignKey("account.id", ondelete="CASCADE"), primary_key=True
    ),
    Column("tag_id", Integer, ForeignKey("tag.id", ondelete="CASCADE"), primary_key=True),
)

account_to_favorite = Table(
    "account_to_favorite",
    metadata,
    Column(
        "account_id", Integer, ForeignKey("account.id", ondelete="CASCADE"), primary_key=True
    ),
    Column("user_id", Integer, ForeignKey("user.id", ondelete="CASCADE"), primary_key=True),
)

# History rows keep no foreign key to account: they outlive deleted accounts.
account_history = Table(
    "account_history",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("account_id", Integer, nullable=False, index=True),
    Column("client_id", Integer, nullable=False),
    Column("category_id", Integer, nullable=False),
    Column("name", String(100), nullable=False),
    Column("login", String(50)),
    Column("url", String(255)),
    Column("notes", Text),
    Column("password", LargeBinary, nullable=False),
    Column("password_key", LargeBinary, nullable=False),
    Column("user_id", Integer, nullable=False),
    Column("user_group_id", Integer, nullable=False),
    Column("user_edit_id", Integer),
    Column("is_private", Boolean, nullable=False, server_default="0"),
    Column("is_private_group", Boolean, nullable=False, server_default="0"),
    Column("pass_date", Integer),
    Column("pass_date_change", Integer),
    Column("parent_id", Integer),
    Column("is_modify", Boolean, nullable=False, server_default="0"),
    Column("is_deleted", Boolean, nullable=False, server_default="0"),
    Column("date_add", DateTime(timezone=True), nullable=False, server_default=func.now()),
)
