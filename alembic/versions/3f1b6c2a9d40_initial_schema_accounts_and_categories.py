"""initial schema - accounts, categories and their references

Revision ID: 3f1b6c2a9d40
Revises:
Create Date: 2026-10-16 10:12:05.114273


Creates:
- Tables: user_group, user, client, category, tag, account,
  account_to_tag, account_to_favorite, account_history
- Indexes on the account foreign keys
- Unique name hashes for clients, categories and tags

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f1b6c2a9d40"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "user_group",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("description", sa.String(255)),
        sa.PrimaryKeyConstraint("id", name="pk_user_group"),
        sa.UniqueConstraint("name", name="uq_user_group_name"),
    )

    op.create_table(
        "user",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(80), nullable=False),
        sa.Column("login", sa.String(50), nullable=False),
        sa.Column("user_group_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["user_group_id"], ["user_group.id"], name="fk_user_user_group_id_user_group"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_user"),
        sa.UniqueConstraint("login", name="uq_user_login"),
    )

    for table_name, name_length in (("client", 100), ("category", 50)):
        op.create_table(
            table_name,
            sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
            sa.Column("name", sa.String(name_length), nullable=False),
            sa.Column("description", sa.String(255)),
            sa.Column("hash", sa.String(64), nullable=False),
            sa.PrimaryKeyConstraint("id", name=f"pk_{table_name}"),
            sa.UniqueConstraint("hash", name=f"uq_{table_name}_hash"),
        )

    op.create_table(
        "tag",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(45), nullable=False),
        sa.Column("hash", sa.String(64), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_tag"),
        sa.UniqueConstraint("hash", name="uq_tag_hash"),
    )

    op.create_table(
        "account",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("client_id", sa.Integer(), nullable=False),
        sa.Column("category_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("login", sa.String(50)),
        sa.Column("url", sa.String(255)),
        sa.Column("notes", sa.Text()),
        sa.Column("password", sa.LargeBinary(), nullable=False),
        sa.Column("password_key", sa.LargeBinary(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("user_group_id", sa.Integer(), nullable=False),
        sa.Column("user_edit_id", sa.Integer()),
        sa.Column("is_private", sa.Boolean(), server_default="0", nullable=False),
        sa.Column("is_private_group", sa.Boolean(), server_default="0", nullable=False),
        sa.Column("count_view", sa.Integer(), server_default="0", nullable=False),
        sa.Column("count_decrypt", sa.Integer(), server_default="0", nullable=False),
        sa.Column("pass_date", sa.Integer()),
        sa.Column("pass_date_change", sa.Integer()),
        sa.Column("parent_id", sa.Integer()),
        sa.Column(
            "date_add", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.Column("date_edit", sa.DateTime(timezone=True)),
        sa.ForeignKeyConstraint(["client_id"], ["client.id"], name="fk_account_client_id_client"),
        sa.ForeignKeyConstraint(
            ["category_id"], ["category.id"], name="fk_account_category_id_category"
        ),
        sa.ForeignKeyConstraint(["user_id"], ["user.id"], name="fk_account_user_id_user"),
        sa.ForeignKeyConstraint(
            ["user_group_id"], ["user_group.id"], name="fk_account_user_group_id_user_group"
        ),
        sa.ForeignKeyConstraint(
            ["user_edit_id"], ["user.id"], name="fk_account_user_edit_id_user"
        ),
        sa.ForeignKeyConstraint(
            ["parent_id"],
            ["account.id"],
            name="fk_account_parent_id_account",
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_account"),
    )
    for column in ("client_id", "category_id", "user_id", "user_group_id", "parent_id"):
        op.create_index(f"ix_account_{column}", "account", [column])

    op.create_table(
        "account_to_tag",
        sa.Column("account_id", sa.Integer(), nullable=False),
        sa.Column("tag_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["account_id"],
            ["account.id"],
            name="fk_account_to_tag_account_id_account",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["tag_id"], ["tag.id"], name="fk_account_to_tag_tag_id_tag", ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("account_id", "tag_id", name="pk_account_to_tag"),
    )

    op.create_table(
        "account_to_favorite",
        sa.Column("account_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(
            ["account_id"],
            ["account.id"],
            name="fk_account_to_favorite_account_id_account",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["user_id"],
            ["user.id"],
            name="fk_account_to_favorite_user_id_user",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("account_id", "user_id", name="pk_account_to_favorite"),
    )

    op.create_table(
        "account_history",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("account_id", sa.Integer(), nullable=False),
        sa.Column("client_id", sa.Integer(), nullable=False),
        sa.Column("category_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("login", sa.String(50)),
        sa.Column("url", sa.String(255)),
        sa.Column("notes", sa.Text()),
        sa.Column("password", sa.LargeBinary(), nullable=False),
        sa.Column("password_key", sa.LargeBinary(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("user_group_id", sa.Integer(), nullable=False),
        sa.Column("user_edit_id", sa.Integer()),
        sa.Column("is_private", sa.Boolean(), server_default="0", nullable=False),
        sa.Column("is_private_group", sa.Boolean(), server_default="0", nullable=False),
        sa.Column("pass_date", sa.Integer()),
        sa.Column("pass_date_change", sa.Integer()),
        sa.Column("parent_id", sa.Integer()),
        sa.Column("is_modify", sa.Boolean(), server_default="0", nullable=False),
        sa.Column("is_deleted", sa.Boolean(), server_default="0", nullable=False),
        sa.Column(
            "date_add", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False
        ),
        sa.PrimaryKeyConstraint("id", name="pk_account_history"),
    )
    op.create_index("ix_account_history_account_id", "account_history", ["account_id"])


def downgrade() -> None:
    op.drop_index("ix_account_history_account_id", table_name="account_history")
    op.drop_table("account_history")
    op.drop_table("account_to_favorite")
    op.drop_table("account_to_tag")
    for column in ("client_id", "category_id", "user_id", "user_group_id", "parent_id"):
        op.drop_index(f"ix_account_{column}", table_name="account")
    op.drop_table("account")
    op.drop_table("tag")
    op.drop_table("category")
    op.drop_table("client")
    op.drop_table("user")
    op.drop_table("user_group")
