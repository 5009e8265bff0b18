"""Pydantic schemas for account write requests."""

from pydantic import BaseModel, Field


class AccountRequest(BaseModel):
    """Payload for creating or updating an account.

    ``user_id`` and ``user_group_id`` are only written on update when
    ``change_owner`` / ``change_user_group`` are set. Callers clear those flags
    with :func:`vault.core.authorization.sanitize_account_request` when the
    requester lacks authority.
    """

    id: int | None = Field(None, description="Account id (required for updates)")
    name: str = Field(..., min_length=1, max_length=255)
    login: str | None = Field(None, max_length=255)
    url: str | None = Field(None, max_length=2048)
    notes: str | None = None
    client_id: int
    category_id: int
    user_id: int | None = Field(None, description="Owner user id")
    user_group_id: int | None = Field(None, description="Owner user group id")
    user_edit_id: int | None = Field(None, description="User performing the change")
    is_private: bool = False
    is_private_group: bool = False
    parent_id: int | None = Field(None, description="Parent (linked) account id")
    pass_date_change: int | None = Field(
        None, description="Password expiry as a unix timestamp"
    )
    password: bytes | None = Field(None, description="Encrypted password")
    password_key: bytes | None = Field(None, description="Secured key for the password")
    change_owner: bool = False
    change_user_group: bool = False


class AccountPasswordRequest(BaseModel):
    """Password-only update, used for bulk re-encryption."""

    id: int
    password: bytes
    password_key: bytes
