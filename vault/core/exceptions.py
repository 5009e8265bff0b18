"""Exceptions raised by the data-access layer.

Missing records are never an error: lookups return ``None`` or an empty
result and deletes return 0.
"""


class VaultError(Exception):
    """Base exception for passvault errors."""


class QueryError(VaultError):
    """Raised when a query is malformed or the store fails to run it."""

    def __init__(self, message: str, query_type: str | None = None):
        self.query_type = query_type
        super().__init__(message)


class ConstraintError(QueryError):
    """Raised when a write breaks a referential or uniqueness constraint."""


class DuplicatedItemError(ConstraintError):
    """Raised when an item name collides with an existing item's hashed name."""

    def __init__(self, item_type: str, name: str):
        self.item_type = item_type
        self.name = name
        super().__init__(
            f"Duplicated {item_type} name '{name}'", query_type=f"{item_type}_duplicate"
        )


class CryptoError(VaultError):
    """Raised when a secured key cannot be unlocked or data cannot be decrypted."""
