"""passvault: data-access layer for accounts and categories of a password manager."""

__version__ = "1.0.0"
