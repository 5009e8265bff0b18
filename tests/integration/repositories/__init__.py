"""Integration tests for the repositories.

Each test file covers a single repository. Tests run against
TEST_DATABASE_URL, or a temporary SQLite database when it is unset.
"""
