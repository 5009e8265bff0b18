"""Prometheus metrics configuration."""

from prometheus_client import Counter, Histogram

# Account usage
account_views_total = Counter("account_views_total", "Total account view counter increments")

account_decrypts_total = Counter(
    "account_decrypts_total", "Total account decrypt counter increments"
)

# Integrity
repository_constraint_violations_total = Counter(
    "repository_constraint_violations_total",
    "Total constraint violations raised by repositories",
    ["repository"],
)

# Database Metrics
db_query_duration_seconds = Histogram(
    "db_query_duration_seconds", "Database query duration in seconds", ["query_type"]
)
