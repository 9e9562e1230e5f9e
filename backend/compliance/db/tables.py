"""
Single source of truth for database tables that exist after migrations.

Use these names when writing raw SQL. Order matters for FK: parents first.
"""
ALL_TABLE_NAMES = (
    "users",
    "vendors",
    "notifications",
    "activity_logs",
)
