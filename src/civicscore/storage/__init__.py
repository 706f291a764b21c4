"""PostgreSQL persistence for issues."""
