"""Cost, pagination, analytics and session services."""
