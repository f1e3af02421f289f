"""Core application infrastructure: configuration, database, dependencies."""
