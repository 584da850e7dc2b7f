"""Data access layer: protocols and their SQLAlchemy implementations."""
