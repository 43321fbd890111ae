"""Car rental REST API backed by PostgreSQL."""

__version__ = "1.0.0"
