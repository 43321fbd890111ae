"""Helpers shared by the table repositories.

Repositories always take the connection explicitly via ``conn`` so that the
service layer owns acquire/release and transaction boundaries.
"""


def affected_rows(status: str) -> int:
    """Row count from an asyncpg command status such as ``'UPDATE 1'``."""
    try:
        return int(status.rsplit(" ", 1)[-1])
    except (AttributeError, ValueError):
        return 0
