"""Outbound ports - interfaces for external dependencies.

Outbound ports define contracts for the storage that the session
depends on.
"""

from naive_db.ports.outbound.table_store import TableStore

__all__ = [
    "TableStore",
]
