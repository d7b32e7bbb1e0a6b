"""Outbound adapters - implementations of outbound ports.

These adapters implement the storage the session depends on.
"""

from naive_db.adapters.outbound.file_table_store import FileTableStore, read_trailing_slot

__all__ = [
    "FileTableStore",
    "read_trailing_slot",
]
