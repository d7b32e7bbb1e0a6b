"""Adapters layer - concrete implementations of port interfaces.

Adapters provide the actual implementations:
- Inbound adapters: Handle incoming requests (statement text)
- Outbound adapters: Implement external dependencies (table files)
"""

from naive_db.adapters.inbound import Statement, StatementParser, StatementType
from naive_db.adapters.outbound import FileTableStore, read_trailing_slot

__all__ = [
    # Inbound adapters
    "Statement",
    "StatementParser",
    "StatementType",
    # Outbound adapters
    "FileTableStore",
    "read_trailing_slot",
]
