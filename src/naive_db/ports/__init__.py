"""Ports layer - interface definitions following Hexagonal Architecture.

Ports are abstract interfaces (protocols) that define contracts. Adapters
implement these ports with concrete functionality.
"""

from naive_db.ports.outbound import TableStore

__all__ = [
    "TableStore",
]
