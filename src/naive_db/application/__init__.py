"""Application layer for naive_db.

The application layer wires the statement parser to the table stores.

Exports:
    Session:
        - Session: Main entry point (connect / execute / close)
        - ExecutionResult: Outcome of one statement
    Registry:
        - TableRegistry: Open table handles owned by a session
"""

from naive_db.application.registry import TableRegistry
from naive_db.application.session import ExecutionResult, Session

__all__ = [
    "ExecutionResult",
    "Session",
    "TableRegistry",
]
