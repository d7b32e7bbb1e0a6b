"""Inbound adapters for naive_db.

Inbound adapters handle incoming requests and convert them to
internal domain operations.

Exports:
    Statement Parser:
        - StatementParser: Parser that converts statement text to requests
        - Statement: Structured SELECT / INSERT / DELETE request
        - StatementType: Kind of statement
"""

from naive_db.adapters.inbound.statement_parser import (
    Statement,
    StatementParser,
    StatementType,
)

__all__ = [
    "Statement",
    "StatementParser",
    "StatementType",
]
