"""Domain entities for naive_db.

Exports:
    Schema:
        - Column: Named, typed column
        - TableSchema: Ordered columns fixing a table's slot layout
        - DEFAULT_SCHEMA: id INTEGER, name TEXT, debit FLOAT

    Row:
        - Row: Ordered atoms, field 0 is the identifier
"""

from naive_db.domain.entities.row import Row
from naive_db.domain.entities.schema import DEFAULT_SCHEMA, Column, TableSchema

__all__ = [
    "Column",
    "TableSchema",
    "DEFAULT_SCHEMA",
    "Row",
]
