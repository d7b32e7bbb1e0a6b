"""Statement parser using sqlglot.

Translates statement text into a structured Statement request for the
session. Only three shapes are recognized:

    SELECT * FROM <table> [WHERE <operand> <op> <operand>];
    INSERT INTO <table> VALUES (<literal>, <literal>, ...);
    DELETE FROM <table> WHERE <operand> <op> <operand>;

Operands and values become atoms: numbers follow the atom codec's decode
rules, quoted strings become Text and bare identifiers become Symbol (the
predicate evaluator later binds symbols that name a column). With the
default ``mysql`` dialect both single- and double-quoted strings are text.

``parse`` never raises for bad input; it returns ``Err`` carrying
MalformedStatementError, UnsupportedOperatorError or
UnsupportedAtomTypeError.

References:
    - sqlglot documentation: https://sqlglot.com/
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable

import sqlglot
from sqlglot import exp
from sqlglot.errors import SqlglotError
from sqlglot.tokens import Token, TokenType

from naive_db.domain.errors import (
    DatabaseError,
    MalformedStatementError,
    UnsupportedAtomTypeError,
    UnsupportedOperatorError,
)
from naive_db.domain.services import AtomCodec
from naive_db.domain.value_objects import (
    Atom,
    ComparisonOp,
    Err,
    Float,
    Integer,
    Ok,
    Result,
    Symbol,
    Text,
    WhereClause,
    to_atom,
)


class StatementType(Enum):
    """Kinds of statement the engine executes."""

    SELECT = "select"
    INSERT = "insert"
    DELETE = "delete"


@dataclass(frozen=True)
class Statement:
    """A structured request against one table.

    Attributes:
        command: Which operation to run.
        table: Target table name.
        predicate: Where-clause for SELECT (optional) and DELETE (required).
        values: Field values for INSERT, identifier excluded.
    """

    command: StatementType
    table: str
    predicate: WhereClause | None = None
    values: tuple[Atom, ...] | None = None

    def __post_init__(self) -> None:
        if not self.table:
            raise MalformedStatementError("Statement needs a table name")
        if self.command is StatementType.INSERT:
            if self.values is None or self.predicate is not None:
                raise MalformedStatementError("INSERT takes values and no predicate")
        elif self.values is not None:
            raise MalformedStatementError(f"{self.command.name} takes no values")
        if self.command is StatementType.DELETE and self.predicate is None:
            raise MalformedStatementError("DELETE requires a WHERE clause")

    @classmethod
    def select(cls, table: str, predicate: WhereClause | None = None) -> Statement:
        return cls(StatementType.SELECT, table, predicate=predicate)

    @classmethod
    def insert(cls, table: str, values: Iterable[Any]) -> Statement:
        """Build an INSERT, wrapping plain Python values as atoms.

        Raises:
            UnsupportedAtomTypeError: If a value cannot be an atom.
        """
        return cls(
            StatementType.INSERT,
            table,
            values=tuple(to_atom(value).unwrap() for value in values),
        )

    @classmethod
    def delete(cls, table: str, predicate: WhereClause) -> Statement:
        return cls(StatementType.DELETE, table, predicate=predicate)

    def __str__(self) -> str:
        if self.command is StatementType.INSERT:
            rendered = ", ".join(_render_atom(atom) for atom in self.values or ())
            return f"INSERT INTO {self.table} VALUES ({rendered});"
        prefix = "SELECT * FROM" if self.command is StatementType.SELECT else "DELETE FROM"
        where = f" WHERE {self.predicate}" if self.predicate else ""
        return f"{prefix} {self.table}{where};"


_COMPARISONS: dict[type[exp.Expression], ComparisonOp] = {
    exp.EQ: ComparisonOp.EQ,
    exp.NEQ: ComparisonOp.NE,
    exp.LT: ComparisonOp.LT,
    exp.LTE: ComparisonOp.LE,
    exp.GT: ComparisonOp.GT,
    exp.GTE: ComparisonOp.GE,
}

_TABLE_REF = re.compile(r"\s*([.\w]+)")

# A run of these characters that is not a known operator is unsupported.
_OPERATOR_CHARS = frozenset("<>=")

_UNSUPPORTED_SELECT_CLAUSES = (
    "joins",
    "laterals",
    "group",
    "having",
    "order",
    "limit",
    "offset",
    "distinct",
    "with",
)


class StatementParser:
    """Statement parser using sqlglot.

    Example:
        >>> parser = StatementParser()
        >>> statement = parser.parse("SELECT * FROM debits WHERE id = 1;").unwrap()
        >>> statement.command, statement.table
        (<StatementType.SELECT: 'select'>, 'debits')
    """

    def __init__(self, dialect: str = "mysql", atom_codec: AtomCodec | None = None) -> None:
        """Initialize the parser.

        Args:
            dialect: sqlglot dialect used to tokenize statements.
            atom_codec: Codec whose decode rules turn numeric literals into atoms.
        """
        self._dialect = dialect
        self._atoms = atom_codec or AtomCodec()

    def parse(self, text: str) -> Result[Statement]:
        """Parse statement text into a structured request."""
        try:
            return Ok(self._parse(text))
        except DatabaseError as e:
            return Err(e)

    def _parse(self, text: str) -> Statement:
        if not text or not text.strip():
            raise MalformedStatementError("Empty statement")

        try:
            tokens = sqlglot.tokenize(text, read=self._dialect)
        except SqlglotError as e:
            raise MalformedStatementError(f"Failed to parse statement: {e}") from e
        _check_operators(tokens)

        try:
            statements = sqlglot.parse(text, dialect=self._dialect)
        except SqlglotError as e:
            raise MalformedStatementError(f"Failed to parse statement: {e}") from e

        statements = [stmt for stmt in statements if stmt is not None]
        if not statements:
            raise MalformedStatementError("Empty statement")
        if len(statements) > 1:
            raise MalformedStatementError("Multiple statements not supported")

        stmt = statements[0]
        table_ref = _table_reference(text, tokens)
        if isinstance(stmt, exp.Select):
            return self._convert_select(stmt, table_ref)
        if isinstance(stmt, exp.Insert):
            return self._convert_insert(stmt, table_ref)
        if isinstance(stmt, exp.Delete):
            return self._convert_delete(stmt, table_ref)
        raise MalformedStatementError(f"Unsupported statement: {stmt.key.upper()}")

    def _convert_select(self, stmt: exp.Select, table_ref: str | None) -> Statement:
        projection = stmt.expressions
        if len(projection) != 1 or not isinstance(projection[0], exp.Star):
            raise MalformedStatementError("Only SELECT * is supported")

        for clause in _UNSUPPORTED_SELECT_CLAUSES:
            if stmt.args.get(clause):
                raise MalformedStatementError(f"SELECT does not support {clause.upper()}")

        from_clause = stmt.args.get("from") or stmt.args.get("from_")
        if from_clause is None:
            raise MalformedStatementError("SELECT requires FROM clause")

        table = self._table_name(from_clause.this, table_ref)
        return Statement.select(table, predicate=self._convert_where(stmt.args.get("where"), table))

    def _convert_insert(self, stmt: exp.Insert, table_ref: str | None) -> Statement:
        if isinstance(stmt.this, exp.Schema):
            raise MalformedStatementError("INSERT column lists are not supported")
        table = self._table_name(stmt.this, table_ref)

        values = stmt.expression
        if not isinstance(values, exp.Values):
            raise MalformedStatementError("INSERT requires a VALUES list")
        if len(values.expressions) != 1:
            raise MalformedStatementError("INSERT takes exactly one VALUES tuple")

        row = values.expressions[0]
        items = row.expressions if isinstance(row, exp.Tuple) else [row]
        return Statement(
            StatementType.INSERT,
            table,
            values=tuple(self._convert_literal(item, table) for item in items),
        )

    def _convert_delete(self, stmt: exp.Delete, table_ref: str | None) -> Statement:
        table = self._table_name(stmt.this, table_ref)
        predicate = self._convert_where(stmt.args.get("where"), table)
        if predicate is None:
            raise MalformedStatementError("DELETE requires a WHERE clause")
        return Statement.delete(table, predicate)

    def _table_name(self, node: exp.Expression | None, table_ref: str | None) -> str:
        """Full table name as written, dotted qualifiers and leading dots included.

        sqlglot splits ``archive.t`` into db and table parts and drops the
        leading dot of ``.test``, so the name is read from the statement text
        and only checked against the parsed table.
        """
        if not isinstance(node, exp.Table) or not node.name:
            raise MalformedStatementError("Statement requires a table name")
        if node.alias:
            raise MalformedStatementError(f"Table aliases are not supported: {node.alias}")

        if table_ref is not None and table_ref.rsplit(".", 1)[-1] == node.name:
            return table_ref
        return ".".join(part.name for part in node.parts)

    def _convert_where(self, where: exp.Expression | None, table: str) -> WhereClause | None:
        if where is None:
            return None

        condition = where.this
        while isinstance(condition, exp.Paren):
            condition = condition.this

        op = _COMPARISONS.get(type(condition))
        if op is None:
            if isinstance(condition, (exp.Binary, exp.Predicate, exp.Not)):
                raise UnsupportedOperatorError(
                    f"Unsupported operator: {condition.key.upper()}"
                )
            raise MalformedStatementError(f"WHERE must be a comparison, got {condition.sql()}")

        return WhereClause(
            left=self._convert_literal(condition.left, table),
            op=op,
            right=self._convert_literal(condition.right, table),
        )

    def _convert_literal(self, node: exp.Expression, table: str) -> Atom:
        """Convert a literal, negated number or bare identifier into an atom."""
        if isinstance(node, exp.Literal):
            if node.args.get("is_string"):
                return Text(node.this)
            return self._number(node.this)
        if isinstance(node, exp.Neg) and isinstance(node.this, exp.Literal):
            if not node.this.args.get("is_string"):
                return self._number(f"-{node.this.this}")
        if isinstance(node, exp.Column):
            qualifier = ".".join(part.name for part in node.parts[:-1])
            if qualifier and qualifier != table:
                raise MalformedStatementError(
                    f"Column {node.sql()} does not belong to table {table!r}"
                )
            return Symbol(node.name)
        if isinstance(node, (exp.Null, exp.Boolean)):
            raise UnsupportedAtomTypeError(f"Unsupported atom type: {node.sql()}")
        raise MalformedStatementError(f"Unsupported value: {node.sql()}")

    def _number(self, text: str) -> Atom:
        atom = self._atoms.decode(text)
        if not isinstance(atom, (Integer, Float)):
            raise MalformedStatementError(f"Invalid number: {text}")
        return atom


def _render_atom(atom: Atom) -> str:
    if isinstance(atom, Text):
        return repr(atom.value)
    return str(atom.value)


def _table_reference(text: str, tokens: list[Token]) -> str | None:
    """Raw ``[.\\w]+`` run following the first FROM or INTO keyword."""
    for token in tokens:
        if token.token_type in (TokenType.FROM, TokenType.INTO):
            match = _TABLE_REF.match(text, token.end + 1)
            return match.group(1) if match else None
    return None


def _check_operators(tokens: list[Token]) -> None:
    """Reject WHERE-clause operators that are not comparisons.

    Adjacent tokens made only of ``<``, ``>`` and ``=`` are joined first, so
    ``><`` and ``=<`` are judged as written rather than as two operators.

    Raises:
        UnsupportedOperatorError: If such a run is not a known operator.
    """
    runs: list[list[Token]] = []
    in_where = False
    for token in tokens:
        if token.token_type is TokenType.WHERE:
            in_where = True
            continue
        if not in_where or token.token_type in (TokenType.STRING, TokenType.IDENTIFIER):
            continue
        if not token.text or not set(token.text) <= _OPERATOR_CHARS:
            continue
        if runs and runs[-1][-1].end + 1 == token.start:
            runs[-1].append(token)
        else:
            runs.append([token])

    for run in runs:
        ComparisonOp.from_token("".join(token.text for token in run))
