"""
db/query.py
-----------
Builds parameterized SELECT statements for a mapped entity.

A compiled query carries the pymssql statement (``%s`` placeholders), its
bound parameters typed by the declared column encoding, and the statement
text as the server receives it once pymssql has inlined the literals.
"""

from dataclasses import dataclass
from typing import Any

from db.mapping import ColumnMapping, EntityMapping, quote_identifier

# Accepted operator spellings -> T-SQL operator.
OPERATORS = {
    "=": "=",
    "==": "=",
    "!=": "<>",
    "<>": "<>",
    "<": "<",
    "<=": "<=",
    ">": ">",
    ">=": ">=",
}


class QueryError(ValueError):
    """Raised for a filter the builder cannot express."""


@dataclass(frozen=True)
class Predicate:
    column: ColumnMapping
    operator: str
    value: Any


@dataclass(frozen=True)
class CompiledQuery:
    """
    Attributes:
        sql: Statement with ``%s`` placeholders for pymssql.
        params: Bound values, one per placeholder.
        text: Statement with the literals inlined.
    """
    sql: str
    params: tuple
    text: str


class SelectQuery:
    """Immutable SELECT over one entity's table, filtered by AND-ed predicates."""

    def __init__(self, mapping: EntityMapping, predicates: tuple = ()):
        self.mapping = mapping
        self.predicates = predicates

    def where(self, attribute: str, operator: str, value: Any) -> "SelectQuery":
        """
        Return a new query with one more filter.

        Raises:
            QueryError: If the operator is not supported, or None is
                compared with anything but equality.
            MappingError: If the attribute is not mapped.
        """
        sql_operator = OPERATORS.get(operator)
        if sql_operator is None:
            raise QueryError(f"Unsupported operator '{operator}'.")
        if value is None and sql_operator not in ("=", "<>"):
            raise QueryError(f"Cannot compare NULL with '{operator}'.")
        column = self.mapping.column(attribute)
        predicate = Predicate(column, sql_operator, value)
        return SelectQuery(self.mapping, self.predicates + (predicate,))

    @property
    def alias(self) -> str:
        return self.mapping.table[:1].lower() or "t"

    def compile(self) -> CompiledQuery:
        alias = quote_identifier(self.alias)
        select_list = ", ".join(
            f"{alias}.{quote_identifier(c.column)}" for c in self.mapping.columns
        )
        head = f"SELECT {select_list} FROM {self.mapping.qualified_table} AS {alias}"

        sql_terms = []
        text_terms = []
        params = []
        for predicate in self.predicates:
            target = f"{alias}.{quote_identifier(predicate.column.column)}"
            if predicate.value is None:
                null_test = "IS NULL" if predicate.operator == "=" else "IS NOT NULL"
                sql_terms.append(f"{target} {null_test}")
                text_terms.append(f"{target} {null_test}")
                continue
            sql_terms.append(f"{target} {predicate.operator} %s")
            text_terms.append(
                f"{target} {predicate.operator} {predicate.column.literal(predicate.value)}"
            )
            params.append(predicate.column.parameter(predicate.value))

        if not sql_terms:
            return CompiledQuery(sql=head, params=(), text=head)
        return CompiledQuery(
            sql=f"{head} WHERE " + " AND ".join(sql_terms),
            params=tuple(params),
            text=f"{head} WHERE " + " AND ".join(text_terms),
        )
