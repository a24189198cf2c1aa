"""
repositories/entity_repo.py
---------------------------
Queryable collection over one mapped table.
Builds the SELECT, hands it to the context to run, and turns the rows
back into domain model objects.
"""

from typing import Any

from db.mapping import EntityMapping
from db.query import CompiledQuery, SelectQuery


class EntityQuery:
    """A pending, filterable query; nothing runs until `to_list()`."""

    def __init__(self, context, select: SelectQuery):
        self._context = context
        self._select = select

    def where(self, attribute: str, value: Any, operator: str = "=") -> "EntityQuery":
        return EntityQuery(self._context, self._select.where(attribute, operator, value))

    def to_query(self) -> CompiledQuery:
        return self._select.compile()

    def to_list(self) -> list:
        """Run the query and materialize the rows in the order returned."""
        mapping = self._select.mapping
        rows = self._context.execute(self.to_query())
        return [mapping.materialize(tuple(row)) for row in rows]


class EntityRepository:
    """Read access to the rows of one entity's table."""

    def __init__(self, context, mapping: EntityMapping):
        self._context = context
        self.mapping = mapping

    def all(self) -> EntityQuery:
        return EntityQuery(self._context, SelectQuery(self.mapping))

    def where(self, attribute: str, value: Any, operator: str = "=") -> EntityQuery:
        """
        Filter on one attribute.

        Args:
            attribute: Dataclass attribute name, e.g. 'some_varchar'.
            value: Value compared against the column; encoded per the
                column's declared type, not its real one.
            operator: One of the operators in `db.query.OPERATORS`.
        """
        return self.all().where(attribute, value, operator)
