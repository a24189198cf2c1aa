"""
db/mapping.py
-------------
Maps dataclass entities onto SQL Server tables and columns.

Declarations are collected with `ModelBuilder` and frozen into a
`MappingConfiguration` once at startup. Anything not declared is inferred:

    - table name    = class name
    - column name   = attribute name in PascalCase (some_varchar -> SomeVarchar)
    - int           -> INT (an `id` attribute is the store-generated key)
    - str           -> NVARCHAR, whatever the real column type is

The last rule is what makes an undeclared VARCHAR column get compared with
an N'...' literal.
"""

import dataclasses
import typing
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Optional

from config import MSSQL_CHARSET
from utils.logger import get_logger

logger = get_logger(__name__)


class MappingError(RuntimeError):
    """Raised when an entity mapping is missing or ambiguous."""


class ColumnType(Enum):
    """Physical storage type of a mapped column."""

    INT = "int"
    VARCHAR = "varchar"
    NVARCHAR = "nvarchar"

    @property
    def is_text(self) -> bool:
        return self is not ColumnType.INT

    @property
    def is_unicode(self) -> bool:
        """True for the wide (two bytes per character) text encoding."""
        return self is ColumnType.NVARCHAR


def to_column_name(attribute: str) -> str:
    """some_varchar -> SomeVarchar"""
    return "".join(part[:1].upper() + part[1:] for part in attribute.split("_") if part)


def quote_identifier(name: str) -> str:
    """Bracket-quote a T-SQL identifier."""
    return "[" + name.replace("]", "]]") + "]"


@dataclass(frozen=True)
class ColumnMapping:
    """
    A single attribute-to-column mapping.

    Attributes:
        attribute: Dataclass field name on the entity.
        column: Column name in the table.
        column_type: Declared (not introspected) storage type.
        is_key: True for the identity primary key.
    """
    attribute: str
    column: str
    column_type: ColumnType
    is_key: bool = False

    def literal(self, value: Any) -> str:
        """
        Render `value` as the T-SQL literal the server receives.

        Wide text gets the N prefix, narrow text does not.
        """
        if value is None:
            return "NULL"
        if self.column_type is ColumnType.INT:
            return str(int(value))
        escaped = str(value).replace("'", "''")
        prefix = "N" if self.column_type.is_unicode else ""
        return f"{prefix}'{escaped}'"

    def parameter(self, value: Any) -> Any:
        """
        Convert `value` into the bound parameter for pymssql.

        pymssql interpolates on the client: str is sent as N'...' and bytes
        as '...', so the declared encoding picks the Python type.
        """
        if value is None:
            return None
        if self.column_type is ColumnType.INT:
            return int(value)
        if self.column_type.is_unicode:
            return str(value)
        return str(value).encode(MSSQL_CHARSET)


@dataclass(frozen=True)
class EntityMapping:
    """The table and ordered columns an entity class is stored in."""
    entity: type
    table: str
    columns: tuple
    schema: str = "dbo"

    @property
    def qualified_table(self) -> str:
        return f"{quote_identifier(self.schema)}.{quote_identifier(self.table)}"

    @property
    def key(self) -> ColumnMapping:
        for column in self.columns:
            if column.is_key:
                return column
        raise MappingError(f"Entity {self.entity.__name__} has no key.")

    def column(self, attribute: str) -> ColumnMapping:
        """
        Look up the mapping of one attribute.

        Raises:
            MappingError: If the attribute is not mapped.
        """
        for column in self.columns:
            if column.attribute == attribute:
                return column
        raise MappingError(f"{self.entity.__name__} has no mapped attribute '{attribute}'.")

    def materialize(self, row: tuple) -> Any:
        """Build an entity from a row whose values follow `columns` order."""
        if len(row) != len(self.columns):
            raise MappingError(
                f"Row for {self.entity.__name__} has {len(row)} values, "
                f"expected {len(self.columns)}."
            )
        values = {}
        for column, value in zip(self.columns, row):
            if isinstance(value, bytes) and column.column_type.is_text:
                value = value.decode(MSSQL_CHARSET)
            values[column.attribute] = value
        return self.entity(**values)


class PropertyBuilder:
    """Fluent declarations for one attribute."""

    def __init__(self, attribute: str):
        self.attribute = attribute
        self.column_name: Optional[str] = None
        self.column_type: Optional[ColumnType] = None

    def has_column_name(self, name: str) -> "PropertyBuilder":
        self.column_name = name
        return self

    def has_column_type(self, type_name: str) -> "PropertyBuilder":
        try:
            self.column_type = ColumnType(type_name.lower())
        except ValueError:
            raise MappingError(f"Unsupported column type '{type_name}' for '{self.attribute}'.") from None
        return self

    def is_unicode(self, unicode: bool = True) -> "PropertyBuilder":
        """Declare the text encoding: NVARCHAR when True, VARCHAR when False."""
        self.column_type = ColumnType.NVARCHAR if unicode else ColumnType.VARCHAR
        return self


class EntityTypeBuilder:
    """Collects the declarations for one entity class."""

    def __init__(self, entity: type):
        if not dataclasses.is_dataclass(entity):
            raise MappingError(f"{entity!r} is not a dataclass and cannot be mapped.")
        self.entity = entity
        self.table: Optional[str] = None
        self.schema = "dbo"
        self._properties: dict = {}

    def to_table(self, name: str, schema: str = "dbo") -> "EntityTypeBuilder":
        self.table = name
        self.schema = schema
        return self

    def property(self, attribute: str) -> PropertyBuilder:
        if attribute not in self._properties:
            self._properties[attribute] = PropertyBuilder(attribute)
        return self._properties[attribute]

    def build(self) -> EntityMapping:
        """
        Freeze the declarations, inferring whatever was left undeclared.

        Raises:
            MappingError: On unknown attributes, unsupported attribute
                types, duplicate column names or a missing key.
        """
        hints = typing.get_type_hints(self.entity)
        names = [f.name for f in dataclasses.fields(self.entity)]

        unknown = set(self._properties) - set(names)
        if unknown:
            raise MappingError(
                f"{self.entity.__name__} has no attribute(s): {', '.join(sorted(unknown))}"
            )

        columns = []
        for name in names:
            declared = self._properties.get(name)
            column_type = declared.column_type if declared else None
            if column_type is None:
                column_type = _infer_column_type(self.entity, name, hints.get(name))
            column_name = (declared.column_name if declared else None) or to_column_name(name)
            columns.append(ColumnMapping(
                attribute=name,
                column=column_name,
                column_type=column_type,
                is_key=(name == "id"),
            ))

        seen = set()
        for column in columns:
            lowered = column.column.lower()
            if lowered in seen:
                raise MappingError(
                    f"Column '{column.column}' is mapped more than once on {self.entity.__name__}."
                )
            seen.add(lowered)

        if not any(column.is_key for column in columns):
            raise MappingError(f"Entity {self.entity.__name__} has no key.")

        return EntityMapping(
            entity=self.entity,
            table=self.table or self.entity.__name__,
            columns=tuple(columns),
            schema=self.schema,
        )


def _infer_column_type(entity: type, name: str, hint: Any) -> ColumnType:
    """Default storage type for an attribute with no declaration."""
    args = typing.get_args(hint)
    if type(None) in args:
        remaining = [a for a in args if a is not type(None)]
        hint = remaining[0] if len(remaining) == 1 else hint
    if hint is int:
        return ColumnType.INT
    if hint is str:
        return ColumnType.NVARCHAR
    raise MappingError(f"Cannot infer a column type for {entity.__name__}.{name} ({hint!r}).")


class MappingConfiguration:
    """Immutable set of entity mappings, resolved once per process."""

    def __init__(self, mappings: dict):
        self._mappings = MappingProxyType(dict(mappings))

    @property
    def entities(self) -> tuple:
        return tuple(self._mappings)

    def for_entity(self, entity: type) -> EntityMapping:
        """
        Get the mapping for an entity class.

        Raises:
            MappingError: If the entity was never configured.
        """
        try:
            return self._mappings[entity]
        except KeyError:
            raise MappingError(f"No mapping configured for entity {entity.__name__}.") from None

    def __contains__(self, entity: type) -> bool:
        return entity in self._mappings

    def __len__(self) -> int:
        return len(self._mappings)


class ModelBuilder:
    """Entry point for declaring entity mappings."""

    def __init__(self):
        self._builders: dict = {}

    def entity(self, entity: type) -> EntityTypeBuilder:
        if entity not in self._builders:
            self._builders[entity] = EntityTypeBuilder(entity)
        return self._builders[entity]

    def apply_configuration(
        self, entity: type, configure: Callable[[EntityTypeBuilder], None]
    ) -> "ModelBuilder":
        configure(self.entity(entity))
        return self

    def build(self) -> MappingConfiguration:
        """
        Freeze every entity mapping.

        Raises:
            MappingError: If two entities claim the same table.
        """
        mappings = {}
        tables = {}
        for entity, builder in self._builders.items():
            mapping = builder.build()
            key = (mapping.schema.lower(), mapping.table.lower())
            if key in tables:
                raise MappingError(
                    f"Table {mapping.qualified_table} is mapped by both "
                    f"{tables[key].__name__} and {entity.__name__}."
                )
            tables[key] = entity
            mappings[entity] = mapping
            logger.debug(
                f"Mapped {entity.__name__} -> {mapping.qualified_table} ("
                + ", ".join(f"{c.column} {c.column_type.value}" for c in mapping.columns)
                + ")"
            )
        return MappingConfiguration(mappings)
