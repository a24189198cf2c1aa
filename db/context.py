"""
db/context.py
-------------
Data context: resolves entity mappings up front, hands out queryable
collections and runs their compiled statements over one scoped session.
"""

import time
from typing import Callable, Optional

from config import ConnectionSettings
from db.connection import DbSession
from db.mapping import MappingConfiguration
from db.query import CompiledQuery
from models.bad_type import BadType
from models.good_type import GoodType
from repositories.entity_repo import EntityRepository
from utils.logger import COMMAND_LOGGER, get_logger

logger = get_logger(__name__)
command_logger = get_logger(COMMAND_LOGGER)


class DbContext:
    """
    Base data context.

    Subclasses list the entity classes they expose in `entity_types`; every
    one of them must be mapped or construction fails.
    """

    entity_types: tuple = ()

    def __init__(
        self,
        settings: ConnectionSettings,
        mapping: MappingConfiguration,
        connect: Optional[Callable] = None,
        log_sql: bool = True,
    ):
        if mapping is None:
            raise TypeError("A MappingConfiguration is required.")
        # Resolve everything before a query can be issued.
        self._sets = {
            entity: EntityRepository(self, mapping.for_entity(entity))
            for entity in self.entity_types
        }
        self.mapping = mapping
        self.session = DbSession(settings, connect)
        self.log_sql = log_sql
        self.executed_statements: list[str] = []

    def set(self, entity: type) -> EntityRepository:
        """The queryable collection for `entity`."""
        try:
            return self._sets[entity]
        except KeyError:
            raise KeyError(f"{entity.__name__} is not part of {type(self).__name__}.") from None

    def execute(self, query: CompiledQuery) -> list:
        """
        Run a compiled query and fetch every row.

        Errors from the driver (unreachable server, missing table or
        column) are logged and re-raised unchanged.
        """
        conn = self.session.get_connection()
        started = time.perf_counter()
        try:
            with conn.cursor() as cur:
                cur.execute(query.sql, query.params or None)
                rows = cur.fetchall()
        except Exception as e:
            logger.error(f"Failed executing query: {query.text}: {e}")
            raise
        elapsed_ms = (time.perf_counter() - started) * 1000.0
        self.executed_statements.append(query.text)
        if self.log_sql:
            command_logger.info(f"Executed query ({elapsed_ms:.1f}ms, {len(rows)} rows): {query.text}")
        return list(rows)

    def close(self) -> None:
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class ImplicitConversionContext(DbContext):
    """Context over the BadType and GoodType tables."""

    entity_types = (BadType, GoodType)

    @property
    def bad_types(self) -> EntityRepository:
        return self.set(BadType)

    @property
    def good_types(self) -> EntityRepository:
        return self.set(GoodType)
