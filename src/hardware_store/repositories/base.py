from abc import ABC, abstractmethod
from typing import Optional, List, Any, Dict
from contextlib import contextmanager
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from sqlalchemy.types import TypeEngine
from hardware_store.core.exceptions import BaseAPIException, ConflictError, DatabaseError
from hardware_store.db import get_connection
import logging

logger = logging.getLogger(__name__)

Params = Optional[Dict[str, Any]]
ColumnTypes = Optional[Dict[str, TypeEngine]]


class BaseRepository(ABC):
    """
    Shared SQL plumbing for the store's tables.

    Queries are plain parameterized SQL kept portable between PostgreSQL and
    SQLite. Timestamp and JSON columns read through raw SQL come back as
    strings on SQLite, so callers pass `types` to have SQLAlchemy apply the
    column's result processing.

    Every helper turns SQLAlchemy failures into API exceptions: unique and
    foreign key violations become ConflictError, anything else DatabaseError.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    @property
    @abstractmethod
    def table_name(self) -> str:
        pass

    @contextmanager
    def _sql_errors(self, operation: str, sql: str = ""):
        try:
            yield
        except BaseAPIException:
            raise
        except IntegrityError as e:
            logger.warning(f"{self.table_name}: {operation} violated a constraint: {e.orig}")
            raise ConflictError(f"The change conflicts with existing {self.table_name} data")
        except SQLAlchemyError as e:
            logger.error(f"{self.table_name}: {operation} failed [{sql.strip()[:120]}]: {e}")
            raise DatabaseError(f"{operation} on {self.table_name} failed: {e}", operation)

    @contextmanager
    def get_db_connection(self):
        with self._sql_errors("CONNECT"):
            with get_connection(self.engine) as conn:
                yield conn

    @contextmanager
    def transaction(self):
        """
        Run several statements atomically.

        Commits when the block exits cleanly; any exception, including a
        business rule violation raised inside the block, rolls back.
        """
        with self._sql_errors("TRANSACTION"):
            with self.engine.begin() as conn:
                yield conn

    @staticmethod
    def _statement(query: str, types: ColumnTypes = None):
        stmt = text(query)
        return stmt.columns(**types) if types else stmt

    def execute_query(self, query: str, params: Params = None, types: ColumnTypes = None) -> List[Dict[str, Any]]:
        """Rows of a SELECT as dictionaries"""
        with self._sql_errors("SELECT", query), get_connection(self.engine) as conn:
            rows = conn.execute(self._statement(query, types), params or {})
            return [dict(row._mapping) for row in rows]

    def execute_single_query(self, query: str, params: Params = None, types: ColumnTypes = None) -> Optional[Dict[str, Any]]:
        """First row of a SELECT, or None"""
        with self._sql_errors("SELECT", query), get_connection(self.engine) as conn:
            row = conn.execute(self._statement(query, types), params or {}).first()
            return dict(row._mapping) if row else None

    def execute_scalar(self, query: str, params: Params = None) -> Any:
        with self._sql_errors("SELECT", query), get_connection(self.engine) as conn:
            return conn.execute(text(query), params or {}).scalar()

    def execute_command(self, command: str, params: Params = None) -> int:
        """INSERT/UPDATE/DELETE in its own transaction; returns the affected row count"""
        with self._sql_errors("WRITE", command), self.engine.begin() as conn:
            return conn.execute(text(command), params or {}).rowcount

    def execute_insert_returning_id(self, command: str, params: Params = None) -> Any:
        with self._sql_errors("INSERT", command), self.engine.begin() as conn:
            return conn.execute(text(command + " RETURNING id"), params or {}).scalar()

    def exists(self, entity_id: Any) -> bool:
        query = f"SELECT 1 FROM {self.table_name} WHERE id = :id"
        return self.execute_scalar(query, {"id": entity_id}) is not None
