"""
Table gateway: load-by-key, insert, and column-scoped update over one table.

Records compose a gateway instead of inheriting table behaviour. Every call
runs in its own short session, so each statement is committed on its own and
storage errors propagate to the caller untouched.
"""
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Dict, List, Optional

from sqlalchemy import ColumnElement, Table, insert, select, update
from sqlalchemy.orm import Session, sessionmaker

from crowdfunding.database.connection import get_session_factory
from crowdfunding.exceptions import UnknownColumnError


class TableGateway:
    """Row-level access to a single table through SQLAlchemy Core statements."""

    def __init__(
        self,
        table: Table,
        session_factory: Optional[sessionmaker[Session]] = None,
    ):
        """
        Initialize the gateway.

        Args:
            table: Table to operate on
            session_factory: Optional session factory (process default if omitted)
        """
        self.table = table
        self._session_factory = session_factory

    @property
    def session_factory(self) -> sessionmaker[Session]:
        if self._session_factory is None:
            self._session_factory = get_session_factory()
        return self._session_factory

    def has_column(self, name: str) -> bool:
        return name in self.table.c

    def column(self, name: str) -> Any:
        if not self.has_column(name):
            raise UnknownColumnError(
                f"Unknown column '{name}' in table '{self.table.name}'"
            )
        return self.table.c[name]

    def criteria(self, values: Mapping[str, Any]) -> List[ColumnElement[bool]]:
        """Turn a column->value mapping into equality clauses."""
        return [self.column(name) == value for name, value in values.items()]

    def fetch_one(
        self, columns: Sequence[str], criteria: Mapping[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """
        Fetch the first row matching all criteria.

        Returns:
            Optional[Dict[str, Any]]: Column values, or None when nothing matches
        """
        stmt = (
            select(*(self.column(name) for name in columns))
            .where(*self.criteria(criteria))
            .limit(1)
        )
        with self.session_factory() as session:
            row = session.execute(stmt).mappings().first()
        return dict(row) if row is not None else None

    def fetch_all(
        self,
        columns: Sequence[str],
        where: Iterable[ColumnElement[bool]] = (),
    ) -> List[Dict[str, Any]]:
        """Fetch all rows matching the given clauses, ordered by primary key."""
        stmt = select(*(self.column(name) for name in columns)).where(*where)
        stmt = stmt.order_by(*self.table.primary_key.columns)
        with self.session_factory() as session:
            rows = session.execute(stmt).mappings().all()
        return [dict(row) for row in rows]

    def fetch_value(self, column: str, criteria: Mapping[str, Any]) -> Any:
        """Fetch a single column of the first matching row, or None."""
        stmt = select(self.column(column)).where(*self.criteria(criteria)).limit(1)
        with self.session_factory() as session:
            return session.execute(stmt).scalar()

    def insert(self, values: Mapping[str, Any]) -> int:
        """
        Insert one row.

        Returns:
            int: The new primary key value
        """
        for name in values:
            self.column(name)
        with self.session_factory.begin() as session:
            result = session.execute(insert(self.table).values(**values))
            return int(result.inserted_primary_key[0])

    def update(self, values: Mapping[str, Any], criteria: Mapping[str, Any]) -> int:
        """
        Update the given columns on rows matching all criteria.

        Returns:
            int: Number of rows matched by the statement
        """
        if not criteria:
            raise ValueError("Refusing to update without criteria")
        for name in values:
            self.column(name)
        stmt = update(self.table).where(*self.criteria(criteria)).values(**values)
        with self.session_factory.begin() as session:
            result = session.execute(stmt)
            return result.rowcount
