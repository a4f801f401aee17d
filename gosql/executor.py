"""Execution of parsed statements against a store."""

from __future__ import annotations

from typing import Any

from gosql.parser import CreateTableStmt, InsertStmt, SelectStmt, Statement
from gosql.storage import MemoryStorage, StorageError

ER_PARSE_ERROR = 1064


class Executor:
    """Runs statements on a store and writes the replies to a connection."""

    def __init__(self, store: MemoryStorage) -> None:
        self.store = store

    def execute(self, stmt: Statement, conn: Any) -> None:
        """Execute one statement; storage failures become error packets."""
        if isinstance(stmt, CreateTableStmt):
            action = lambda: self.store.create_table(stmt.table_name, stmt.columns)
        elif isinstance(stmt, InsertStmt):
            action = lambda: self.store.insert(stmt.table_name, stmt.values)
        elif isinstance(stmt, SelectStmt):
            self._select(stmt, conn)
            return
        else:
            raise TypeError("unsupported statement type")
        try:
            action()
        except StorageError as err:
            conn.write_error(ER_PARSE_ERROR, str(err))
            return
        conn.write_ok()

    def _select(self, stmt: SelectStmt, conn: Any) -> None:
        try:
            columns, rows = self.store.select_all(stmt.table_name)
        except StorageError as err:
            conn.write_error(ER_PARSE_ERROR, str(err))
            return
        conn.write_result_set([column.name for column in columns], rows)