"""Table storage: an in-memory store and a JSON file-backed store."""

from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Sequence

Row = list[Any]


class StorageError(Exception):
    """Raised when a storage operation cannot be carried out."""


@dataclass(frozen=True)
class Column:
    """A column definition: a name and an upper-case type such as INT."""

    name: str
    type: str


@dataclass
class Table:
    """A named table holding rows in insertion order."""

    name: str
    columns: list[Column]
    rows: list[Row] = field(default_factory=list)
    _lock: threading.RLock = field(
        default_factory=threading.RLock, repr=False, compare=False
    )

    def insert(self, row: Sequence[Any]) -> None:
        """Append a row; its length must match the number of columns."""
        with self._lock:
            if len(row) != len(self.columns):
                raise StorageError("column count mismatch")
            self.rows.append(list(row))

    def select_all(self) -> list[Row]:
        """Return a copy of all rows."""
        with self._lock:
            return [list(row) for row in self.rows]

    def _to_json(self) -> dict[str, Any]:
        with self._lock:
            return {
                "Name": self.name,
                "Columns": [{"Name": c.name, "Type": c.type} for c in self.columns],
                "Rows": [list(row) for row in self.rows],
            }

    @classmethod
    def _from_json(cls, data: dict[str, Any]) -> Table:
        columns = [Column(c["Name"], c["Type"]) for c in data.get("Columns") or []]
        rows = [list(r) for r in data.get("Rows") or []]
        return cls(data["Name"], columns, rows)


class MemoryStorage:
    """Tables kept in memory only."""

    def __init__(self) -> None:
        self._tables: dict[str, Table] = {}
        self._lock = threading.RLock()

    def create_table(self, name: str, columns: Iterable[Column]) -> Table:
        """Create an empty table; fail if the name is taken."""
        with self._lock:
            if name in self._tables:
                raise StorageError(f"table {name} already exists")
            table = Table(name, list(columns))
            self._tables[name] = table
            return table

    def _get(self, name: str) -> Table:
        with self._lock:
            try:
                return self._tables[name]
            except KeyError:
                raise StorageError(f"table {name} not found") from None

    def insert(self, table: str, row: Sequence[Any]) -> Table:
        """Insert a row into the named table."""
        target = self._get(table)
        target.insert(row)
        return target

    def select_all(self, table: str) -> tuple[list[Column], list[Row]]:
        """Return the columns and a copy of the rows of the named table."""
        target = self._get(table)
        return list(target.columns), target.select_all()


class FileStore(MemoryStorage):
    """Tables persisted as one JSON file each in a data directory."""

    def __init__(self, data_dir: str | Path) -> None:
        super().__init__()
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self._load_tables()

    def _load_tables(self) -> None:
        for path in sorted(self.data_dir.iterdir()):
            if path.suffix != ".json":
                continue
            with path.open(encoding="utf-8") as fh:
                table = Table._from_json(json.load(fh))
            self._tables[table.name] = table

    def _save_table(self, table: Table) -> None:
        path = self.data_dir / f"{table.name}.json"
        with path.open("w", encoding="utf-8") as fh:
            json.dump(table._to_json(), fh)
            fh.write("\n")

    def create_table(self, name: str, columns: Iterable[Column]) -> Table:
        """Create a table and write it to disk."""
        with self._lock:
            table = super().create_table(name, columns)
            self._save_table(table)
            return table

    def insert(self, table: str, row: Sequence[Any]) -> Table:
        """Insert a row and write the table to disk."""
        target = super().insert(table, row)
        self._save_table(target)
        return target

    def select_all(self, table: str) -> tuple[list[Column], list[Row]]:
        """Return the columns and a copy of the rows of the named table."""
        return super().select_all(table)