"""Parsing of the small SQL subset the server understands."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, ClassVar, Union

from gosql.storage import Column


class ParseError(ValueError):
    """Raised when a query cannot be parsed."""


@dataclass
class CreateTableStmt:
    """CREATE TABLE name (col TYPE, ...)."""

    table_name: str
    columns: list[Column] = field(default_factory=list)
    kind: ClassVar[str] = "CREATE"


@dataclass
class InsertStmt:
    """INSERT INTO name VALUES (...)."""

    table_name: str
    values: list[Any] = field(default_factory=list)
    kind: ClassVar[str] = "INSERT"


@dataclass
class SelectStmt:
    """SELECT * FROM name."""

    table_name: str
    kind: ClassVar[str] = "SELECT"


Statement = Union[CreateTableStmt, InsertStmt, SelectStmt]

_CREATE_RE = re.compile(r"^create table (\w+) *\((.+)\)", re.IGNORECASE | re.ASCII)
_INSERT_RE = re.compile(r"^insert into (\w+) values *\((.+)\)", re.IGNORECASE | re.ASCII)


def parse(query: str) -> Statement:
    """Parse a query into a statement object."""
    query = query.strip()
    lower = query.lower()
    if lower.startswith("create table"):
        return _parse_create_table(query)
    if lower.startswith("insert into"):
        return _parse_insert(query)
    if lower.startswith("select"):
        return _parse_select(query)
    raise ParseError("unsupported statement")


def _parse_create_table(query: str) -> CreateTableStmt:
    match = _CREATE_RE.match(query)
    if not match:
        raise ParseError("invalid CREATE TABLE syntax")
    table_name, defs = match.groups()
    columns = []
    for definition in defs.split(","):
        parts = definition.split()
        if len(parts) < 2:
            raise ParseError(f"invalid column definition: {definition}")
        columns.append(Column(parts[0], parts[1].upper()))
    return CreateTableStmt(table_name, columns)


def _parse_insert(query: str) -> InsertStmt:
    match = _INSERT_RE.match(query)
    if not match:
        raise ParseError("invalid INSERT syntax")
    table_name, raw_values = match.groups()
    return InsertStmt(table_name, [_parse_value(tok) for tok in raw_values.split(",")])


def _parse_value(token: str) -> Any:
    token = token.strip()
    if token.startswith("'") and token.endswith("'"):
        return token.strip("'")
    return _parse_int(token)


def _parse_int(text: str) -> int:
    """Collect the decimal digits of text into a number; 0 if there are none."""
    digits = "".join(ch for ch in text if "0" <= ch <= "9")
    return int(digits) if digits else 0


def _parse_select(query: str) -> SelectStmt:
    tokens = query.lower().split()
    if len(tokens) < 4 or tokens[1] != "*" or tokens[2] != "from":
        raise ParseError("invalid SELECT syntax")
    return SelectStmt(tokens[3])