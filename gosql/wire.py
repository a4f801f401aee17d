"""Encoding of the wire-protocol packets the server sends."""

from __future__ import annotations

import struct
from typing import Any

MAX_LENENC_INT = (1 << 64) - 1


def encode_lenenc_int(n: int) -> bytes:
    """Encode a non-negative integer as a length-encoded integer."""
    if n < 0 or n > MAX_LENENC_INT:
        raise ValueError(f"length-encoded integer out of range: {n}")
    if n < 251:
        return bytes([n])
    if n < 1 << 16:
        return b"\xfc" + n.to_bytes(2, "little")
    if n < 1 << 24:
        return b"\xfd" + n.to_bytes(3, "little")
    return b"\xfe" + n.to_bytes(8, "little")


def encode_lenenc_string(s: str | bytes) -> bytes:
    """Encode a string prefixed by its length as a length-encoded integer."""
    data = s.encode("utf-8") if isinstance(s, str) else bytes(s)
    return encode_lenenc_int(len(data)) + data


def encode_column_def(name: str) -> bytes:
    """Build a minimal column definition packet for a VARCHAR column."""
    return b"".join(
        [
            encode_lenenc_string("def"),  # catalog
            encode_lenenc_string("gosql"),  # schema
            encode_lenenc_string(""),  # table
            encode_lenenc_string(""),  # org_table
            encode_lenenc_string(name),  # name
            encode_lenenc_string(name),  # org_name
            b"\x0c",  # length of the fixed-length fields
            struct.pack("<H", 0),  # character set
            struct.pack("<I", 256),  # column length
            b"\xfd",  # type: VARCHAR
            b"\x00",  # flags
            b"\x00",  # decimals
            b"\x00\x00",  # filler
        ]
    )


def ok_packet() -> bytes:
    """Payload of an OK packet with no affected rows and no warnings."""
    return b"\x00" + b"\x00" + b"\x00" + b"\x00\x00" + b"\x00\x00"


def error_packet(code: int, message: str) -> bytes:
    """Payload of an error packet with SQL state HY000."""
    return (
        b"\xff"
        + (code & 0xFFFF).to_bytes(2, "little")
        + b"#HY000"
        + message.encode("utf-8")
    )


def eof_packet() -> bytes:
    """Payload of an EOF packet with no status flags and no warnings."""
    return b"\xfe\x00\x00\x00\x00"


def format_value(value: Any) -> str:
    """Render a cell value as the text sent in a result row."""
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    return str(value)