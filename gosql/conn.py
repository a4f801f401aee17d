"""Packet-level connection to one client."""

from __future__ import annotations

import contextlib
import secrets
import socket
from typing import Any, Iterable, Mapping, Sequence

from gosql.auth import SEED_LENGTH, build_handshake, check_password, parse_login
from gosql.wire import (
    encode_column_def,
    encode_lenenc_int,
    encode_lenenc_string,
    eof_packet,
    error_packet,
    format_value,
    ok_packet,
)

MAX_PAYLOAD = (1 << 24) - 1
COM_QUIT = 0x01
COM_QUERY = 0x03
ER_ACCESS_DENIED = 1045


class ProtocolError(Exception):
    """Raised when the client sends something that cannot be handled."""


class QuitRequested(ProtocolError):
    """Raised when the client asks to end the session."""

    def __init__(self) -> None:
        super().__init__("client requested quit")


class Conn:
    """A client connection speaking length-prefixed, sequenced packets."""

    def __init__(self, sock: socket.socket) -> None:
        self._sock = sock
        self._reader = sock.makefile("rb")
        self._writer = sock.makefile("wb")
        self.seq = 0

    def __enter__(self) -> Conn:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _read_exact(self, size: int) -> bytes:
        data = self._reader.read(size)
        if data is None or len(data) < size:
            raise ProtocolError("connection closed")
        return data

    def read_packet(self) -> bytes:
        """Read one packet and adopt its sequence number."""
        head = self._read_exact(4)
        length = int.from_bytes(head[:3], "little")
        self.seq = head[3]
        return self._read_exact(length)

    def write_packet(self, data: bytes) -> None:
        """Write one packet with the current sequence number."""
        data = bytes(data)
        if len(data) > MAX_PAYLOAD:
            raise ProtocolError("packet too large")
        header = len(data).to_bytes(3, "little") + bytes([self.seq])
        self.seq = (self.seq + 1) & 0xFF
        self._writer.write(header + data)
        self._writer.flush()

    def read_query(self) -> str:
        """Read a command packet and return the query text it carries."""
        data = self.read_packet()
        if not data:
            raise ProtocolError("empty packet")
        command = data[0]
        if command == COM_QUIT:
            raise QuitRequested()
        if command == COM_QUERY:
            return data[1:].decode("utf-8", errors="replace")
        raise ProtocolError(f"unsupported command: 0x{command:x}")

    def write_ok(self) -> None:
        """Send an OK packet."""
        self.write_packet(ok_packet())

    def write_error(self, code: int, message: str) -> None:
        """Send an error packet."""
        self.write_packet(error_packet(code, message))

    def write_eof(self) -> None:
        """Send an EOF packet."""
        self.write_packet(eof_packet())

    def write_result_set(
        self, columns: Sequence[str], rows: Iterable[Sequence[Any]]
    ) -> None:
        """Send a text result set: column count, definitions and rows."""
        self.write_packet(encode_lenenc_int(len(columns)))
        for name in columns:
            self.write_packet(encode_column_def(name))
        self.write_eof()
        for row in rows:
            self.write_packet(
                b"".join(encode_lenenc_string(format_value(v)) for v in row)
            )
        self.write_eof()

    def handshake(self, users: Mapping[str, str]) -> bool:
        """Authenticate the client; return whether access was granted."""
        seed = secrets.token_bytes(SEED_LENGTH)
        self.write_packet(build_handshake(seed))
        username, auth_response = parse_login(self.read_packet())
        stored = users.get(username)
        if stored is None or not check_password(stored, seed, auth_response):
            self.write_error(ER_ACCESS_DENIED, "Access denied for user")
            return False
        self.write_ok()
        return True

    def close(self) -> None:
        """Close the streams and the socket."""
        for closer in (self._writer.close, self._reader.close, self._sock.close):
            with contextlib.suppress(OSError):
                closer()