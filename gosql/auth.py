"""Handshake packet and native-password authentication."""

from __future__ import annotations

import hashlib
import hmac
import struct

SERVER_VERSION = "5.7.0-gosql"
SEED_LENGTH = 20
_LOGIN_USERNAME_OFFSET = 36


def build_handshake(seed: bytes) -> bytes:
    """Build the initial handshake payload around a 20-byte seed."""
    if len(seed) != SEED_LENGTH:
        raise ValueError(f"seed must be {SEED_LENGTH} bytes")
    return b"".join(
        [
            b"\x0a",  # protocol version
            SERVER_VERSION.encode("ascii"),
            b"\x00",
            struct.pack("<I", 1),  # connection id
            seed[:8],  # auth-plugin-data part 1
            b"\x00",  # filler
            struct.pack("<H", 0x0002),  # capability flags, lower half
            b"\x21",  # character set
            struct.pack("<H", 0),  # status flags
            struct.pack("<H", 0x8000),  # capability flags, upper half
            bytes([SEED_LENGTH]),
            bytes(10),  # reserved
            seed[8:],  # auth-plugin-data part 2
            b"\x00",  # plugin name terminator
        ]
    )


def parse_login(data: bytes) -> tuple[str, bytes]:
    """Extract the user name and the auth response from a login packet."""
    rest = data[_LOGIN_USERNAME_OFFSET:]
    end = rest.find(b"\x00")
    if end == -1:
        return "", b""
    username = rest[:end].decode("utf-8", errors="replace")
    pos = end + 1
    if pos >= len(rest):
        return username, b""
    auth_len = rest[pos]
    pos += 1
    if pos + auth_len > len(rest):
        return username, b""
    return username, bytes(rest[pos:pos + auth_len])


def _hashes(password: str, seed: bytes) -> tuple[bytes, bytes]:
    stage1 = hashlib.sha1(password.encode()).digest()
    stage2 = hashlib.sha1(stage1).digest()
    mask = hashlib.sha1(seed[:SEED_LENGTH] + stage2).digest()
    return stage1, mask


def scramble_password(password: str, seed: bytes) -> bytes:
    """Compute the auth response a client sends for a password and seed."""
    if not password:
        return b""
    stage1, mask = _hashes(password, seed)
    return bytes(a ^ b for a, b in zip(stage1, mask))


def check_password(password: str, seed: bytes, auth_response: bytes) -> bool:
    """Check a client's auth response against the stored password."""
    if not password:
        return len(auth_response) == 0
    stage1, mask = _hashes(password, seed)
    if len(auth_response) != len(mask):
        return False
    candidate = bytes(a ^ b for a, b in zip(mask, auth_response))
    return hmac.compare_digest(candidate, stage1)