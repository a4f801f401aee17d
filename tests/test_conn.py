import socket
import threading

import pytest

from gosql.auth import SERVER_VERSION, scramble_password
from gosql.conn import Conn, ProtocolError, QuitRequested
from gosql.wire import encode_column_def, encode_lenenc_int, encode_lenenc_string


def frame(payload: bytes, seq: int = 0) -> bytes:
    return len(payload).to_bytes(3, "little") + bytes([seq]) + payload


def read_frame(stream):
    head = stream.read(4)
    length = int.from_bytes(head[:3], "little")
    return head[3], stream.read(length)


@pytest.fixture
def pair():
    server_sock, client_sock = socket.socketpair()
    server_sock.settimeout(5)
    client_sock.settimeout(5)
    conn = Conn(server_sock)
    stream = client_sock.makefile("rb")
    yield conn, client_sock, stream
    stream.close()
    conn.close()
    client_sock.close()


def test_write_packet_frames_and_counts(pair):
    conn, _, stream = pair
    conn.write_packet(b"abc")
    conn.write_packet(b"de")
    assert read_frame(stream) == (0, b"abc")
    assert read_frame(stream) == (1, b"de")


def test_read_packet_adopts_sequence(pair):
    conn, client, stream = pair
    client.sendall(frame(b"hello", seq=7))
    assert conn.read_packet() == b"hello"
    conn.write_ok()
    seq, payload = read_frame(stream)
    assert seq == 7
    assert payload == bytes(7)


def test_read_query(pair):
    conn, client, _ = pair
    client.sendall(frame(b"\x03SELECT * FROM t"))
    assert conn.read_query() == "SELECT * FROM t"


def test_quit_command(pair):
    conn, client, _ = pair
    client.sendall(frame(b"\x01"))
    with pytest.raises(QuitRequested):
        conn.read_query()


def test_unsupported_command(pair):
    conn, client, _ = pair
    client.sendall(frame(b"\x02db"))
    with pytest.raises(ProtocolError, match="unsupported command: 0x2"):
        conn.read_query()


def test_empty_packet(pair):
    conn, client, _ = pair
    client.sendall(frame(b""))
    with pytest.raises(ProtocolError, match="empty packet"):
        conn.read_query()


def test_closed_peer(pair):
    conn, client, _ = pair
    client.sendall(b"\x05\x00")
    client.shutdown(socket.SHUT_WR)
    with pytest.raises(ProtocolError):
        conn.read_packet()


def test_write_error(pair):
    conn, _, stream = pair
    conn.write_error(1064, "oops")
    _, payload = read_frame(stream)
    assert payload[0] == 0xFF
    assert int.from_bytes(payload[1:3], "little") == 1064
    assert payload[3:] == b"#HY000oops"


def test_write_result_set(pair):
    conn, _, stream = pair
    conn.write_result_set(["id", "name"], [[1, "Alice"], [2, None]])
    payloads = [read_frame(stream) for _ in range(7)]
    assert [seq for seq, _ in payloads] == list(range(7))
    bodies = [p for _, p in payloads]
    assert bodies[0] == encode_lenenc_int(2)
    assert bodies[1] == encode_column_def("id")
    assert bodies[2] == encode_column_def("name")
    assert bodies[3][0] == 0xFE
    assert bodies[4] == encode_lenenc_string("1") + encode_lenenc_string("Alice")
    assert bodies[5] == encode_lenenc_string("2") + encode_lenenc_string("NULL")
    assert bodies[6][0] == 0xFE


def _seed_from_handshake(payload: bytes) -> bytes:
    start = 1 + len(SERVER_VERSION) + 1 + 4
    return payload[start:start + 8] + payload[-13:-1]


def _login(username: str, auth: bytes) -> bytes:
    return bytes(36) + username.encode() + b"\x00" + bytes([len(auth)]) + auth


def _run_handshake(pair, users, username, password):
    conn, client, stream = pair
    result = {}
    worker = threading.Thread(target=lambda: result.update(ok=conn.handshake(users)))
    worker.start()
    _, greeting = read_frame(stream)
    seed = _seed_from_handshake(greeting)
    client.sendall(frame(_login(username, scramble_password(password, seed)), seq=1))
    _, reply = read_frame(stream)
    worker.join(5)
    return result["ok"], reply


def test_handshake_accepts_known_user(pair):
    password = "password"
    ok, reply = _run_handshake(pair, {"alice": password}, "alice", password)
    assert ok is True
    assert reply == bytes(7)


def test_handshake_rejects_wrong_password(pair):
    password = "password"
    ok, reply = _run_handshake(pair, {"alice": password}, "alice", "secret")
    assert ok is False
    assert reply[0] == 0xFF
    assert int.from_bytes(reply[1:3], "little") == 1045


def test_handshake_rejects_unknown_user(pair):
    password = "password"
    ok, reply = _run_handshake(pair, {"alice": password}, "bob", password)
    assert ok is False
    assert reply.endswith(b"Access denied for user")