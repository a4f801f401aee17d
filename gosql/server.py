"""TCP server: accepts clients and runs their queries."""

from __future__ import annotations

import argparse
import socket
import socketserver

from gosql.config import DEFAULT_USERS_PATH, ConfigError, ServerConfig, load_config
from gosql.conn import Conn, ProtocolError
from gosql.executor import ER_PARSE_ERROR, Executor
from gosql.parser import ParseError, parse
from gosql.storage import FileStore


def handle_connection(conn: socket.socket, executor: Executor) -> None:
    """Serve one client socket until it quits, disconnects or fails."""
    with Conn(conn) as client:
        while True:
            try:
                query = client.read_query()
            except (ProtocolError, OSError):
                return
            try:
                stmt = parse(query)
            except ParseError as err:
                try:
                    client.write_error(ER_PARSE_ERROR, str(err))
                except OSError:
                    return
                continue
            try:
                executor.execute(stmt, client)
            except Exception as err:  # one client's failure must not stop the server
                print("Execution error:", err)
                return


class _Handler(socketserver.BaseRequestHandler):
    def handle(self) -> None:
        handle_connection(self.request, self.server.executor)


class _Server(socketserver.ThreadingTCPServer):
    daemon_threads = True

    def __init__(self, address: tuple[str, int], executor: Executor) -> None:
        self.executor = executor
        super().__init__(address, _Handler)


def serve(address: tuple[str, int], executor: Executor) -> socketserver.TCPServer:
    """Bind a threaded TCP server; call serve_forever() on it to run it."""
    return _Server(address, executor)


def main(argv: list[str] | None = None) -> int:
    """Run the server from the command line."""
    parser = argparse.ArgumentParser(prog="gosql", description="Run the SQL server.")
    parser.add_argument("--config", help="server settings file")
    parser.add_argument("--users", default=DEFAULT_USERS_PATH, help="users file")
    parser.add_argument("--host", default="", help="address to listen on")
    parser.add_argument("--port", type=int, help="port to listen on")
    parser.add_argument("--data-dir", help="directory holding table files")
    args = parser.parse_args(argv)

    cfg = ServerConfig()
    if args.config:
        try:
            cfg = load_config(args.config, args.users)
        except (OSError, ConfigError) as err:
            print("Failed to load config:", err)
            return 1
    try:
        port = args.port if args.port is not None else int(cfg.port)
    except ValueError:
        print("Invalid port:", cfg.port)
        return 1

    try:
        store = FileStore(args.data_dir or cfg.data_path)
    except (OSError, ValueError, KeyError) as err:
        print("Failed to initialize storage:", err)
        return 1

    try:
        server = serve((args.host, port), Executor(store))
    except OSError as err:
        print("Failed to listen:", err)
        return 1

    print("gosql listening on", f"{args.host}:{port}")
    with server:
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            pass
    return 0