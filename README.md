# gosql

gosql is a deliberately small SQL server. It listens on TCP, reads text
queries framed as MySQL protocol packets, and stores every table as a JSON
file in a data directory.

## Installing

```
pip install .
```

To run the test suite as well:

```
pip install ".[test]"
pytest
```

## Running the server

```
gosql
```

With no options the server listens on port 3306 on all interfaces and keeps
its tables in the directory `data`, creating it if needed. Every `*.json`
file already in that directory is loaded as a table at start-up. Each client
connection is served on its own thread. The server prints
`gosql listening on <host>:<port>` and runs until interrupted.

Options:

- `--config FILE` – read a server settings file (see below).
- `--users FILE` – users file read together with `--config`
  (default `settings/users.conf`).
- `--host HOST` – address to listen on (default: all interfaces).
- `--port PORT` – port to listen on; overrides the settings file.
- `--data-dir DIR` – table directory; overrides the settings file.

If the settings file, the data directory or the listening socket cannot be
set up, the command prints the reason and exits with status 1.

## What a client sends

After connecting, a client sends command packets straight away:

- `COM_QUERY` (0x03) followed by the query text runs one statement.
- `COM_QUIT` (0x01) ends the session.

Any other command, an empty packet or a closed socket ends the connection.
A query that cannot be parsed, and a statement that fails in storage (a
missing table, a duplicate table, a wrong number of values), is answered
with an error packet, code 1064, SQL state `HY000`. Successful `CREATE` and
`INSERT` are answered with an OK packet; `SELECT` with a text result set in
which every column is described as `VARCHAR` and every value is sent as
text (`None` as `NULL`).

## Supported SQL

Only three statement forms are understood; anything else is answered with
error 1064.

```sql
CREATE TABLE users (id INT, name VARCHAR)
INSERT INTO users VALUES (1, 'Alice')
SELECT * FROM users
```

- Column types are kept in upper case but are not enforced.
- In `INSERT`, a value in single quotes is a string; any other value is
  read as a whole number from its digits (`0` if it has none). Values are
  split on commas, so a quoted string cannot contain a comma.
- An insert must supply exactly one value per column.
- `SELECT` always returns every column of every row, in insertion order.
  Table names in `SELECT` are lower-cased.

## Configuration files

A server settings file has a `[server]` section:

```ini
[server]
port = 3306
data_path = data
```

`port` defaults to `3306` and `data_path` to `data`. Users and their
passwords live in a separate file with a `[users]` section:

```ini
[users]
alice = password
```

Lines starting with `#` or `;` are comments, and section names are matched
without regard to case. `gosql.config.load_config(path, users_path)` reads
both files into a `ServerConfig`; `gosql.config.load_users(path)` reads the
users file alone. An empty `port` or `data_path` raises
`gosql.config.ConfigError`.

## What the server does not do

- It does not authenticate clients. The command never performs the login
  handshake, so the users file is read but not used, and a standard MySQL
  client, which waits for a handshake first, cannot talk to it. The
  handshake itself is available as `gosql.conn.Conn.handshake(users)`.
- There is no `UPDATE`, `DELETE`, `DROP`, `WHERE`, column list or
  transaction support.

## Using the pieces from Python

The parser, storage and executor can be used without a network connection:

```python
from gosql.parser import parse, CreateTableStmt
from gosql.storage import Column, MemoryStorage

stmt = parse("CREATE TABLE users (id INT, name VARCHAR)")
assert isinstance(stmt, CreateTableStmt)

store = MemoryStorage()
store.create_table("users", [Column("id", "INT"), Column("name", "VARCHAR")])
store.insert("users", [1, "Alice"])
columns, rows = store.select_all("users")
```

`gosql.storage.FileStore(data_dir)` offers the same operations and writes
each table to `<name>.json` after every change. Storage problems raise
`gosql.storage.StorageError`; malformed SQL raises `gosql.parser.ParseError`.

`gosql.executor.Executor(store).execute(stmt, conn)` runs a statement and
writes the reply to any object with `write_ok`, `write_error` and
`write_result_set` methods, such as `gosql.conn.Conn`.

Other modules:

- `gosql.wire` – length-encoded integers and strings, column definitions,
  OK, error and EOF payloads, and `format_value`.
- `gosql.auth` – the handshake payload (`build_handshake`), login parsing
  (`parse_login`) and native-password scrambling (`scramble_password`,
  `check_password`).
- `gosql.conn` – packet framing over a socket (`Conn`).
- `gosql.server` – `handle_connection`, `serve(address, executor)`, which
  returns a threaded TCP server to run with `serve_forever()`, and `main`.