"""Loading of server and user settings from INI-style files."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

DEFAULT_USERS_PATH = "settings/users.conf"


class ConfigError(Exception):
    """Raised when the configuration is incomplete."""


@dataclass
class ServerConfig:
    """Server settings and the known users with their passwords."""

    port: str = "3306"
    data_path: str = "data"
    users: dict[str, str] = field(default_factory=dict)


def _section_entries(path: str | Path, section: str) -> Iterator[tuple[str, str]]:
    """Yield key/value pairs found inside the given section of a file."""
    inside = False
    with open(path, encoding="utf-8") as fh:
        for raw in fh:
            line = raw.strip()
            if not line or line.startswith(("#", ";")):
                continue
            if line.startswith("[") and line.endswith("]"):
                inside = line[1:-1].strip().lower() == section
                continue
            if not inside:
                continue
            key, sep, value = line.partition("=")
            if not sep:
                continue
            yield key.strip(), value.strip()


def load_users(path: str | Path) -> dict[str, str]:
    """Read the [users] section: one user = password entry per line."""
    return dict(_section_entries(path, "users"))


def load_config(
    path: str | Path, users_path: str | Path = DEFAULT_USERS_PATH
) -> ServerConfig:
    """Read the [server] section of a file and the users file."""
    cfg = ServerConfig()
    for key, value in _section_entries(path, "server"):
        if key == "port":
            cfg.port = value
        elif key == "data_path":
            cfg.data_path = value
    if not cfg.port or not cfg.data_path:
        raise ConfigError("missing required server config")
    cfg.users = load_users(users_path)
    return cfg