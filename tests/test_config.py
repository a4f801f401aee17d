import pytest

from gosql.config import ConfigError, ServerConfig, load_config, load_users


@pytest.fixture
def users_file(tmp_path):
    path = tmp_path / "users.conf"
    path.write_text(
        "# users\n"
        "[Users]\n"
        "root = password\n"
        "guest =\n"
        "junk line\n"
        "[other]\n"
        "ignored = secret\n"
    )
    return path


def test_load_users(users_file):
    users = load_users(users_file)
    assert users == {"root": "password", "guest": ""}


def test_load_config_reads_server_section(tmp_path, users_file):
    cfg_path = tmp_path / "server.conf"
    cfg_path.write_text(
        "; comment\n"
        "[client]\n"
        "port = 1\n"
        "[ SERVER ]\n"
        "port = 4000\n"
        "data_path = /tmp/db\n"
        "unknown = x\n"
    )
    cfg = load_config(cfg_path, users_file)
    assert cfg.port == "4000"
    assert cfg.data_path == "/tmp/db"
    assert cfg.users == {"root": "password", "guest": ""}


def test_load_config_defaults(tmp_path, users_file):
    cfg_path = tmp_path / "server.conf"
    cfg_path.write_text("[server]\n")
    cfg = load_config(cfg_path, users_file)
    assert (cfg.port, cfg.data_path) == ("3306", "data")
    assert ServerConfig().port == cfg.port


def test_load_config_empty_port(tmp_path, users_file):
    cfg_path = tmp_path / "server.conf"
    cfg_path.write_text("[server]\nport =\n")
    with pytest.raises(ConfigError, match="missing required server config"):
        load_config(cfg_path, users_file)


def test_load_config_missing_file(tmp_path, users_file):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.conf", users_file)


def test_load_config_missing_users_file(tmp_path):
    cfg_path = tmp_path / "server.conf"
    cfg_path.write_text("[server]\nport = 3307\n")
    with pytest.raises(FileNotFoundError):
        load_config(cfg_path, tmp_path / "absent_users.conf")


def test_value_may_contain_equals(tmp_path):
    path = tmp_path / "users.conf"
    path.write_text("[users]\nalice = a=b\n")
    assert load_users(path) == {"alice": "a=b"}