"""Tests for configuration loading."""

from pathlib import Path

import pytest

from cleanup_rulesets.config import DEFAULT_ENV_VARS, StoreConfig, load_config
from cleanup_rulesets.errors import ConfigError


def test_defaults_without_files(tmp_path):
    cfg = load_config(tmp_path, environ={})

    assert cfg.file_name == "client.realm"
    assert cfg.settings_file_name == "storage.ini"
    assert cfg.schema_version == 0
    assert cfg.fallback_pipe_path.name == "lazer"
    assert cfg.env_vars == DEFAULT_ENV_VARS
    assert list(cfg.official_ids) == [0, 1, 2, 3]
    assert cfg.source is None


def test_toml_found_in_parent(tmp_path):
    (tmp_path / "cleanup-rulesets.toml").write_text(
        '[store]\nfile_name = "other.realm"\nschema_version = 49\nfallback_pipe_path = "/tmp/x"\n'
    )
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)

    cfg = load_config(nested, environ={})

    assert cfg.file_name == "other.realm"
    assert cfg.schema_version == 49
    assert cfg.fallback_pipe_path == Path("/tmp/x")
    assert cfg.source == tmp_path / "cleanup-rulesets.toml"


def test_config_env_var_names_file(tmp_path):
    config_file = tmp_path / "elsewhere.toml"
    config_file.write_text('[store]\nsettings_file_name = "custom.ini"\n')

    cfg = load_config(tmp_path / "unrelated", environ={"CLEANUP_RULESETS_CONFIG": str(config_file)})

    assert cfg.settings_file_name == "custom.ini"


def test_config_env_var_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="missing file"):
        load_config(tmp_path, environ={"CLEANUP_RULESETS_CONFIG": str(tmp_path / "nope.toml")})


def test_dotenv_read_but_environment_wins(tmp_path):
    (tmp_path / ".env").write_text('# comment\nOSU_LAZER_PATH="/from/dotenv"\nOSU_DATA_PATH=/data/dotenv\n')

    cfg = load_config(tmp_path, environ={"OSU_DATA_PATH": "/data/env"})

    assert cfg.environ["OSU_LAZER_PATH"] == "/from/dotenv"
    assert cfg.env_overrides() == ["/from/dotenv", "/data/env"]


def test_invalid_toml(tmp_path):
    (tmp_path / "cleanup-rulesets.toml").write_text("[store\n")

    with pytest.raises(ConfigError, match="Could not read"):
        load_config(tmp_path, environ={})


@pytest.mark.parametrize(
    "body",
    [
        'schema_version = "7"',
        "schema_version = true",
        "file_name = 3",
    ],
)
def test_wrong_types_rejected(tmp_path, body):
    (tmp_path / "cleanup-rulesets.toml").write_text(f"[store]\n{body}\n")

    with pytest.raises(ConfigError):
        load_config(tmp_path, environ={})


def test_store_must_be_table(tmp_path):
    (tmp_path / "cleanup-rulesets.toml").write_text('store = "x"\n')

    with pytest.raises(ConfigError, match="table"):
        load_config(tmp_path, environ={})


def test_env_overrides_skip_blank():
    cfg = StoreConfig(environ={"OSU_LAZER_PATH": " ", "OSU_DATA_PATH": "/d"})

    assert cfg.env_overrides() == ["/d"]
