import json
import os
import tempfile

import pytest

from pg_ddl_core.lib.config import RcConfig, load_rc_config, merge_with_cli_options
from pg_ddl_core.lib.errors import ConfigError


def _write(directory, name, content):
    with open(os.path.join(directory, name), "w", encoding="utf-8") as f:
        f.write(content)


def test_no_config_file():
    with tempfile.TemporaryDirectory() as d:
        assert load_rc_config(d) is None


def test_json_config():
    with tempfile.TemporaryDirectory() as d:
        _write(d, ".pg-ddl.json", json.dumps({
            "defaults": {"left": "stage", "sql_dir": "schemas"},
            "migration": {"with_rollback": True},
        }))
        config = load_rc_config(d)

        assert config.defaults.left == "stage"
        assert config.defaults.right == "prod"
        assert config.defaults.sql_dir == "schemas"
        assert config.migration.with_rollback is True
        assert config.compare.ignore_categories == ["data"]


def test_yaml_config():
    with tempfile.TemporaryDirectory() as d:
        _write(d, ".pg-ddl.yml", "compare:\n  context_lines: 5\n  ignore_categories: []\n")
        config = load_rc_config(d)
        assert config.compare.context_lines == 5
        assert config.compare.ignore_categories == []


def test_json_wins_over_yaml():
    with tempfile.TemporaryDirectory() as d:
        _write(d, ".pg-ddl.json", '{"defaults": {"left": "from_json"}}')
        _write(d, ".pg-ddl.yml", "defaults:\n  left: from_yaml\n")
        assert load_rc_config(d).defaults.left == "from_json"


def test_empty_yaml_is_default_config():
    with tempfile.TemporaryDirectory() as d:
        _write(d, ".pg-ddl.yaml", "")
        assert load_rc_config(d) == RcConfig()


def test_invalid_json_raises_config_error():
    with tempfile.TemporaryDirectory() as d:
        _write(d, ".pg-ddl.json", "{not json")
        with pytest.raises(ConfigError) as excinfo:
            load_rc_config(d)
        assert excinfo.value.path.endswith(".pg-ddl.json")


def test_invalid_values_raise_config_error():
    with tempfile.TemporaryDirectory() as d:
        _write(d, "pg-ddl.config.json", '{"compare": {"context_lines": -1}}')
        with pytest.raises(ConfigError):
            load_rc_config(d)


def test_non_mapping_raises_config_error():
    with tempfile.TemporaryDirectory() as d:
        _write(d, ".pg-ddl.yml", "- a\n- b\n")
        with pytest.raises(ConfigError):
            load_rc_config(d)


class TestMerge:

    def test_cli_values_win(self):
        config = RcConfig.model_validate({"defaults": {"left": "stage", "sql_dir": "cfg"}})
        merged = merge_with_cli_options(config, {"left": "dev", "right": None, "sql_dir": None})
        assert merged["left"] == "dev"
        assert merged["right"] == "prod"
        assert merged["sql_dir"] == "cfg"

    def test_sql_dir_from_environment(self, monkeypatch):
        monkeypatch.setenv("SQL_OUTPUT_DIR", "/data/sql")
        assert merge_with_cli_options(None, {})["sql_dir"] == "/data/sql"

    def test_sql_dir_default(self, monkeypatch):
        monkeypatch.delenv("SQL_OUTPUT_DIR", raising=False)
        assert merge_with_cli_options(None, {})["sql_dir"] == "./sql"

    def test_false_flag_is_kept(self):
        config = RcConfig.model_validate({"migration": {"interactive": True}})
        assert merge_with_cli_options(config, {"interactive": False})["interactive"] is False
