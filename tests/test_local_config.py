import os
import pytest
from unittest.mock import patch

from config.configuration import ConfigLoader, ConnectorConfig, OdbcFeatureConfig
from services.core.constants import SQL_SC_SQL92_ENTRY, SQL_SC_SQL92_FULL
from services.core.models import LimitClauseKind


@pytest.fixture(autouse=True)
def reset_loader():
    ConfigLoader.reset()
    yield
    ConfigLoader.reset()


def _write(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text)
    return str(path)


class TestConfigLoader:
    def test_yaml_values(self, tmp_path):
        path = _write(tmp_path, """
driver:
  name: DuckDB ODBC
odbc:
  sql_conformance: sql92_entry
  limit_clause_kind: limit
  use_cast_instead_of_convert: null
logging:
  trace: true
""")
        with patch.dict(os.environ, {}, clear=True):
            config = ConfigLoader.load(path)

        assert config.driver.name == "DuckDB ODBC"
        assert config.logging.trace is True
        flags = config.odbc.to_flags()
        assert flags.sql_conformance == SQL_SC_SQL92_ENTRY
        assert flags.limit_clause_kind == LimitClauseKind.LIMIT
        assert flags.use_cast_instead_of_convert is None

    def test_missing_file_uses_defaults(self, tmp_path):
        with patch.dict(os.environ, {}, clear=True):
            config = ConfigLoader.load(str(tmp_path / "absent.yaml"))
        assert config == ConnectorConfig()
        assert config.odbc.to_flags().sql_conformance == SQL_SC_SQL92_FULL

    def test_singleton(self, tmp_path):
        path = _write(tmp_path, "server:\n  port: 1234\n")
        first = ConfigLoader.load(path)
        assert ConfigLoader.load() is first

    def test_env_overrides(self, tmp_path):
        path = _write(tmp_path, "server:\n  transport: stdio\n")
        env = {"MCP_TRANSPORT": "sse", "DUCKDB_ODBC_DRIVER": "/opt/duckdb/libduckdb_odbc.so", "CONNECTOR_TRACE": "yes"}
        with patch.dict(os.environ, env, clear=True):
            config = ConfigLoader.load(path)
        assert config.server.transport == "sse"
        assert config.driver.name == "/opt/duckdb/libduckdb_odbc.so"
        assert config.logging.trace is True

    def test_unknown_flag_name_is_invalid(self, tmp_path):
        path = _write(tmp_path, "odbc:\n  limit_clause_kind: fetch_first\n")
        with pytest.raises(ValueError) as exc:
            ConfigLoader.load(path)
        assert "Invalid Configuration" in str(exc.value)

    def test_bad_type_is_invalid(self, tmp_path):
        path = _write(tmp_path, "server:\n  port: not-a-port\n")
        with pytest.raises(ValueError):
            ConfigLoader.load(path)


def test_unknown_conformance():
    with pytest.raises(ValueError):
        OdbcFeatureConfig(sql_conformance="SQL2016").to_flags()


def test_config_path_from_settings(tmp_path):
    path = _write(tmp_path, "driver:\n  name: From Settings\n")
    with patch('config.configuration.settings') as mock_settings, patch.dict(os.environ, {}, clear=True):
        mock_settings.CONFIG_PATH = path
        config = ConfigLoader.load()
    assert config.driver.name == "From Settings"
