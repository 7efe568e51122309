"""
Unit tests for DbConnectionService.
Tests request assembly and the hand-off to pyodbc.
"""
import pytest
from unittest.mock import MagicMock, patch
from pydantic import SecretStr
from services.infrastructure.db_connection_service import DbConnectionService
from services.common.exceptions import ConfigurationError, DatabaseError
from services.core.models import ConnectionParams


class TestDbConnectionServiceUnit:
    @pytest.fixture
    def mock_pyodbc(self):
        with patch('services.infrastructure.db_connection_service.pyodbc') as mock_pyodbc:
            # IMPORTANT: Error must be a distinct class inheriting from Exception
            class PyodbcError(Exception): pass
            mock_pyodbc.Error = PyodbcError
            yield mock_pyodbc

    @pytest.fixture
    def service(self, connector_config):
        with patch('services.infrastructure.db_connection_service.settings') as mock_settings:
            mock_settings.get_motherduck_token.return_value = None
            return DbConnectionService(connector_config)

    def test_build_request_local(self, service):
        request = service.build_request(ConnectionParams(database="sales.duckdb", read_only=True))

        assert request.connection.database == "sales.duckdb"
        assert request.connection_string.startswith("Driver={DuckDB Driver};Database=sales.duckdb;access_mode=read_only;")
        assert request.options["SqlCapabilities"]["SupportsDerivedTable"] is True
        assert request.options["SQLGetFunctions"]["SQL_API_SQLBINDPARAMETER"] is False

    def test_build_request_motherduck_requires_token(self, service):
        with pytest.raises(ConfigurationError):
            service.build_request(ConnectionParams(database="md:prod"))

    def test_env_token_fallback(self, connector_config):
        with patch('services.infrastructure.db_connection_service.settings') as mock_settings:
            mock_settings.get_motherduck_token.return_value = SecretStr("ENVTOKEN")
            service = DbConnectionService(connector_config)

        request = service.build_request(ConnectionParams(database="md:prod"))
        assert "motherduck_token=ENVTOKEN" in request.connection.database

    def test_to_dict_masks_token(self, service):
        request = service.build_request(ConnectionParams(database="md:prod", motherduck_token="SECRET"))
        data = request.to_dict()
        assert "SECRET" not in data["connection_string"]
        assert "SECRET" not in data["connection"]["Database"]
        assert "SECRET" in request.to_dict(include_secrets=True)["connection_string"]

    def test_driver_name_from_config(self, connector_config):
        connector_config.driver.name = "DuckDB ODBC"
        service = DbConnectionService(connector_config)
        request = service.build_request(ConnectionParams(database=":memory:"))
        assert request.connection_string.startswith("Driver={DuckDB ODBC};")

    def test_odbc_flags_from_config(self, connector_config):
        connector_config.odbc.use_cast_instead_of_convert = False
        connector_config.odbc.limit_clause_kind = "top"
        options = DbConnectionService(connector_config).odbc_options()
        assert options["SQLGetInfo"]["SQL_CONVERT_FUNCTIONS"] == 1
        assert options["SqlCapabilities"]["LimitClauseKind"] == 1

    def test_connect_success(self, service, mock_pyodbc):
        mock_conn = MagicMock()
        mock_pyodbc.connect.return_value = mock_conn

        conn = service.connect(ConnectionParams(database="x.duckdb", read_only=True))

        assert conn is mock_conn
        args, kwargs = mock_pyodbc.connect.call_args
        assert args[0].startswith("Driver={DuckDB Driver};Database=x.duckdb;")
        assert kwargs["readonly"] is True
        assert kwargs["autocommit"] is True

    def test_connect_failure_is_wrapped(self, service, mock_pyodbc):
        mock_pyodbc.connect.side_effect = mock_pyodbc.Error("[IM002] Data source name not found")

        with pytest.raises(DatabaseError) as exc:
            service.connect(ConnectionParams(database="md:prod", motherduck_token="SECRET"))

        assert "IM002" in str(exc.value)
        assert "SECRET" not in exc.value.details["connection_string"]

    def test_get_connection_closes(self, service, mock_pyodbc):
        mock_conn = MagicMock()
        mock_pyodbc.connect.return_value = mock_conn

        with service.get_connection(ConnectionParams(database="x.duckdb")) as conn:
            assert conn is mock_conn
            mock_conn.close.assert_not_called()

        mock_conn.close.assert_called_once()

    def test_invalid_request_never_reaches_driver(self, service, mock_pyodbc):
        with pytest.raises(ConfigurationError):
            service.connect(ConnectionParams(database="md:prod", motherduck_token=""))
        mock_pyodbc.connect.assert_not_called()
