import contextlib
import pyodbc
import structlog
from typing import Dict, Any, Optional, Iterator

from config.configuration import ConnectorConfig, get_config
from config.settings import settings
from services.common.exceptions import DatabaseError
from services.core.models import ConnectionParams, DataSourceRequest
from services.core.odbc_option_composer import OdbcOptionComposer, build_data_source_options
from services.infrastructure.connection_string_builder import ConnectionStringBuilder

logger = structlog.get_logger()


class DbConnectionService:
    """
    Entry point for a DuckDB connection attempt.

    Builds the connection string, composes the ODBC capability record once and
    hands both to the ODBC driver through pyodbc.
    """
    def __init__(self, config: Optional[ConnectorConfig] = None):
        self.config = config or get_config()
        trace = self.config.logging.trace
        self.composer = OdbcOptionComposer(trace=trace)
        self.builder = ConnectionStringBuilder(
            driver=self.config.driver.name,
            user_agent=self.config.driver.user_agent,
            default_token=settings.get_motherduck_token(),
            trace=trace
        )

    def odbc_options(self) -> Dict[str, Any]:
        """Data-source options record for the generic ODBC bridge."""
        composed = self.composer.compose(self.config.odbc.to_flags())
        return build_data_source_options(composed)

    def build_request(self, params: ConnectionParams) -> DataSourceRequest:
        """
        Resolve a connection request into everything the ODBC bridge needs.

        Raises:
            ConfigurationError, InvalidOptionError, InvalidValueError
        """
        fields = self.builder.build_from_params(params)
        return DataSourceRequest(
            connection=fields,
            connection_string=fields.to_connection_string(),
            options=self.odbc_options(),
        )

    def connect(self, params: ConnectionParams) -> pyodbc.Connection:
        """Open a pyodbc connection for the request."""
        request = self.build_request(params)
        try:
            conn = pyodbc.connect(
                request.connection_string,
                autocommit=True,
                readonly=request.connection.access_mode == "read_only"
            )
        except pyodbc.Error as e:
            logger.error("odbc_connect_failed", connection_string=request.connection.masked(), error=str(e))
            raise DatabaseError(
                f"ODBC driver '{self.config.driver.name}' refused the connection: {e}",
                details={"connection_string": request.connection.masked()}
            ) from e

        logger.info("odbc_connected", database=request.connection.masked_record()["Database"])
        return conn

    @contextlib.contextmanager
    def get_connection(self, params: ConnectionParams) -> Iterator[pyodbc.Connection]:
        """Context manager that closes the connection on exit."""
        conn = self.connect(params)
        try:
            yield conn
        finally:
            try:
                conn.close()
            except pyodbc.Error as e:
                logger.warning("odbc_close_failed", error=str(e))
