"""
DuckDB ODBC Connector MCP
"""
import sys
from typing import Dict, Any, Optional

from mcp.server.fastmcp import FastMCP  # type: ignore[import-untyped]
from config.configuration import get_config
from config.settings import settings
from services.common.exceptions import ConnectorError
from services.common.logging import configure_logging
from services.core.duckdb_options import DUCKDB_OPTION_SCHEMA
from services.core.models import ConnectionParams
from services.core.option_validator import OptionValidator
from services.infrastructure.db_connection_service import DbConnectionService

# Load Config
try:
    config = get_config()
except Exception as e:
    print(f"FATAL: Config load failed: {e}", file=sys.stderr)
    sys.exit(1)

configure_logging(log_level=settings.LOG_LEVEL or config.server.log_level, json_format=settings.LOG_JSON)

mcp = FastMCP("duckdb-odbc-connector")

connection_service = DbConnectionService(config)
option_validator = OptionValidator(DUCKDB_OPTION_SCHEMA, trace=config.logging.trace)


def _error(e: ConnectorError) -> Dict[str, Any]:
    return {"success": False, "error": e.to_dict()}


@mcp.tool()
def build_connection(
    database: Optional[str] = None,
    motherduck_token: Optional[str] = None,
    read_only: Optional[bool] = None,
    saas_mode: Optional[bool] = None,
    attach_mode: Optional[str] = None,
    options: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Build the ODBC connection string and data-source options for a DuckDB or MotherDuck database.

    Args:
        database: DuckDB file path, ':memory:' or MotherDuck identifier ('md:my_db').
        motherduck_token: MotherDuck access token (required for 'md:' databases unless MOTHERDUCK_TOKEN is set).
        read_only: True for read_only access, False for read_write, omit to use options.access_mode.
        saas_mode: Enable MotherDuck SaaS mode.
        attach_mode: MotherDuck attach mode ('single' or 'workspace').
        options: Extra DuckDB options, see list_options.

    The token is masked in the returned connection string.
    """
    try:
        params = ConnectionParams(
            database=database or settings.DEFAULT_DATABASE,
            motherduck_token=motherduck_token,
            read_only=read_only,
            saas_mode=saas_mode,
            attach_mode=attach_mode,
            options=options,
        )
        request = connection_service.build_request(params)
    except ConnectorError as e:
        return _error(e)
    return {"success": True, **request.to_dict()}


@mcp.tool()
def odbc_capabilities() -> Dict[str, Any]:
    """Return the SqlCapabilities / SQLGetFunctions / SQLGetInfo record handed to the ODBC bridge."""
    return connection_service.odbc_options()


@mcp.tool()
def validate_options(options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Validate DuckDB options and return them with defaults filled in."""
    try:
        return {"success": True, "options": option_validator.validate(options)}
    except ConnectorError as e:
        return _error(e)


@mcp.tool()
def list_options() -> Dict[str, Any]:
    """Describe every supported DuckDB option (type, default, description)."""
    return option_validator.describe()


if __name__ == "__main__":
    import os
    server_host = os.getenv("HOST", config.server.host)
    server_port = int(os.getenv("PORT", str(config.server.port)))

    print(f"Starting DuckDB ODBC Connector MCP ({config.server.transport}) on {server_host}:{server_port}", file=sys.stderr)
    if config.server.transport == "sse":
        mcp.settings.host = server_host
        mcp.settings.port = server_port
        mcp.run(transport="sse")
    else:
        mcp.run(transport=config.server.transport)
