"""
Configuration Management Module.
Loads configuration from config.yaml and allows overrides via environment variables.
"""
import os
import yaml
from typing import List, Optional
from pathlib import Path
from pydantic import BaseModel, Field
import structlog

from config.settings import settings
from services.core.constants import DEFAULT_DRIVER_NAME, DEFAULT_USER_AGENT, SQL_CONFORMANCE_LEVELS
from services.core.models import LimitClauseKind, OdbcFeatureFlags

logger = structlog.get_logger()

# --- Configuration Models ---

class ServerConfig(BaseModel):
    host: str = "127.0.0.1"
    port: int = 9304
    transport: str = "stdio"
    log_level: str = "INFO"

class DriverConfig(BaseModel):
    name: str = DEFAULT_DRIVER_NAME
    user_agent: str = DEFAULT_USER_AGENT

class OdbcFeatureConfig(BaseModel):
    """Dialect flags as written in YAML (names instead of ODBC codes)."""
    sql_conformance: Optional[str] = "SQL92_FULL"
    limit_clause_kind: str = "LIMIT_OFFSET"
    use_cast_instead_of_convert: Optional[bool] = True
    use_parameter_bindings: Optional[bool] = False
    string_literal_escape_characters: Optional[List[str]] = Field(default_factory=lambda: ["\\"])

    def to_flags(self) -> OdbcFeatureFlags:
        conformance = None
        if self.sql_conformance is not None:
            key = self.sql_conformance.upper()
            if key not in SQL_CONFORMANCE_LEVELS:
                raise ValueError(
                    f"Unknown sql_conformance '{self.sql_conformance}'. "
                    f"Valid values: {', '.join(SQL_CONFORMANCE_LEVELS)}"
                )
            conformance = SQL_CONFORMANCE_LEVELS[key]

        try:
            limit_kind = LimitClauseKind[self.limit_clause_kind.upper()]
        except KeyError:
            raise ValueError(
                f"Unknown limit_clause_kind '{self.limit_clause_kind}'. "
                f"Valid values: {', '.join(k.name for k in LimitClauseKind)}"
            )

        return OdbcFeatureFlags(
            sql_conformance=conformance,
            limit_clause_kind=limit_kind,
            use_cast_instead_of_convert=self.use_cast_instead_of_convert,
            use_parameter_bindings=self.use_parameter_bindings,
            string_literal_escape_characters=self.string_literal_escape_characters,
        )

class LoggingConfig(BaseModel):
    trace: bool = False

class ConnectorConfig(BaseModel):
    server: ServerConfig = Field(default_factory=ServerConfig)
    driver: DriverConfig = Field(default_factory=DriverConfig)
    odbc: OdbcFeatureConfig = Field(default_factory=OdbcFeatureConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

# --- Loader Logic ---

class ConfigLoader:
    _instance: Optional[ConnectorConfig] = None

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> ConnectorConfig:
        """
        Load configuration from YAML and override with Environment Variables.
        Singleton pattern to avoid reloading.
        """
        if cls._instance:
            return cls._instance

        if not config_path:
            config_path = settings.CONFIG_PATH

        path = Path(config_path)
        if not path.is_absolute():
            path = Path.cwd() / config_path

        config_data = {}
        if path.exists():
            try:
                with open(path, "r") as f:
                    config_data = yaml.safe_load(f) or {}
            except Exception as e:
                logger.error("config_load_error", error=str(e), path=str(path))
                raise RuntimeError(f"Failed to load config file at {path}: {e}")
        else:
            logger.warning("config_file_not_found", path=str(path))

        try:
            config = ConnectorConfig(**config_data)
            # Resolve flag names early so a typo fails at startup
            config.odbc.to_flags()

            mcp_transport = os.getenv("MCP_TRANSPORT")
            if mcp_transport:
                config.server.transport = mcp_transport
                logger.info("transport_overridden", transport=mcp_transport)

            driver_name = os.getenv("DUCKDB_ODBC_DRIVER")
            if driver_name:
                config.driver.name = driver_name
                logger.info("driver_overridden", driver=driver_name)

            trace = os.getenv("CONNECTOR_TRACE")
            if trace:
                config.logging.trace = trace.strip().lower() in ("1", "true", "yes", "on")

            cls._instance = config
            return config

        except Exception as e:
            logger.error("config_validation_error", error=str(e))
            raise ValueError(f"Invalid Configuration: {e}")

    @classmethod
    def reset(cls):
        cls._instance = None


def get_config() -> ConnectorConfig:
    return ConfigLoader.load()
