"""
Connection String Builder for DuckDB / MotherDuck.
Builds the ODBC connection-string fields from individual components.
"""
from typing import Any, Dict, Optional, Union

import structlog
from pydantic import SecretStr

from services.common.exceptions import ConfigurationError, InvalidValueError
from services.core.constants import (
    ACCESS_MODE_AUTOMATIC,
    ACCESS_MODE_READ_ONLY,
    ACCESS_MODE_READ_WRITE,
    DEFAULT_ATTACH_MODE,
    DEFAULT_DRIVER_NAME,
    DEFAULT_USER_AGENT,
    MOTHERDUCK_PREFIX,
    VALID_ATTACH_MODES,
)
from services.core.duckdb_options import DUCKDB_OPTION_SCHEMA
from services.core.models import ConnectionParams, ConnectionStringFields
from services.core.option_validator import OptionValidator

logger = structlog.get_logger()

Token = Union[str, SecretStr, None]


def _secret_value(token: Token) -> str:
    if token is None:
        return ""
    if isinstance(token, SecretStr):
        return token.get_secret_value()
    return token


def is_motherduck(database: str) -> bool:
    return database.startswith(MOTHERDUCK_PREFIX)


class ConnectionStringBuilder:
    """Builds DuckDB ODBC connection-string fields."""

    def __init__(
        self,
        driver: str = DEFAULT_DRIVER_NAME,
        user_agent: str = DEFAULT_USER_AGENT,
        default_token: Token = None,
        option_validator: Optional[OptionValidator] = None,
        trace: bool = False
    ):
        """
        Initialize connection string builder.

        Args:
            driver: ODBC driver name
            user_agent: Base user agent reported to DuckDB / MotherDuck
            default_token: MotherDuck token used when a request carries none
            option_validator: Validator for free-form options (DuckDB schema by default)
            trace: Log every built field set (tokens masked)
        """
        self.driver = driver
        self.user_agent = user_agent
        self.default_token = default_token
        self.option_validator = option_validator or OptionValidator(DUCKDB_OPTION_SCHEMA, trace=trace)
        self.trace = trace

    def build(
        self,
        database: str,
        motherduck_token: Token = None,
        read_only: Optional[bool] = None,
        saas_mode: Optional[bool] = None,
        attach_mode: Optional[str] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> ConnectionStringFields:
        """
        Build connection-string fields.

        Args:
            database: DuckDB file path, ':memory:' or MotherDuck identifier ('md:...')
            motherduck_token: MotherDuck access token
            read_only: True for read_only, False for read_write, None to defer to options
            saas_mode: Enable MotherDuck SaaS mode
            attach_mode: MotherDuck attach mode ('single' or 'workspace')
            options: Free-form DuckDB options

        Returns:
            Resolved connection-string fields

        Raises:
            ConfigurationError: MotherDuck identifier without a token
            InvalidOptionError: Unknown option key
            InvalidValueError: Option or attach mode with an invalid value
        """
        normalized = self.option_validator.validate(options)

        # Fallback only when no token was given; an explicit empty token still fails
        token = _secret_value(self.default_token if motherduck_token is None else motherduck_token)
        path = self.resolve_path(database, token, saas_mode, attach_mode)

        fields = ConnectionStringFields(
            driver=self.driver,
            database=path,
            access_mode=self.resolve_access_mode(read_only, normalized),
            custom_user_agent=self.resolve_user_agent(normalized),
            options=normalized,
        )

        if self.trace:
            logger.info("connection_fields_built", connection_string=fields.masked())
        else:
            logger.info("connection_fields_built", motherduck=is_motherduck(database), access_mode=fields.access_mode)
        return fields

    def build_from_params(self, params: ConnectionParams) -> ConnectionStringFields:
        return self.build(
            database=params.database,
            motherduck_token=params.motherduck_token,
            read_only=params.read_only,
            saas_mode=params.saas_mode,
            attach_mode=params.attach_mode,
            options=params.options,
        )

    @staticmethod
    def resolve_access_mode(read_only: Optional[bool], options: Dict[str, Any]) -> str:
        if read_only is True:
            return ACCESS_MODE_READ_ONLY
        if read_only is False:
            return ACCESS_MODE_READ_WRITE
        if options.get("access_mode") is not None:
            return options["access_mode"]
        return ACCESS_MODE_AUTOMATIC

    def resolve_user_agent(self, options: Dict[str, Any]) -> str:
        custom = options.get("custom_user_agent")
        if custom is not None:
            return f"{self.user_agent} {custom}"
        return self.user_agent

    @staticmethod
    def resolve_path(
        database: str,
        token: str,
        saas_mode: Optional[bool] = None,
        attach_mode: Optional[str] = None
    ) -> str:
        """
        Append MotherDuck query parameters to an 'md:' identifier.

        Local paths are returned unchanged.
        """
        if not is_motherduck(database):
            return database

        if not token:
            raise ConfigurationError(
                "A MotherDuck token is required to connect to a MotherDuck database ('md:'). "
                "Get a token from https://app.motherduck.com/ (Settings > Access Tokens) and supply it as motherduck_token.",
                details={"database": database}
            )

        mode = attach_mode or DEFAULT_ATTACH_MODE
        if mode not in VALID_ATTACH_MODES:
            raise InvalidValueError(
                f"Invalid attach_mode: {mode!r}. Valid values are: {', '.join(VALID_ATTACH_MODES)}",
                details={"attach_mode": mode}
            )

        params = [f"motherduck_token={token}"]
        if saas_mode is True:
            params.append("saas_mode=true")
        params.append(f"attach_mode={mode}")

        separator = "&" if "?" in database else "?"
        return database + separator + "&".join(params)
