import re
from enum import IntEnum
from typing import List, Optional, Dict, Any
from pydantic import BaseModel, ConfigDict, Field, SecretStr

from .constants import SECRET_KEYS, SQL_SC_SQL92_FULL

# Characters that force an ODBC connection-string value into braces
_BRACE_CHARS = ";{}= "
# Tokens are inserted unencoded and may contain '&'; mask up to the next known parameter
_TOKEN_IN_PATH = re.compile(r'(motherduck_token=)(.*?)(?=&(?:saas_mode|attach_mode|motherduck_\w+)=|$)', re.IGNORECASE)


class LimitClauseKind(IntEnum):
    """Row-limiting syntax the generic ODBC bridge should generate."""
    NONE = 0
    TOP = 1
    LIMIT_OFFSET = 2
    LIMIT = 3
    ANSI_SQL_2008 = 4


class OdbcFeatureFlags(BaseModel):
    """Static capability flags describing DuckDB's SQL dialect."""
    model_config = ConfigDict(frozen=True)

    sql_conformance: Optional[int] = SQL_SC_SQL92_FULL
    limit_clause_kind: LimitClauseKind = LimitClauseKind.LIMIT_OFFSET
    use_cast_instead_of_convert: Optional[bool] = True
    use_parameter_bindings: Optional[bool] = False
    string_literal_escape_characters: Optional[List[str]] = Field(default_factory=lambda: ["\\"])


class ConnectionParams(BaseModel):
    """A connection request as supplied by the caller."""
    model_config = ConfigDict(frozen=True)

    database: str
    motherduck_token: Optional[SecretStr] = None
    read_only: Optional[bool] = None
    saas_mode: Optional[bool] = None
    attach_mode: Optional[str] = None
    options: Optional[Dict[str, Any]] = None


class ComposedOdbcConfig(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    sql_capabilities: Dict[str, Any] = Field(default_factory=dict, alias="SqlCapabilities")
    sql_get_functions: Dict[str, Any] = Field(default_factory=dict, alias="SQLGetFunctions")
    sql_get_info: Dict[str, Any] = Field(default_factory=dict, alias="SQLGetInfo")

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _escape_value(value: str) -> str:
    """Brace a value when it carries characters with meaning in ODBC syntax."""
    if not value:
        return value
    if any(ch in value for ch in _BRACE_CHARS):
        escaped = value.replace('}', '}}').replace('{', '{{')
        return f'{{{escaped}}}'
    return value


class ConnectionStringFields(BaseModel):
    """Resolved connection-string fields handed to the ODBC driver."""
    model_config = ConfigDict(frozen=True)

    driver: str
    database: str
    access_mode: str
    custom_user_agent: str
    options: Dict[str, Any] = Field(default_factory=dict)

    def to_record(self) -> Dict[str, Any]:
        """
        Flatten into the field set the driver expects.

        Resolved fields take precedence over same-named free-form options, and
        options with a null value are left out.
        """
        record: Dict[str, Any] = {
            "Driver": self.driver,
            "Database": self.database,
            "access_mode": self.access_mode,
            "custom_user_agent": self.custom_user_agent,
        }
        for key, value in self.options.items():
            if value is None or key in record:
                continue
            record[key] = value
        return record

    def to_connection_string(self) -> str:
        """Render as an ODBC connection string (Driver first, `;` separated)."""
        parts = []
        for key, value in self.to_record().items():
            text = _format_value(value)
            if key == "Driver":
                parts.append(f"Driver={{{text}}}")
            else:
                parts.append(f"{key}={_escape_value(text)}")
        return ";".join(parts) + ";"

    def masked_record(self) -> Dict[str, Any]:
        """Same as `to_record` with tokens and passwords replaced by `***`."""
        record = {}
        for key, value in self.to_record().items():
            if key.lower() in SECRET_KEYS:
                value = "***"
            elif key == "Database":
                value = _TOKEN_IN_PATH.sub(r'\1***', value)
            record[key] = value
        return record

    def masked(self) -> str:
        """Connection string safe for logs and tool responses."""
        parts = [f"{key}={_format_value(value)}" for key, value in self.masked_record().items()]
        return ";".join(parts) + ";"


class DataSourceRequest(BaseModel):
    """Everything the ODBC bridge needs for one connection attempt."""
    model_config = ConfigDict(frozen=True)

    connection: ConnectionStringFields
    connection_string: str
    options: Dict[str, Any]

    def to_dict(self, include_secrets: bool = False) -> Dict[str, Any]:
        return {
            "connection": self.connection.to_record() if include_secrets else self.connection.masked_record(),
            "connection_string": self.connection_string if include_secrets else self.connection.masked(),
            "options": self.options,
        }
