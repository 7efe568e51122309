"""
Options accepted by the DuckDB connector.
Each option is forwarded to the DuckDB ODBC driver as a connection-string field.
"""
import re

from .constants import VALID_ACCESS_MODES
from .option_validator import OptionSchemaEntry

_SIZE_PATTERN = re.compile(r'^\s*\d+(\.\d+)?\s*(B|KB|MB|GB|TB|KIB|MIB|GIB|TIB|%)\s*$', re.IGNORECASE)


def _is_size(value: str) -> bool:
    return bool(_SIZE_PATTERN.match(value))


def _is_positive_integer(value) -> bool:
    return value >= 1 and (isinstance(value, int) or value.is_integer())


DUCKDB_OPTION_SCHEMA = (
    OptionSchemaEntry(
        name="access_mode",
        type="text",
        description=f"Access mode of the database. One of: {', '.join(VALID_ACCESS_MODES)}.",
        predicate=lambda v: v in VALID_ACCESS_MODES,
    ),
    OptionSchemaEntry(
        name="custom_user_agent",
        type="text",
        description="Text appended to the connector's user agent.",
        predicate=lambda v: v.strip() != "",
    ),
    OptionSchemaEntry(
        name="threads",
        type="number",
        description="Number of worker threads. Must be a positive whole number.",
        predicate=_is_positive_integer,
    ),
    OptionSchemaEntry(
        name="memory_limit",
        type="text",
        description="Maximum memory of the system, e.g. '4GB' or '80%'.",
        predicate=_is_size,
    ),
    OptionSchemaEntry(
        name="temp_directory",
        type="text",
        description="Directory to use for spilling to disk.",
    ),
    OptionSchemaEntry(
        name="max_temp_directory_size",
        type="text",
        description="Maximum amount of data stored inside temp_directory, e.g. '100GB'.",
        predicate=_is_size,
    ),
    OptionSchemaEntry(
        name="allow_unsigned_extensions",
        type="logical",
        description="Allow loading extensions with invalid or missing signatures.",
    ),
    OptionSchemaEntry(
        name="autoinstall_known_extensions",
        type="logical",
        description="Install known extensions automatically when a query needs them.",
    ),
    OptionSchemaEntry(
        name="autoload_known_extensions",
        type="logical",
        description="Load known extensions automatically when a query needs them.",
    ),
    OptionSchemaEntry(
        name="enable_external_access",
        type="logical",
        description="Allow the database to access external state (files, network). true or false.",
        default=True,
        nullable=False,
    ),
    OptionSchemaEntry(
        name="default_order",
        type="text",
        description="Default ordering direction. One of: asc, desc.",
        predicate=lambda v: v.lower() in ("asc", "desc"),
    ),
    OptionSchemaEntry(
        name="preserve_insertion_order",
        type="logical",
        description="Preserve insertion order when no ORDER BY is given.",
    ),
)
