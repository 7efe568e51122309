"""Constants for the DuckDB ODBC connector.

This module centralizes the driver defaults and the ODBC numeric codes used
when composing capability records for the generic ODBC bridge.
"""

# Driver defaults
DEFAULT_DRIVER_NAME = "DuckDB Driver"
DEFAULT_USER_AGENT = "powerbi/v0.0(DuckDB)"

# MotherDuck
MOTHERDUCK_PREFIX = "md:"
DEFAULT_ATTACH_MODE = "single"
VALID_ATTACH_MODES = ["single", "workspace"]

# Access modes
ACCESS_MODE_READ_ONLY = "read_only"
ACCESS_MODE_READ_WRITE = "read_write"
ACCESS_MODE_AUTOMATIC = "automatic"
VALID_ACCESS_MODES = [ACCESS_MODE_AUTOMATIC, ACCESS_MODE_READ_ONLY, ACCESS_MODE_READ_WRITE]

# SQL_SQL_CONFORMANCE values
SQL_SC_SQL92_ENTRY = 1
SQL_SC_FIPS127_2_TRANSITIONAL = 2
SQL_SC_SQL92_INTERMEDIATE = 4
SQL_SC_SQL92_FULL = 8

SQL_CONFORMANCE_LEVELS = {
    'SQL92_ENTRY': SQL_SC_SQL92_ENTRY,
    'FIPS127_2_TRANSITIONAL': SQL_SC_FIPS127_2_TRANSITIONAL,
    'SQL92_INTERMEDIATE': SQL_SC_SQL92_INTERMEDIATE,
    'SQL92_FULL': SQL_SC_SQL92_FULL,
}

# SQL_CONVERT_FUNCTIONS bitmask
SQL_FN_CVT_CONVERT = 0x00000001
SQL_FN_CVT_CAST = 0x00000002

# SQL_GROUP_BY values
SQL_GB_NOT_SUPPORTED = 0
SQL_GB_GROUP_BY_EQUALS_SELECT = 1
SQL_GB_GROUP_BY_CONTAINS_SELECT = 2
SQL_GB_NO_RELATION = 3
SQL_GB_COLLATE = 4

# SQL_SQL92_PREDICATES bitmask
SQL_SP_EXISTS = 0x00000001
SQL_SP_ISNOTNULL = 0x00000002
SQL_SP_ISNULL = 0x00000004
SQL_SP_LIKE = 0x00000200
SQL_SP_IN = 0x00000400
SQL_SP_BETWEEN = 0x00000800
SQL_SP_COMPARISON = 0x00001000
SQL_SP_QUANTIFIED_COMPARISON = 0x00002000

DUCKDB_SQL92_PREDICATES = (
    SQL_SP_EXISTS | SQL_SP_ISNOTNULL | SQL_SP_ISNULL | SQL_SP_LIKE
    | SQL_SP_IN | SQL_SP_BETWEEN | SQL_SP_COMPARISON | SQL_SP_QUANTIFIED_COMPARISON
)

# SQL_AGGREGATE_FUNCTIONS bitmask
SQL_AF_AVG = 0x00000001
SQL_AF_COUNT = 0x00000002
SQL_AF_MAX = 0x00000004
SQL_AF_MIN = 0x00000008
SQL_AF_SUM = 0x00000010
SQL_AF_DISTINCT = 0x00000020
SQL_AF_ALL = 0x00000040

DUCKDB_AGGREGATE_FUNCTIONS = (
    SQL_AF_AVG | SQL_AF_COUNT | SQL_AF_MAX | SQL_AF_MIN
    | SQL_AF_SUM | SQL_AF_DISTINCT | SQL_AF_ALL
)

# Fractional seconds DuckDB timestamps are reported with
FRACTIONAL_SECONDS_SCALE = 3

# Connection-string keys that always hold secrets
SECRET_KEYS = ['motherduck_token', 'pwd', 'password']
