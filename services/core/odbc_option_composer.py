"""
ODBC Option Composer.
Turns the static dialect flags into the capability record consumed by the
generic ODBC bridge.
"""
from typing import Any, Dict, Optional

import structlog

from .constants import (
    SQL_FN_CVT_CAST,
    SQL_FN_CVT_CONVERT,
    SQL_GB_NO_RELATION,
    SQL_SC_SQL92_FULL,
    DUCKDB_SQL92_PREDICATES,
    DUCKDB_AGGREGATE_FUNCTIONS,
    FRACTIONAL_SECONDS_SCALE,
)
from .models import ComposedOdbcConfig, OdbcFeatureFlags

logger = structlog.get_logger()


def merge_config(
    previous: ComposedOdbcConfig,
    caps: Optional[Dict[str, Any]] = None,
    funcs: Optional[Dict[str, Any]] = None,
    get_info: Optional[Dict[str, Any]] = None
) -> ComposedOdbcConfig:
    """Right-biased merge of each section; sections passed as None are kept as-is."""
    return ComposedOdbcConfig(
        sql_capabilities={**previous.sql_capabilities, **caps} if caps is not None else previous.sql_capabilities,
        sql_get_functions={**previous.sql_get_functions, **funcs} if funcs is not None else previous.sql_get_functions,
        sql_get_info={**previous.sql_get_info, **get_info} if get_info is not None else previous.sql_get_info,
    )


class OdbcOptionComposer:
    """Builds the merged SqlCapabilities / SQLGetFunctions / SQLGetInfo record."""

    def __init__(self, trace: bool = False):
        self.trace = trace

    def compose(self, flags: Optional[OdbcFeatureFlags] = None) -> ComposedOdbcConfig:
        """
        Apply each flag-driven merge in order.

        Args:
            flags: Dialect flags (defaults describe DuckDB)

        Returns:
            Composed capability record
        """
        flags = flags or OdbcFeatureFlags()
        config = ComposedOdbcConfig()

        config = self._with_parameter_bindings(config, flags)
        config = self._with_escape_characters(config, flags)
        config = self._with_limit_clause_kind(config, flags)
        config = self._with_cast_or_convert(config, flags)
        config = self._with_sql_conformance(config, flags)

        if self.trace:
            logger.info("odbc_config_composed", **config.to_record())
        return config

    def _with_parameter_bindings(self, config: ComposedOdbcConfig, flags: OdbcFeatureFlags) -> ComposedOdbcConfig:
        # Without parameter binding the bridge must inline every literal
        if flags.use_parameter_bindings is False:
            return merge_config(
                config,
                caps={
                    "SupportsNumericLiterals": True,
                    "SupportsStringLiterals": True,
                    "SupportsOdbcDateLiterals": True,
                    "SupportsOdbcTimeLiterals": True,
                    "SupportsOdbcTimestampLiterals": True,
                },
                funcs={"SQL_API_SQLBINDPARAMETER": False},
            )
        return config

    def _with_escape_characters(self, config: ComposedOdbcConfig, flags: OdbcFeatureFlags) -> ComposedOdbcConfig:
        if flags.string_literal_escape_characters is not None:
            return merge_config(
                config,
                caps={"StringLiteralEscapeCharacters": list(flags.string_literal_escape_characters)},
            )
        return config

    def _with_limit_clause_kind(self, config: ComposedOdbcConfig, flags: OdbcFeatureFlags) -> ComposedOdbcConfig:
        return merge_config(config, caps={"LimitClauseKind": int(flags.limit_clause_kind)})

    def _with_cast_or_convert(self, config: ComposedOdbcConfig, flags: OdbcFeatureFlags) -> ComposedOdbcConfig:
        if flags.use_cast_instead_of_convert is not None:
            value = SQL_FN_CVT_CAST if flags.use_cast_instead_of_convert else SQL_FN_CVT_CONVERT
            return merge_config(config, get_info={"SQL_CONVERT_FUNCTIONS": value})
        return config

    def _with_sql_conformance(self, config: ComposedOdbcConfig, flags: OdbcFeatureFlags) -> ComposedOdbcConfig:
        if flags.sql_conformance is not None:
            return merge_config(config, get_info={"SQL_SQL_CONFORMANCE": flags.sql_conformance})
        return config


def build_data_source_options(composed: ComposedOdbcConfig) -> Dict[str, Any]:
    """
    Layer DuckDB-specific overrides on top of the composed record.

    Returns:
        Options record passed to the ODBC bridge alongside the connection string
    """
    config = merge_config(
        composed,
        caps={
            "SupportsTop": False,
            "SupportsDerivedTable": True,
            "Sql92Conformance": SQL_SC_SQL92_FULL,
            "GroupByCapabilities": SQL_GB_NO_RELATION,
            "FractionalSecondsScale": FRACTIONAL_SECONDS_SCALE,
        },
        get_info={
            "SQL_SQL92_PREDICATES": DUCKDB_SQL92_PREDICATES,
            "SQL_AGGREGATE_FUNCTIONS": DUCKDB_AGGREGATE_FUNCTIONS,
        },
    )
    return {
        "ClientConnectionPooling": True,
        "HierarchicalNavigation": True,
        **config.to_record(),
    }
