"""
Option Validator.
Checks a free-form options mapping against a static, ordered schema and
returns the mapping with defaults filled in.
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

import structlog

from services.common.exceptions import InvalidOptionError, InvalidValueError

logger = structlog.get_logger()

# Type tag -> runtime check
_TYPE_CHECKS: Dict[str, Callable[[Any], bool]] = {
    "text": lambda v: isinstance(v, str),
    "number": lambda v: isinstance(v, (int, float)) and not isinstance(v, bool),
    "logical": lambda v: isinstance(v, bool),
    "list": lambda v: isinstance(v, (list, tuple)),
    "record": lambda v: isinstance(v, Mapping),
    "any": lambda v: True,
}


@dataclass(frozen=True)
class OptionSchemaEntry:
    """Descriptor for a single supported option."""
    name: str
    type: str
    description: str
    default: Any = None
    nullable: bool = True
    predicate: Optional[Callable[[Any], bool]] = None

    def __post_init__(self):
        if self.type not in _TYPE_CHECKS:
            raise ValueError(f"Unknown option type '{self.type}' for '{self.name}'")

    def validate(self, value: Any) -> bool:
        """True when a non-null value has the declared type and satisfies the predicate."""
        if not _TYPE_CHECKS[self.type](value):
            return False
        return self.predicate is None or bool(self.predicate(value))

    def accepts(self, value: Any) -> bool:
        if value is None:
            return self.nullable or self.default is not None
        return self.validate(value)


def schema_defaults(schema: Sequence[OptionSchemaEntry]) -> Dict[str, Any]:
    return {entry.name: entry.default for entry in schema}


def validate_options(
    options: Optional[Mapping[str, Any]],
    schema: Sequence[OptionSchemaEntry]
) -> Dict[str, Any]:
    """
    Validate and normalize an options mapping.

    Args:
        options: User-supplied options, or None
        schema: Ordered option descriptors

    Returns:
        Mapping holding every schema key, with defaults where not supplied

    Raises:
        InvalidOptionError: options contains keys the schema does not define
        InvalidValueError: one or more values fail their type or predicate check
    """
    defaults = schema_defaults(schema)
    if options is None:
        return defaults

    invalid_keys = [key for key in options if key not in defaults]
    if invalid_keys:
        valid_keys = list(defaults)
        raise InvalidOptionError(
            f"Invalid option(s): {', '.join(invalid_keys)}. "
            f"Valid options are: {', '.join(valid_keys)}",
            details={"invalid_keys": invalid_keys, "valid_keys": valid_keys}
        )

    errors = []
    for entry in schema:
        value = options[entry.name] if entry.name in options else entry.default
        if not entry.accepts(value):
            errors.append(
                f"Invalid value for option '{entry.name}': {value!r}. {entry.description}"
            )

    if errors:
        raise InvalidValueError(
            "; ".join(errors),
            details={"errors": errors}
        )

    by_name = {entry.name: entry for entry in schema}
    normalized = dict(defaults)
    for key, value in options.items():
        # An explicit null never shadows the default of a non-nullable option
        if value is None and not by_name[key].nullable:
            continue
        normalized[key] = value
    return normalized


class OptionValidator:
    """Validates options against a fixed schema."""

    def __init__(self, schema: Sequence[OptionSchemaEntry], trace: bool = False):
        self.schema = tuple(schema)
        self.trace = trace

    @property
    def option_names(self):
        return [entry.name for entry in self.schema]

    def validate(self, options: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        normalized = validate_options(options, self.schema)
        if self.trace:
            logger.info("options_validated", supplied=sorted(options or {}), normalized=normalized)
        return normalized

    def describe(self) -> Dict[str, Dict[str, Any]]:
        """Documentation for every supported option, in schema order."""
        return {
            entry.name: {
                "type": entry.type,
                "nullable": entry.nullable,
                "default": entry.default,
                "description": entry.description,
            }
            for entry in self.schema
        }
