"""Construction options for the line document decoder."""

import math
from collections.abc import Mapping
from typing import Any, NamedTuple, Optional, Union

from .exceptions import ConfigurationError

Number = Union[int, float]

# Option name as exposed in messages and mappings -> Python field name
_NUMBER_OPTIONS = (("maxDocLength", "max_doc_length"), ("maxBytes", "max_bytes"))
_BOOLEAN_OPTIONS = (("debug", "debug"), ("hide", "hide"))


class DecoderOptions(NamedTuple):
    """Validated, immutable decoder configuration."""

    max_doc_length: Optional[Number] = None
    max_bytes: Optional[Number] = None
    debug: bool = False
    hide: bool = False

    @classmethod
    def from_mapping(cls, opts: Any = None, **overrides: Any) -> "DecoderOptions":
        """
        Build options from a mapping and/or keyword overrides.

        Mapping keys may use either the camelCase option names (``maxDocLength``)
        or the snake_case field names (``max_doc_length``). Keyword overrides
        always use field names and take precedence. ``None`` means unset.
        Unknown mapping keys are ignored so option mappings can be shared with
        other consumers; unknown keyword overrides are rejected.

        Args:
            opts: Mapping of options, or None for defaults
            **overrides: Field-named options

        Returns:
            A validated DecoderOptions instance

        Raises:
            ConfigurationError: If opts is not a mapping or an option has the wrong type
        """
        if opts is None:
            opts = {}
        if not isinstance(opts, Mapping):
            raise ConfigurationError("opts must be an object")

        unknown = set(overrides) - set(cls._fields)
        if unknown:
            raise ConfigurationError(f"Unknown option(s): {', '.join(sorted(unknown))}")

        values = {}
        for name, field in _NUMBER_OPTIONS + _BOOLEAN_OPTIONS:
            value = opts.get(name, opts.get(field))
            if overrides.get(field) is not None:
                value = overrides[field]
            values[field] = value

        for name, field in _NUMBER_OPTIONS:
            value = values[field]
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigurationError(f"opts.{name} must be a number")
            if math.isnan(value) or value <= 0:
                raise ConfigurationError(f"opts.{name} must be positive")

        for name, field in _BOOLEAN_OPTIONS:
            value = values[field]
            if value is None:
                values[field] = False
            elif not isinstance(value, bool):
                raise ConfigurationError(f"opts.{name} must be a boolean")

        return cls(**values)
