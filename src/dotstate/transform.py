"""Value transformer — coercion followed by the allow-list filter.

Each TransformType maps to exactly one coercer in _COERCERS. Numeric
coercers never raise: anything that does not parse becomes 0.
"""

from __future__ import annotations

import json
import logging
import math
import re
from typing import Any, Callable

from dotstate._keys import normalize_keys
from dotstate._merge import same_value
from dotstate.options import Options, TransformType

logger = logging.getLogger("dotstate.transform")

_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_FLOAT_PREFIX = re.compile(r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|[+-]?Infinity)")


def _finite_or_zero(number: float) -> float:
    return 0 if math.isnan(number) else number


def to_number(value: Any) -> int | float:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return _finite_or_zero(value)
    if value is None:
        return 0
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            return int(text, 0)
        except ValueError:
            pass
        try:
            return _finite_or_zero(float(text))
        except ValueError:
            return 0
    return 0


def to_integer(value: Any) -> int:
    match = _INT_PREFIX.match(str(value))
    return int(match.group(1)) if match else 0


def to_float(value: Any) -> float:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return _finite_or_zero(float(value))
    match = _FLOAT_PREFIX.match(str(value))
    if not match:
        return 0
    return float(match.group(1).replace("Infinity", "inf"))


def to_boolean(value: Any) -> bool:
    return value is not None and value is not False and value != "false"


def from_json(value: Any) -> Any:
    """Parse JSON text and camelCase its keys. Malformed input is kept as is."""
    if not isinstance(value, str):
        return value
    try:
        value = json.loads(value)
    except ValueError:
        logger.debug("Keeping unparsable json text %r", value)
        return value
    try:
        return normalize_keys(value)
    except Exception:
        logger.debug("Key normalization failed; keeping parsed value", exc_info=True)
        return value


_COERCERS: dict[TransformType, Callable[[Any], Any]] = {
    TransformType.NONE: lambda value: value,
    TransformType.NUMBER: to_number,
    TransformType.INTEGER: to_integer,
    TransformType.FLOAT: to_float,
    TransformType.BOOLEAN: to_boolean,
    TransformType.JSON: from_json,
}


def transform_value(value: Any, old_value: Any, options: Options) -> Any:
    """Coerce value per options.type, then enforce options.allowed_values.

    A value outside a non-empty allow-list is replaced by the configured
    default, or None when there is none. Exceptions from a custom
    transform_function propagate.
    """
    if options.type is TransformType.CUSTOM:
        value = options.transform_function(value, old_value, options.default_value if options.has_default else None)
    else:
        value = _COERCERS[options.type](value)

    if options.allowed_values and not any(same_value(allowed, value) for allowed in options.allowed_values):
        return options.default_value if options.has_default else None

    return value
