"""Per-path options — defaults, coercion type, allow-lists.

Records are registered against a dot-path and govern that path and every
path below it. Lookup picks the record at the longest registered prefix of
the queried path; fields are never merged across levels.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Callable

from dotstate._paths import split_path


class _Unset:
    __slots__ = ()

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


# No default value configured. A default of None is a real default.
UNSET: Any = _Unset()


class TransformType(str, enum.Enum):
    """Coercion applied to a raw value before it is stored."""

    NONE = "none"
    CUSTOM = "custom"
    NUMBER = "number"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    JSON = "json"


@dataclass(frozen=True)
class Options:
    default_value: Any = UNSET
    type: TransformType = TransformType.NONE
    transform_function: Callable[[Any, Any, Any], Any] | None = None
    allowed_values: tuple = field(default_factory=tuple)
    same_reference_check: bool = True

    def __post_init__(self) -> None:
        # Accept plain strings ("integer") and any iterable allow-list.
        object.__setattr__(self, "type", TransformType(self.type or TransformType.NONE))
        object.__setattr__(self, "allowed_values", tuple(self.allowed_values or ()))
        if self.type is TransformType.CUSTOM and not callable(self.transform_function):
            raise ValueError("type='custom' requires a callable transform_function")

    @property
    def has_default(self) -> bool:
        return self.default_value is not UNSET


DEFAULT_OPTIONS = Options()


class OptionsRegistry:
    """Options records keyed by dot-path."""

    __slots__ = ("_records",)

    def __init__(self) -> None:
        self._records: dict[str, Options] = {}

    def set(self, path: str, options: Options) -> None:
        self._records[path or ""] = options

    def resolve(self, path: str | None) -> Options:
        """Effective options for path: the longest registered prefix wins.

        The root record ("") applies when nothing more specific matches.
        Returns the built-in defaults when no record applies at all.
        """
        record = self._records.get("")
        segments = split_path(path)
        for index in range(1, len(segments) + 1):
            record = self._records.get(".".join(segments[:index]), record)
        return record if record is not None else DEFAULT_OPTIONS

    def __contains__(self, path: str) -> bool:
        return (path or "") in self._records

    def __len__(self) -> int:
        return len(self._records)
