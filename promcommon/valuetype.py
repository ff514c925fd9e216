"""The kinds of value a query evaluation can produce."""

from __future__ import annotations

import json
from enum import IntEnum
from typing import Union

__all__ = ["ValueType"]


class ValueType(IntEnum):
    NONE = 0
    SCALAR = 1
    VECTOR = 2
    MATRIX = 3
    STRING = 4

    def __str__(self) -> str:
        return _NAMES[self]

    def __format__(self, spec: str) -> str:
        return format(str(self), spec)

    def to_json(self) -> str:
        """Encode as a JSON string."""
        return json.dumps(str(self))

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> ValueType:
        """Decode a JSON string naming a value type."""
        data = json.loads(text)
        if not isinstance(data, str):
            raise ValueError("value type must be a JSON string")
        try:
            return _BY_NAME[data]
        except KeyError:
            raise ValueError(f"unknown value type {json.dumps(data)}") from None


_NAMES = {
    ValueType.NONE: "<ValNone>",
    ValueType.SCALAR: "scalar",
    ValueType.VECTOR: "vector",
    ValueType.MATRIX: "matrix",
    ValueType.STRING: "string",
}
_BY_NAME = {name: value_type for value_type, name in _NAMES.items()}