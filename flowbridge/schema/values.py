"""Closed set of value shapes found in legacy flow documents.

Legacy settings, inputs and outputs are loosely typed: a value may be a
scalar, a list, a mapping, or a typed complex object bundling a payload with
an embedded schema. Everything the converter inspects is classified into one
of these kinds; anything else is rejected once, when the document is decoded.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional


class LegacySchemaError(ValueError):
    """Raised when a legacy document does not have the expected structure."""


class ValueKind(str, Enum):
    SCALAR = "scalar"
    LIST = "list"
    MAPPING = "mapping"
    COMPLEX_OBJECT = "complex_object"


@dataclass(frozen=True)
class ComplexObject:
    """A value carrying its own schema text in ``metadata``."""

    value: Any = None
    metadata: str = ""


_SCALAR_TYPES = (str, bool, int, float)


def classify_value(value: Any) -> Optional[ValueKind]:
    if value is None or isinstance(value, _SCALAR_TYPES):
        return ValueKind.SCALAR
    if isinstance(value, ComplexObject):
        return ValueKind.COMPLEX_OBJECT
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    if isinstance(value, (list, tuple)):
        return ValueKind.LIST
    return None


def decode_value(raw: Any, path: str = "$") -> Any:
    kind = classify_value(raw)
    if kind is None:
        raise LegacySchemaError(f"Unsupported value of type {type(raw).__name__} at {path}")

    if kind is ValueKind.SCALAR or kind is ValueKind.COMPLEX_OBJECT:
        return raw

    if kind is ValueKind.LIST:
        items: List[Any] = []
        for index, item in enumerate(raw):
            items.append(decode_value(item, f"{path}[{index}]"))
        return items

    decoded: Dict[str, Any] = {}
    for key, item in raw.items():
        if not isinstance(key, str):
            raise LegacySchemaError(f"Mapping key {key!r} at {path} must be a string")
        decoded[key] = decode_value(item, f"{path}.{key}")
    return decoded


def decode_value_map(raw: Any, path: str) -> Dict[str, Any]:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise LegacySchemaError(f"Field '{path}' must be a mapping")
    return decode_value(raw, path)
