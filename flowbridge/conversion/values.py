"""Detection and unwrapping of legacy values that embed their own schema.

Legacy activities stored structured values together with a serialized
description of their shape, either as JSON text or as a mapping with
``value`` and ``metadata`` keys. The activity's own declared metadata is not
available at conversion time, so the shape of each value is the only signal
used to decide whether it is such a complex value.
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
import json
from typing import Any, Dict, Mapping, Optional

from flowbridge.schema import SCHEMA_TYPE_JSON, ComplexObject, SchemaDef, ValueKind, classify_value


EMPTY_OBJECT_MARKER = "{}"


@dataclass(frozen=True)
class ComplexValueInfo:
    value: Any
    schema: str = ""


@dataclass(frozen=True)
class ConvertedValues:
    values: Dict[str, Any] = field(default_factory=dict)
    schemas: Dict[str, SchemaDef] = field(default_factory=dict)


def _inspect_text(text: str) -> Optional[ComplexValueInfo]:
    if text == "":
        return None
    try:
        decoded = json.loads(text)
    except ValueError:
        return None

    if not isinstance(decoded, dict):
        return None
    # Stricter than a bare JSON-object match: text such as '{"a": 1}' stays a plain scalar.
    if "value" not in decoded and "metadata" not in decoded:
        return None

    metadata = decoded.get("metadata", "")
    if metadata is None:
        metadata = ""
    if not isinstance(metadata, str):
        return None
    return ComplexValueInfo(value=decoded.get("value"), schema=metadata)


def _inspect_mapping(mapping: Mapping[str, Any]) -> Optional[ComplexValueInfo]:
    if "value" not in mapping and "metadata" not in mapping:
        return None
    metadata = mapping.get("metadata")
    return ComplexValueInfo(
        value=mapping.get("value"),
        schema=metadata if isinstance(metadata, str) else "",
    )


def inspect_complex_value(value: Any) -> Optional[ComplexValueInfo]:
    """Return the unwrapped value and schema text, or ``None`` for plain values."""
    kind = classify_value(value)

    if kind is ValueKind.SCALAR and isinstance(value, str):
        return _inspect_text(value)
    if kind is ValueKind.MAPPING:
        return _inspect_mapping(value)
    if kind is ValueKind.COMPLEX_OBJECT:
        complex_object: ComplexObject = value
        return ComplexValueInfo(value=complex_object.value, schema=complex_object.metadata or "")
    return None


def is_empty_value(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value == "" or value == EMPTY_OBJECT_MARKER
    if isinstance(value, Mapping):
        return len(value) == 0
    return False


def convert_values(old_values: Optional[Mapping[str, Any]]) -> ConvertedValues:
    values: Dict[str, Any] = {}
    schemas: Dict[str, SchemaDef] = {}

    for name, value in (old_values or {}).items():
        info = inspect_complex_value(value)
        if info is None:
            values[name] = deepcopy(value)
            continue

        if info.schema:
            schemas[name] = SchemaDef(type=SCHEMA_TYPE_JSON, value=info.schema)

        # An empty payload must not turn into a binding downstream.
        if not is_empty_value(info.value):
            values[name] = deepcopy(info.value)

    return ConvertedValues(values=values, schemas=schemas)
