"""Conversion of legacy typed attribute declarations."""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, Mapping

from flowbridge.schema import LegacyAttribute, TypedAttribute

from .errors import AttributeConversionFailed
from .values import inspect_complex_value, is_empty_value


LEGACY_TYPE_ALIASES: Dict[str, str] = {
    "any": "any",
    "string": "string",
    "integer": "int",
    "int": "int",
    "long": "int64",
    "double": "float64",
    "number": "float64",
    "boolean": "bool",
    "bool": "bool",
    "object": "object",
    "complex_object": "object",
    "complexobject": "object",
    "array": "array",
    "params": "params",
}

_COMPLEX_OBJECT_TYPES = {"complex_object", "complexobject"}


def _decode_json_text(value: str, expected: type) -> Any:
    try:
        decoded = json.loads(value)
    except ValueError as exc:
        raise TypeError(f"invalid JSON text: {exc}") from exc
    if not isinstance(decoded, expected):
        raise TypeError(f"JSON text does not hold {expected.__name__}")
    return decoded


def _to_string(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, sort_keys=True)


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise TypeError(f"{value!r} is not integral")
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            return _to_int(_to_float(text))
    raise TypeError(f"{type(value).__name__} is not numeric")


def _to_float(value: Any) -> float:
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError as exc:
            raise TypeError(f"{value!r} is not numeric") from exc
    raise TypeError(f"{type(value).__name__} is not numeric")


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes"):
            return True
        if lowered in ("false", "0", "no", ""):
            return False
    raise TypeError(f"{value!r} is not a boolean")


def _to_object(value: Any) -> Dict[str, Any]:
    if isinstance(value, Mapping):
        return dict(value)
    if isinstance(value, str):
        return _decode_json_text(value, dict)
    raise TypeError(f"{type(value).__name__} is not an object")


def _to_array(value: Any) -> list:
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, str):
        return _decode_json_text(value, list)
    raise TypeError(f"{type(value).__name__} is not an array")


def _to_params(value: Any) -> Dict[str, str]:
    return {key: _to_string(item) for key, item in _to_object(value).items()}


_COERCERS: Dict[str, Callable[[Any], Any]] = {
    "any": lambda value: value,
    "string": _to_string,
    "int": _to_int,
    "int64": _to_int,
    "float64": _to_float,
    "bool": _to_bool,
    "object": _to_object,
    "array": _to_array,
    "params": _to_params,
}


def convert_legacy_attribute(attr: LegacyAttribute) -> TypedAttribute:
    legacy_type = attr.type.strip().lower() if isinstance(attr.type, str) else attr.type
    new_type = LEGACY_TYPE_ALIASES.get(legacy_type)
    if new_type is None:
        raise AttributeConversionFailed(attr.name, attr.type, "unsupported legacy type")

    value = attr.value
    if legacy_type in _COMPLEX_OBJECT_TYPES:
        info = inspect_complex_value(value)
        if info is not None:
            value = info.value
        if is_empty_value(value):
            value = None

    if value is None:
        return TypedAttribute(name=attr.name, type=new_type)

    try:
        coerced = _COERCERS[new_type](value)
    except TypeError as exc:
        raise AttributeConversionFailed(attr.name, attr.type, str(exc)) from exc
    return TypedAttribute(name=attr.name, type=new_type, value=coerced)
