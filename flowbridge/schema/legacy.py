"""Typed legacy flow definition and decoding helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .values import LegacySchemaError, decode_value, decode_value_map


@dataclass(frozen=True)
class LegacyAttribute:
    name: str
    type: str
    value: Any = None


@dataclass(frozen=True)
class LegacyIOMetadata:
    input: Dict[str, LegacyAttribute] = field(default_factory=dict)
    output: Dict[str, LegacyAttribute] = field(default_factory=dict)


@dataclass(frozen=True)
class LegacyMapping:
    type: Any
    value: Any
    map_to: str


@dataclass(frozen=True)
class LegacyMappings:
    input: Tuple[LegacyMapping, ...] = field(default_factory=tuple)
    output: Tuple[LegacyMapping, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class LegacyActivityConfig:
    ref: str
    settings: Dict[str, Any] = field(default_factory=dict)
    input_attrs: Dict[str, Any] = field(default_factory=dict)
    output_attrs: Dict[str, Any] = field(default_factory=dict)
    mappings: Optional[LegacyMappings] = None


@dataclass(frozen=True)
class LegacyTask:
    id: str
    name: str = ""
    type: str = ""
    settings: Dict[str, Any] = field(default_factory=dict)
    activity: Optional[LegacyActivityConfig] = None


@dataclass(frozen=True)
class LegacyLink:
    from_id: str
    to_id: str
    name: str = ""
    value: str = ""
    type: Any = None


@dataclass(frozen=True)
class LegacyErrorHandler:
    tasks: Tuple[LegacyTask, ...] = field(default_factory=tuple)
    links: Tuple[LegacyLink, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class LegacyDefinition:
    name: str = ""
    model_id: str = ""
    explicit_reply: bool = False
    metadata: Optional[LegacyIOMetadata] = None
    tasks: Tuple[LegacyTask, ...] = field(default_factory=tuple)
    links: Tuple[LegacyLink, ...] = field(default_factory=tuple)
    error_handler: Optional[LegacyErrorHandler] = None
    # Single-root-task payload of the generation before this one.
    root_task: Any = None


def _ensure_mapping(value: Any, field_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise LegacySchemaError(f"Field '{field_name}' must be a mapping")
    return value


def _ensure_list(value: Any, field_name: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise LegacySchemaError(f"Field '{field_name}' must be a list")
    return value


def _optional_string(value: Any, field_name: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise LegacySchemaError(f"Field '{field_name}' must be a string")
    return value


def _required_identifier(value: Any, field_name: str) -> str:
    # Legacy editors wrote numeric task ids; they are compared as text downstream.
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        raise LegacySchemaError(f"Field '{field_name}' must be a non-empty string")
    text = str(value)
    if not text.strip():
        raise LegacySchemaError(f"Field '{field_name}' must be a non-empty string")
    return text


def _parse_attribute(raw: Any, field_name: str, default_name: Optional[str] = None) -> LegacyAttribute:
    attr = _ensure_mapping(raw, field_name)
    name = attr.get("name", default_name)
    if not isinstance(name, str) or not name:
        raise LegacySchemaError(f"Field '{field_name}.name' must be a non-empty string")
    attr_type = attr.get("type")
    if not isinstance(attr_type, str) or not attr_type:
        raise LegacySchemaError(f"Field '{field_name}.type' must be a non-empty string")
    return LegacyAttribute(
        name=name,
        type=attr_type,
        value=decode_value(attr.get("value"), f"{field_name}.value"),
    )


def _parse_attribute_side(raw: Any, field_name: str) -> Dict[str, LegacyAttribute]:
    if raw is None:
        return {}

    attributes: Dict[str, LegacyAttribute] = {}
    if isinstance(raw, list):
        for index, item in enumerate(raw):
            attr = _parse_attribute(item, f"{field_name}[{index}]")
            attributes[attr.name] = attr
        return attributes

    if isinstance(raw, Mapping):
        for name, item in raw.items():
            attributes[name] = _parse_attribute(item, f"{field_name}.{name}", default_name=name)
        return attributes

    raise LegacySchemaError(f"Field '{field_name}' must be a list or a mapping of attributes")


def _parse_metadata(raw: Any) -> Optional[LegacyIOMetadata]:
    if raw is None:
        return None
    metadata = _ensure_mapping(raw, "metadata")
    return LegacyIOMetadata(
        input=_parse_attribute_side(metadata.get("input"), "metadata.input"),
        output=_parse_attribute_side(metadata.get("output"), "metadata.output"),
    )


def _parse_mapping(raw: Any, field_name: str) -> LegacyMapping:
    mapping = _ensure_mapping(raw, field_name)
    map_to = mapping.get("mapTo", "")
    if not isinstance(map_to, str):
        raise LegacySchemaError(f"Field '{field_name}.mapTo' must be a string")
    return LegacyMapping(
        type=mapping.get("type"),
        value=decode_value(mapping.get("value"), f"{field_name}.value"),
        map_to=map_to,
    )


def _parse_mappings(raw: Any, field_name: str) -> Optional[LegacyMappings]:
    if raw is None:
        return None
    mappings = _ensure_mapping(raw, field_name)
    return LegacyMappings(
        input=tuple(
            _parse_mapping(item, f"{field_name}.input[{index}]")
            for index, item in enumerate(_ensure_list(mappings.get("input"), f"{field_name}.input"))
        ),
        output=tuple(
            _parse_mapping(item, f"{field_name}.output[{index}]")
            for index, item in enumerate(_ensure_list(mappings.get("output"), f"{field_name}.output"))
        ),
    )


def _parse_activity(raw: Any, field_name: str) -> Optional[LegacyActivityConfig]:
    if raw is None:
        return None
    activity = _ensure_mapping(raw, field_name)
    return LegacyActivityConfig(
        ref=_optional_string(activity.get("ref"), f"{field_name}.ref"),
        settings=decode_value_map(activity.get("settings"), f"{field_name}.settings"),
        input_attrs=decode_value_map(activity.get("input"), f"{field_name}.input"),
        output_attrs=decode_value_map(activity.get("output"), f"{field_name}.output"),
        mappings=_parse_mappings(activity.get("mappings"), f"{field_name}.mappings"),
    )


def _parse_task(raw: Any, field_name: str) -> LegacyTask:
    task = _ensure_mapping(raw, field_name)
    return LegacyTask(
        id=_required_identifier(task.get("id"), f"{field_name}.id"),
        name=_optional_string(task.get("name"), f"{field_name}.name"),
        type=_optional_string(task.get("type"), f"{field_name}.type"),
        settings=decode_value_map(task.get("settings"), f"{field_name}.settings"),
        activity=_parse_activity(task.get("activity"), f"{field_name}.activity"),
    )


def _parse_link(raw: Any, field_name: str) -> LegacyLink:
    link = _ensure_mapping(raw, field_name)
    link_type = link.get("type")
    if link_type is not None and (isinstance(link_type, bool) or not isinstance(link_type, (str, int))):
        raise LegacySchemaError(f"Field '{field_name}.type' must be a string or an integer")
    return LegacyLink(
        from_id=_required_identifier(link.get("from"), f"{field_name}.from"),
        to_id=_required_identifier(link.get("to"), f"{field_name}.to"),
        name=_optional_string(link.get("name"), f"{field_name}.name"),
        value=_optional_string(link.get("value"), f"{field_name}.value"),
        type=link_type,
    )


def _parse_graph(raw: Mapping[str, Any], prefix: str) -> Tuple[Tuple[LegacyTask, ...], Tuple[LegacyLink, ...]]:
    tasks_field = f"{prefix}tasks"
    links_field = f"{prefix}links"
    tasks = tuple(
        _parse_task(item, f"{tasks_field}[{index}]")
        for index, item in enumerate(_ensure_list(raw.get("tasks"), tasks_field))
    )
    links = tuple(
        _parse_link(item, f"{links_field}[{index}]")
        for index, item in enumerate(_ensure_list(raw.get("links"), links_field))
    )
    return tasks, links


def parse_legacy_definition(data: Mapping[str, Any]) -> LegacyDefinition:
    if not isinstance(data, Mapping):
        raise LegacySchemaError("Legacy flow definition must be a mapping")

    explicit_reply = data.get("explicitReply", False)
    if not isinstance(explicit_reply, bool):
        raise LegacySchemaError("Field 'explicitReply' must be a boolean")

    tasks, links = _parse_graph(data, "")

    error_handler = None
    raw_handler = data.get("errorHandler")
    if raw_handler is not None:
        handler_tasks, handler_links = _parse_graph(_ensure_mapping(raw_handler, "errorHandler"), "errorHandler.")
        error_handler = LegacyErrorHandler(tasks=handler_tasks, links=handler_links)

    return LegacyDefinition(
        name=_optional_string(data.get("name"), "name"),
        model_id=_optional_string(data.get("model"), "model"),
        explicit_reply=explicit_reply,
        metadata=_parse_metadata(data.get("metadata")),
        tasks=tasks,
        links=links,
        error_handler=error_handler,
        root_task=data.get("rootTask"),
    )
