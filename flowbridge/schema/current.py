"""Current-format flow definition produced by the converter."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


SCHEMA_TYPE_JSON = "json"


@dataclass(frozen=True)
class SchemaDef:
    type: str
    value: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "value": self.value}


@dataclass(frozen=True)
class SchemaConfig:
    input: Dict[str, SchemaDef] = field(default_factory=dict)
    output: Dict[str, SchemaDef] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.input:
            data["input"] = {name: schema.to_dict() for name, schema in self.input.items()}
        if self.output:
            data["output"] = {name: schema.to_dict() for name, schema in self.output.items()}
        return data


@dataclass(frozen=True)
class ActivityConfig:
    ref: str
    settings: Optional[Dict[str, Any]] = None
    input: Optional[Dict[str, Any]] = None
    output: Optional[Dict[str, Any]] = None
    schemas: Optional[SchemaConfig] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"ref": self.ref}
        if self.settings:
            data["settings"] = dict(self.settings)
        if self.input:
            data["input"] = dict(self.input)
        if self.output:
            data["output"] = dict(self.output)
        if self.schemas is not None:
            data["schemas"] = self.schemas.to_dict()
        return data


@dataclass(frozen=True)
class Task:
    id: str
    name: str = ""
    type: str = ""
    settings: Optional[Dict[str, Any]] = None
    activity: Optional[ActivityConfig] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id}
        if self.type:
            data["type"] = self.type
        data["name"] = self.name
        if self.settings:
            data["settings"] = dict(self.settings)
        if self.activity is not None:
            data["activity"] = self.activity.to_dict()
        return data


@dataclass(frozen=True)
class Link:
    from_id: str
    to_id: str
    name: str = ""
    value: str = ""
    type: Any = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.type is not None:
            data["type"] = self.type
        if self.name:
            data["name"] = self.name
        data["from"] = self.from_id
        data["to"] = self.to_id
        if self.value:
            data["value"] = self.value
        return data


@dataclass(frozen=True)
class ErrorHandler:
    tasks: Tuple[Task, ...] = field(default_factory=tuple)
    links: Tuple[Link, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"tasks": [task.to_dict() for task in self.tasks]}
        if self.links:
            data["links"] = [link.to_dict() for link in self.links]
        return data


@dataclass(frozen=True)
class TypedAttribute:
    name: str
    type: str
    value: Any = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name, "type": self.type}
        if self.value is not None:
            data["value"] = self.value
        return data


@dataclass(frozen=True)
class IOMetadata:
    input: Optional[Dict[str, TypedAttribute]] = None
    output: Optional[Dict[str, TypedAttribute]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.input:
            data["input"] = [attr.to_dict() for attr in self.input.values()]
        if self.output:
            data["output"] = [attr.to_dict() for attr in self.output.values()]
        return data


@dataclass(frozen=True)
class Definition:
    name: str = ""
    model_id: str = ""
    explicit_reply: bool = False
    metadata: Optional[IOMetadata] = None
    tasks: Tuple[Task, ...] = field(default_factory=tuple)
    links: Tuple[Link, ...] = field(default_factory=tuple)
    error_handler: Optional[ErrorHandler] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name}
        if self.model_id:
            data["model"] = self.model_id
        if self.explicit_reply:
            data["explicitReply"] = True
        if self.metadata is not None:
            data["metadata"] = self.metadata.to_dict()
        data["tasks"] = [task.to_dict() for task in self.tasks]
        data["links"] = [link.to_dict() for link in self.links]
        if self.error_handler is not None:
            data["errorHandler"] = self.error_handler.to_dict()
        return data
