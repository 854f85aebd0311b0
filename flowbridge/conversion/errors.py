"""Errors raised while converting legacy flow definitions."""

from __future__ import annotations

from typing import Any


class ConversionError(ValueError):
    """Base error for legacy flow conversion failures."""


DEFINITION_TOO_OLD = "definition too old to be automatically converted"


class UnsupportedLegacyShape(ConversionError):
    """Raised for documents older than the supported legacy schema."""


class AttributeConversionFailed(ConversionError):
    def __init__(self, attribute_name: str, legacy_type: Any, reason: str):
        self.attribute_name = attribute_name
        self.legacy_type = legacy_type
        self.reason = reason
        super().__init__(f"Attribute '{attribute_name}' (type {legacy_type!r}) cannot be converted: {reason}")


class MappingConversionFailed(ConversionError):
    def __init__(self, direction: str, map_to: str, reason: str):
        self.direction = direction
        self.map_to = map_to
        self.reason = reason
        super().__init__(f"{direction.capitalize()} mapping to '{map_to}' cannot be converted: {reason}")


class TaskConversionFailed(ConversionError):
    def __init__(self, index: int, task_id: str, scope: str, cause: Exception):
        self.index = index
        self.task_id = task_id
        self.scope = scope
        self.cause = cause
        super().__init__(f"Task '{task_id}' ({scope}[{index}]) cannot be converted: {cause}")


class ResourceConversionFailed(ConversionError):
    def __init__(self, resource_id: str, cause: Exception):
        self.resource_id = resource_id
        self.cause = cause
        super().__init__(f"Resource '{resource_id}' cannot be converted: {cause}")
