"""Conversion entry point for decoded legacy documents.

A legacy document is either a bare flow definition or an application
document whose ``resources`` list carries flows as ``{"id": "flow:<name>",
"data": {...}}`` entries. Non-flow resources are copied untouched.
"""

from __future__ import annotations

from copy import deepcopy
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

from flowbridge.schema import Definition, LegacySchemaError, parse_legacy_definition

from .definition import DEFAULT_CONVERTER, DefinitionConverter
from .errors import DEFINITION_TOO_OLD, ConversionError, ResourceConversionFailed, UnsupportedLegacyShape


logger = logging.getLogger(__name__)

FLOW_RESOURCE_PREFIX = "flow:"


def is_application_document(descriptor: Mapping[str, Any]) -> bool:
    return isinstance(descriptor.get("resources"), list)


def is_flow_resource(resource: Any) -> bool:
    if not isinstance(resource, Mapping):
        return False
    resource_id = resource.get("id")
    return isinstance(resource_id, str) and resource_id.startswith(FLOW_RESOURCE_PREFIX)


def convert_definition(
    descriptor: Mapping[str, Any],
    converter: Optional[DefinitionConverter] = None,
) -> Definition:
    converter = converter or DEFAULT_CONVERTER
    # A single-root-task document is rejected whatever else it contains.
    if descriptor.get("rootTask") is not None:
        raise UnsupportedLegacyShape(DEFINITION_TOO_OLD)
    return converter.convert(parse_legacy_definition(descriptor))


def convert_definition_document(
    descriptor: Mapping[str, Any],
    converter: Optional[DefinitionConverter] = None,
) -> Dict[str, Any]:
    return convert_definition(descriptor, converter).to_dict()


def convert_flow_resources(
    descriptor: Mapping[str, Any],
    converter: Optional[DefinitionConverter] = None,
) -> List[Tuple[int, str, Definition]]:
    """Convert every ``flow:`` resource of an application document.

    Returns ``(index, resource_id, definition)`` for each flow resource in
    document order. The first failing resource raises
    ``ResourceConversionFailed`` naming it.
    """
    flows = []
    for index, resource in enumerate(descriptor["resources"]):
        if not is_flow_resource(resource):
            continue

        resource_id = resource["id"]
        data = resource.get("data")
        if not isinstance(data, Mapping):
            raise LegacySchemaError(f"Field 'resources[{index}].data' must be a mapping")

        try:
            definition = convert_definition(data, converter)
        except (ConversionError, LegacySchemaError) as exc:
            raise ResourceConversionFailed(resource_id, exc) from exc
        logger.debug("Converted flow resource %s", resource_id)
        flows.append((index, resource_id, definition))
    return flows


def convert_document(
    descriptor: Mapping[str, Any],
    converter: Optional[DefinitionConverter] = None,
) -> Dict[str, Any]:
    if not isinstance(descriptor, Mapping):
        raise LegacySchemaError("Document must be a mapping")

    if not is_application_document(descriptor):
        return convert_definition_document(descriptor, converter)

    converted: Dict[str, Any] = deepcopy(dict(descriptor))
    for index, _, definition in convert_flow_resources(descriptor, converter):
        converted["resources"][index]["data"] = definition.to_dict()
    return converted
