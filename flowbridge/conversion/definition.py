"""Conversion of a legacy flow definition into the current format."""

from __future__ import annotations

from copy import deepcopy
import logging
from typing import Callable, Dict, Optional, Sequence, Tuple

from flowbridge.schema import (
    Definition,
    ErrorHandler,
    IOMetadata,
    LegacyAttribute,
    LegacyDefinition,
    LegacyLink,
    LegacyTask,
    Link,
    Task,
    TypedAttribute,
)

from .activity import MappingConverter, convert_activity_config
from .attributes import convert_legacy_attribute
from .errors import DEFINITION_TOO_OLD, ConversionError, TaskConversionFailed, UnsupportedLegacyShape
from .mappings import DEFAULT_RESOLUTION_CONTEXT, ResolutionContext, convert_legacy_mappings


logger = logging.getLogger(__name__)

AttributeConverter = Callable[[LegacyAttribute], TypedAttribute]

TASKS_SCOPE = "tasks"
ERROR_HANDLER_TASKS_SCOPE = "errorHandler.tasks"


def convert_link(rep: LegacyLink) -> Link:
    return Link(
        from_id=rep.from_id,
        to_id=rep.to_id,
        name=rep.name,
        value=rep.value,
        type=rep.type,
    )


class DefinitionConverter:
    """Converts legacy definitions using pluggable attribute and mapping converters.

    The converter keeps no state between calls; one instance can convert any
    number of documents, including concurrently.
    """

    def __init__(
        self,
        attribute_converter: AttributeConverter = convert_legacy_attribute,
        mapping_converter: MappingConverter = convert_legacy_mappings,
        context: ResolutionContext = DEFAULT_RESOLUTION_CONTEXT,
    ):
        self.attribute_converter = attribute_converter
        self.mapping_converter = mapping_converter
        self.context = context

    def convert_task(self, rep: LegacyTask) -> Task:
        activity = None
        if rep.activity is not None:
            activity = convert_activity_config(rep.activity, self.mapping_converter, self.context)

        return Task(
            id=rep.id,
            name=rep.name,
            type=rep.type,
            settings=deepcopy(rep.settings) if rep.settings else None,
            activity=activity,
        )

    def _convert_tasks(self, tasks: Sequence[LegacyTask], scope: str) -> Tuple[Task, ...]:
        converted = []
        for index, rep in enumerate(tasks):
            try:
                converted.append(self.convert_task(rep))
            except ConversionError as exc:
                raise TaskConversionFailed(index, rep.id, scope, exc) from exc
        return tuple(converted)

    def _convert_attributes(self, attributes: Dict[str, LegacyAttribute]) -> Optional[Dict[str, TypedAttribute]]:
        if not attributes:
            return None
        return {name: self.attribute_converter(attr) for name, attr in attributes.items()}

    def convert(self, rep: LegacyDefinition) -> Definition:
        if rep.root_task is not None:
            raise UnsupportedLegacyShape(DEFINITION_TOO_OLD)

        logger.debug(
            "Converting legacy flow %r (%d tasks, %d links)",
            rep.name,
            len(rep.tasks),
            len(rep.links),
        )

        metadata = None
        if rep.metadata is not None:
            metadata = IOMetadata(
                input=self._convert_attributes(rep.metadata.input),
                output=self._convert_attributes(rep.metadata.output),
            )

        tasks = self._convert_tasks(rep.tasks, TASKS_SCOPE)
        links = tuple(convert_link(link) for link in rep.links)

        error_handler = None
        if rep.error_handler is not None:
            error_handler = ErrorHandler(
                tasks=self._convert_tasks(rep.error_handler.tasks, ERROR_HANDLER_TASKS_SCOPE),
                links=tuple(convert_link(link) for link in rep.error_handler.links),
            )

        return Definition(
            name=rep.name,
            model_id=rep.model_id,
            explicit_reply=rep.explicit_reply,
            metadata=metadata,
            tasks=tasks,
            links=links,
            error_handler=error_handler,
        )


DEFAULT_CONVERTER = DefinitionConverter()


def convert_legacy_definition(
    rep: LegacyDefinition,
    attribute_converter: AttributeConverter = convert_legacy_attribute,
    mapping_converter: MappingConverter = convert_legacy_mappings,
    context: ResolutionContext = DEFAULT_RESOLUTION_CONTEXT,
) -> Definition:
    converter = DefinitionConverter(
        attribute_converter=attribute_converter,
        mapping_converter=mapping_converter,
        context=context,
    )
    return converter.convert(rep)
