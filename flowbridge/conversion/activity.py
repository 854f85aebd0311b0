"""Conversion of a legacy activity configuration."""

from __future__ import annotations

from copy import deepcopy
import logging
from typing import Any, Dict, Protocol, Tuple

from flowbridge.schema import ActivityConfig, LegacyActivityConfig, LegacyMappings, SchemaConfig

from .mappings import DEFAULT_RESOLUTION_CONTEXT, ResolutionContext, convert_legacy_mappings
from .values import convert_values


logger = logging.getLogger(__name__)


class MappingConverter(Protocol):
    def __call__(
        self,
        mappings: LegacyMappings,
        context: ResolutionContext,
    ) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        ...


def convert_activity_config(
    rep: LegacyActivityConfig,
    mapping_converter: MappingConverter = convert_legacy_mappings,
    context: ResolutionContext = DEFAULT_RESOLUTION_CONTEXT,
) -> ActivityConfig:
    settings = convert_values(rep.settings)
    inputs = convert_values(rep.input_attrs)
    outputs = convert_values(rep.output_attrs)

    input_values = dict(inputs.values)
    output_values = dict(outputs.values)

    if rep.mappings is not None:
        input_mappings, output_mappings = mapping_converter(rep.mappings, context)
        input_values.update(input_mappings)
        output_values.update(output_mappings)

    # Once any setting survives conversion, the input bindings stand in for the
    # settings; otherwise the raw legacy settings are kept.
    final_settings = deepcopy(rep.settings) if rep.settings else None
    if settings.values:
        final_settings = dict(input_values)

    schemas = None
    if inputs.schemas or outputs.schemas:
        schemas = SchemaConfig(input=dict(inputs.schemas), output=dict(outputs.schemas))
        logger.debug(
            "Inferred %d input and %d output schema(s) for activity %s",
            len(inputs.schemas),
            len(outputs.schemas),
            rep.ref,
        )

    return ActivityConfig(
        ref=rep.ref,
        settings=final_settings,
        input=input_values or None,
        output=output_values or None,
        schemas=schemas,
    )
