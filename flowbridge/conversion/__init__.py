"""Legacy flow definition conversion APIs."""

from .activity import MappingConverter, convert_activity_config
from .attributes import LEGACY_TYPE_ALIASES, convert_legacy_attribute
from .definition import (
    DEFAULT_CONVERTER,
    AttributeConverter,
    DefinitionConverter,
    convert_legacy_definition,
    convert_link,
)
from .document import (
    convert_definition,
    convert_definition_document,
    convert_document,
    convert_flow_resources,
    is_application_document,
)
from .errors import (
    AttributeConversionFailed,
    ConversionError,
    MappingConversionFailed,
    ResourceConversionFailed,
    TaskConversionFailed,
    UnsupportedLegacyShape,
)
from .mappings import (
    DEFAULT_RESOLUTION_CONTEXT,
    ResolutionContext,
    UnknownScopeError,
    convert_legacy_mappings,
)
from .values import (
    EMPTY_OBJECT_MARKER,
    ComplexValueInfo,
    ConvertedValues,
    convert_values,
    inspect_complex_value,
)

__all__ = [
    "DEFAULT_CONVERTER",
    "DEFAULT_RESOLUTION_CONTEXT",
    "EMPTY_OBJECT_MARKER",
    "LEGACY_TYPE_ALIASES",
    "AttributeConversionFailed",
    "AttributeConverter",
    "ComplexValueInfo",
    "ConversionError",
    "ConvertedValues",
    "DefinitionConverter",
    "MappingConversionFailed",
    "MappingConverter",
    "ResolutionContext",
    "ResourceConversionFailed",
    "TaskConversionFailed",
    "UnknownScopeError",
    "UnsupportedLegacyShape",
    "convert_activity_config",
    "convert_definition",
    "convert_definition_document",
    "convert_document",
    "convert_flow_resources",
    "convert_legacy_attribute",
    "convert_legacy_definition",
    "convert_legacy_mappings",
    "convert_link",
    "convert_values",
    "inspect_complex_value",
    "is_application_document",
]
