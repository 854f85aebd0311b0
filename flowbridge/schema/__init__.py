"""Legacy and current flow definition models."""

from .current import (
    SCHEMA_TYPE_JSON,
    ActivityConfig,
    Definition,
    ErrorHandler,
    IOMetadata,
    Link,
    SchemaConfig,
    SchemaDef,
    Task,
    TypedAttribute,
)
from .documents import DocumentSyntaxError, parse_document_file, parse_document_text
from .legacy import (
    LegacyActivityConfig,
    LegacyAttribute,
    LegacyDefinition,
    LegacyErrorHandler,
    LegacyIOMetadata,
    LegacyLink,
    LegacyMapping,
    LegacyMappings,
    LegacyTask,
    parse_legacy_definition,
)
from .values import (
    ComplexObject,
    LegacySchemaError,
    ValueKind,
    classify_value,
    decode_value,
)

__all__ = [
    "SCHEMA_TYPE_JSON",
    "ActivityConfig",
    "ComplexObject",
    "Definition",
    "DocumentSyntaxError",
    "ErrorHandler",
    "IOMetadata",
    "LegacyActivityConfig",
    "LegacyAttribute",
    "LegacyDefinition",
    "LegacyErrorHandler",
    "LegacyIOMetadata",
    "LegacyLink",
    "LegacyMapping",
    "LegacyMappings",
    "LegacySchemaError",
    "LegacyTask",
    "Link",
    "SchemaConfig",
    "SchemaDef",
    "Task",
    "TypedAttribute",
    "ValueKind",
    "classify_value",
    "decode_value",
    "parse_document_file",
    "parse_document_text",
    "parse_legacy_definition",
]
