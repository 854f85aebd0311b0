"""Decoding of legacy documents from YAML or JSON text."""

from __future__ import annotations

import json
from typing import Any, Dict

import yaml

from .values import LegacySchemaError


_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class DocumentSyntaxError(LegacySchemaError):
    """Raised when document text cannot be parsed."""


class _LegacyDocumentLoader(yaml.SafeLoader):
    """Safe loader that keeps unquoted dates and times as plain strings."""


_LegacyDocumentLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def parse_document_text(text: str, source: str = "<memory>") -> Dict[str, Any]:
    # Tab-indented JSON exports are not valid YAML, so JSON is tried first.
    try:
        data = json.loads(text)
    except ValueError:
        try:
            data = yaml.load(text, Loader=_LegacyDocumentLoader)
        except yaml.YAMLError as exc:
            raise DocumentSyntaxError(f"Invalid document in {source}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise LegacySchemaError(f"Document root must be a mapping in {source}")
    return data


def parse_document_file(file_path: str) -> Dict[str, Any]:
    with open(file_path, "r", encoding="utf-8") as file:
        content = file.read()
    return parse_document_text(content, source=file_path)
