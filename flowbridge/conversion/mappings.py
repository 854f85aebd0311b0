"""Conversion of legacy expression-based input/output mappings.

Legacy mappings are ``{"type", "value", "mapTo"}`` records. The current
format keys bindings by target name and marks expressions with a leading
``=``; object and array mappings are wrapped as ``{"mapping": ...}``.
"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
import re
from typing import Any, Dict, FrozenSet, Mapping, Tuple

from flowbridge.schema import LegacyMapping, LegacyMappings

from .errors import MappingConversionFailed


MAPPING_TYPE_CODES: Dict[int, str] = {
    1: "assign",
    2: "literal",
    3: "expression",
    4: "object",
    5: "array",
}
MAPPING_TYPE_NAMES = frozenset(MAPPING_TYPE_CODES.values())

_REFERENCE_PATTERN = re.compile(
    r"\$(?P<scope>\.|[A-Za-z_][A-Za-z0-9_]*)(?:\.(?P<name>[A-Za-z_][A-Za-z0-9_]*))?"
)
_TEMPLATE_PATTERN = re.compile(r"^\s*\{\{\s*(?P<expr>.+?)\s*\}\}\s*$", re.DOTALL)
_INPUT_TARGET_PATTERN = re.compile(r"^\$INPUT\[\s*(?:'(?P<sq>[^']*)'|\"(?P<dq>[^\"]*)\"|(?P<bare>[^\]]*))\s*\]$")

CURRENT_SCOPE = "."


class UnknownScopeError(ValueError):
    """Raised when an expression references a scope the context cannot resolve."""


@dataclass(frozen=True)
class ResolutionContext:
    """Resolution rules for rewriting legacy ``$scope`` references.

    ``scope_aliases`` maps a legacy scope name to its current resolver name;
    ``"."`` is the current flow scope. Dotted names under a scope listed in
    ``bracketed_scopes`` are rewritten to the indexed form ``$scope[NAME]``.
    """

    scope_aliases: Mapping[str, str] = field(default_factory=dict)
    bracketed_scopes: FrozenSet[str] = field(default_factory=frozenset)

    def _rewrite_reference(self, match: "re.Match[str]") -> str:
        scope = match.group("scope")
        name = match.group("name")

        if scope == CURRENT_SCOPE:
            return match.group(0)

        target = self.scope_aliases.get(scope)
        if target is None:
            raise UnknownScopeError(f"unknown resolver scope '${scope}'")

        if target == CURRENT_SCOPE:
            return f"$.{name}" if name else "$."
        if name is None:
            return f"${target}"
        if target in self.bracketed_scopes:
            return f"${target}[{name}]"
        return f"${target}.{name}"

    def rewrite(self, expression: str) -> str:
        return _REFERENCE_PATTERN.sub(self._rewrite_reference, expression)


DEFAULT_RESOLUTION_CONTEXT = ResolutionContext(
    scope_aliases={
        "activity": "activity",
        "flow": CURRENT_SCOPE,
        "env": "env",
        "property": "property",
        "iteration": "iteration",
        "current": "iteration",
    },
    bracketed_scopes=frozenset({"env", "property", "iteration"}),
)


def normalize_mapping_type(raw_type: Any) -> str:
    if isinstance(raw_type, bool):
        raise ValueError(f"unsupported mapping type {raw_type!r}")
    if isinstance(raw_type, int):
        name = MAPPING_TYPE_CODES.get(raw_type)
        if name is None:
            raise ValueError(f"unsupported mapping type {raw_type!r}")
        return name
    if isinstance(raw_type, str):
        text = raw_type.strip().lower()
        if text.isdigit():
            return normalize_mapping_type(int(text))
        if text in MAPPING_TYPE_NAMES:
            return text
    raise ValueError(f"unsupported mapping type {raw_type!r}")


def normalize_map_to(map_to: str) -> str:
    target = map_to.strip()
    match = _INPUT_TARGET_PATTERN.match(target)
    if match:
        target = next(group for group in (match.group("sq"), match.group("dq"), match.group("bare")) if group is not None)
        target = target.strip()
    elif target.startswith("$."):
        target = target[2:]
    return target


def _rewrite_templates(value: Any, context: ResolutionContext) -> Any:
    if isinstance(value, str):
        match = _TEMPLATE_PATTERN.match(value)
        if match:
            return "=" + context.rewrite(match.group("expr"))
        return value
    if isinstance(value, list):
        return [_rewrite_templates(item, context) for item in value]
    if isinstance(value, dict):
        return {key: _rewrite_templates(item, context) for key, item in value.items()}
    return value


def _convert_mapping_value(mapping: LegacyMapping, context: ResolutionContext) -> Any:
    mapping_type = normalize_mapping_type(mapping.type)

    if mapping_type == "literal":
        return deepcopy(mapping.value)

    if mapping_type in ("assign", "expression"):
        if not isinstance(mapping.value, str) or not mapping.value.strip():
            raise ValueError(f"{mapping_type} mapping requires a non-empty expression string")
        return "=" + context.rewrite(mapping.value.strip())

    return {"mapping": _rewrite_templates(mapping.value, context)}


def convert_legacy_mapping(mapping: LegacyMapping, context: ResolutionContext, direction: str = "input") -> Tuple[str, Any]:
    target = normalize_map_to(mapping.map_to)
    if not target:
        raise MappingConversionFailed(direction, mapping.map_to, "mapping target is empty")
    try:
        value = _convert_mapping_value(mapping, context)
    except ValueError as exc:
        raise MappingConversionFailed(direction, target, str(exc)) from exc
    return target, value


def convert_legacy_mappings(
    mappings: LegacyMappings,
    context: ResolutionContext = DEFAULT_RESOLUTION_CONTEXT,
) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    input_mappings: Dict[str, Any] = {}
    for mapping in mappings.input:
        target, value = convert_legacy_mapping(mapping, context, direction="input")
        input_mappings[target] = value

    output_mappings: Dict[str, Any] = {}
    for mapping in mappings.output:
        target, value = convert_legacy_mapping(mapping, context, direction="output")
        output_mappings[target] = value

    return input_mappings, output_mappings
