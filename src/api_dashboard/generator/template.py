"""Example payload synthesis from type descriptors."""

import logging
from typing import Any

from api_dashboard.parser.base import TypeDescriptor, TypeKind

logger = logging.getLogger(__name__)

DEFAULT_DEPTH_LIMIT = 3
RECURSION_SENTINEL = "Recursion Limit Reached"
DEMO_MAPPING = {"demoKey": "demoValue"}


def synthesize(type_: TypeDescriptor, depth: int = 0, limit: int = DEFAULT_DEPTH_LIMIT) -> Any:
    """Convert a type descriptor into a representative example value.

    Records become dicts in field declaration order, sequences become
    one-element lists and mappings always become a single demo pair.
    Past ``limit`` nesting levels the sentinel string is returned instead.
    """
    if depth > limit:
        return RECURSION_SENTINEL

    kind = type_.kind
    if kind is TypeKind.NUMERIC:
        return 0
    if kind is TypeKind.BOOLEAN:
        return False
    if kind in (TypeKind.STRING, TypeKind.SCALAR):
        return f"Please fill in {type_.name}"
    if kind is TypeKind.SEQUENCE:
        if type_.element is None:
            return []
        return [synthesize(type_.element, depth + 1, limit)]
    if kind is TypeKind.MAPPING:
        return dict(DEMO_MAPPING)
    if kind is TypeKind.RECORD:
        return _record(type_, depth, limit)
    return placeholder(type_.name)


def _record(type_: TypeDescriptor, depth: int, limit: int) -> dict[str, Any]:
    example: dict[str, Any] = {}
    for field in type_.fields:
        if field.static:
            continue
        try:
            field_type = field.type
        except Exception:  # noqa: BLE001 - one bad field must not sink the record
            logger.debug("Cannot resolve field %s.%s", type_.name, field.name, exc_info=True)
            example[field.name] = placeholder(str(field.annotation))
            continue
        example[field.name] = synthesize(field_type, depth + 1, limit)
    return example


def placeholder(name: str) -> str:
    return f"Unknown type: {name}"
