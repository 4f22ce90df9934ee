"""Reflect Python type hints into TypeDescriptor models."""

import collections.abc
import dataclasses
import datetime
import decimal
import enum
import logging
import pathlib
import types
import typing
import uuid
from typing import Annotated, Any, ClassVar, Literal, Union, get_args, get_origin, get_type_hints

from pydantic import BaseModel

from .base import FieldDescriptor, TypeDescriptor, TypeKind

logger = logging.getLogger(__name__)

NUMERIC_TYPES = (int, float, decimal.Decimal, complex)
SCALAR_TYPES = (
    bytes,
    bytearray,
    datetime.datetime,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    uuid.UUID,
    pathlib.PurePath,
    type(None),
)
SEQUENCE_ORIGINS = (list, tuple, set, frozenset, collections.abc.Sequence, collections.abc.Set, collections.abc.Iterable)
SEQUENCE_CLASSES = (list, tuple, set, frozenset)
MAPPING_ORIGINS = (dict, collections.abc.Mapping)


def describe(annotation: Any) -> TypeDescriptor:
    """Build a TypeDescriptor for a type hint.

    Never raises: anything that cannot be classified becomes an
    ``unknown`` descriptor carrying a best-effort name.
    """
    try:
        return _describe(annotation)
    except Exception:  # noqa: BLE001 - reflection on foreign types
        logger.debug("Cannot reflect %r", annotation, exc_info=True)
        return TypeDescriptor(kind=TypeKind.UNKNOWN, name=display_name(annotation), origin=annotation)


def _describe(annotation: Any) -> TypeDescriptor:
    annotation = _unwrap(annotation)
    origin = get_origin(annotation)
    args = get_args(annotation)

    if origin is Literal:
        return _describe(type(args[0])) if args else _unknown(annotation)

    if origin is not None:
        if isinstance(origin, type) and issubclass(origin, MAPPING_ORIGINS):
            return TypeDescriptor(
                kind=TypeKind.MAPPING,
                name=display_name(annotation),
                full_name=full_name(origin),
                origin=origin,
                key=describe(args[0]) if len(args) == 2 else None,
                element=describe(args[1]) if len(args) == 2 else None,
            )
        if isinstance(origin, type) and issubclass(origin, SEQUENCE_ORIGINS):
            element = args[0] if args and args[0] is not Ellipsis else None
            return TypeDescriptor(
                kind=TypeKind.SEQUENCE,
                name=display_name(annotation),
                full_name=full_name(origin),
                origin=origin,
                element=describe(element) if element is not None else None,
            )
        # Generic record such as Page[Item]
        if isinstance(origin, type):
            return _record(origin, annotation)
        return _unknown(annotation)

    if annotation is Any or isinstance(annotation, (str, typing.ForwardRef, typing.TypeVar)):
        return _unknown(annotation)
    if not isinstance(annotation, type):
        return _unknown(annotation)

    kind = _scalar_kind(annotation)
    if kind is not None:
        return TypeDescriptor(kind=kind, name=display_name(annotation), full_name=full_name(annotation), origin=annotation)
    if issubclass(annotation, MAPPING_ORIGINS) and not _is_typed_dict(annotation):
        return TypeDescriptor(kind=TypeKind.MAPPING, name=annotation.__name__, full_name=full_name(annotation), origin=annotation)
    if issubclass(annotation, SEQUENCE_CLASSES) and not _is_named_tuple(annotation):
        return TypeDescriptor(kind=TypeKind.SEQUENCE, name=annotation.__name__, full_name=full_name(annotation), origin=annotation)
    return _record(annotation, annotation)


def _unwrap(annotation: Any) -> Any:
    """Strip Annotated[...] and Optional[...] wrappers."""
    while True:
        origin = get_origin(annotation)
        if origin is Annotated:
            annotation = get_args(annotation)[0]
            continue
        if origin is Union or _is_union_type(annotation):
            members = [a for a in get_args(annotation) if a is not type(None)]
            if not members:
                return type(None)
            annotation = members[0]
            continue
        return annotation


def _is_union_type(annotation: Any) -> bool:
    return isinstance(annotation, types.UnionType)


def _scalar_kind(cls: type) -> TypeKind | None:
    if issubclass(cls, bool):
        return TypeKind.BOOLEAN
    if issubclass(cls, enum.Enum):
        return TypeKind.SCALAR
    if issubclass(cls, str):
        return TypeKind.STRING
    if issubclass(cls, NUMERIC_TYPES):
        return TypeKind.NUMERIC
    if issubclass(cls, SCALAR_TYPES):
        return TypeKind.SCALAR
    if cls.__module__ == "builtins" and cls not in (list, tuple, set, frozenset, dict, object):
        return TypeKind.SCALAR
    return None


def _record(cls: type, annotation: Any) -> TypeDescriptor:
    fields = record_fields(cls)
    if not fields:
        return _unknown(annotation)
    return TypeDescriptor(
        kind=TypeKind.RECORD,
        name=display_name(annotation),
        full_name=full_name(cls),
        origin=cls,
        fields=tuple(fields),
    )


def record_fields(cls: type) -> list[FieldDescriptor]:
    """Return the fields of a record class in declaration order."""
    if issubclass(cls, BaseModel):
        return [
            FieldDescriptor(name=name, annotation=info.annotation, owner=_declaring_class(cls, name))
            for name, info in cls.model_fields.items()
        ]
    if dataclasses.is_dataclass(cls):
        hints = _hints(cls)
        return [
            FieldDescriptor(name=f.name, annotation=hints.get(f.name, f.type), owner=_declaring_class(cls, f.name))
            for f in dataclasses.fields(cls)
        ]

    hints = _hints(cls)
    result = []
    for name, hint in hints.items():
        static = get_origin(hint) is ClassVar or hint is ClassVar
        if static:
            args = get_args(hint)
            hint = args[0] if args else Any
        result.append(FieldDescriptor(name=name, annotation=hint, owner=_declaring_class(cls, name), static=static))
    return result


def _hints(cls: type) -> dict[str, Any]:
    try:
        return get_type_hints(cls, include_extras=True)
    except Exception:  # noqa: BLE001 - unresolved forward references
        logger.debug("Falling back to raw annotations for %s", cls, exc_info=True)
        merged: dict[str, Any] = {}
        for base in reversed(cls.__mro__):
            merged.update(getattr(base, "__annotations__", {}))
        return merged


def _declaring_class(cls: type, name: str) -> type:
    for base in cls.__mro__:
        if name in getattr(base, "__annotations__", {}):
            return base
    return cls


def _is_typed_dict(cls: type) -> bool:
    return typing.is_typeddict(cls)


def _is_named_tuple(cls: type) -> bool:
    return issubclass(cls, tuple) and hasattr(cls, "_fields")


def _unknown(annotation: Any) -> TypeDescriptor:
    return TypeDescriptor(kind=TypeKind.UNKNOWN, name=display_name(annotation), origin=annotation)


def display_name(annotation: Any) -> str:
    """Short human-readable name, e.g. ``list[Address]``."""
    if annotation is Any:
        return "Any"
    if isinstance(annotation, str):
        return annotation
    if isinstance(annotation, typing.ForwardRef):
        return annotation.__forward_arg__
    origin = get_origin(annotation)
    if origin is Annotated:
        return display_name(get_args(annotation)[0])
    if origin is Union or _is_union_type(annotation):
        members = [display_name(a) for a in get_args(annotation) if a is not type(None)]
        if len(members) == 1:
            return f"Optional[{members[0]}]"
        return f"Union[{', '.join(members)}]"
    if origin is not None:
        args = get_args(annotation)
        base = getattr(origin, "__name__", None) or str(origin).replace("typing.", "")
        if not args:
            return base
        return f"{base}[{', '.join(display_name(a) for a in args)}]"
    if annotation is Ellipsis:
        return "..."
    if annotation is type(None):
        return "None"
    return getattr(annotation, "__name__", None) or str(annotation).replace("typing.", "")


def full_name(cls: Any) -> str:
    module = getattr(cls, "__module__", "")
    qualname = getattr(cls, "__qualname__", None) or display_name(cls)
    return f"{module}.{qualname}" if module else qualname
