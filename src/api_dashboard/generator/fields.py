"""Response-shape flattening into dotted field paths."""

import logging

from api_dashboard.parser.base import ResponseField, TypeDescriptor, TypeKind
from api_dashboard.parser.comments import clean_description
from api_dashboard.parser.source import SourceCommentStore

from .template import DEFAULT_DEPTH_LIMIT

logger = logging.getLogger(__name__)


class FieldFlattener:
    """Walks a response type into ``(path, type name, description)`` rows."""

    def __init__(self, store: SourceCommentStore | None = None, limit: int = DEFAULT_DEPTH_LIMIT):
        self.store = store
        self.limit = limit

    def flatten(
        self,
        type_: TypeDescriptor,
        prefix: str = "",
        depth: int = 0,
        out: list[ResponseField] | None = None,
    ) -> list[ResponseField]:
        if out is None:
            out = []
        if depth > self.limit:
            return out

        if type_.kind in (TypeKind.SEQUENCE, TypeKind.MAPPING):
            # Collections expand into their element (or value) under the same path.
            if type_.element is not None:
                self.flatten(type_.element, prefix, depth, out)
            return out
        if type_.kind is not TypeKind.RECORD:
            return out

        for field in type_.fields:
            if field.static:
                continue
            path = f"{prefix}.{field.name}" if prefix else field.name
            try:
                field_type = field.type
                description = self._describe(field.owner, field.name)
                out.append(ResponseField(path=path, type_name=field_type.name, description=description))
            except Exception:  # noqa: BLE001 - skip the malformed field, keep the rest
                logger.debug("Skipping field %s of %s", path, type_.name, exc_info=True)
                continue
            self.flatten(field_type, path, depth + 1, out)
        return out

    def _describe(self, owner, name: str) -> str:
        if self.store is None or owner is None:
            return ""
        return clean_description(self.store.field_description(owner, name))
