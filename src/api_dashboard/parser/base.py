"""Unified data models for reflected API metadata.

The route registry, the type reflector and the metadata builder all
exchange these models, so downstream rendering never touches raw
Python annotations directly.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TypeKind(str, Enum):
    STRING = "string"
    BOOLEAN = "boolean"
    NUMERIC = "numeric"
    SCALAR = "scalar"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    RECORD = "record"
    UNKNOWN = "unknown"


SCALAR_KINDS = frozenset({TypeKind.STRING, TypeKind.BOOLEAN, TypeKind.NUMERIC, TypeKind.SCALAR, TypeKind.UNKNOWN})


class ParamRole(str, Enum):
    """Where a handler parameter is bound from."""

    QUERY = "Query"
    PATH = "Path"
    BODY = "Body"


class FieldDescriptor(BaseModel):
    """A single field of a record type.

    The field type is resolved on access so self-referential records
    can be described without recursing at construction time.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    annotation: Any = None
    owner: Any = None  # declaring class, used for comment lookups
    static: bool = False

    @property
    def type(self) -> "TypeDescriptor":
        from api_dashboard.parser.types import describe

        return describe(self.annotation)


class TypeDescriptor(BaseModel):
    """Language-neutral description of a value's shape."""

    model_config = ConfigDict(frozen=True)

    kind: TypeKind
    name: str
    full_name: str = ""
    origin: Any = None
    element: "TypeDescriptor | None" = None  # sequence element / mapping value
    key: "TypeDescriptor | None" = None
    fields: tuple[FieldDescriptor, ...] = ()

    @property
    def is_scalar(self) -> bool:
        return self.kind in SCALAR_KINDS


class ParameterDescriptor(BaseModel):
    """A handler parameter as supplied by the route registry."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: TypeDescriptor
    role: ParamRole
    description: str = ""
    required: bool = False
    default: Any = None


class EndpointDescriptor(BaseModel):
    """One registered route and its handler contract."""

    model_config = ConfigDict(frozen=True)

    path: str  # /demo/users/{id}
    methods: tuple[str, ...] = ()
    group: str
    owner: Any = None  # class or module declaring the handler
    handler: str
    parameters: tuple[ParameterDescriptor, ...] = ()
    response: TypeDescriptor


class ParameterDetail(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type_name: str
    role: ParamRole
    description: str = ""
    required: bool = False
    default: str | None = None  # rendered default value


class ResponseField(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str  # data.items.name
    type_name: str
    description: str = ""


class EndpointMetadata(BaseModel):
    """Everything the dashboard knows about one endpoint."""

    model_config = ConfigDict(frozen=True)

    endpoint: EndpointDescriptor
    group_name: str
    content_type: str = "FORM"  # JSON / FORM
    body_example: str = ""
    parameters: tuple[ParameterDetail, ...] = ()
    response_example: str = "{}"
    response_fields: tuple[ResponseField, ...] = ()
    description: str = ""

    @property
    def path(self) -> str:
        return self.endpoint.path

    @property
    def method_label(self) -> str:
        return ", ".join(self.endpoint.methods) if self.endpoint.methods else "ALL"


class MetadataIndex(BaseModel):
    """Endpoint metadata grouped by display name, sorted by URL within a group."""

    model_config = ConfigDict(frozen=True)

    base_url: str = ""
    groups: dict[str, tuple[EndpointMetadata, ...]] = Field(default_factory=dict)

    def url_for(self, metadata: EndpointMetadata) -> str:
        return self.base_url + metadata.path

    def with_base_url(self, base_url: str) -> "MetadataIndex":
        return self.model_copy(update={"base_url": base_url})

    def all(self) -> list[EndpointMetadata]:
        return [m for group in self.groups.values() for m in group]

    def to_listing(self) -> dict:
        """Plain-JSON view of the index for the dashboard front end."""
        groups = {}
        for name, entries in self.groups.items():
            groups[name] = [
                {
                    "url": self.url_for(m),
                    "path": m.path,
                    "method": m.method_label,
                    "bean": m.endpoint.group,
                    "function": m.endpoint.handler,
                    "paramType": m.content_type,
                    "params": [p.model_dump(mode="json") for p in m.parameters],
                    "bodyTemplate": m.body_example,
                    "responseExample": m.response_example,
                    "responseFields": [f.model_dump(mode="json") for f in m.response_fields],
                    "description": m.description,
                }
                for m in entries
            ]
        return {"baseUrl": self.base_url, "controllerGroups": groups}


class CommentBlock(BaseModel):
    """A documentation block recovered from source text."""

    text: str
    tags: dict[str, str] = Field(default_factory=dict)


class RefreshAck(BaseModel):
    status: str = "ok"
    timestamp: float
