import datetime
import enum
import uuid
from dataclasses import dataclass
from typing import Annotated, Any, ClassVar, Optional, TypedDict

from pydantic import BaseModel

from api_dashboard.parser.base import TypeKind
from api_dashboard.parser.types import describe, display_name


class Color(enum.Enum):
    RED = "red"


@dataclass
class Point:
    x: int
    y: int


class Shape(BaseModel):
    name: str
    points: list[Point] = []
    meta: dict[str, int] = {}


class Node(BaseModel):
    value: int
    children: list["Node"] = []


class Movie(TypedDict):
    title: str
    year: int


class Plain:
    kind: ClassVar[str] = "plain"
    label: str


class TestScalars:
    def test_string(self):
        d = describe(str)
        assert d.kind is TypeKind.STRING
        assert d.full_name == "builtins.str"

    def test_bool_is_not_numeric(self):
        assert describe(bool).kind is TypeKind.BOOLEAN

    def test_numeric(self):
        assert describe(int).kind is TypeKind.NUMERIC
        assert describe(float).kind is TypeKind.NUMERIC

    def test_other_scalars(self):
        for tp in (datetime.datetime, uuid.UUID, bytes, Color):
            assert describe(tp).kind is TypeKind.SCALAR, tp

    def test_optional_is_unwrapped(self):
        assert describe(Optional[int]).kind is TypeKind.NUMERIC
        assert describe(str | None).kind is TypeKind.STRING

    def test_annotated_is_unwrapped(self):
        assert describe(Annotated[str, "meta"]).kind is TypeKind.STRING


class TestCollections:
    def test_list_element(self):
        d = describe(list[Point])
        assert d.kind is TypeKind.SEQUENCE
        assert d.element.kind is TypeKind.RECORD
        assert d.name == "list[Point]"

    def test_bare_list_has_no_element(self):
        d = describe(list)
        assert d.kind is TypeKind.SEQUENCE
        assert d.element is None

    def test_mapping(self):
        d = describe(dict[str, Point])
        assert d.kind is TypeKind.MAPPING
        assert d.key.kind is TypeKind.STRING
        assert d.element.name == "Point"


class TestRecords:
    def test_dataclass_fields_in_order(self):
        d = describe(Point)
        assert d.kind is TypeKind.RECORD
        assert [f.name for f in d.fields] == ["x", "y"]

    def test_pydantic_model(self):
        d = describe(Shape)
        assert [f.name for f in d.fields] == ["name", "points", "meta"]
        assert d.fields[1].type.element.name == "Point"
        assert d.fields[0].owner is Shape

    def test_self_reference_is_lazy(self):
        d = describe(Node)
        children = d.fields[1].type
        assert children.kind is TypeKind.SEQUENCE
        assert children.element.origin is Node

    def test_typed_dict(self):
        d = describe(Movie)
        assert d.kind is TypeKind.RECORD
        assert [f.name for f in d.fields] == ["title", "year"]

    def test_class_var_is_static(self):
        d = describe(Plain)
        assert [(f.name, f.static) for f in d.fields] == [("kind", True), ("label", False)]


class TestUnknown:
    def test_any(self):
        d = describe(Any)
        assert d.kind is TypeKind.UNKNOWN
        assert d.name == "Any"

    def test_forward_reference_string(self):
        d = describe("Missing")
        assert d.kind is TypeKind.UNKNOWN
        assert d.name == "Missing"

    def test_class_without_annotations(self):
        class Opaque:
            pass

        assert describe(Opaque).kind is TypeKind.UNKNOWN


class TestDisplayName:
    def test_optional(self):
        assert display_name(Optional[int]) == "Optional[int]"

    def test_nested_generic(self):
        assert display_name(dict[str, list[int]]) == "dict[str, list[int]]"
