from dataclasses import dataclass
from typing import Any, ClassVar

from pydantic import BaseModel

from api_dashboard.generator.template import RECURSION_SENTINEL, synthesize
from api_dashboard.parser.base import FieldDescriptor, TypeDescriptor, TypeKind
from api_dashboard.parser.types import describe


@dataclass
class Order:
    code: int
    msg: str
    data: dict[str, Any]


class Tree(BaseModel):
    label: str
    children: list["Tree"] = []


class Counter:
    total: ClassVar[int] = 0
    hits: int


class TestScalars:
    def test_string_placeholder_is_readable(self):
        assert synthesize(describe(str)) == "Please fill in str"

    def test_numeric_and_boolean(self):
        assert synthesize(describe(int)) == 0
        assert synthesize(describe(float)) == 0
        assert synthesize(describe(bool)) is False

    def test_every_kind_has_a_value(self):
        for kind in TypeKind:
            value = synthesize(TypeDescriptor(kind=kind, name="Thing"))
            assert value is not None, kind

    def test_unknown_mentions_type_name(self):
        assert "Widget" in synthesize(TypeDescriptor(kind=TypeKind.UNKNOWN, name="Widget"))


class TestCollections:
    def test_sequence_has_single_element(self):
        assert synthesize(describe(list[int])) == [0]

    def test_sequence_without_element(self):
        assert synthesize(describe(list)) == []

    def test_mapping_uses_demo_pair(self):
        assert synthesize(describe(dict[str, Order])) == {"demoKey": "demoValue"}


class TestRecords:
    def test_record_keys_in_declaration_order(self):
        example = synthesize(describe(Order))
        assert list(example) == ["code", "msg", "data"]
        assert example == {"code": 0, "msg": "Please fill in str", "data": {"demoKey": "demoValue"}}

    def test_static_fields_are_skipped(self):
        assert synthesize(describe(Counter)) == {"hits": 0}

    def test_recursive_record_hits_sentinel(self):
        example = synthesize(describe(Tree), limit=3)
        # depth 0 Tree -> 1 list -> 2 Tree -> 3 list -> 4 Tree (over the limit)
        assert example["children"][0]["children"] == [RECURSION_SENTINEL]

    def test_depth_over_limit_returns_sentinel(self):
        assert synthesize(describe(Order), depth=4, limit=3) == RECURSION_SENTINEL

    def test_unresolvable_field_gets_placeholder(self):
        broken = TypeDescriptor(
            kind=TypeKind.RECORD,
            name="Broken",
            fields=(FieldDescriptor(name="ok", annotation=int), FieldDescriptor(name="bad", annotation="Nope")),
        )
        assert synthesize(broken) == {"ok": 0, "bad": "Unknown type: Nope"}
