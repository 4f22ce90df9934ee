from dataclasses import dataclass
from typing import Annotated
from unittest.mock import MagicMock

from api_dashboard.generator.markdown import ATTRIBUTION, render, render_not_found
from api_dashboard.generator.metadata import EndpointMetadataBuilder
from api_dashboard.parser.base import (
    EndpointDescriptor,
    EndpointMetadata,
    ParameterDetail,
    ParamRole,
    ResponseField,
    TypeDescriptor,
    TypeKind,
)
from api_dashboard.routing import Query, describe_handler


def _metadata(**overrides) -> EndpointMetadata:
    endpoint = EndpointDescriptor(
        path="/demo/users/{id}",
        methods=("GET",),
        group="demo",
        handler="get_user_detail",
        response=TypeDescriptor(kind=TypeKind.RECORD, name="UserDetail"),
    )
    defaults = dict(
        endpoint=endpoint,
        group_name="Demo",
        parameters=(
            ParameterDetail(name="id", type_name="str", role=ParamRole.PATH, description="user ID", required=True),
        ),
        response_example='{\n  "id": 0\n}',
        response_fields=(
            ResponseField(path="id", type_name="int", description="Numeric user ID"),
            ResponseField(path="status", type_name="str", description="Account status (ok | error)"),
        ),
        description="User detail (path variable)\nOnly numeric IDs are accepted.",
    )
    defaults.update(overrides)
    return EndpointMetadata(**defaults)


def _table_rows(doc: str, header: str) -> list[str]:
    lines = doc.splitlines()
    start = lines.index(header) + 2
    rows = []
    for line in lines[start:]:
        if not line.startswith("|"):
            break
        rows.append(line)
    return rows


class TestRender:
    def test_sections_in_order(self):
        doc = render(_metadata())
        headings = [line for line in doc.splitlines() if line.startswith("#")]
        assert headings == [
            "# User detail (path variable)",
            "## Basic Information",
            "## Parameters",
            "## Response Fields",
            "## Response Example",
        ]
        assert "Only numeric IDs are accepted." in doc
        assert doc.rstrip().endswith(ATTRIBUTION)

    def test_basic_information(self):
        doc = render(_metadata())
        assert "| Path | `/demo/users/{id}` |" in doc
        assert "| Methods | GET |" in doc
        assert "| Group | Demo |" in doc
        assert "| Content Type | FORM |" in doc

    def test_parameter_rows(self):
        rows = _table_rows(render(_metadata()), "| Name | Type | Location | Required | Description |")
        assert rows == ["| id | str | Path | Yes | user ID |"]

    def test_no_parameters_message(self):
        doc = render(_metadata(parameters=()))
        assert "_No parameters._" in doc
        assert "| Name | Type |" not in doc

    def test_pipes_do_not_break_tables(self):
        rows = _table_rows(render(_metadata()), "| Field | Type | Description |")
        assert len(rows) == 2
        assert all(row.count("|") == 4 for row in rows)
        assert "ok / error" in rows[1]

    def test_request_example_only_with_body(self):
        assert "## Request Example" not in render(_metadata())
        doc = render(_metadata(content_type="JSON", body_example='{\n  "code": 0\n}'))
        assert "## Request Example\n\n```json\n{\n  \"code\": 0\n}\n```" in doc

    def test_title_falls_back_to_handler(self):
        assert render(_metadata(description="")).startswith("# get_user_detail\n")

    def test_actual_response(self):
        doc = render(_metadata(), actual_response='{"id": 7}')
        assert "## Actual Response\n\n```json\n{\"id\": 7}\n```" in doc

    def test_all_methods_label(self):
        metadata = _metadata()
        endpoint = metadata.endpoint.model_copy(update={"methods": ()})
        assert "| Methods | ALL |" in render(metadata.model_copy(update={"endpoint": endpoint}))


class TestNotFound:
    def test_names_the_key(self):
        doc = render_not_found("GET /nope")
        assert doc.startswith("# Not Found")
        assert "`GET /nope`" in doc


@dataclass
class Reading:
    value: int
    unit: str


class TestTableStructure:
    def _built(self) -> EndpointMetadata:
        def read(
            sensor: Annotated[str, Query("line1\r\nline2")],
            window: Annotated[int, Query("a | b\rc")] = 5,
        ) -> Reading:
            pass

        store = MagicMock()
        store.method_description.return_value = "Read a sensor"
        store.class_description.return_value = None
        store.param_description.return_value = None
        store.field_description.side_effect = lambda owner, name: {"value": "raw\r\nvalue", "unit": "si | imperial"}[name]
        return EndpointMetadataBuilder(store).build(describe_handler(read, "/sensors/read"))

    def test_every_row_survives_rendering(self):
        metadata = self._built()
        doc = render(metadata)

        params = _table_rows(doc, "| Name | Type | Location | Required | Description |")
        fields = _table_rows(doc, "| Field | Type | Description |")
        assert len(params) == len(metadata.parameters) == 2
        assert len(fields) == len(metadata.response_fields) == 2
        assert all(row.count("|") == 6 for row in params)
        assert all(row.count("|") == 4 for row in fields)
        assert params[0].endswith("| line1 line2 |")
        assert "line2" not in doc.replace(params[0], "")
