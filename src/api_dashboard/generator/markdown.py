"""Markdown rendering of endpoint metadata."""

from api_dashboard.parser.base import EndpointMetadata
from api_dashboard.parser.comments import clean_description

ATTRIBUTION = "_Generated by api-dashboard_"
NOT_FOUND = "# Not Found\n\nNo endpoint matches `{key}`.\n"


def _cell(value) -> str:
    return clean_description("" if value is None else str(value)) or "-"


def _code_block(body: str, lang: str = "json") -> list[str]:
    return [f"```{lang}", body.rstrip("\n"), "```", ""]


def render(metadata: EndpointMetadata, actual_response: str | None = None) -> str:
    """Serialize one endpoint's metadata into a Markdown document."""
    endpoint = metadata.endpoint
    desc_lines = metadata.description.splitlines() if metadata.description else []
    title = desc_lines[0] if desc_lines else endpoint.handler

    lines = [f"# {title}", ""]
    if len(desc_lines) > 1:
        lines.extend(["\n".join(desc_lines[1:]), ""])

    lines.extend(
        [
            "## Basic Information",
            "",
            "| Item | Value |",
            "|------|-------|",
            f"| Path | `{_cell(endpoint.path)}` |",
            f"| Methods | {_cell(metadata.method_label)} |",
            f"| Group | {_cell(metadata.group_name)} |",
            f"| Content Type | {_cell(metadata.content_type)} |",
            "",
            "## Parameters",
            "",
        ]
    )

    if metadata.parameters:
        lines.extend(["| Name | Type | Location | Required | Description |", "|------|------|----------|----------|-------------|"])
        for p in metadata.parameters:
            required = "Yes" if p.required else "No"
            lines.append(f"| {_cell(p.name)} | {_cell(p.type_name)} | {p.role.value} | {required} | {_cell(p.description)} |")
        lines.append("")
    else:
        lines.extend(["_No parameters._", ""])

    if metadata.body_example:
        lines.extend(["## Request Example", ""])
        lines.extend(_code_block(metadata.body_example))

    if metadata.response_fields:
        lines.extend(["## Response Fields", "", "| Field | Type | Description |", "|-------|------|-------------|"])
        for f in metadata.response_fields:
            lines.append(f"| {_cell(f.path)} | {_cell(f.type_name)} | {_cell(f.description)} |")
        lines.append("")

    if metadata.response_example:
        lines.extend(["## Response Example", ""])
        lines.extend(_code_block(metadata.response_example))

    if actual_response:
        lines.extend(["## Actual Response", ""])
        lines.extend(_code_block(actual_response))

    lines.extend(["---", "", ATTRIBUTION, ""])
    return "\n".join(lines)


def render_not_found(key: str) -> str:
    return NOT_FOUND.format(key=key)
