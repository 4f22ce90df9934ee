"""Per-endpoint metadata assembly."""

import json
import logging
from typing import Any

from api_dashboard.parser.base import (
    EndpointDescriptor,
    EndpointMetadata,
    ParameterDescriptor,
    ParameterDetail,
    ParamRole,
)
from api_dashboard.parser.comments import clean_description
from api_dashboard.parser.source import SourceCommentStore

from .fields import FieldFlattener
from .template import DEFAULT_DEPTH_LIMIT, synthesize

logger = logging.getLogger(__name__)

NO_DESCRIPTION = "No description"
EMPTY_EXAMPLE = "{}"


def to_pretty_json(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


class EndpointMetadataBuilder:
    """Combines an endpoint descriptor with synthesized examples and source docs."""

    def __init__(
        self,
        store: SourceCommentStore,
        limit: int = DEFAULT_DEPTH_LIMIT,
        no_description: str = NO_DESCRIPTION,
    ):
        self.store = store
        self.limit = limit
        self.no_description = no_description
        self.flattener = FieldFlattener(store, limit=limit)

    def build(self, endpoint: EndpointDescriptor) -> EndpointMetadata:
        details: list[ParameterDetail] = []
        body_example = ""
        has_body = False

        for param in endpoint.parameters:
            try:
                if param.role is ParamRole.BODY:
                    has_body = True
                    if param.type.is_scalar:
                        details.append(self._detail(endpoint, param))
                    else:
                        body_example = self._body_example(endpoint, param, details)
                else:
                    details.append(self._detail(endpoint, param))
            except Exception:  # noqa: BLE001 - isolate one bad parameter
                logger.warning("Skipping parameter %s of %s", param.name, endpoint.handler, exc_info=True)

        return EndpointMetadata(
            endpoint=endpoint,
            group_name=self.group_name(endpoint),
            content_type="JSON" if has_body else "FORM",
            body_example=body_example,
            parameters=tuple(details),
            response_example=self._response_example(endpoint),
            response_fields=tuple(self._response_fields(endpoint)),
            description=self.store.method_description(endpoint.owner, endpoint.handler) or "",
        )

    def group_name(self, endpoint: EndpointDescriptor) -> str:
        """Display name of the endpoint's group: first line of its doc block, else its name."""
        desc = self.store.class_description(endpoint.owner) if endpoint.owner is not None else None
        if desc:
            return desc.splitlines()[0]
        return endpoint.group

    def _detail(self, endpoint: EndpointDescriptor, param: ParameterDescriptor) -> ParameterDetail:
        desc = param.description or self.store.param_description(endpoint.owner, endpoint.handler, param.name)
        return ParameterDetail(
            name=param.name,
            type_name=param.type.name,
            role=param.role,
            description=clean_description(desc or None, self.no_description),
            required=param.required,
            default=None if param.default is None else str(param.default),
        )

    def _body_example(self, endpoint: EndpointDescriptor, param: ParameterDescriptor, details: list[ParameterDetail]) -> str:
        try:
            return to_pretty_json(synthesize(param.type, 0, self.limit))
        except Exception:  # noqa: BLE001
            logger.warning("Cannot synthesize request body for %s", endpoint.handler, exc_info=True)
            details.append(ParameterDetail(name=param.name, type_name="ComplexType", role=ParamRole.BODY))
            return ""

    def _response_example(self, endpoint: EndpointDescriptor) -> str:
        try:
            return to_pretty_json(synthesize(endpoint.response, 0, self.limit))
        except Exception:  # noqa: BLE001
            logger.warning("Cannot synthesize response for %s", endpoint.handler, exc_info=True)
            return EMPTY_EXAMPLE

    def _response_fields(self, endpoint: EndpointDescriptor) -> list:
        try:
            return self.flattener.flatten(endpoint.response)
        except Exception:  # noqa: BLE001
            logger.warning("Cannot flatten response of %s", endpoint.handler, exc_info=True)
            return []
