"""Minimal route registry that turns handler signatures into endpoint descriptors.

Handlers are plain functions, or methods of a controller class::

    registry = RouteRegistry()

    @registry.get("/hello")
    def hello(name: str = "World") -> str: ...

    @registry.controller("/users")
    class UserController:
        @registry.get("/{id}")
        def detail(self, id: str) -> User: ...

Binding roles come from ``Annotated[T, Body()]`` style markers. Unmarked
parameters are path parameters when named in the route, query otherwise.
"""

import importlib
import inspect
import re
import sys
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Annotated, Any, get_args, get_origin, get_type_hints

from api_dashboard.errors import RegistryLoadError
from api_dashboard.parser.base import EndpointDescriptor, ParameterDescriptor, ParamRole
from api_dashboard.parser.types import describe

PATH_VARIABLE = re.compile(r"\{(\w+)(?::[^}]*)?\}")
ROUTE_ATTR = "__api_route__"


@dataclass(frozen=True)
class Binding:
    """Annotated marker assigning a parameter its binding role."""

    role: ParamRole
    description: str = ""


def Query(description: str = "") -> Binding:
    return Binding(ParamRole.QUERY, description)


def Path(description: str = "") -> Binding:
    return Binding(ParamRole.PATH, description)


def Body(description: str = "") -> Binding:
    return Binding(ParamRole.BODY, description)


@dataclass
class _Route:
    path: str
    methods: tuple[str, ...]
    handler: Callable
    group: str | None = None
    owner: Any = None


class RouteRegistry:
    """Collects registered handlers and describes them on demand."""

    def __init__(self):
        self._routes: list[_Route] = []

    def route(self, path: str, methods: tuple[str, ...] = ("GET",), group: str | None = None):
        def decorator(func):
            route = _Route(path=path, methods=tuple(m.upper() for m in methods), handler=func, group=group)
            if _is_method(func):
                # Picked up by controller() once the class exists.
                setattr(func, ROUTE_ATTR, route)
            else:
                route.owner = sys.modules.get(func.__module__)
                self._routes.append(route)
            return func

        return decorator

    def get(self, path: str, **kwargs):
        return self.route(path, ("GET",), **kwargs)

    def post(self, path: str, **kwargs):
        return self.route(path, ("POST",), **kwargs)

    def put(self, path: str, **kwargs):
        return self.route(path, ("PUT",), **kwargs)

    def delete(self, path: str, **kwargs):
        return self.route(path, ("DELETE",), **kwargs)

    def patch(self, path: str, **kwargs):
        return self.route(path, ("PATCH",), **kwargs)

    def controller(self, prefix: str = "", group: str | None = None):
        """Class decorator registering every routed method of a controller."""

        def decorator(cls):
            for member in vars(cls).values():
                route = getattr(member, ROUTE_ATTR, None)
                if route is None:
                    continue
                self._routes.append(
                    _Route(
                        path=_join(prefix, route.path),
                        methods=route.methods,
                        handler=member,
                        group=route.group or group or cls.__name__,
                        owner=cls,
                    )
                )
            return cls

        return decorator

    def add(self, path: str, handler: Callable, methods: tuple[str, ...] = ("GET",), group: str | None = None) -> None:
        """Register a handler without decorator syntax."""
        route = _Route(path=path, methods=tuple(m.upper() for m in methods), handler=handler, group=group)
        route.owner = sys.modules.get(handler.__module__)
        self._routes.append(route)

    def remove(self, path: str) -> None:
        self._routes = [r for r in self._routes if r.path != path]

    def endpoints(self) -> Iterator[EndpointDescriptor]:
        for route in self._routes:
            yield describe_handler(route.handler, route.path, route.methods, route.group, route.owner)

    def __len__(self) -> int:
        return len(self._routes)


def describe_handler(
    handler: Callable,
    path: str,
    methods: tuple[str, ...] = ("GET",),
    group: str | None = None,
    owner: Any = None,
) -> EndpointDescriptor:
    """Build an EndpointDescriptor from a handler's signature and type hints."""
    if owner is None:
        owner = sys.modules.get(handler.__module__)
    try:
        hints = get_type_hints(handler, include_extras=True)
    except Exception:  # noqa: BLE001 - unresolved forward references
        hints = dict(getattr(handler, "__annotations__", {}))

    path_vars = set(PATH_VARIABLE.findall(path))
    params = []
    for name, sig_param in inspect.signature(handler).parameters.items():
        if name in ("self", "cls") or sig_param.kind in (sig_param.VAR_POSITIONAL, sig_param.VAR_KEYWORD):
            continue
        annotation = hints.get(name, Any)
        binding = _binding(annotation)
        if binding is not None:
            role, description = binding.role, binding.description
        else:
            role, description = (ParamRole.PATH if name in path_vars else ParamRole.QUERY), ""
        has_default = sig_param.default is not inspect.Parameter.empty
        params.append(
            ParameterDescriptor(
                name=name,
                type=describe(annotation),
                role=role,
                description=description,
                required=not has_default,
                default=sig_param.default if has_default else None,
            )
        )

    return EndpointDescriptor(
        path=path,
        methods=tuple(methods),
        group=group or _default_group(owner),
        owner=owner,
        handler=handler.__name__,
        parameters=tuple(params),
        response=describe(hints.get("return", Any)),
    )


def load_registry(target: str) -> RouteRegistry:
    """Import ``package.module:attribute`` and return the registry it names."""
    module_name, _, attr = target.partition(":")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise RegistryLoadError(f"Cannot import {module_name}: {e}") from e
    registry = getattr(module, attr or "registry", None)
    if not isinstance(registry, RouteRegistry):
        raise RegistryLoadError(f"{target} is not a RouteRegistry")
    return registry


def _binding(annotation: Any) -> Binding | None:
    if get_origin(annotation) is Annotated:
        for meta in get_args(annotation)[1:]:
            if isinstance(meta, Binding):
                return meta
    return None


def _is_method(func: Callable) -> bool:
    parts = func.__qualname__.split(".")
    return len(parts) > 1 and parts[-2] != "<locals>"


def _default_group(owner: Any) -> str:
    if inspect.isclass(owner):
        return owner.__name__
    name = getattr(owner, "__name__", "") or "default"
    return name.rpartition(".")[2]


def _join(prefix: str, path: str) -> str:
    if not prefix:
        return path
    return prefix.rstrip("/") + "/" + path.lstrip("/")
