"""Exceptions raised outside the metadata engine.

The engine itself degrades to placeholders instead of raising; these
cover configuration and registry loading at the edges.
"""


class ApiDashboardError(Exception):
    """Base class for api-dashboard errors."""


class ConfigError(ApiDashboardError):
    """The settings file is missing, unreadable or invalid."""


class RegistryLoadError(ApiDashboardError):
    """The ``module:attribute`` target does not name a route registry."""
