"""http-router: declarative route registry with matching and URL generation."""

from http_router.exceptions import (
    ConfigurationError,
    ConstraintViolation,
    MissingParameter,
    RouteNotFound,
    RouterError,
)
from http_router.group import PendingRoutes, RouteBuilder, RouteRegistrar
from http_router.router import Router
from http_router.routing import Route
from http_router.types import Action, RouteMatch, Scope

__version__ = "1.0.0"

__all__ = [
    "Action",
    "ConfigurationError",
    "ConstraintViolation",
    "MissingParameter",
    "PendingRoutes",
    "Route",
    "RouteBuilder",
    "RouteMatch",
    "RouteNotFound",
    "RouteRegistrar",
    "Router",
    "RouterError",
    "Scope",
]
