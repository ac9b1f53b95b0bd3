"""Flat, serializable form of a route table."""

from typing import Any, Dict, List, Mapping, Sequence

from http_router.exceptions import ConfigurationError
from http_router.routing import Route
from http_router.types import Action

COMPILED_VERSION = 1
RECORD_KEYS = ("method", "pattern", "handler", "middleware", "name", "constraints")


def is_cacheable_route(route: Route) -> bool:
    """Check that a route only holds statically representable data."""
    handler = route.handler
    if not isinstance(handler, Action):
        return False
    if not isinstance(handler.controller, str) or not isinstance(handler.action, str):
        return False
    return all(isinstance(m, str) for m in route.middleware)


def is_cacheable(routes: Sequence[Route]) -> bool:
    """Check that every route can be compiled."""
    return all(is_cacheable_route(route) for route in routes)


def _route_to_record(route: Route) -> Dict[str, Any]:
    return {
        "method": route.method,
        "pattern": route.pattern,
        "handler": [route.handler.controller, route.handler.action],
        "middleware": list(route.middleware),
        "name": route.name,
        "constraints": dict(route.constraints),
    }


def _record_to_route(record: Any) -> Route:
    if not isinstance(record, Mapping):
        raise ConfigurationError(f"Invalid compiled route: {record!r}")

    missing = [key for key in RECORD_KEYS if key not in record]
    if missing:
        raise ConfigurationError(
            f"Compiled route is missing: {', '.join(missing)}"
        )

    handler = record["handler"]
    if not isinstance(handler, (list, tuple)) or len(handler) != 2:
        raise ConfigurationError(f"Invalid compiled handler: {handler!r}")

    for key in ("method", "pattern"):
        if not isinstance(record[key], str):
            raise ConfigurationError(f"Invalid compiled {key}: {record[key]!r}")
    if record["name"] is not None and not isinstance(record["name"], str):
        raise ConfigurationError(f"Invalid compiled name: {record['name']!r}")
    if not isinstance(record["middleware"], (list, tuple)):
        raise ConfigurationError(
            f"Invalid compiled middleware: {record['middleware']!r}"
        )
    if not isinstance(record["constraints"], Mapping):
        raise ConfigurationError(
            f"Invalid compiled constraints: {record['constraints']!r}"
        )

    return Route(
        method=record["method"],
        pattern=record["pattern"],
        handler=Action(*handler),
        middleware=tuple(record["middleware"]),
        name=record["name"],
        constraints=dict(record["constraints"]),
    )


def compile_routes(routes: Sequence[Route]) -> Dict[str, Any]:
    """Flatten routes into plain data, keeping registration order."""
    for route in routes:
        if not is_cacheable_route(route):
            raise ConfigurationError(
                f"Route {route.method} {route.pattern} cannot be compiled: "
                "handler and middleware must be plain names"
            )

    return {
        "version": COMPILED_VERSION,
        "routes": [_route_to_record(route) for route in routes],
    }


def load_routes(compiled: Mapping[str, Any]) -> List[Route]:
    """Rebuild routes from their compiled form."""
    if not isinstance(compiled, Mapping):
        raise ConfigurationError("Compiled routes must be a mapping")

    version = compiled.get("version")
    if version != COMPILED_VERSION:
        raise ConfigurationError(f"Unsupported compiled routes version: {version!r}")

    records = compiled.get("routes")
    if not isinstance(records, list):
        raise ConfigurationError("Compiled routes must contain a 'routes' list")

    return [_record_to_route(record) for record in records]
