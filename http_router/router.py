"""Route registry: registration, matching, URL generation and caching."""

import dataclasses
import logging
import sys
from typing import Any, Dict, List, Mapping, Optional

from http_router.cache import compile_routes, is_cacheable, load_routes
from http_router.exceptions import ConfigurationError, RouteNotFound
from http_router.group import RouteRegistrar
from http_router.routing import Route, normalize_path
from http_router.types import RouteMatch, Scope


class Router(RouteRegistrar):
    """Router."""

    FORMAT_STRING = "[%(name)s] - [%(levelname)s] - %(message)s"

    def __init__(
        self,
        name: str = "http_router",
        debug: bool = False,
        configure_logs: bool = True,
    ) -> None:
        """Initialize Router object."""
        super().__init__(self, Scope())
        self.routes: List[Route] = []
        self.named_routes: Dict[str, Route] = {}
        self.debug: bool = debug
        self.log = logging.getLogger(name)
        if configure_logs:
            self._configure_logging()

    @classmethod
    def create(cls, **kwargs) -> "Router":
        """Create an empty router."""
        return cls(**kwargs)

    def _configure_logging(self) -> None:
        if self._already_configured(self.log):
            return

        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(self.FORMAT_STRING)
        handler.setFormatter(formatter)
        self.log.propagate = False
        if self.debug:
            level = logging.DEBUG
        else:
            level = logging.ERROR
        self.log.setLevel(level)
        self.log.addHandler(handler)

    def _already_configured(self, log) -> bool:
        if not log.handlers:
            return False

        for handler in log.handlers:
            if isinstance(handler, logging.StreamHandler):
                if handler.stream == sys.stdout:
                    return True

        return False

    def _add_route(
        self, scope: Scope, method: str, pattern: str, handler: Any, **kwargs
    ) -> int:
        name = kwargs.pop("name", None)
        middleware = kwargs.pop("middleware", [])
        constraints = kwargs.pop("where", {})

        if kwargs:
            raise TypeError(
                f"{method.lower()}() got unexpected keyword "
                f"arguments: {', '.join(list(kwargs))}"
            )

        if isinstance(middleware, str) or not isinstance(middleware, (list, tuple)):
            middleware = [middleware]

        pattern, middleware = scope.apply(pattern, middleware)
        route = Route(
            method=method,
            pattern=pattern,
            handler=handler,
            middleware=middleware,
            name=name,
            constraints=constraints,
        )

        if self._checkroute(route.pattern, route.method):
            self.log.warning(
                f"Route {route.method} {route.pattern} is already registered "
                "and will shadow this one"
            )

        self._index_name(route)
        self.routes.append(route)
        self.log.debug(f"Registered {route.method} {route.pattern}")
        return len(self.routes) - 1

    def _index_name(self, route: Route, previous: Optional[Route] = None) -> None:
        if previous is not None and previous.name is not None:
            self.named_routes.pop(previous.name, None)

        if route.name is None:
            return

        if route.name in self.named_routes:
            existing = self.named_routes[route.name]
            if previous is not None and previous.name is not None:
                self.named_routes[previous.name] = previous
            raise ConfigurationError(
                f"Duplicate route name '{route.name}' "
                f"(already used by {existing.method} {existing.pattern})"
            )

        self.named_routes[route.name] = route

    def _replace_route(self, index: int, **changes: Any) -> Route:
        previous = self.routes[index]
        if index != len(self.routes) - 1:
            raise ConfigurationError(
                f"Route {previous.method} {previous.pattern} can no longer be "
                "modified once another route is registered"
            )

        route = dataclasses.replace(previous, **changes)
        self._index_name(route, previous)
        self.routes[index] = route
        return route

    def _checkroute(self, pattern: str, method: str) -> bool:
        for route in self.routes:
            if method == route.method and pattern == route.pattern:
                return True
        return False

    def get_routes(self) -> List[Route]:
        """Return routes in registration order."""
        return list(self.routes)

    def match(self, method: str, path: str) -> Optional[RouteMatch]:
        """Return the first route handling the request, if any."""
        path = normalize_path(path)
        for route in self.routes:
            if not route.accepts(method):
                continue
            params = route.match(path)
            if params is not None:
                return RouteMatch(route=route, params=params)

        self.log.debug(f"No route for: {method} - {path}")
        return None

    def has_route(self, method: str, path: str) -> bool:
        """Check for a route registered with, or matching, path."""
        pattern = normalize_path(path)
        for route in self.routes:
            if route.accepts(method) and route.pattern == pattern:
                return True
        return self.match(method, path) is not None

    def route(
        self, name: str, params: Optional[Mapping[str, Any]] = None, **kwargs
    ) -> str:
        """Generate the URL of a named route."""
        if name not in self.named_routes:
            raise RouteNotFound(name)

        values = dict(params or {})
        values.update(kwargs)
        return self.named_routes[name].url(values)

    def is_cacheable(self) -> bool:
        """Check whether the route table can be compiled."""
        return is_cacheable(self.routes)

    def compile(self) -> Dict[str, Any]:
        """Return the route table as plain, serializable data."""
        compiled = compile_routes(self.routes)
        self.log.debug(f"Compiled {len(self.routes)} route(s)")
        return compiled

    def load_compiled(self, compiled: Mapping[str, Any]) -> "Router":
        """Replace the route table with a compiled one."""
        routes = load_routes(compiled)

        named: Dict[str, Route] = {}
        for route in routes:
            if route.name is None:
                continue
            if route.name in named:
                raise ConfigurationError(f"Duplicate route name '{route.name}'")
            named[route.name] = route

        self.routes = routes
        self.named_routes = named
        self.log.debug(f"Loaded {len(routes)} compiled route(s)")
        return self
