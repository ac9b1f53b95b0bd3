"""Scoped route registration.

Group prefixes and middleware are carried by immutable ``Scope`` frames.
``prefix()`` and ``middleware()`` never touch the router: they return a
``PendingRoutes`` value that is consumed either by ``group()`` or by the
next single route registered through it, so nothing is left behind for
later registrations.
"""

from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Union,
)

from http_router.exceptions import ConfigurationError
from http_router.routing import ANY_METHOD, Route
from http_router.types import Action, RouteMatch, Scope

if TYPE_CHECKING:  # pragma: no cover
    from http_router.router import Router

# (action, method, suffix) in registration order; "create" precedes "show"
RESOURCE_ACTIONS = (
    ("index", "GET", ""),
    ("create", "GET", "/create"),
    ("store", "POST", ""),
    ("show", "GET", "/{id}"),
    ("edit", "GET", "/{id}/edit"),
    ("update", "PUT", "/{id}"),
    ("destroy", "DELETE", "/{id}"),
)


def _flatten(middleware: Iterable[Any]) -> List[Any]:
    items: List[Any] = []
    for entry in middleware:
        if isinstance(entry, (list, tuple)):
            items.extend(entry)
        else:
            items.append(entry)
    return items


def _constraints(
    param: Union[str, Mapping[str, str]], regex: Optional[str]
) -> Dict[str, str]:
    if isinstance(param, Mapping):
        return dict(param)
    if regex is None:
        raise ConfigurationError(f"Missing constraint for parameter '{param}'")
    return {param: regex}


class RouteRegistrar:
    """Register routes inside a scope frame."""

    def __init__(self, router: "Router", scope: Scope = Scope()) -> None:
        """Initialize registrar object."""
        self.router = router
        self.scope = scope

    @property
    def _continuation(self) -> "RouteRegistrar":
        """Registrar that fluent calls return to."""
        return self

    def add_route(
        self, method: str, pattern: str, handler: Any, **kwargs
    ) -> "RouteBuilder":
        """Register route."""
        index = self.router._add_route(self.scope, method, pattern, handler, **kwargs)
        return RouteBuilder(self._continuation, index)

    def get(self, pattern: str, handler: Any, **kwargs) -> "RouteBuilder":
        """Register GET route."""
        return self.add_route("GET", pattern, handler, **kwargs)

    def post(self, pattern: str, handler: Any, **kwargs) -> "RouteBuilder":
        """Register POST route."""
        return self.add_route("POST", pattern, handler, **kwargs)

    def put(self, pattern: str, handler: Any, **kwargs) -> "RouteBuilder":
        """Register PUT route."""
        return self.add_route("PUT", pattern, handler, **kwargs)

    def patch(self, pattern: str, handler: Any, **kwargs) -> "RouteBuilder":
        """Register PATCH route."""
        return self.add_route("PATCH", pattern, handler, **kwargs)

    def delete(self, pattern: str, handler: Any, **kwargs) -> "RouteBuilder":
        """Register DELETE route."""
        return self.add_route("DELETE", pattern, handler, **kwargs)

    def options(self, pattern: str, handler: Any, **kwargs) -> "RouteBuilder":
        """Register OPTIONS route."""
        return self.add_route("OPTIONS", pattern, handler, **kwargs)

    def head(self, pattern: str, handler: Any, **kwargs) -> "RouteBuilder":
        """Register HEAD route."""
        return self.add_route("HEAD", pattern, handler, **kwargs)

    def any(self, pattern: str, handler: Any, **kwargs) -> "RouteBuilder":
        """Register route matching every method."""
        return self.add_route(ANY_METHOD, pattern, handler, **kwargs)

    def prefix(self, prefix: str) -> "PendingRoutes":
        """Set a prefix for the next group or route."""
        return PendingRoutes(self, Scope().nest(prefix=prefix))

    def middleware(self, *middleware: Any) -> "PendingRoutes":
        """Set middleware for the next group or route."""
        return PendingRoutes(self, Scope().nest(middleware=_flatten(middleware)))

    def group(self, callback: Callable[["RouteRegistrar"], Any]) -> "RouteRegistrar":
        """Register the routes declared by callback inside this scope."""
        callback(RouteRegistrar(self.router, self.scope))
        return self._continuation

    def resource(
        self,
        name: str,
        controller: Any,
        only: Optional[Iterable[str]] = None,
        exclude: Optional[Iterable[str]] = None,
    ) -> "RouteRegistrar":
        """Register the conventional CRUD routes of a controller."""
        known = [action for action, _, _ in RESOURCE_ACTIONS]
        only = list(only) if only is not None else known
        exclude = list(exclude or [])
        unknown = [a for a in only + exclude if a not in known]
        if unknown:
            raise ConfigurationError(
                f"Unknown resource action(s): {', '.join(unknown)}"
            )

        base = "/" + name.strip("/")
        prefix = name.strip("/").replace("/", ".")
        for action, method, suffix in RESOURCE_ACTIONS:
            if action not in only or action in exclude:
                continue
            handler = Action(controller, action)
            self.router._add_route(
                self.scope, method, base + suffix, handler, name=f"{prefix}.{action}"
            )
            if action == "update":
                self.router._add_route(self.scope, "PATCH", base + suffix, handler)

        return self._continuation

    def _last(self) -> "RouteBuilder":
        if not self.router.routes:
            raise ConfigurationError("No route registered yet")
        return RouteBuilder(self._continuation, len(self.router.routes) - 1)

    def name(self, name: str) -> "RouteBuilder":
        """Name the most recently registered route."""
        return self._last().name(name)

    def where(
        self, param: Union[str, Mapping[str, str]], regex: Optional[str] = None
    ) -> "RouteBuilder":
        """Constrain parameters of the most recently registered route."""
        return self._last().where(param, regex)

    def get_routes(self) -> List[Route]:
        """Return routes in registration order."""
        return self.router.get_routes()

    def match(self, method: str, path: str) -> Optional[RouteMatch]:
        """Return the first route handling the request, if any."""
        return self.router.match(method, path)

    def has_route(self, method: str, path: str) -> bool:
        """Check for a route registered with, or matching, path."""
        return self.router.has_route(method, path)

    def route(
        self, name: str, params: Optional[Mapping[str, Any]] = None, **kwargs
    ) -> str:
        """Generate the URL of a named route."""
        return self.router.route(name, params, **kwargs)

    def is_cacheable(self) -> bool:
        """Check whether the route table can be compiled."""
        return self.router.is_cacheable()

    def compile(self) -> Dict[str, Any]:
        """Return the route table as plain, serializable data."""
        return self.router.compile()


class PendingRoutes(RouteRegistrar):
    """Prefix and middleware waiting for a group or a single route."""

    def __init__(self, parent: RouteRegistrar, pending: Scope) -> None:
        """Initialize pending scope on top of the parent registrar."""
        super().__init__(
            parent.router, parent.scope.nest(pending.prefix, pending.middleware)
        )
        self.parent = parent
        self.pending = pending

    @property
    def _continuation(self) -> RouteRegistrar:
        return self.parent

    def prefix(self, prefix: str) -> "PendingRoutes":
        """Extend the pending prefix."""
        return PendingRoutes(self.parent, self.pending.nest(prefix=prefix))

    def middleware(self, *middleware: Any) -> "PendingRoutes":
        """Extend the pending middleware."""
        return PendingRoutes(
            self.parent, self.pending.nest(middleware=_flatten(middleware))
        )


class RouteBuilder:
    """Fluent access to a freshly registered route.

    ``name``, ``where`` and ``middleware`` modify the route until another
    route is registered. Any other attribute is looked up on the registrar
    the route was registered from, so registration calls keep chaining.
    """

    def __init__(self, registrar: RouteRegistrar, index: int) -> None:
        """Initialize builder for the route at index."""
        self._registrar = registrar
        self._index = index

    def __getattr__(self, item: str) -> Any:
        if item.startswith("_"):
            raise AttributeError(item)
        return getattr(self._registrar, item)

    @property
    def entry(self) -> Route:
        """Return the route record."""
        return self._registrar.router.routes[self._index]

    def _update(self, **changes: Any) -> "RouteBuilder":
        self._registrar.router._replace_route(self._index, **changes)
        return self

    def name(self, name: str) -> "RouteBuilder":
        """Name the route."""
        return self._update(name=name)

    def where(
        self, param: Union[str, Mapping[str, str]], regex: Optional[str] = None
    ) -> "RouteBuilder":
        """Constrain route parameters."""
        constraints: Dict[str, str] = dict(self.entry.constraints)
        constraints.update(_constraints(param, regex))
        return self._update(constraints=constraints)

    def middleware(self, *middleware: Any) -> "RouteBuilder":
        """Append middleware to the route."""
        middleware = self.entry.middleware + tuple(_flatten(middleware))
        return self._update(middleware=middleware)
