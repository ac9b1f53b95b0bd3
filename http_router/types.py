"""Value types shared by the route table."""

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Iterable, Optional, Tuple

from http_router.exceptions import ConfigurationError
from http_router.patterns import anchor_pattern

if TYPE_CHECKING:  # pragma: no cover
    from http_router.routing import Route


def join_fragments(*fragments: str) -> str:
    """Join path fragments with a single slash, ignoring empty ones."""
    parts = [fragment.strip("/") for fragment in fragments]
    return "/".join(part for part in parts if part)


@dataclass(frozen=True)
class Action:
    """Named controller action used as a route handler."""

    controller: Any
    action: str

    def __str__(self) -> str:
        """Return ``Controller@action`` notation."""
        controller = getattr(self.controller, "__name__", self.controller)
        return f"{controller}@{self.action}"


@dataclass(frozen=True)
class Constraint:
    """Compiled regular expression restricting a path parameter."""

    pattern: str
    regex: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Compile the constraint pattern."""
        if not isinstance(self.pattern, str):
            raise ConfigurationError(
                f"Constraint must be a regex string, got {self.pattern!r}"
            )
        # constraints always apply to a whole segment
        if anchor_pattern.search(self.pattern):
            raise ConfigurationError(
                f"Constraint '{self.pattern}' must not contain '^' or '$' anchors"
            )

        try:
            regex = re.compile(self.pattern)
        except re.error as err:
            raise ConfigurationError(
                f"Invalid constraint '{self.pattern}': {err}"
            ) from err
        object.__setattr__(self, "regex", regex)

    def matches(self, value: Any) -> bool:
        """Check that the string form of value fully matches the constraint."""
        return self.regex.fullmatch(str(value)) is not None


@dataclass(frozen=True)
class Segment:
    """A parsed segment of a route pattern.

    Literal:   ``users``   (is_param=False)
    Required:  ``{id}``    (is_param=True, name="id", required=True)
    Optional:  ``{slug?}`` (is_param=True, name="slug", required=False)
    """

    value: str
    is_param: bool = False
    name: Optional[str] = None
    required: bool = True
    constraint: Optional[Constraint] = None


@dataclass(frozen=True)
class Scope:
    """Prefix and middleware accumulated by enclosing groups."""

    prefix: str = ""
    middleware: Tuple[Any, ...] = ()

    def nest(self, prefix: str = "", middleware: Iterable[Any] = ()) -> "Scope":
        """Return a child frame inside this one."""
        return Scope(
            prefix=join_fragments(self.prefix, prefix),
            middleware=self.middleware + tuple(middleware),
        )

    def apply(
        self, pattern: str, middleware: Iterable[Any] = ()
    ) -> Tuple[str, Tuple[Any, ...]]:
        """Return pattern and middleware of a route registered in this frame."""
        return (
            "/" + join_fragments(self.prefix, pattern),
            self.middleware + tuple(middleware),
        )


@dataclass(frozen=True)
class RouteMatch:
    """Result of a successful route match."""

    route: "Route"
    params: Dict[str, str]
