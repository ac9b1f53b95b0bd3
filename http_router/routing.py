"""Route records, pattern compilation and URL generation."""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from http_router.exceptions import (
    ConfigurationError,
    ConstraintViolation,
    MissingParameter,
)
from http_router.patterns import (
    DEFAULT_CONSTRAINT,
    param_pattern,
    slashes_pattern,
)
from http_router.types import Action, Constraint, Segment

METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD")
ANY_METHOD = "ANY"


def normalize_path(path: str) -> str:
    """Return path with a leading slash and no trailing or repeated slashes."""
    return slashes_pattern.sub("/", "/" + path.strip("/"))


def to_handler(handler: Any) -> Any:
    """Convert a ``(controller, action)`` pair to an Action."""
    if isinstance(handler, (tuple, list)) and len(handler) == 2:
        controller, action = handler
        return Action(controller, action)
    return handler


def compile_pattern(
    pattern: str, constraints: Optional[Mapping[str, str]] = None
) -> List[Segment]:
    """Split a route pattern into literal and parameter segments."""
    constraints = constraints or {}
    segments: List[Segment] = []
    names = set()
    optional = None

    for fragment in pattern.split("/"):
        if not fragment:
            continue

        match = param_pattern.match(fragment)
        if optional and not (match and match["optional"]):
            raise ConfigurationError(
                f"Segment '{fragment}' follows optional parameter '{optional}' "
                f"in '{pattern}'"
            )

        if not match:
            segments.append(Segment(fragment))
            continue

        name = match["name"]
        if name in names:
            raise ConfigurationError(f"Duplicate parameter '{name}' in '{pattern}'")
        names.add(name)

        required = not match["optional"]
        if not required:
            optional = name

        segments.append(
            Segment(
                fragment,
                is_param=True,
                name=name,
                required=required,
                constraint=Constraint(constraints.get(name, DEFAULT_CONSTRAINT)),
            )
        )

    return segments


def segments_to_regex(segments: Sequence[Segment]) -> str:
    """Build an anchored expression matching a normalized path."""
    if not segments:
        return "^/$"

    expr = ""
    closing = ""
    for segment in segments:
        if not segment.is_param:
            expr += "/" + re.escape(segment.value)
        elif segment.required:
            expr += f"/(?P<{segment.name}>{segment.constraint.pattern})"
        else:
            # optional parameters nest so a later one needs the earlier one
            expr += f"(?:/(?P<{segment.name}>{segment.constraint.pattern})"
            closing += ")?"

    if all(s.is_param and not s.required for s in segments):
        return f"^/?{expr}{closing}$"
    return f"^{expr}{closing}$"


def generate_url(
    segments: Sequence[Segment],
    params: Mapping[str, Any],
    name: Optional[str] = None,
) -> str:
    """Substitute parameter values into the segments of a pattern."""
    parts: List[str] = []
    for segment in segments:
        if not segment.is_param:
            parts.append(segment.value)
            continue

        value = params.get(segment.name)
        if value is None:
            if segment.required:
                raise MissingParameter(segment.name, name)
            # remaining segments are optional too
            break

        if not segment.constraint.matches(value):
            raise ConstraintViolation(
                segment.name, value, segment.constraint.pattern
            )
        parts.append(str(value))

    return "/" + "/".join(parts)


@dataclass(frozen=True)
class Route:
    """A registered route.

    ``segments`` and ``regex`` are derived from ``pattern`` and
    ``constraints`` when the record is created, so a malformed pattern
    fails at registration time.

    """

    method: str
    pattern: str
    handler: Any
    middleware: Tuple[Any, ...] = ()
    name: Optional[str] = None
    constraints: Dict[str, str] = field(default_factory=dict)
    segments: List[Segment] = field(init=False, repr=False, compare=False)
    regex: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        """Normalize fields and compile the pattern."""
        method = self.method.upper()
        if method not in METHODS and method != ANY_METHOD:
            raise ConfigurationError(f"'{self.method}' is not a supported method")

        object.__setattr__(self, "method", method)
        object.__setattr__(self, "pattern", normalize_path(self.pattern))
        object.__setattr__(self, "handler", to_handler(self.handler))
        object.__setattr__(self, "middleware", tuple(self.middleware))
        object.__setattr__(self, "constraints", dict(self.constraints))

        segments = compile_pattern(self.pattern, self.constraints)
        try:
            regex = re.compile(segments_to_regex(segments))
        except re.error as err:
            raise ConfigurationError(
                f"Cannot compile pattern '{self.pattern}': {err}"
            ) from err
        object.__setattr__(self, "segments", segments)
        object.__setattr__(self, "regex", regex)

    def __hash__(self) -> int:
        constraints = tuple(sorted(self.constraints.items()))
        return hash(
            (
                self.method,
                self.pattern,
                self.handler,
                self.middleware,
                self.name,
                constraints,
            )
        )

    @property
    def parameters(self) -> List[str]:
        """Return parameter names in declaration order."""
        return [s.name for s in self.segments if s.is_param]

    def accepts(self, method: str) -> bool:
        """Check whether the route handles the request method."""
        return self.method == ANY_METHOD or self.method == method.upper()

    def match(self, path: str) -> Optional[Dict[str, str]]:
        """Return the parameters extracted from path."""
        matched = self.regex.match(normalize_path(path))
        if not matched:
            return None
        params = {name: matched.group(name) for name in self.parameters}
        return {key: value for key, value in params.items() if value is not None}

    def url(self, params: Optional[Mapping[str, Any]] = None) -> str:
        """Generate a path for this route."""
        return generate_url(self.segments, params or {}, self.name)
