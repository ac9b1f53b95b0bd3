"""Router exceptions."""

from typing import Any, Optional


class RouterError(Exception):
    """Base class for router errors."""


class ConfigurationError(RouterError, ValueError):
    """Invalid route registration or compiled route table."""


class RouteNotFound(RouterError, LookupError):
    """No route registered under the requested name."""

    def __init__(self, name: str) -> None:
        """Initialize error for route name."""
        self.name = name
        super().__init__(f"Route not found: {name}")


class MissingParameter(RouterError, LookupError):
    """A required path parameter was not supplied for URL generation."""

    def __init__(self, parameter: str, route: Optional[str] = None) -> None:
        """Initialize error for parameter."""
        self.parameter = parameter
        self.route = route
        super().__init__(f"Missing required parameter: {parameter}")


class ConstraintViolation(RouterError, ValueError):
    """A supplied parameter value does not satisfy its constraint."""

    def __init__(self, parameter: str, value: Any, constraint: str) -> None:
        """Initialize error for parameter."""
        self.parameter = parameter
        self.value = value
        self.constraint = constraint
        super().__init__(
            f"Parameter '{parameter}' value '{value}' does not match constraint "
            f"'{constraint}'"
        )
