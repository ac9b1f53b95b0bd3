"""Regex patterns for path parsing and route matching."""

import re

# Pattern matching expressions
param_pattern = re.compile(
    r"^\{(?P<name>[a-zA-Z_][a-zA-Z0-9_]*)(?P<optional>\?)?\}$"
)
slashes_pattern = re.compile(r"/{2,}")

# Parameters without a constraint match one path segment
DEFAULT_CONSTRAINT = r"[^/]+"

# Leading "^" or trailing unescaped "$" in a constraint source
anchor_pattern = re.compile(r"^\^|(?<!\\)(?:\\\\)*\$$")
