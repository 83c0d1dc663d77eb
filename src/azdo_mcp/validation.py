"""Argument presence checks and the standard tool response shapes."""
from typing import Any, Optional

import jsonschema
from mcp.types import CallToolResult, TextContent


def create_text_response(text: str) -> CallToolResult:
    """Wrap markdown text into a successful tool response."""
    return CallToolResult(content=[TextContent(type="text", text=text)])


def create_error_response(message: str) -> CallToolResult:
    """Wrap a message into an error-flagged tool response."""
    return CallToolResult(content=[TextContent(type="text", text=message)], isError=True)


def validate_required_params(
    arguments: Optional[dict],
    required: list[str],
) -> Optional[CallToolResult]:
    """Return an error response if any required argument is missing.

    Falsy values (empty string, 0, False, empty list) count as missing.
    Returns None when every name in ``required`` is present.
    """
    if arguments is None:
        return create_error_response("No arguments provided")

    missing = [name for name in required if not arguments.get(name)]
    if missing:
        return create_error_response(f"Missing required parameters: {', '.join(missing)}")

    return None


def validate_at_least_one_param(
    arguments: Optional[dict],
    names: list[str],
) -> Optional[CallToolResult]:
    """Return an error response unless at least one of ``names`` is truthy."""
    if arguments is None:
        return create_error_response("No arguments provided")

    if not any(arguments.get(name) for name in names):
        return create_error_response(
            f"At least one of the following parameters is required: {', '.join(names)}"
        )

    return None


def extract_array_param(arguments: dict, name: str) -> Optional[list[Any]]:
    """Return the argument when it is a non-empty list, else None."""
    value = arguments.get(name)
    if isinstance(value, list) and value:
        return value
    return None


def validate_arguments(
    arguments: Optional[dict],
    schema: dict,
) -> Optional[CallToolResult]:
    """Check arguments against a tool's input schema.

    Required names are checked first so a missing argument is reported as
    ``Missing required parameters: ...``; then the value types are checked.
    """
    required = schema.get("required", [])
    if required:
        missing = validate_required_params(arguments, required)
        if missing:
            return missing

    try:
        jsonschema.validate(arguments or {}, schema)
    except jsonschema.ValidationError as e:
        field = ".".join(str(part) for part in e.absolute_path) or e.validator
        return create_error_response(f"Invalid parameter '{field}': {e.message}")

    return None
