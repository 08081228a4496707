"""Domain exceptions raised by services and turned into responses by the API layer."""

from dataclasses import dataclass
from typing import Any

_LOCATIONS = {"body", "query", "path", "header"}

_TITLE_MESSAGES = {
    "string_too_short": "Give your cheese a longer title, at least {min_length} characters.",
    "string_too_long": "Describe your cheese in {max_length} characters or less.",
}

_MESSAGES = {
    "missing": "This value should not be blank.",
    "string_too_short": "This value is too short. It should have {min_length} characters or more.",
    "string_too_long": "This value is too long. It should have {max_length} characters or less.",
    "int_parsing": "This value should be of type int.",
    "int_type": "This value should be of type int.",
    "string_type": "This value should be of type string.",
    "dict_type": "The request body should be a JSON object.",
}


@dataclass(frozen=True)
class Violation:
    """A single failed constraint on one input field."""

    property_path: str
    message: str


class ValidationFailed(Exception):
    """One or more input constraints were violated."""

    def __init__(self, violations: list[Violation]):
        self.violations = violations
        super().__init__("; ".join(f"{v.property_path}: {v.message}" for v in violations))


class InvalidCredentials(Exception):
    """Supplied password does not match the stored hash."""


def _property_path(loc: tuple[Any, ...]) -> str:
    parts = [str(part) for part in loc if part not in _LOCATIONS]
    return ".".join(parts) or "body"


def violation_from_error(error: dict[str, Any]) -> Violation:
    """Translate one pydantic error into a violation with a readable message."""
    error_type = error.get("type", "")
    if error_type == "json_invalid":
        # loc carries the byte offset of the decode failure, not a field
        return Violation("body", error.get("msg", "JSON decode error"))

    path = _property_path(tuple(error.get("loc", ())))
    templates = _TITLE_MESSAGES if path == "title" and error_type in _TITLE_MESSAGES else _MESSAGES
    template = templates.get(error_type)
    if template is None:
        return Violation(path, error.get("msg", "This value is not valid."))
    return Violation(path, template.format(**(error.get("ctx") or {})))
