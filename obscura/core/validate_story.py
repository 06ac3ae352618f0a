"""Story Request Validation — field rules applied before the service is entered.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Each check returns a FieldViolation on failure, None on success
    - Title length is measured on the raw value (no trimming)

Design Decisions:
    - Rules live in core rather than as pydantic validators: the schema decodes shape,
      this module decides validity, and every violation is reported at once
"""

from typing import Protocol

from obscura.core.domain_types import TITLE_MAX_LENGTH
from obscura.core.errors import FieldViolation


class StoryFields(Protocol):
    """Structural contract for anything carrying story request fields."""
    title: str | None
    content: str | None
    author: str | None


def is_blank(value: str | None) -> bool:
    """True for None, empty, or whitespace-only strings."""
    return value is None or not value.strip()


def check_not_blank(field: str, value: str | None) -> FieldViolation | None:
    if is_blank(value):
        return FieldViolation(
            field, f"{field.capitalize()} must not be blank", "blank",
        )
    return None


def check_max_length(
    field: str, value: str | None, max_length: int,
) -> FieldViolation | None:
    if value is not None and len(value) > max_length:
        return FieldViolation(
            field,
            f"{field.capitalize()} must be at most {max_length} characters",
            "too_long",
        )
    return None


def check_story_request(request: StoryFields) -> list[FieldViolation]:
    """Run every field rule and collect the violations (empty list = valid)."""
    checks = (
        check_not_blank("title", request.title),
        check_max_length("title", request.title, TITLE_MAX_LENGTH),
        check_not_blank("content", request.content),
        check_not_blank("author", request.author),
    )
    return [violation for violation in checks if violation is not None]
