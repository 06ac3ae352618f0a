"""Story request validation — pure tests for the field rules.

Tests cover:
    - title: required, non-blank, raw length <= 100
    - content: required, non-blank
    - author: required, non-blank
    - tags: unconstrained
    - all violations reported together
"""

from obscura.core.validate_story import (
    check_max_length,
    check_not_blank,
    check_story_request,
    is_blank,
)
from obscura.schemas.story import StoryRequest


def _request(**overrides) -> StoryRequest:
    fields = {
        "title": "The Lighthouse",
        "content": "The lamp went dark at midnight.",
        "author": "Ada",
        "tags": ["sea"],
    }
    fields.update(overrides)
    return StoryRequest(**fields)


# --- is_blank -----------------------------------------------------------------

def test_none_is_blank():
    assert is_blank(None)


def test_empty_and_whitespace_are_blank():
    assert is_blank("")
    assert is_blank("   ")
    assert is_blank("\t\n ")


def test_text_with_surrounding_spaces_is_not_blank():
    assert not is_blank("  x  ")


# --- single checks ------------------------------------------------------------

def test_not_blank_reports_field_and_message():
    violation = check_not_blank("title", "  ")
    assert violation is not None
    assert violation.field == "title"
    assert violation.message == "Title must not be blank"


def test_max_length_allows_boundary():
    assert check_max_length("title", "x" * 100, 100) is None


def test_max_length_rejects_one_over():
    violation = check_max_length("title", "x" * 101, 100)
    assert violation is not None
    assert violation.message == "Title must be at most 100 characters"


def test_max_length_ignores_none():
    assert check_max_length("title", None, 100) is None


# --- check_story_request ------------------------------------------------------

def test_valid_request_has_no_violations():
    assert check_story_request(_request()) == []


def test_blank_title_is_rejected():
    violations = check_story_request(_request(title=""))
    assert [v.field for v in violations] == ["title"]


def test_missing_content_is_rejected():
    violations = check_story_request(_request(content=None))
    assert [v.field for v in violations] == ["content"]
    assert violations[0].message == "Content must not be blank"


def test_whitespace_author_is_rejected():
    violations = check_story_request(_request(author="   "))
    assert [v.field for v in violations] == ["author"]
    assert violations[0].message == "Author must not be blank"


def test_title_length_is_measured_without_trimming():
    violations = check_story_request(_request(title=" " + "x" * 100))
    assert [v.field for v in violations] == ["title"]
    assert violations[0].type == "too_long"


def test_tags_are_unconstrained():
    assert check_story_request(_request(tags=None)) == []
    assert check_story_request(_request(tags=[])) == []
    assert check_story_request(_request(tags=["", " ", "dup", "dup"])) == []


def test_every_violation_is_reported():
    violations = check_story_request(
        StoryRequest(title=None, content="", author=" "),
    )
    assert {v.field for v in violations} == {"title", "content", "author"}
