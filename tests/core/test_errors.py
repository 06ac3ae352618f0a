"""Error hierarchy — status codes and response envelopes.

Invariants:
    - StoryNotFoundError → 404 with "Story not found with id: <id>"
    - StoryValidationError / MalformedRequestError → 400 with per-field details
    - DatabaseError / MigrationError → 500, critical severity
"""

from obscura.core.errors import (
    DatabaseError,
    ErrorSeverity,
    FieldViolation,
    MalformedRequestError,
    MigrationError,
    StoryNotFoundError,
    StoryValidationError,
)


def test_not_found_message_and_status():
    err = StoryNotFoundError(42)
    assert err.http_status == 404
    assert err.message == "Story not found with id: 42"
    assert err.story_id == 42
    assert err.context.story_id == 42


def test_not_found_response_envelope():
    body = StoryNotFoundError(5).to_response()
    assert body["error"]["code"] == "RESOURCE_NOT_FOUND"
    assert body["error"]["message"] == "Story not found with id: 5"
    assert body["error"]["category"] == "resource_not_found"


def test_validation_error_lists_fields():
    err = StoryValidationError([
        FieldViolation("title", "Title must not be blank", "blank"),
        FieldViolation("author", "Author must not be blank", "blank"),
    ])
    body = err.to_response()
    assert err.http_status == 400
    assert body["error"]["code"] == "VALIDATION_ERROR"
    assert [d["field"] for d in body["error"]["details"]] == ["title", "author"]
    assert body["error"]["details"][0]["message"] == "Title must not be blank"


def test_malformed_request_defaults_to_no_details():
    body = MalformedRequestError("Malformed request").to_response()
    assert body["error"]["code"] == "MALFORMED_REQUEST"
    assert body["error"]["details"] == []


def test_infrastructure_errors_are_critical_500():
    for err in (DatabaseError("boom", "commit"), MigrationError("boom")):
        assert err.http_status == 500
        assert err.severity == ErrorSeverity.CRITICAL


def test_database_error_message_names_operation():
    assert DatabaseError("lost", "execute").message == "Database execute failed: lost"
