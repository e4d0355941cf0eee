"""Error Hierarchy — verifies codes, HTTP mapping and the REST envelope."""

from mutual_aid.core.errors import (
    AuthError,
    ConcurrencyError,
    ErrorCategory,
    ErrorContext,
    InvalidTransitionError,
    MutualAidError,
    OwnershipError,
    PersistenceError,
    ResourceNotFoundError,
    ValidationError,
)


def test_every_error_is_a_mutual_aid_error():
    errors = [
        ValidationError("bad", "articles"),
        ResourceNotFoundError("HelpRequest", "x"),
        InvalidTransitionError("pending", "done"),
        OwnershipError("no"),
        AuthError(),
        ConcurrencyError("busy"),
        PersistenceError("boom", "insert"),
    ]
    for err in errors:
        assert isinstance(err, MutualAidError)


def test_http_status_mapping():
    assert ValidationError("bad", "articles").http_status == 400
    assert InvalidTransitionError("pending", "done").http_status == 400
    assert AuthError().http_status == 401
    assert OwnershipError("no").http_status == 403
    assert ResourceNotFoundError("HelpRequest", "x").http_status == 404
    assert ConcurrencyError("busy").http_status == 409
    assert PersistenceError("boom", "insert").http_status == 503


def test_validation_error_records_field():
    err = ValidationError("A help request needs at least one article", "articles")
    assert err.field == "articles"
    assert err.context.field == "articles"
    assert err.category == ErrorCategory.VALIDATION


def test_invalid_transition_envelope_includes_pair():
    err = InvalidTransitionError(
        "pending", "done", ErrorContext(help_request_id="hr-1"),
    )
    body = err.to_response()["error"]
    assert body["code"] == "INVALID_TRANSITION"
    assert body["context"]["from"] == "pending"
    assert body["context"]["to"] == "done"
    assert body["context"]["help_request_id"] == "hr-1"


def test_persistence_error_keeps_operation():
    err = PersistenceError("help request must contain at least one article", "insert")
    assert err.operation == "insert"
    assert err.message.startswith("Database insert failed")
