"""Unit tests for the domain exception to HTTP mapping."""

import pytest

from humans.domain.exceptions import (
    AuthenticationRequiredError,
    AuthorizationError,
    BatchItemFailure,
    BatchUpdateError,
    BioBlockExistsError,
    BlockContentError,
    NotFoundError,
    ProfileSetupRequiredError,
    SlugTakenError,
    StorageError,
    UsernameTakenError,
    ValidationError,
)
from humans.infrastructure.api.app import error_body, error_status_code


@pytest.mark.parametrize(
    "exc,status_code",
    [
        (AuthenticationRequiredError(), 401),
        (AuthorizationError("nope"), 403),
        (ProfileSetupRequiredError(), 428),
        (NotFoundError("missing"), 404),
        (ValidationError("bad"), 400),
        (BlockContentError("bad content"), 400),
        (SlugTakenError("hello"), 409),
        (UsernameTakenError(), 409),
        (BioBlockExistsError("b1"), 409),
        (BatchUpdateError("partial"), 409),
        (StorageError("down"), 502),
    ],
)
def test_status_codes(exc, status_code):
    assert error_status_code(exc) == status_code


def test_authentication_body_has_login_redirect():
    body = error_body(AuthenticationRequiredError())
    assert body["error"] == "Authentication required"
    assert body["redirect"] == "/login"


def test_setup_required_body_has_setup_redirect():
    assert error_body(ProfileSetupRequiredError())["redirect"] == "/dashboard?setup=required"


def test_conflict_body_names_field():
    body = error_body(SlugTakenError("hello"))
    assert body["field"] == "slug"
    assert "hello" in body["message"]


def test_bio_conflict_points_to_existing_block():
    body = error_body(BioBlockExistsError("b1"))
    assert body["existing_block_id"] == "b1"
    assert body["redirect"] == "/dashboard/edit-block/b1"


def test_validation_body_has_field_and_code():
    body = error_body(ValidationError("too short", field="username", code="username_too_short"))
    assert body == {
        "error": "Validation error",
        "message": "too short",
        "field": "username",
        "code": "username_too_short",
    }


def test_batch_body_lists_failed_ids():
    exc = BatchUpdateError(
        "Failed to reorder some blocks",
        [BatchItemFailure(id="a", reason="Block not found")],
    )
    body = error_body(exc)
    assert body["failed_ids"] == ["a"]
    assert body["failures"] == [{"id": "a", "reason": "Block not found"}]
