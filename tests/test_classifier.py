"""
Tests for mapping failed responses onto the error taxonomy
"""

import json

import pytest

from vault_link_sdk import (
    ErrorCode,
    ForbiddenError,
    GenericBackendError,
    InternalServerError,
    InvalidDataError,
    NotFoundError,
    RateLimitError,
    SealedError,
    VaultLinkError,
)
from vault_link_sdk.classifier import classify_error, extract_error_messages


def errors_body(*messages):
    return json.dumps({"errors": list(messages)})


@pytest.mark.parametrize("status, expected", [
    (400, InvalidDataError),
    (403, ForbiddenError),
    (404, NotFoundError),
    (429, RateLimitError),
    (500, InternalServerError),
    (503, SealedError),
    (401, GenericBackendError),
    (405, GenericBackendError),
    (502, GenericBackendError),
    (307, GenericBackendError),
])
def test_every_status_resolves_to_one_kind(status, expected):
    error = classify_error(status, errors_body("boom"))
    assert type(error) is expected
    assert isinstance(error, VaultLinkError)
    assert error.status_code == status


@pytest.mark.parametrize("status", [429, 500, 503])
def test_known_backend_statuses_are_generic_kind(status):
    assert isinstance(classify_error(status, ""), GenericBackendError)


def test_generic_error_keeps_raw_body():
    body = "<html>bad gateway</html>"
    error = classify_error(502, body)
    assert error.body == body
    assert error.errors == (body,)
    assert "502" in error.message


def test_mount_already_exists_sub_code():
    error = classify_error(400, errors_body("path is already in use at transit/"))
    assert isinstance(error, InvalidDataError)
    assert error.error_code == ErrorCode.BACKEND_MOUNT_ALREADY_EXISTS


def test_permission_denied_sub_code():
    error = classify_error(403, errors_body("1 error occurred:\n\t* permission denied\n\n"))
    assert isinstance(error, ForbiddenError)
    assert error.error_code == ErrorCode.PERMISSION_DENIED


@pytest.mark.parametrize("message, code", [
    ("check-and-set parameter required for this call", ErrorCode.CHECK_AND_SET_MISSING),
    ("check-and-set parameter did not match the current version", ErrorCode.CAS_VERSION_MISMATCH),
    ("invalid role ID", ErrorCode.LOGIN_ROLE_ID_NOT_FOUND),
    ("invalid secret id", ErrorCode.LOGIN_SECRET_ID_NOT_FOUND),
    ("LDAP Result Code 200 \"Network Error\"", ErrorCode.LDAP_SERVER_CONNECTION_ISSUE),
    ("ldap operation failed: failed to bind", ErrorCode.LDAP_CREDENTIALS_FAILURE),
])
def test_sub_codes(message, code):
    assert classify_error(400, errors_body(message)).error_code == code


def test_unrecognized_message_has_no_sub_code():
    assert classify_error(400, errors_body("something else")).error_code is None


def test_empty_404_means_object_does_not_exist():
    error = classify_error(404, errors_body())
    assert isinstance(error, NotFoundError)
    assert error.error_code == ErrorCode.OBJECT_DOES_NOT_EXIST


def test_description_is_part_of_message():
    error = classify_error(400, errors_body("bad"), "Create mount")
    assert error.message.startswith("Create mount: HTTP 400")
    assert "bad" in str(error)


class TestExtractErrorMessages:
    """Test reading messages out of error bodies"""

    def test_errors_array(self):
        assert extract_error_messages(errors_body("a", "b")) == ["a", "b"]

    def test_non_json(self):
        assert extract_error_messages("upstream failure") == ["upstream failure"]

    def test_empty(self):
        assert extract_error_messages("") == []

    def test_message_member(self):
        assert extract_error_messages('{"message": "nope"}') == ["nope"]
