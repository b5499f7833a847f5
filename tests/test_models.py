"""
Tests for token and login models
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from vault_link_sdk import LoginResponse, StringOrList, Token


class TestToken:
    """Test the token model"""

    def test_parse_lookup_data(self, lookup_body):
        data = lookup_body("s.abc", ttl=300, num_uses=3, bound_cidrs=["10.0.0.0/8"])["data"]
        token = Token.model_validate(data)

        assert token.id == "s.abc"
        assert token.accessor == "accessor-root"
        assert token.token_type == "service"
        assert token.ttl == 300
        assert token.num_uses == 3
        assert token.orphan is True
        assert token.expire_time is None
        assert token.bound_cidrs.as_list() == ["10.0.0.0/8"]
        assert token.read_from_vault is False

    def test_defaults(self):
        token = Token()
        assert token.id == ""
        assert token.policies == set()
        assert token.meta == {}
        assert token.bound_cidrs.is_absent
        assert token.has_parent is True

    def test_has_parent_is_inverse_of_orphan(self):
        token = Token(id="s.x", orphan=False)
        assert token.has_parent

        token.has_parent = False
        assert token.orphan is True
        assert not token.has_parent

        token.orphan = False
        assert token.has_parent

    def test_creation_time_as_datetime(self):
        token = Token(creation_time=1700000000)
        assert token.creation_time_as_datetime == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)

    def test_type_accepted_by_field_name(self):
        assert Token(token_type="batch").token_type == "batch"
        assert Token.model_validate({"type": "batch"}).token_type == "batch"

    def test_read_from_vault_not_serialized(self):
        token = Token(id="s.x", read_from_vault=True)
        assert "read_from_vault" not in token.model_dump()

    def test_from_login_response(self):
        response = LoginResponse(
            client_token="s.new",
            accessor="acc",
            policies=["default", "app"],
            metadata={"role_name": "app"},
            lease_duration=60,
            renewable=True,
            token_type="service",
        )
        token = Token.from_login_response(response)

        assert token.id == "s.new"
        assert token.accessor == "acc"
        assert token.policies == {"default", "app"}
        assert token.meta == {"role_name": "app"}
        assert token.ttl == 60
        assert token.renewable is True


class TestTokenUpdate:
    """Test refreshing a token from a newer record"""

    def test_mutable_fields_replaced(self):
        current = Token(id="s.x", accessor="acc", creation_time=100, policies={"a"}, ttl=500, num_uses=5)
        fresh = Token(id="s.x", accessor="acc", creation_time=100, policies={"a", "b"}, ttl=200, num_uses=4)

        current.update_from(fresh)

        assert current.policies == {"a", "b"}
        assert current.ttl == 200
        assert current.num_uses == 4

    def test_identity_fields_kept(self):
        current = Token(id="s.x", accessor="acc", creation_time=100)
        fresh = Token(id="s.other", accessor="other", creation_time=999, ttl=10)

        current.update_from(fresh)

        assert current.id == "s.x"
        assert current.accessor == "acc"
        assert current.creation_time == 100
        assert current.ttl == 10

    def test_missing_identity_fields_filled(self):
        current = Token(id="s.x")
        current.update_from(Token(id="s.x", accessor="acc", creation_time=100, read_from_vault=True))

        assert current.accessor == "acc"
        assert current.creation_time == 100
        assert current.read_from_vault is True


class TestLoginResponse:
    """Test the login response model"""

    def test_parse_auth_block(self, auth_body):
        response = LoginResponse.model_validate(auth_body("s.abc")["auth"])

        assert response.client_token == "s.abc"
        assert response.policies == ["default", "app"]
        assert response.identity_policies == []
        assert response.lease_duration == 2764800
        assert response.entity_id == "entity-1"

    def test_from_token(self):
        token = Token(id="s.x", accessor="acc", policies={"b", "a"}, ttl=30, token_type="batch")
        response = LoginResponse.from_token(token)

        assert response.client_token == "s.x"
        assert response.policies == ["a", "b"]
        assert response.lease_duration == 30
        assert response.token_type == "batch"


class TestStringOrList:
    """Test the string-or-list member"""

    @pytest.mark.parametrize("raw, kind, as_list", [
        ("10.0.0.1", "string", ["10.0.0.1"]),
        (["a", "b"], "list", ["a", "b"]),
        (None, "absent", []),
    ])
    def test_shapes(self, raw, kind, as_list):
        value = StringOrList.model_validate(raw)
        assert value.kind == kind
        assert value.as_list() == as_list

    def test_absent_factory(self):
        assert StringOrList.absent().is_absent

    def test_frozen(self):
        value = StringOrList.model_validate("a")
        with pytest.raises(ValidationError):
            value.value = "b"
