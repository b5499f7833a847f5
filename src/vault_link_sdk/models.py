"""
Data models for Vault Link SDK.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional, Set, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class VaultModel(BaseModel):
    """
    Base for models parsed out of Vault responses.

    Vault reports many unset members as ``null``; those are dropped before
    validation so the field defaults apply. Members this SDK does not know
    about are ignored.
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class StringOrList(BaseModel):
    """
    A member whose JSON shape may be a string, an array of strings, or absent.

    Parse rules:
      - ``"a"``        -> kind ``string``, value ``"a"``
      - ``["a", "b"]`` -> kind ``list``, value ``["a", "b"]``
      - ``null``       -> kind ``absent``, value ``None``
    """
    model_config = ConfigDict(frozen=True)

    kind: Literal["string", "list", "absent"] = "absent"
    value: Union[str, List[str], None] = None

    @model_validator(mode="before")
    @classmethod
    def _from_raw(cls, data: Any) -> Any:
        if data is None:
            return {"kind": "absent", "value": None}
        if isinstance(data, str):
            return {"kind": "string", "value": data}
        if isinstance(data, (list, tuple)):
            return {"kind": "list", "value": [str(item) for item in data]}
        return data

    @classmethod
    def absent(cls) -> "StringOrList":
        return cls(kind="absent", value=None)

    @property
    def is_absent(self) -> bool:
        return self.kind == "absent"

    def as_list(self) -> List[str]:
        if self.kind == "list":
            return list(self.value)
        if self.kind == "string":
            return [self.value]
        return []


class LoginResponse(VaultModel):
    """The ``auth`` member returned by a successful login."""

    client_token: str = Field("", description="ID of the token generated by the login")
    accessor: str = Field("", description="Accessor for the client token")
    policies: List[str] = Field(default_factory=list, description="Token plus identity policies")
    token_policies: List[str] = Field(default_factory=list, description="Policies attached to the token")
    identity_policies: List[str] = Field(default_factory=list, description="Policies inherited from the entity")
    metadata: Dict[str, str] = Field(default_factory=dict, description="Informational login metadata")
    lease_duration: int = Field(0, description="Seconds the token is valid for")
    renewable: bool = Field(False, description="Whether the token is renewable")
    entity_id: str = Field("", description="Identity entity the login is tied to")
    token_type: str = Field("", description="service or batch")

    @classmethod
    def from_token(cls, token: "Token") -> "LoginResponse":
        return cls(
            client_token=token.id,
            accessor=token.accessor,
            policies=sorted(token.policies),
            identity_policies=sorted(token.identity_policies),
            metadata=dict(token.meta),
            renewable=token.renewable,
            entity_id=token.entity_id,
            lease_duration=token.ttl,
            token_type=token.token_type,
        )


class Token(VaultModel):
    """
    A Vault token as reported by the token lookup endpoints.

    Note: a token read via its accessor has no ``id``.
    """

    id: str = Field("", description="Token ID")
    accessor: str = Field("", description="Non-secret handle referencing the token")
    policies: Set[str] = Field(default_factory=set, description="Policies attached to the token")
    identity_policies: Set[str] = Field(default_factory=set, description="Policies inherited from the entity")
    renewable: bool = Field(False, description="Whether the token is renewable")
    entity_id: str = Field("", description="Identity entity ID")
    meta: Dict[str, str] = Field(default_factory=dict, description="Arbitrary token metadata")
    creation_time: int = Field(0, description="Unix timestamp of token creation")
    orphan: bool = Field(False, description="Whether the token has no parent")

    display_name: str = Field("", description="Informational name")
    path: str = Field("", description="API path the token was created at")
    expire_time: Optional[str] = Field(None, description="Expiry as reported by Vault")
    explicit_max_ttl: int = Field(0, description="Hard maximum lifetime in seconds")
    num_uses: int = Field(0, description="Remaining uses, zero is unlimited")
    period: int = Field(0, description="Renewal period in seconds")
    ttl: int = Field(0, description="Remaining time to live in seconds")
    creation_ttl: int = Field(0, description="TTL at creation in seconds")
    issue_time: Optional[datetime] = Field(None, description="When the token was issued")
    token_type: str = Field("", alias="type", description="service or batch")
    bound_cidrs: StringOrList = Field(default_factory=StringOrList.absent, description="CIDRs the token is bound to")

    read_from_vault: bool = Field(False, exclude=True, description="Whether this came from a lookup")

    @property
    def has_parent(self) -> bool:
        return not self.orphan

    @has_parent.setter
    def has_parent(self, value: bool) -> None:
        self.orphan = not value

    @property
    def creation_time_as_datetime(self) -> datetime:
        return datetime.fromtimestamp(self.creation_time, tz=timezone.utc)

    @classmethod
    def from_login_response(cls, response: LoginResponse) -> "Token":
        return cls(
            id=response.client_token,
            accessor=response.accessor,
            policies=set(response.policies),
            identity_policies=set(response.identity_policies),
            renewable=response.renewable,
            entity_id=response.entity_id,
            meta=dict(response.metadata),
            ttl=response.lease_duration,
            token_type=response.token_type,
        )

    def update_from(self, other: "Token") -> None:
        """Copy the mutable fields of ``other`` into this token."""
        for name in type(self).model_fields:
            if name in _IMMUTABLE_TOKEN_FIELDS:
                continue
            setattr(self, name, getattr(other, name))
        if not self.creation_time:
            self.creation_time = other.creation_time
        if not self.accessor:
            self.accessor = other.accessor


_IMMUTABLE_TOKEN_FIELDS = frozenset({"id", "accessor", "creation_time"})
