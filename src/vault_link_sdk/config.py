"""
Configuration classes for Vault Link SDK.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ClientConfig(BaseModel):
    """Configuration for a Vault Link client."""
    model_config = ConfigDict(extra="forbid")

    base_url: str = Field("http://127.0.0.1:8200", description="Base URL of the Vault server")
    api_version: str = Field("v1", description="API version prefix prepended to every path")
    namespace: Optional[str] = Field(None, description="Vault Enterprise namespace")

    timeout: float = Field(30.0, description="Request timeout in seconds")
    max_connections: int = Field(10, description="Maximum number of connections")
    verify_ssl: bool = Field(True, description="Whether to verify SSL certificates")
    ca_bundle: Optional[str] = Field(None, description="Path to CA bundle file")
    client_cert: Optional[str] = Field(None, description="Path to TLS client certificate (PEM)")
    client_key: Optional[str] = Field(None, description="Path to TLS client private key (PEM)")

    # Logging configuration
    log_requests: bool = Field(False, description="Whether to log HTTP requests")
    log_responses: bool = Field(False, description="Whether to log HTTP responses")

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("api_version")
    @classmethod
    def _strip_slashes(cls, value: str) -> str:
        return value.strip("/")
