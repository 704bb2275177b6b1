"""Client configuration."""

import os
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from .errors import ConfigurationError

DEFAULT_URL = "http://localhost:8080/graphql"
DEFAULT_TIMEOUT = 30.0


class AuthConfig(BaseModel):
    """Explicit authentication settings; takes precedence over ``token``."""
    enabled: bool = False
    type: Literal["bearer", "api-key"] = "bearer"
    token: str = ""
    header_name: str = "x-api-key"  # Only used for api-key auth


class ClientConfig(BaseModel):
    """Settings for talking to a GraphQL endpoint over HTTP.

    Example:
        config = ClientConfig(url="https://api.example.com/graphql", token="...")
        config = ClientConfig.from_env()
    """
    url: str = DEFAULT_URL
    token: str = ""  # Sent as a bearer token
    auth: AuthConfig = Field(default_factory=AuthConfig)
    timeout: float = DEFAULT_TIMEOUT  # Seconds; 0 means the default
    debug: bool = False  # Log requests and responses

    @field_validator("timeout")
    @classmethod
    def _default_timeout(cls, value: float) -> float:
        if value < 0:
            raise ValueError("timeout must not be negative")
        return value or DEFAULT_TIMEOUT

    def validate_url(self) -> None:
        """Check the endpoint URL before any request is made.

        Raises:
            ConfigurationError: The URL is empty or not http(s)
        """
        if not self.url:
            raise ConfigurationError("GraphQL URL is not configured")
        if not self.url.startswith(("http://", "https://")):
            raise ConfigurationError("URL must start with http:// or https://")

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Build a config from GRAPHQL_URL, GRAPHQL_TOKEN and GRAPHQL_TIMEOUT."""
        env = {
            "url": os.environ.get("GRAPHQL_URL"),
            "token": os.environ.get("GRAPHQL_TOKEN"),
            "timeout": os.environ.get("GRAPHQL_TIMEOUT"),
        }
        return cls(**{k: v for k, v in env.items() if v})
