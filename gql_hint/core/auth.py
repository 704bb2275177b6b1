"""Authentication handlers for the HTTP executor.

An auth handler contributes request headers. Pass one explicitly to
``HTTPExecutor`` or let ``auth_from_config`` pick one from a ``ClientConfig``.
"""

from typing import Dict, Protocol, runtime_checkable

from .config import ClientConfig


@runtime_checkable
class Auth(Protocol):
    """Protocol for authentication handlers.

    Example:
        class TenantAuth:
            def __init__(self, token: str, tenant: str):
                self.token = token
                self.tenant = tenant

            def get_headers(self) -> dict[str, str]:
                return {
                    "Authorization": f"Bearer {self.token}",
                    "X-Tenant-ID": self.tenant,
                }
    """

    def get_headers(self) -> Dict[str, str]:
        """Return headers to include in requests."""
        ...


class BearerAuth:
    """Bearer token sent in the Authorization header.

    Example:
        auth = BearerAuth("eyJhbGciOiJIUzI1NiIs...")
    """

    def __init__(self, token: str):
        self.token = token

    def get_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


class ApiKeyAuth:
    """API key sent in a custom header (``x-api-key`` unless told otherwise)."""

    def __init__(self, api_key: str, header_name: str = "x-api-key"):
        self.api_key = api_key
        self.header_name = header_name

    def get_headers(self) -> Dict[str, str]:
        return {self.header_name: self.api_key}


class NoAuth:
    """No authentication (public endpoints, local servers)."""

    def get_headers(self) -> Dict[str, str]:
        return {}


def auth_from_config(config: ClientConfig) -> Auth:
    """Pick an auth handler for a config.

    An enabled ``auth`` section wins, then a plain ``token`` as bearer auth.
    """
    if config.auth.enabled and config.auth.token:
        if config.auth.type == "api-key":
            return ApiKeyAuth(config.auth.token, header_name=config.auth.header_name)
        return BearerAuth(config.auth.token)
    if config.token:
        return BearerAuth(config.token)
    return NoAuth()
