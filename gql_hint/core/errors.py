"""Exception types raised by gql-hint.

Transport and configuration problems are raised. GraphQL-level errors are
returned as data (see ``OperationResult``) and only raised on request.
"""

from typing import Any


class GQLHintError(Exception):
    """Base class for all gql-hint errors."""


class ConfigurationError(GQLHintError):
    """Raised when the endpoint configuration is missing or malformed."""


class TransportError(GQLHintError):
    """Raised when a request could not be sent or its body could not be decoded."""


class IntrospectionError(GQLHintError):
    """Raised when introspection data for a type could not be obtained."""


class TypeNotFoundError(IntrospectionError):
    """Raised when the schema has no type with the requested name."""

    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__(f"type {type_name!r} not found in schema")


class GraphQLResponseError(GQLHintError):
    """A response that carries GraphQL errors.

    Holds the complete decoded response (with any schema hints already
    attached) so callers can present it without another round trip.
    """

    def __init__(self, response: dict[str, Any], query: str = ""):
        self.response = response
        self.query = query
        messages = "; ".join(
            e.get("message", str(e)) if isinstance(e, dict) else str(e) for e in self.errors
        )
        super().__init__(f"GraphQL errors: {messages}")

    @property
    def errors(self) -> list[Any]:
        errors = self.response.get("errors")
        return errors if isinstance(errors, list) else []


def format_query_for_error(query: str) -> str:
    """Format a query for display next to an error, with line numbers."""
    lines = query.split("\n")
    if len(lines) <= 1:
        if len(query) > 100:
            return f"   {query[:97]}... (truncated, length: {len(query)} chars)"
        return f"   {query}"

    return "\n".join(f"   {i:2d} | {line}" for i, line in enumerate(lines, start=1))
