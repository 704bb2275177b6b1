"""Shapes of the data exchanged with a GraphQL endpoint.

Introspection payloads are kept as decoded JSON and cached verbatim; the
TypedDicts below document the keys the SDL compiler reads. Request-side
values are plain dataclasses.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, TypedDict


class TypeRef(TypedDict, total=False):
    """A possibly wrapped type reference, e.g. NON_NULL(LIST(NON_NULL(Book)))."""
    kind: str
    name: Optional[str]
    ofType: Optional["TypeRef"]


class ArgDescriptor(TypedDict, total=False):
    name: str
    type: TypeRef


class FieldDescriptor(TypedDict, total=False):
    name: str
    description: Optional[str]
    type: TypeRef
    args: list[ArgDescriptor]


class EnumValueDescriptor(TypedDict):
    name: str


class TypeDescriptor(TypedDict, total=False):
    """Introspection payload for a single named type (``__type``)."""
    name: str
    kind: str  # SCALAR, OBJECT, INPUT_OBJECT, INTERFACE, UNION or ENUM
    description: Optional[str]
    fields: Optional[list[FieldDescriptor]]
    inputFields: Optional[list[FieldDescriptor]]
    enumValues: Optional[list[EnumValueDescriptor]]


class ErrorPayload(TypedDict, total=False):
    """A single entry of a response's ``errors`` array."""
    message: str
    path: list[Any]
    locations: list[dict[str, int]]
    extensions: dict[str, Any]


class ExecutionMode(Enum):
    """Where an operation runs."""
    INLINE = "inline"  # In-process, against a local schema
    HTTP = "http"      # Against a remote endpoint


@dataclass
class GraphQLRequest:
    """The standard GraphQL request body."""
    query: str
    variables: dict[str, Any] | None = None
    operation_name: str | None = None

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON body, omitting empty members."""
        payload: dict[str, Any] = {"query": self.query}
        if self.variables is not None:
            payload["variables"] = self.variables
        if self.operation_name:
            payload["operationName"] = self.operation_name
        return payload

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "GraphQLRequest":
        """Build a request from a decoded JSON body."""
        query = payload.get("query")
        if not isinstance(query, str):
            raise ValueError("request body must contain a 'query' string")
        variables = payload.get("variables")
        if variables is not None and not isinstance(variables, dict):
            raise ValueError("'variables' must be an object")
        return cls(
            query=query,
            variables=variables,
            operation_name=payload.get("operationName") or None,
        )
