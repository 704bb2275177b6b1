"""GraphQL executors.

Every executor runs the same operation contract. ``HTTPExecutor`` posts to a
remote endpoint; ``InlineExecutor`` (see ``inline.py``) runs against a local
schema. GraphQL errors come back as data inside an ``OperationResult`` with
schema hints attached; only transport and configuration problems raise.
"""

import json
import logging
import threading
from dataclasses import dataclass
from typing import Any

import httpx
from graphql import get_introspection_query
from pydantic import BaseModel

from .auth import Auth, auth_from_config
from .config import ClientConfig
from .describer import Describer
from .errors import GraphQLResponseError, TransportError
from .hints import enrich_errors
from .types import ExecutionMode, GraphQLRequest

logger = logging.getLogger(__name__)

LIST_TYPES_QUERY = "{ __schema { types { name kind } } }"


@dataclass
class OperationResult:
    """A decoded GraphQL response and, if it carries errors, a typed error."""
    response: dict[str, Any]
    error: GraphQLResponseError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def data(self) -> Any:
        return self.response.get("data")

    @property
    def errors(self) -> list[Any]:
        return self.error.errors if self.error else []

    def raise_for_errors(self) -> "OperationResult":
        """Raise the wrapped ``GraphQLResponseError``, if any."""
        if self.error is not None:
            raise self.error
        return self


def decode_response(raw: bytes) -> dict[str, Any]:
    """Decode a response body into a JSON object.

    Raises:
        TransportError: The body is not a JSON object
    """
    try:
        result = json.loads(raw)
    except ValueError as e:
        body = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
        raise TransportError(f"failed to parse response: {e}\nBody: {body}") from e
    if not isinstance(result, dict):
        raise TransportError(f"unexpected response body: {result!r}")
    return result


def serialize_variables(variables: dict[str, Any] | None) -> dict[str, Any] | None:
    """Serialize variables for a request.

    Pydantic models (and lists of them) become dicts using field aliases,
    with ``None`` model fields left out. A top-level ``None`` is kept so the
    server receives an explicit ``null`` rather than falling back to the
    variable default.
    """
    if variables is None:
        return None
    result = {}
    for key, value in variables.items():
        if isinstance(value, BaseModel):
            result[key] = value.model_dump(by_alias=True, exclude_none=True)
        elif isinstance(value, list):
            result[key] = [
                v.model_dump(by_alias=True, exclude_none=True) if isinstance(v, BaseModel) else v
                for v in value
            ]
        else:
            result[key] = value
    return result


class BaseExecutor:
    """Operations shared by every execution mode.

    Subclasses implement ``execute_raw``; everything else builds on it.
    """

    mode: ExecutionMode

    def __init__(self):
        self._describer: Describer | None = None
        self._lock = threading.Lock()

    def execute_raw(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
        operation_name: str | None = None,
    ) -> bytes:
        """Run an operation and return the raw response body."""
        raise NotImplementedError

    @property
    def describer(self) -> Describer:
        """Describer that introspects through this executor (created lazily)."""
        if self._describer is None:
            with self._lock:
                if self._describer is None:
                    self._describer = Describer(self.execute_raw)
        return self._describer

    def execute(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
        operation_name: str | None = None,
    ) -> OperationResult:
        """Execute a GraphQL query or mutation.

        Args:
            query: GraphQL operation string
            variables: Operation variables
            operation_name: Operation to run when the document holds several

        Returns:
            The decoded response, with a ``GraphQLResponseError`` attached if
            it contains errors

        Raises:
            ConfigurationError: The endpoint is misconfigured
            TransportError: The request failed or the body was not JSON
        """
        raw = self.execute_raw(query, serialize_variables(variables), operation_name)
        response = decode_response(raw)

        errors = response.get("errors")
        if isinstance(errors, list) and errors:
            self._enrich(errors)
            return OperationResult(response, GraphQLResponseError(response, query))
        return OperationResult(response)

    def execute_mutation(
        self,
        mutation: str,
        variables: dict[str, Any] | None = None,
        input: Any = None,
        operation_name: str | None = None,
    ) -> OperationResult:
        """Execute a mutation, wrapping ``input`` as the ``$input`` variable."""
        if input is not None:
            variables = dict(variables or {})
            variables["input"] = input
        return self.execute(mutation, variables, operation_name)

    def introspect(self) -> OperationResult:
        """Run the full introspection query."""
        return self.execute(get_introspection_query(descriptions=True), operation_name="IntrospectionQuery")

    def list_types(self, include_builtin: bool = False) -> list[dict[str, Any]]:
        """List the schema's named types as ``{name, kind}`` entries, sorted by name."""
        result = self.execute(LIST_TYPES_QUERY).raise_for_errors()
        schema = (result.data or {}).get("__schema") or {}
        types = [t for t in schema.get("types") or [] if isinstance(t, dict)]
        if not include_builtin:
            types = [t for t in types if not str(t.get("name", "")).startswith("__")]
        return sorted(types, key=lambda t: t.get("name") or "")

    def _enrich(self, errors: list[Any]) -> None:
        """Attach schema hints to a decoded ``errors`` array (no-op by default)."""


class HTTPExecutor(BaseExecutor):
    """Executes GraphQL operations against an HTTP endpoint.

    Errors in the response are enriched after decoding: for each error that
    names a type and has no hint yet, the type is introspected over the same
    endpoint and its SDL is stored under ``extensions.schemaHint``.

    Examples:
        executor = HTTPExecutor(ClientConfig(url=url, token=token))
        result = executor.execute("{ books { id titl } }")
        if not result.ok:
            print(result.errors[0]["extensions"]["schemaHint"])

        # Custom auth
        executor = HTTPExecutor(config, auth=ApiKeyAuth(key))
    """

    mode = ExecutionMode.HTTP

    def __init__(
        self,
        config: ClientConfig | None = None,
        auth: Auth | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the executor.

        Args:
            config: Endpoint settings (defaults to ``ClientConfig()``)
            auth: Authentication handler; derived from ``config`` when omitted
            transport: httpx transport override, e.g. ``httpx.MockTransport``
        """
        super().__init__()
        self.config = config or ClientConfig()
        self._auth = auth or auth_from_config(self.config)
        self._transport = transport
        self._client: httpx.Client | None = None

    def _get_client(self) -> httpx.Client:
        """Get or create the HTTP client."""
        if self._client is None:
            with self._lock:
                if self._client is None:
                    self._client = self._build_client()
        return self._client

    def _build_client(self) -> httpx.Client:
        headers = {"Content-Type": "application/json"}
        headers.update(self._auth.get_headers())

        event_hooks = {}
        if self.config.debug:
            event_hooks = {"request": [_log_request], "response": [_log_response]}

        return httpx.Client(
            timeout=self.config.timeout,
            headers=headers,
            transport=self._transport,
            event_hooks=event_hooks,
        )

    def close(self):
        """Close the HTTP client."""
        with self._lock:
            if self._client:
                self._client.close()
                self._client = None

    def __enter__(self) -> "HTTPExecutor":
        return self

    def __exit__(self, *exc_info):
        self.close()

    def execute_raw(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
        operation_name: str | None = None,
    ) -> bytes:
        """POST an operation and return the response body.

        The HTTP status is not checked; GraphQL servers report failures in
        the body, which ``execute`` decodes.
        """
        self.config.validate_url()
        payload = GraphQLRequest(query, variables, operation_name).to_payload()
        try:
            response = self._get_client().post(self.config.url, json=payload)
        except httpx.HTTPError as e:
            raise TransportError(f"request failed: {e}") from e
        return response.content

    def _enrich(self, errors: list[Any]) -> None:
        attached = enrich_errors(errors, self.describer)
        logger.debug("attached %d schema hint(s) to %d error(s)", attached, len(errors))


def create_executor(
    config: ClientConfig | None = None,
    *,
    schema: Any = None,
    **kwargs: Any,
) -> BaseExecutor:
    """Create an in-process executor when a schema is given, else an HTTP one.

    Extra keyword arguments go to the chosen executor's constructor.
    """
    if schema is not None:
        from .inline import InlineExecutor

        return InlineExecutor(schema, **kwargs)
    return HTTPExecutor(config, **kwargs)


def _log_request(request: httpx.Request) -> None:
    logger.debug("--> %s %s\n%s", request.method, request.url, request.content.decode("utf-8", "replace"))


def _log_response(response: httpx.Response) -> None:
    response.read()
    logger.debug("<-- %s %s\n%s", response.status_code, response.request.url, response.text)
