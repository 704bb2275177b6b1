"""In-process execution against a graphql-core schema.

``InlineServer`` is the engine side: it executes requests with graphql-core
and passes every error through an optional error presenter before it is
serialized. It also exposes an HTTP-shaped ``serve`` entrypoint driven by a
``SyntheticRequest`` and a ``ResponseRecorder``, for hosts that want the
request/response round trip without a socket.

``InlineExecutor`` is the client side and calls the server directly.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable

from graphql import GraphQLError, GraphQLSchema, build_schema, graphql_sync

from .describer import Describer
from .errors import TransportError
from .executor import BaseExecutor
from .hints import SchemaHintPresenter
from .types import ExecutionMode, GraphQLRequest

logger = logging.getLogger(__name__)

ErrorPresenter = Callable[[GraphQLError, Any], GraphQLError]
ContextEnricher = Callable[[dict[str, Any]], dict[str, Any]]


def encode_response(response: dict[str, Any]) -> bytes:
    """Encode an execution result as a JSON body.

    Raises:
        TransportError: A resolver returned a value JSON cannot represent,
            such as a custom scalar with no serializer.
    """
    try:
        return json.dumps(response).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise TransportError(f"failed to encode response: {e}") from e


@dataclass
class SyntheticRequest:
    """A request handed to ``InlineServer.serve`` without a network."""
    body: bytes
    method: str = "POST"
    path: str = "/graphql"
    headers: dict[str, str] = field(default_factory=lambda: {"Content-Type": "application/json"})

    @classmethod
    def for_operation(cls, request: GraphQLRequest) -> "SyntheticRequest":
        return cls(body=json.dumps(request.to_payload()).encode("utf-8"))


class ResponseRecorder:
    """In-memory response writer: headers, status code and body bytes."""

    def __init__(self):
        self.headers: dict[str, str] = {}
        self.status_code = 200
        self._body = bytearray()

    def write_header(self, status_code: int) -> None:
        self.status_code = status_code

    def write(self, data: bytes) -> int:
        self._body.extend(data)
        return len(data)

    @property
    def body(self) -> bytes:
        return bytes(self._body)


class InlineServer:
    """Executes GraphQL requests in-process with graphql-core.

    Example:
        server = InlineServer(schema, root_value=root, schema_hints=True)
        response = server.execute(GraphQLRequest("{ books { id titl } }"))
        response["errors"][0]["extensions"]["schemaHint"]
    """

    def __init__(
        self,
        schema: GraphQLSchema,
        *,
        root_value: Any = None,
        schema_hints: bool = False,
    ):
        """Initialize the server.

        Args:
            schema: Executable graphql-core schema
            root_value: Root value passed to top-level resolvers
            schema_hints: Attach ``extensions.schemaHint`` to errors that name a type
        """
        self.schema = schema
        self.root_value = root_value
        self.describer: Describer | None = None
        self._error_presenter: ErrorPresenter | None = None

        if schema_hints:
            self.describer = Describer(self._execute_json)
            self.set_error_presenter(SchemaHintPresenter(self.describer))

    def set_error_presenter(self, presenter: ErrorPresenter | None) -> None:
        """Set the hook every error passes through before serialization."""
        self._error_presenter = presenter

    def execute(self, request: GraphQLRequest, context_value: Any = None) -> dict[str, Any]:
        """Execute a request and return the response as a JSON-ready dict."""
        result = graphql_sync(
            self.schema,
            request.query,
            root_value=self.root_value,
            context_value=context_value,
            variable_values=request.variables,
            operation_name=request.operation_name,
        )

        response: dict[str, Any] = {"data": result.data}
        if result.errors:
            response["errors"] = [self._present(e, context_value).formatted for e in result.errors]
        if result.extensions:
            response["extensions"] = result.extensions
        return response

    def serve(
        self,
        request: SyntheticRequest,
        recorder: ResponseRecorder,
        context_value: Any = None,
    ) -> None:
        """Handle an HTTP-shaped request, writing the response to ``recorder``."""
        recorder.headers["Content-Type"] = "application/json"

        if request.method.upper() != "POST":
            self._write_error(recorder, 405, f"method {request.method} not allowed")
            return

        try:
            payload = json.loads(request.body)
            if not isinstance(payload, dict):
                raise ValueError("request body must be a JSON object")
            operation = GraphQLRequest.from_payload(payload)
        except ValueError as e:
            logger.debug("rejecting inline request: %s", e)
            self._write_error(recorder, 400, f"json request body could not be decoded: {e}")
            return

        try:
            body = encode_response(self.execute(operation, context_value))
        except TransportError as e:
            logger.error("inline request failed: %s", e)
            self._write_error(recorder, 500, str(e))
            return
        recorder.write_header(200)
        recorder.write(body)

    def _present(self, error: GraphQLError, context_value: Any) -> GraphQLError:
        if self._error_presenter is None:
            return error
        return self._error_presenter(error, context_value)

    def _execute_json(self, query: str, variables: dict[str, Any] | None) -> bytes:
        return encode_response(self.execute(GraphQLRequest(query, variables)))

    @staticmethod
    def _write_error(recorder: ResponseRecorder, status_code: int, message: str) -> None:
        recorder.write_header(status_code)
        recorder.write(json.dumps({"errors": [{"message": message}]}).encode("utf-8"))


class InlineExecutor(BaseExecutor):
    """Runs GraphQL operations in-process; no HTTP server required.

    Examples:
        executor = InlineExecutor(schema, root_value=root, schema_hints=True)
        result = executor.execute("{ books { id title } }")

        # Inject request-scoped state before each operation
        executor = InlineExecutor(
            schema,
            context_enricher=lambda ctx: {**ctx, "user": load_user()},
        )
    """

    mode = ExecutionMode.INLINE

    def __init__(
        self,
        schema: GraphQLSchema,
        *,
        root_value: Any = None,
        schema_hints: bool = False,
        context_value: dict[str, Any] | None = None,
        context_enricher: ContextEnricher | None = None,
    ):
        """Initialize the executor.

        Args:
            schema: Executable graphql-core schema
            root_value: Root value passed to top-level resolvers
            schema_hints: Attach schema hints to errors that name a type
            context_value: Base context copied for each operation
            context_enricher: Called with the context before each operation;
                returns the context to execute with
        """
        super().__init__()
        self.server = InlineServer(schema, root_value=root_value, schema_hints=schema_hints)
        self.context_value = context_value
        self.context_enricher = context_enricher

    @classmethod
    def from_sdl(cls, sdl: str, **kwargs: Any) -> "InlineExecutor":
        """Create an executor for a schema given as SDL text."""
        return cls(build_schema(sdl), **kwargs)

    @property
    def describer(self) -> Describer:
        # Share the server's cache when it already has one.
        if self.server.describer is not None:
            return self.server.describer
        return super().describer

    def execute_raw(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
        operation_name: str | None = None,
    ) -> bytes:
        """Execute an operation and return the JSON response body.

        Schema hints, when enabled, are already present in the returned bytes.
        """
        context = dict(self.context_value or {})
        if self.context_enricher is not None:
            context = self.context_enricher(context)

        request = GraphQLRequest(query, variables, operation_name)
        return encode_response(self.server.execute(request, context_value=context))
