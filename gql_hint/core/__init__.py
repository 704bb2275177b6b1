"""Core modules for GraphQL execution with schema hints."""

from .auth import (
    ApiKeyAuth,
    Auth,
    BearerAuth,
    NoAuth,
    auth_from_config,
)
from .config import AuthConfig, ClientConfig
from .describer import (
    TYPE_REF_DEPTH,
    Describer,
    build_describe_query,
    build_type_ref_fragment,
)
from .errors import (
    ConfigurationError,
    GQLHintError,
    GraphQLResponseError,
    IntrospectionError,
    TransportError,
    TypeNotFoundError,
    format_query_for_error,
)
from .executor import (
    BaseExecutor,
    HTTPExecutor,
    OperationResult,
    create_executor,
)
from .hints import (
    SCHEMA_HINT_KEY,
    ErrorKind,
    ErrorReference,
    SchemaHintPresenter,
    classify_error,
    enrich_errors,
    extract_type_from_error,
)
from .inline import (
    InlineExecutor,
    InlineServer,
    ResponseRecorder,
    SyntheticRequest,
)
from .sdl import format_sdl_field, format_type_ref, format_type_sdl
from .types import ExecutionMode, GraphQLRequest

__all__ = [
    # Auth
    "Auth",
    "ApiKeyAuth",
    "BearerAuth",
    "NoAuth",
    "auth_from_config",
    # Config
    "AuthConfig",
    "ClientConfig",
    # Errors
    "GQLHintError",
    "ConfigurationError",
    "TransportError",
    "IntrospectionError",
    "TypeNotFoundError",
    "GraphQLResponseError",
    "format_query_for_error",
    # SDL
    "format_type_ref",
    "format_sdl_field",
    "format_type_sdl",
    # Describer
    "TYPE_REF_DEPTH",
    "Describer",
    "build_describe_query",
    "build_type_ref_fragment",
    # Hints
    "SCHEMA_HINT_KEY",
    "ErrorKind",
    "ErrorReference",
    "SchemaHintPresenter",
    "classify_error",
    "enrich_errors",
    "extract_type_from_error",
    # Executors
    "ExecutionMode",
    "GraphQLRequest",
    "OperationResult",
    "BaseExecutor",
    "HTTPExecutor",
    "InlineExecutor",
    "InlineServer",
    "ResponseRecorder",
    "SyntheticRequest",
    "create_executor",
]
