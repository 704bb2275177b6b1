"""On-demand type introspection with a per-type cache.

A ``Describer`` is handed a function that runs a query and returns the raw
response body. That keeps it independent of the transport: the same class
serves the HTTP executor, the in-process executor and the in-process server's
own schema-hint presenter.
"""

import json
import logging
import threading
from typing import Any, Callable

from .errors import IntrospectionError, TypeNotFoundError
from .sdl import format_type_sdl

logger = logging.getLogger(__name__)

ExecuteFunc = Callable[[str, dict[str, Any] | None], bytes]

# Number of ofType levels unwrapped by the TypeRef fragment. Deeper references
# render as "Unknown".
TYPE_REF_DEPTH = 4


def build_type_ref_fragment(depth: int = TYPE_REF_DEPTH) -> str:
    """Build the ``TypeRef`` fragment unwrapping ``depth`` levels of ofType."""
    nested = "kind name"
    for _ in range(depth):
        nested = f"kind name ofType {{ {nested} }}"
    # The outermost "kind name" goes on its own line.
    inner = nested[len("kind name "):] if depth else ""
    body = "  kind name" + (f"\n  {inner}" if inner else "")
    return f"fragment TypeRef on __Type {{\n{body}\n}}"


def build_describe_query(type_name: str) -> str:
    """Build the introspection query for a single named type."""
    return (
        "query {\n"
        f"  __type(name: {json.dumps(type_name)}) {{\n"
        "    name kind description\n"
        "    fields { name type { ...TypeRef } args { name type { ...TypeRef } } }\n"
        "    inputFields { name type { ...TypeRef } }\n"
        "    enumValues { name }\n"
        "  }\n"
        "}\n"
        f"{build_type_ref_fragment()}"
    )


class Describer:
    """Introspects a schema and returns compact SDL for individual types.

    Raw introspection payloads are cached by exact type name for the life of
    the instance; formatting options are applied to the cached data on every
    call, so changing them never triggers another fetch.

    Example:
        describer = Describer(executor.execute_raw)
        print(describer.describe("Book"))
    """

    def __init__(self, execute: ExecuteFunc):
        self._execute = execute
        self._cache: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    def describe(self, type_name: str) -> str:
        """Return SDL for a type without argument signatures or descriptions."""
        return format_type_sdl(self.fetch(type_name), show_args=False, no_descriptions=True)

    def describe_with(self, type_name: str, show_args: bool, show_descriptions: bool) -> str:
        """Return SDL for a type with explicit formatting options."""
        return format_type_sdl(
            self.fetch(type_name),
            show_args=show_args,
            no_descriptions=not show_descriptions,
        )

    def fetch(self, type_name: str) -> dict[str, Any]:
        """Return the raw ``__type`` payload for a type, fetching it on a miss.

        Raises:
            TypeNotFoundError: The schema has no such type
            IntrospectionError: The query failed or returned an unusable body
        """
        with self._lock:
            cached = self._cache.get(type_name)
        if cached is not None:
            logger.debug("describe cache hit for %s", type_name)
            return cached

        logger.debug("describe cache miss for %s, introspecting", type_name)
        try:
            raw = self._execute(build_describe_query(type_name), None)
        except Exception as e:
            raise IntrospectionError(f"introspection failed: {e}") from e

        try:
            result = json.loads(raw)
        except (TypeError, ValueError) as e:
            raise IntrospectionError(f"failed to parse introspection response: {e}") from e

        data = result.get("data") if isinstance(result, dict) else None
        if not isinstance(data, dict):
            raise IntrospectionError("missing data in introspection response")

        type_info = data.get("__type")
        if not isinstance(type_info, dict):
            raise TypeNotFoundError(type_name)

        # Concurrent misses for one name may both store; the payloads are identical.
        with self._lock:
            self._cache[type_name] = type_info
        return type_info

    def clear(self) -> None:
        """Drop every cached payload, e.g. after the schema was reloaded."""
        with self._lock:
            self._cache.clear()

    @property
    def cached_types(self) -> list[str]:
        """Names currently held in the cache."""
        with self._lock:
            return sorted(self._cache)
