"""Schema hints: attach SDL for the type an error refers to.

The type is recovered from the error message text. graphql-core does not
expose structured validation diagnostics, so messages are classified with
regular expressions; a change in upstream wording stops hints from being
produced but never breaks execution.

Two integration points share the classifier and a ``Describer``:

* ``SchemaHintPresenter`` runs inside ``InlineServer`` for every error before
  it is serialized.
* ``enrich_errors`` runs on a decoded HTTP response.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any

from graphql import GraphQLError

from .describer import Describer
from .errors import GQLHintError

logger = logging.getLogger(__name__)

SCHEMA_HINT_KEY = "schemaHint"

# Names are quoted with "..." by graphql-js/gqlgen and with '...' by graphql-core.
_Q = "[\"']"
_NAME = "[^\"']+"


class ErrorKind(Enum):
    """What an error message says is wrong with a type."""
    UNKNOWN_OUTPUT_FIELD = "unknown_output_field"
    UNKNOWN_INPUT_FIELD = "unknown_input_field"
    UNKNOWN_ARGUMENT = "unknown_argument"
    MISSING_SUBFIELD_SELECTION = "missing_subfield_selection"


@dataclass(frozen=True)
class ErrorReference:
    """A type referenced by an error message."""
    kind: ErrorKind
    type_name: str


# Checked in order; the first match wins.
_PATTERNS: list[tuple[ErrorKind, re.Pattern]] = [
    (
        ErrorKind.UNKNOWN_OUTPUT_FIELD,
        re.compile(rf"Cannot query field {_Q}{_NAME}{_Q} on type {_Q}({_NAME}){_Q}"),
    ),
    (
        ErrorKind.UNKNOWN_INPUT_FIELD,
        re.compile(rf"Field {_Q}{_NAME}{_Q} is not defined by type {_Q}({_NAME}){_Q}"),
    ),
    (
        ErrorKind.UNKNOWN_ARGUMENT,
        re.compile(rf"Unknown argument {_Q}{_NAME}{_Q} on field {_Q}([^.\"']+)\.{_NAME}{_Q}"),
    ),
    (
        ErrorKind.MISSING_SUBFIELD_SELECTION,
        re.compile(
            rf"Field {_Q}{_NAME}{_Q} of type {_Q}({_NAME}){_Q} must have a selection of subfields"
        ),
    ),
]


def classify_error(message: str) -> ErrorReference | None:
    """Classify an error message and recover the type it refers to."""
    for kind, pattern in _PATTERNS:
        match = pattern.search(message)
        if not match:
            continue
        type_name = match.group(1)
        if kind is ErrorKind.MISSING_SUBFIELD_SELECTION:
            # The message embeds a rendered reference such as [Book!]!
            type_name = type_name.strip("[]!")
        if type_name:
            return ErrorReference(kind=kind, type_name=type_name)
    return None


def extract_type_from_error(message: str) -> str:
    """Return the type name an error message refers to, or an empty string."""
    reference = classify_error(message)
    return reference.type_name if reference else ""


def lookup_hint(describer: Describer, message: str) -> str | None:
    """Return SDL for the type referenced by ``message``, or None.

    Lookup failures are logged and swallowed; a missing hint is never an error.
    """
    type_name = extract_type_from_error(message)
    if not type_name:
        return None
    try:
        hint = describer.describe(type_name)
    except GQLHintError as e:
        logger.debug("no schema hint for %s: %s", type_name, e)
        return None
    return hint or None


class SchemaHintPresenter:
    """Error presenter that adds ``extensions.schemaHint`` to GraphQL errors.

    Register it with ``InlineServer.set_error_presenter``. It returns the error
    it was given, enriched when a hint is available.
    """

    def __init__(self, describer: Describer):
        self.describer = describer

    def __call__(self, error: GraphQLError, context: Any = None) -> GraphQLError:
        if error.extensions is not None and SCHEMA_HINT_KEY in error.extensions:
            return error
        hint = lookup_hint(self.describer, error.message or "")
        if hint is not None:
            if error.extensions is None:
                error.extensions = {}
            error.extensions[SCHEMA_HINT_KEY] = hint
        return error


def enrich_errors(errors: list[Any], describer: Describer) -> int:
    """Attach schema hints to decoded error entries in place.

    Entries that are not objects, have no message, or already carry a hint
    (server-supplied hints win) are left alone.

    Returns:
        The number of hints attached
    """
    attached = 0
    for entry in errors:
        if not isinstance(entry, dict):
            continue
        message = entry.get("message")
        if not isinstance(message, str) or not message:
            continue

        extensions = entry.get("extensions")
        if isinstance(extensions, dict) and SCHEMA_HINT_KEY in extensions:
            continue

        hint = lookup_hint(describer, message)
        if hint is None:
            continue

        if not isinstance(extensions, dict):
            extensions = {}
            entry["extensions"] = extensions
        extensions[SCHEMA_HINT_KEY] = hint
        attached += 1
    return attached
