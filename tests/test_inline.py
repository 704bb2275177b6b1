"""Tests for in-process execution and the synthetic transport."""

import json
from datetime import datetime

import pytest
from graphql import build_schema

from conftest import BOOK_HINT, BOOK_SDL
from gql_hint.core.errors import GraphQLResponseError, TransportError
from gql_hint.core.executor import create_executor
from gql_hint.core.hints import SCHEMA_HINT_KEY
from gql_hint.core.inline import (
    InlineExecutor,
    InlineServer,
    ResponseRecorder,
    SyntheticRequest,
)
from gql_hint.core.types import ExecutionMode, GraphQLRequest


@pytest.fixture
def executor(book_schema, root_value):
    return InlineExecutor(book_schema, root_value=root_value, schema_hints=True)


class TestInlineExecutor:
    """Tests for InlineExecutor."""

    def test_successful_query(self, executor):
        result = executor.execute("{ books { id title author { name } } }")
        assert result.ok
        assert result.data["books"][0] == {"id": "1", "title": "Dune", "author": {"name": "Frank Herbert"}}
        assert "errors" not in result.response

    def test_unknown_field_gets_hint(self, executor):
        """Fields are ordered by rendered type, then name."""
        result = executor.execute("{ books { id titl } }")
        assert not result.ok
        assert isinstance(result.error, GraphQLResponseError)
        assert len(result.errors) == 1
        assert result.errors[0]["extensions"][SCHEMA_HINT_KEY] == BOOK_HINT

    def test_raw_bytes_already_contain_hint(self, executor):
        raw = executor.execute_raw("{ books { id titl } }")
        body = json.loads(raw)
        assert body["errors"][0]["extensions"][SCHEMA_HINT_KEY] == BOOK_HINT

    def test_missing_subfields_hint(self, executor):
        result = executor.execute("{ books }")
        assert result.errors[0]["extensions"][SCHEMA_HINT_KEY] == BOOK_HINT

    def test_unknown_argument_hint(self, executor):
        result = executor.execute("{ books(year: 1999) { id } }")
        hint = result.errors[0]["extensions"][SCHEMA_HINT_KEY]
        assert hint.startswith("type Query {\n")
        assert "  books: [Book!]!\n" in hint

    def test_unknown_input_field_hint(self, executor):
        result = executor.execute_mutation(
            "mutation { createBook(input: {title: \"X\", authorName: \"Y\", pages: 3}) { id } }"
        )
        assert result.errors[0]["extensions"][SCHEMA_HINT_KEY] == (
            "input BookInput {\n"
            "  authorName: String!\n"
            "  title: String!\n"
            "}\n"
        )

    def test_syntax_error_has_no_hint(self, executor):
        result = executor.execute("{ books { id ")
        assert not result.ok
        assert SCHEMA_HINT_KEY not in result.errors[0].get("extensions", {})

    def test_hints_disabled(self, book_schema, root_value):
        executor = InlineExecutor(book_schema, root_value=root_value)
        result = executor.execute("{ books { id titl } }")
        assert "extensions" not in result.errors[0]

    def test_mutation_with_input(self, executor):
        result = executor.execute_mutation(
            "mutation Create($input: BookInput!) { createBook(input: $input) { title author { name } } }",
            input={"title": "Leaves of Grass", "authorName": "Walt Whitman"},
        )
        assert result.ok
        assert result.data == {"createBook": {"title": "Leaves of Grass", "author": {"name": "Walt Whitman"}}}

    def test_operation_name(self, executor):
        document = "query A { books { id } } query B { book(id: \"2\") { title } }"
        result = executor.execute(document, operation_name="B")
        assert result.data == {"book": {"title": "Ariel"}}

    def test_variables(self, executor):
        result = executor.execute("query($id: ID!) { book(id: $id) { title } }", {"id": "1"})
        assert result.data == {"book": {"title": "Dune"}}

    def test_explicit_null_variable_overrides_default(self, executor):
        document = 'query($text: String = "default") { echo(text: $text) }'
        assert executor.execute(document, {"text": None}).data == {"echo": None}
        assert executor.execute(document).data == {"echo": "default"}

    def test_unencodable_scalar_raises_transport_error(self):
        """A custom scalar without a serializer passes resolver values through."""
        executor = InlineExecutor.from_sdl(
            "scalar DateTime\ntype Query { now: DateTime }",
            root_value={"now": lambda info: datetime(2020, 1, 1)},
        )
        with pytest.raises(TransportError, match="failed to encode response"):
            executor.execute("{ now }")

    def test_context_enricher(self, book_schema, root_value):
        seen = []

        def enrich(context):
            seen.append(dict(context))
            return {**context, "user": "ada"}

        executor = InlineExecutor(
            book_schema,
            root_value=root_value,
            context_value={"request_id": "r1"},
            context_enricher=enrich,
        )
        result = executor.execute("{ whoami }")
        assert result.data == {"whoami": "ada"}
        assert seen == [{"request_id": "r1"}]

    def test_deep_type_ref_renders_unknown(self, executor):
        """[[Int!]!]! is deeper than the introspection fragment unwraps."""
        assert "  matrix: [[Unknown!]!]!\n" in executor.describer.describe("Query")

    def test_describer_shares_server_cache(self, executor):
        executor.execute("{ books { id titl } }")
        assert executor.describer.cached_types == ["Book"]

    def test_list_types(self, executor):
        names = [t["name"] for t in executor.list_types()]
        assert names == sorted(names)
        assert {"Author", "Book", "BookInput", "Genre", "Query", "Mutation"} <= set(names)
        assert not any(n.startswith("__") for n in names)

    def test_list_types_builtin(self, executor):
        names = [t["name"] for t in executor.list_types(include_builtin=True)]
        assert "__Schema" in names

    def test_introspect(self, executor):
        result = executor.introspect()
        assert result.ok
        assert result.data["__schema"]["queryType"]["name"] == "Query"

    def test_from_sdl(self):
        executor = InlineExecutor.from_sdl(BOOK_SDL, schema_hints=True)
        assert executor.mode is ExecutionMode.INLINE
        assert executor.execute("{ books { titl } }").errors[0]["extensions"][SCHEMA_HINT_KEY] == BOOK_HINT

    def test_create_executor_with_schema(self, book_schema):
        assert isinstance(create_executor(schema=book_schema), InlineExecutor)


class TestInlineServer:
    """Tests for the HTTP-shaped InlineServer entrypoint."""

    def test_serve_records_response(self, book_schema, root_value):
        server = InlineServer(book_schema, root_value=root_value, schema_hints=True)
        recorder = ResponseRecorder()
        request = SyntheticRequest.for_operation(GraphQLRequest("{ books { id titl } }"))

        server.serve(request, recorder)

        assert recorder.status_code == 200
        assert recorder.headers["Content-Type"] == "application/json"
        body = json.loads(recorder.body)
        assert body["data"] is None
        assert body["errors"][0]["extensions"][SCHEMA_HINT_KEY] == BOOK_HINT

    def test_serve_matches_execute(self, book_schema, root_value):
        server = InlineServer(book_schema, root_value=root_value)
        operation = GraphQLRequest("{ books { title } }")
        recorder = ResponseRecorder()
        server.serve(SyntheticRequest.for_operation(operation), recorder)
        assert json.loads(recorder.body) == server.execute(operation)

    def test_serve_malformed_body(self, book_schema):
        recorder = ResponseRecorder()
        InlineServer(book_schema).serve(SyntheticRequest(body=b"{not json"), recorder)
        assert recorder.status_code == 400
        assert "could not be decoded" in json.loads(recorder.body)["errors"][0]["message"]

    def test_serve_missing_query(self, book_schema):
        recorder = ResponseRecorder()
        InlineServer(book_schema).serve(SyntheticRequest(body=b'{"variables": {}}'), recorder)
        assert recorder.status_code == 400

    def test_serve_rejects_get(self, book_schema):
        recorder = ResponseRecorder()
        InlineServer(book_schema).serve(SyntheticRequest(body=b"", method="GET"), recorder)
        assert recorder.status_code == 405

    def test_serve_unencodable_result(self):
        server = InlineServer(
            build_schema("scalar DateTime\ntype Query { now: DateTime }"),
            root_value={"now": lambda info: datetime(2020, 1, 1)},
        )
        recorder = ResponseRecorder()
        server.serve(SyntheticRequest.for_operation(GraphQLRequest("{ now }")), recorder)
        assert recorder.status_code == 500
        assert "failed to encode response" in json.loads(recorder.body)["errors"][0]["message"]
    def test_custom_error_presenter(self, book_schema):
        server = InlineServer(book_schema)

        def presenter(error, context):
            error.extensions = {**(error.extensions or {}), "code": "VALIDATION", "ctx": context}
            return error

        server.set_error_presenter(presenter)
        response = server.execute(GraphQLRequest("{ nope }"), context_value="c1")
        assert response["errors"][0]["extensions"] == {"code": "VALIDATION", "ctx": "c1"}

    def test_recorder_write(self):
        recorder = ResponseRecorder()
        assert recorder.write(b"ab") == 2
        recorder.write(b"c")
        recorder.write_header(201)
        assert recorder.body == b"abc"
        assert recorder.status_code == 201
