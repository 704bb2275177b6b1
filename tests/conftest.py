"""Shared fixtures: a small book catalog schema executed with graphql-core."""

import json

import httpx
import pytest
from graphql import build_schema

from gql_hint.core.inline import InlineServer
from gql_hint.core.types import GraphQLRequest

BOOK_SDL = '''
"""A book in the catalog."""
type Book {
  id: ID!
  title: String!
  author: Author!
}

type Author {
  id: ID!
  name: String!
}

enum Genre {
  FICTION
  NONFICTION
  POETRY
}

input BookInput {
  title: String!
  authorName: String!
}

type Query {
  books(genre: Genre): [Book!]!
  book(id: ID!): Book
  matrix: [[Int!]!]!
  whoami: String
  echo(text: String): String
}

type Mutation {
  createBook(input: BookInput!): Book!
}
'''

BOOK_HINT = "type Book {\n  author: Author!\n  id: ID!\n  title: String!\n}\n"


def make_root():
    """Root value whose callables act as top-level resolvers."""
    books = [
        {"id": "1", "title": "Dune", "author": {"id": "a1", "name": "Frank Herbert"}},
        {"id": "2", "title": "Ariel", "author": {"id": "a2", "name": "Sylvia Plath"}},
    ]

    def create_book(info, input):
        book = {
            "id": str(len(books) + 1),
            "title": input["title"],
            "author": {"id": f"a{len(books) + 1}", "name": input["authorName"]},
        }
        books.append(book)
        return book

    return {
        "books": lambda info, genre=None: books,
        "book": lambda info, id: next((b for b in books if b["id"] == id), None),
        "matrix": lambda info: [[1, 2], [3]],
        "whoami": lambda info: (info.context or {}).get("user"),
        "echo": lambda info, text="omitted": text,
        "createBook": create_book,
    }


@pytest.fixture
def book_schema():
    return build_schema(BOOK_SDL)


@pytest.fixture
def root_value():
    return make_root()


class MockGraphQLServer:
    """An httpx MockTransport handler backed by an InlineServer.

    Records every request body so tests can count round trips.
    """

    def __init__(self, schema, root_value=None, schema_hints=False):
        self.server = InlineServer(schema, root_value=root_value, schema_hints=schema_hints)
        self.requests: list[httpx.Request] = []

    @property
    def bodies(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]

    @property
    def introspection_count(self) -> int:
        return sum(1 for body in self.bodies if "__type(name:" in body["query"])

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        operation = GraphQLRequest.from_payload(json.loads(request.content))
        return httpx.Response(200, json=self.server.execute(operation))

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def mock_server(book_schema, root_value):
    return MockGraphQLServer(book_schema, root_value)
