#!/usr/bin/env python3
"""Demonstration of schema hints on GraphQL errors.

This script shows how to:
1. Run operations in-process against a graphql-core schema
2. Read the schemaHint attached to a validation error
3. Describe a type directly

No server is started; everything runs in this process.
"""

from gql_hint.core import InlineExecutor

SDL = '''
type Book {
  id: ID!
  title: String!
  author: Author!
}

type Author {
  id: ID!
  name: String!
}

type Query {
  books: [Book!]!
}
'''

BOOKS = [
    {"id": "1", "title": "Dune", "author": {"id": "a1", "name": "Frank Herbert"}},
]


def main():
    executor = InlineExecutor.from_sdl(
        SDL,
        root_value={"books": lambda info: BOOKS},
        schema_hints=True,
    )

    print("=== Schema Hint Demo ===\n")

    print("1. A valid query")
    result = executor.execute("{ books { id title } }")
    print(f"   {result.data}")

    print("\n2. A typo in a field name")
    result = executor.execute("{ books { id titl } }")
    for error in result.errors:
        print(f"   Error: {error['message']}")
        hint = error.get("extensions", {}).get("schemaHint")
        if hint:
            print("   Hint:")
            for line in hint.splitlines():
                print(f"     {line}")

    print("\n3. Describing a type")
    print(executor.describer.describe_with("Query", show_args=True, show_descriptions=False))


if __name__ == "__main__":
    main()
