"""Command-line interface for gql-hint."""

import functools
import json
import logging
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.logging import RichHandler

from .core.config import DEFAULT_URL, ClientConfig
from .core.errors import GQLHintError, format_query_for_error
from .core.executor import BaseExecutor, OperationResult, create_executor
from .core.inline import InlineExecutor


def setup_logging(verbose: bool) -> None:
    """Send gql_hint log records to stderr through rich."""
    logger = logging.getLogger("gql_hint")
    if verbose and not logger.handlers:
        handler = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            show_time=True,
            show_path=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def connection_options(func):
    """Options shared by every command that talks to a schema."""

    @click.option(
        "--url",
        "-u",
        default=DEFAULT_URL,
        show_default=True,
        envvar="GRAPHQL_URL",
        help="GraphQL endpoint URL (env: GRAPHQL_URL).",
    )
    @click.option(
        "--token",
        "-t",
        default="",
        envvar="GRAPHQL_TOKEN",
        help="Bearer token sent with each request (env: GRAPHQL_TOKEN).",
    )
    @click.option(
        "--timeout",
        default=30.0,
        show_default=True,
        type=float,
        envvar="GRAPHQL_TIMEOUT",
        help="Request timeout in seconds (env: GRAPHQL_TIMEOUT).",
    )
    @click.option(
        "--schema",
        "-s",
        "schema_file",
        type=click.Path(exists=True, dir_okay=False),
        help="Run in-process against this SDL file instead of an endpoint.",
    )
    @click.option(
        "--debug",
        "-d",
        is_flag=True,
        help="Log HTTP requests and responses.",
    )
    @click.option(
        "--verbose",
        "-v",
        is_flag=True,
        help="Enable verbose output.",
    )
    @functools.wraps(func)
    def wrapper(url, token, timeout, schema_file, debug, verbose, **kwargs):
        setup_logging(verbose or debug)
        if schema_file:
            sdl = Path(schema_file).read_text()
            executor = InlineExecutor.from_sdl(sdl, schema_hints=True)
        else:
            config = ClientConfig(url=url, token=token, timeout=timeout, debug=debug)
            executor = create_executor(config)
        try:
            return func(executor, **kwargs)
        except GQLHintError as e:
            raise click.ClickException(str(e)) from e
        finally:
            close = getattr(executor, "close", None)
            if close is not None:
                close()

    return wrapper


def output_options(func):
    """Options controlling where and how results are written."""
    func = click.option(
        "--output",
        "-o",
        type=click.Path(dir_okay=False),
        help="Output file path (default: stdout).",
    )(func)
    func = click.option(
        "--pretty",
        "-p",
        is_flag=True,
        help="Pretty-print JSON output.",
    )(func)
    return func


def operation_options(kind: str):
    """Options for reading an operation document and its variables."""

    def decorator(func):
        func = click.argument(kind, required=False)(func)
        func = click.option(
            f"--{kind}-file",
            "document_file",
            type=click.Path(exists=True, dir_okay=False),
            help=f"Read the {kind} from a file.",
        )(func)
        func = click.option(
            "--variables",
            "-V",
            help="Variables as inline JSON.",
        )(func)
        func = click.option(
            "--variables-file",
            type=click.Path(exists=True, dir_okay=False),
            help="Read variables from a JSON file.",
        )(func)
        func = click.option(
            "--operation",
            "operation_name",
            help="Name of the operation to run.",
        )(func)
        return output_options(func)

    return decorator


def parse_json_option(value: str | None, param_hint: str) -> Any:
    """Parse a JSON option value, reporting bad input as a usage error."""
    if value is None or value == "":
        return None
    try:
        return json.loads(value)
    except ValueError as e:
        raise click.BadParameter(f"invalid JSON: {e}", param_hint=param_hint) from e


def read_document(document: str | None, document_file: str | None, kind: str) -> str:
    """Return the operation text from the argument or a file."""
    if document_file:
        return Path(document_file).read_text()
    if document:
        return document
    raise click.UsageError(f"No {kind} given. Pass it as an argument or use --{kind}-file.")


def read_variables(variables: str | None, variables_file: str | None) -> dict[str, Any] | None:
    """Return variables from --variables-file or --variables."""
    if variables_file:
        parsed = parse_json_option(Path(variables_file).read_text(), "--variables-file")
    else:
        parsed = parse_json_option(variables, "--variables")
    if parsed is not None and not isinstance(parsed, dict):
        raise click.BadParameter("variables must be a JSON object", param_hint="--variables")
    return parsed


def write_output(data: Any, pretty: bool, output: str | None) -> None:
    """Write JSON to a file or stdout."""
    text = json.dumps(data, indent=2 if pretty else None)
    if output:
        Path(output).write_text(text + "\n")
    else:
        click.echo(text)


def emit_result(result: OperationResult, query: str, pretty: bool, output: str | None) -> None:
    """Write a result; on GraphQL errors show the query and exit non-zero."""
    if result.error is not None:
        click.echo(f"Query:\n{format_query_for_error(query)}\n", err=True)
        write_output(result.response, pretty, output)
        click.get_current_context().exit(1)
    write_output(result.response, pretty, output)


@click.group()
@click.version_option(package_name="gql-hint")
def main():
    """Run GraphQL operations with schema hints on errors.

    Operations run against an HTTP endpoint, or in-process against a local
    SDL file with --schema.
    """
    pass


@main.command()
@connection_options
@operation_options("query")
def query(
    executor: BaseExecutor,
    query: str | None,
    document_file: str | None,
    variables: str | None,
    variables_file: str | None,
    operation_name: str | None,
    pretty: bool,
    output: str | None,
):
    """Execute a GraphQL query.

    Examples:

        gql-hint query '{ books { id title } }'

        gql-hint query --query-file books.graphql -V '{"first": 10}'

        gql-hint query -s schema.graphql '{ books { id titl } }'
    """
    document = read_document(query, document_file, "query")
    parsed_variables = read_variables(variables, variables_file)
    result = executor.execute(document, parsed_variables, operation_name)
    emit_result(result, document, pretty, output)


@main.command()
@connection_options
@operation_options("mutation")
@click.option(
    "--input",
    "input_json",
    help='Input object as JSON, sent as the {"input": ...} variable.',
)
def mutation(
    executor: BaseExecutor,
    mutation: str | None,
    document_file: str | None,
    variables: str | None,
    variables_file: str | None,
    operation_name: str | None,
    pretty: bool,
    output: str | None,
    input_json: str | None,
):
    """Execute a GraphQL mutation.

    Examples:

        gql-hint mutation 'mutation($input: BookInput!) { createBook(input: $input) { id } }' \\
            --input '{"title": "Dune", "authorName": "Frank Herbert"}'
    """
    document = read_document(mutation, document_file, "mutation")
    parsed_variables = read_variables(variables, variables_file)
    input_value = parse_json_option(input_json, "--input")
    result = executor.execute_mutation(document, parsed_variables, input_value, operation_name)
    emit_result(result, document, pretty, output)


@main.command()
@connection_options
@click.argument("type_name")
@click.option("--args", "show_args", is_flag=True, help="Show field argument signatures.")
@click.option("--descriptions", "show_descriptions", is_flag=True, help="Show the type description.")
def describe(executor: BaseExecutor, type_name: str, show_args: bool, show_descriptions: bool):
    """Show the SDL definition of a type.

    Examples:

        gql-hint describe Book

        gql-hint describe Query --args
    """
    sdl = executor.describer.describe_with(type_name, show_args, show_descriptions)
    click.echo(sdl, nl=False)


@main.command()
@connection_options
@click.option("--builtin", is_flag=True, help="Include built-in __ types.")
def types(executor: BaseExecutor, builtin: bool):
    """List all types in the schema."""
    for entry in executor.list_types(include_builtin=builtin):
        click.echo(f"{entry.get('kind', ''):<14} {entry.get('name', '')}")


@main.command()
@connection_options
@output_options
def introspect(executor: BaseExecutor, pretty: bool, output: str | None):
    """Output the full introspection result."""
    result = executor.introspect().raise_for_errors()
    write_output(result.data, pretty, output)


if __name__ == "__main__":
    main()
