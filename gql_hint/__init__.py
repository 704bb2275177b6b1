"""GraphQL execution over HTTP or in-process, with schema hints on errors."""

__version__ = "0.1.0"
