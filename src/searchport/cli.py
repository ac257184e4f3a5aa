"""CLI entry point — Run search port operations against a configured backend.

Examples::

    searchport --url http://localhost:9200 create-index movies --field title
    searchport index movies tgg '{"id": "tgg", "title": "The Great Gatsby"}'
    searchport query movies gatsby --field title --filter rating=4
    searchport bulk movies docs.json

Every command prints its result as JSON. The exit status is 0 when the
result is ``ok``, 1 when the backend reported a failure, and 2 for usage or
configuration errors.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

if TYPE_CHECKING:
    from searchport.config.settings import Settings

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="searchport",
        description="searchport — Document store and search over Elasticsearch",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument("--url", type=str, default=None, help="Elasticsearch URL (overrides config)")
    parser.add_argument("--username", "-u", type=str, default=None, help="Basic-auth username (overrides config)")
    parser.add_argument("--password", "-p", type=str, default=None, help="Basic-auth password (overrides config)")
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["debug", "info", "warning", "error"],
        default=None,
        help="Log level (overrides config)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"searchport {_get_version()}",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    create_index = commands.add_parser("create-index", help="Create an index")
    create_index.add_argument("index")
    create_index.add_argument("--field", "-f", dest="fields", action="append", default=None, help="Full-text field")

    delete_index = commands.add_parser("delete-index", help="Delete an index")
    delete_index.add_argument("index")

    for name, help_text in (("index", "Store a new document"), ("update", "Replace a document")):
        cmd = commands.add_parser(name, help=help_text)
        cmd.add_argument("index")
        cmd.add_argument("key")
        cmd.add_argument("doc", type=_json_object, help="Document as a JSON object")

    for name, help_text in (("get", "Fetch a document"), ("remove", "Remove a document")):
        cmd = commands.add_parser(name, help=help_text)
        cmd.add_argument("index")
        cmd.add_argument("key")

    bulk = commands.add_parser("bulk", help="Store many documents from a JSON array")
    bulk.add_argument("index")
    bulk.add_argument("file", help="JSON file holding an array of documents, or '-' for stdin")

    query = commands.add_parser("query", help="Run a full-text query")
    query.add_argument("index")
    query.add_argument("text")
    query.add_argument("--field", "-f", dest="fields", action="append", default=None, help="Field to match")
    query.add_argument(
        "--filter",
        dest="filters",
        action="append",
        default=None,
        type=_filter_pair,
        help="Exact-match filter as FIELD=VALUE (VALUE parsed as JSON when possible)",
    )

    commands.add_parser("health", help="Report cluster health")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    from searchport.adapters.base.exceptions import ConfigurationError
    from searchport.observability.logging import setup_logging

    try:
        settings = _load_settings(args)
        setup_logging(settings.observability)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    try:
        result = asyncio.run(_run(args, settings))
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE

    print(result.model_dump_json(indent=2))
    return EXIT_OK if _is_ok(result) else EXIT_FAILED


def _load_settings(args: argparse.Namespace) -> Settings:
    from searchport.config.settings import Settings

    if args.config:
        settings = Settings.from_yaml(Path(args.config))
    else:
        settings = Settings()

    # Apply CLI overrides
    if args.url:
        settings.elasticsearch.url = args.url
    if args.username:
        settings.elasticsearch.username = args.username
    if args.password:
        settings.elasticsearch.password = args.password
    if args.log_level:
        settings.observability.log_level = args.log_level
    return settings


async def _run(args: argparse.Namespace, settings: Settings) -> BaseModel:
    from searchport.adapters.elasticsearch import ElasticsearchAdapter
    from searchport.models.document import IndexSpec
    from searchport.models.query import QuerySpec

    async with ElasticsearchAdapter.from_settings(settings.elasticsearch) as adapter:
        match args.command:
            case "create-index":
                return await adapter.create_index(IndexSpec(index=args.index, fields=args.fields or []))
            case "delete-index":
                return await adapter.delete_index(args.index)
            case "index":
                return await adapter.index_doc(args.index, args.key, args.doc)
            case "update":
                return await adapter.update_doc(args.index, args.key, args.doc)
            case "get":
                return await adapter.get_doc(args.index, args.key)
            case "remove":
                return await adapter.remove_doc(args.index, args.key)
            case "bulk":
                return await adapter.bulk(args.index, _read_docs(args.file))
            case "query":
                q = QuerySpec(query=args.text, fields=args.fields, filter=dict(args.filters) if args.filters else None)
                return await adapter.query(args.index, q)
            case "health":
                return await adapter.health_check()
    raise ValueError(f"Unknown command: {args.command}")


def _is_ok(result: BaseModel) -> bool:
    ok = getattr(result, "ok", None)
    if ok is None:
        # AdapterHealth
        return getattr(result, "status", None) == "healthy"
    return bool(ok)


def _json_object(raw: str) -> dict[str, Any]:
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as e:
        raise argparse.ArgumentTypeError(f"invalid JSON: {e}") from e
    if not isinstance(value, dict):
        raise argparse.ArgumentTypeError("document must be a JSON object")
    return value


def _filter_pair(raw: str) -> tuple[str, Any]:
    field, sep, value = raw.partition("=")
    if not sep or not field:
        raise argparse.ArgumentTypeError(f"expected FIELD=VALUE, got {raw!r}")
    try:
        return field, json.loads(value)
    except json.JSONDecodeError:
        return field, value


def _read_docs(source: str) -> list[dict[str, Any]]:
    from searchport.adapters.base.exceptions import ConfigurationError

    try:
        text = sys.stdin.read() if source == "-" else Path(source).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read bulk input: {e}") from e
    try:
        docs = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Bulk input is not valid JSON: {e}") from e
    if not isinstance(docs, list) or not all(isinstance(d, dict) for d in docs):
        raise ConfigurationError("Bulk input must be a JSON array of objects")
    return docs


def _get_version() -> str:
    """Get the package version."""
    try:
        from searchport import __version__

        return __version__
    except ImportError:
        return "unknown"


if __name__ == "__main__":
    sys.exit(main())
