"""Command line tool for the semantic index.

Usage:
    # rebuild the index from a JSON export of users, jobs and news
    alumni-search reindex --source export.json --clear

    # query the index
    alumni-search search "machine learning mentor" --type user --limit 5

    # run the HTTP API
    alumni-search serve --port 8080
"""

import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from alumni_search.core.config import AppSettings, EmbeddingSettings, StorageSettings
from alumni_search.core.documents import document_id, to_index_item
from alumni_search.core.errors import SemanticSearchError
from alumni_search.core.search import SemanticSearchService
from alumni_search.core.sources import MappingRecordSource
from alumni_search.core.storage.config import create_vector_store
from alumni_search.embedding.factory import create_embedding_function
from alumni_search.log import configure_logging

EXPORT_SECTIONS = {"user": "users", "job": "jobs", "news": "news"}


def load_export(path: Path) -> dict[str, list[dict]]:
    """Read a JSON export shaped {"users": [...], "jobs": [...], "news": [...]}."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a JSON object")
    return {
        record_type: list(data.get(section) or [])
        for record_type, section in EXPORT_SECTIONS.items()
    }


def build_service(records: MappingRecordSource | None = None) -> SemanticSearchService:
    return SemanticSearchService(
        embedding_func=create_embedding_function(EmbeddingSettings()),
        vector_store=create_vector_store(StorageSettings()),
        records=records,
    )


def cmd_reindex(args: argparse.Namespace) -> int:
    export = load_export(Path(args.source))
    service = build_service()
    if args.clear:
        service.clear()

    items = []
    for record_type in args.types:
        docs = export.get(record_type, [])
        converted = [to_index_item(record_type, doc) for doc in docs]
        usable = [item for item in converted if item is not None]
        logger.info(f"{record_type}: {len(usable)} of {len(docs)} documents indexable")
        items.extend(usable)

    count = service.index_bulk(items)
    print(f"Indexed {count} records into {StorageSettings().vector_store_path}")
    return 0


def cmd_search(args: argparse.Namespace) -> int:
    records = None
    if args.source:
        export = load_export(Path(args.source))
        records = MappingRecordSource(
            {
                record_type: {
                    document_id(doc): doc
                    for doc in docs
                    if isinstance(doc, dict) and document_id(doc)
                }
                for record_type, docs in export.items()
            }
        )
    service = build_service(records)
    results = service.search(args.query, top_k=args.limit, filter_type=args.type)
    if not results:
        print("No results")
        return 0
    for r in results:
        label = r.meta.name or r.meta.title or r.id
        print(f"{r.score:.3f}  {r.type:<5} {r.id:<24} {label}")
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    settings = AppSettings()
    uvicorn.run(
        "alumni_search.api:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="alumni-search", description="Semantic index for the alumni network"
    )
    parser.add_argument("--env-file", default=".env", help="dotenv file to load")
    parser.add_argument("--log-level", default=None, help="loguru level")
    sub = parser.add_subparsers(dest="command", required=True)

    reindex = sub.add_parser("reindex", help="index users, jobs and news from an export")
    reindex.add_argument("--source", required=True, help="JSON export file")
    reindex.add_argument(
        "--types",
        nargs="+",
        choices=sorted(EXPORT_SECTIONS),
        default=["user", "job", "news"],
        help="entity types to index",
    )
    reindex.add_argument(
        "--clear", action="store_true", help="drop the existing index first"
    )
    reindex.set_defaults(func=cmd_reindex)

    search = sub.add_parser("search", help="query the index")
    search.add_argument("query", help="query text")
    search.add_argument("--type", default=None, help="restrict to one entity type")
    search.add_argument("--limit", type=int, default=10, help="number of results")
    search.add_argument("--source", default=None, help="JSON export for enrichment")
    search.set_defaults(func=cmd_search)

    serve = sub.add_parser("serve", help="run the HTTP API")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.set_defaults(func=cmd_serve)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    load_dotenv(dotenv_path=args.env_file)
    configure_logging(args.log_level or AppSettings().log_level)

    try:
        return args.func(args)
    except (SemanticSearchError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
