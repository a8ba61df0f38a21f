"""Command line interface for the AI Analyst."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import List

from .chat.engine import AnalystSession, create_session, load_corpus
from .chat.generator import InsightFailure, InsightResult
from .config import get_settings
from .errors import EmptyQueryError
from .ingestion.files import load_corpus_file
from .ingestion.mock import EXAMPLE_QUERIES, generate_mock_corpus
from .retrieval.retriever import Retriever
from .storage.corpus import Corpus


def _print_result(result: InsightResult) -> int:
    if isinstance(result, InsightFailure):
        print(f"Error: {result.message}")
        return 1

    response = result.response
    print("\n" + response.summary + "\n")
    print("KPIs:")
    for kpi in response.kpis:
        print(f"- {kpi.label}: {kpi.value} ({kpi.change}, {kpi.change_type})")
    print(f"\n{response.chart_title} [{response.chart_type}]")
    for point in response.chart_data:
        print(f"  {point.name}: {point.value:g}")
    print()
    return 0


def _corpus_from_args(args: argparse.Namespace) -> Corpus:
    if args.corpus:
        return load_corpus_file(args.corpus)
    return load_corpus(get_settings())


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="AI Analyst CLI")
    parser.add_argument(
        "--corpus",
        type=Path,
        help="JSON or JSON Lines corpus file (default: generated mock corpus)",
    )
    parser.add_argument(
        "--max-results",
        type=int,
        default=None,
        help="Number of documents placed in the model context (default: 3)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    ask_parser = subparsers.add_parser("ask", help="Answer a single question")
    ask_parser.add_argument("query", help="Business question to analyze")

    subparsers.add_parser("chat", help="Start an interactive analysis session")

    search_parser = subparsers.add_parser(
        "search", help="Show the retrieval ranking and context without calling the model"
    )
    search_parser.add_argument("query", help="Question to retrieve context for")

    corpus_parser = subparsers.add_parser("corpus", help="Corpus utilities")
    corpus_sub = corpus_parser.add_subparsers(dest="corpus_command", required=True)
    export_parser = corpus_sub.add_parser("export", help="Write the mock corpus to a JSON file")
    export_parser.add_argument("path", type=Path, help="Destination JSON file")
    export_parser.add_argument(
        "--count",
        type=int,
        default=500,
        help="Number of generated documents (default: 500)",
    )
    export_parser.add_argument("--seed", type=int, default=2024, help="Random seed")

    web_parser = subparsers.add_parser("web", help="Launch the HTTP API")
    web_parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host interface for the web server (default: 127.0.0.1)",
    )
    web_parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port for the web server (default: 8000)",
    )

    return parser


def _chat(session: AnalystSession) -> None:
    print("Ask questions about your business. Press Ctrl+C or Ctrl+D to exit.")
    print("Examples:")
    for example in EXAMPLE_QUERIES:
        print(f"  - {example}")
    print()
    try:
        while True:
            question = input("?> ")
            try:
                result = session.submit(question)
            except EmptyQueryError:
                continue
            _print_result(result)
    except (KeyboardInterrupt, EOFError):  # pragma: no cover - interactive session
        print("\nGoodbye!")


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.max_results is not None and args.max_results < 1:
        parser.error("--max-results must be a positive integer")

    if args.command == "corpus":
        corpus = generate_mock_corpus(args.count, seed=args.seed)
        corpus.save(args.path)
        print(f"Wrote {len(corpus)} documents to {args.path}.")
        return 0

    if args.command == "search":
        retriever = Retriever(
            _corpus_from_args(args),
            max_results=args.max_results or get_settings().ANALYST_MAX_RESULTS,
        )
        for result in retriever.rank(args.query):
            print(f"{result.score:6.2f}  {result.document.id}  {result.document.title}")
        print("\n" + retriever.retrieve(args.query))
        return 0

    session = create_session(corpus=_corpus_from_args(args), max_results=args.max_results)

    if args.command == "ask":
        try:
            return _print_result(session.submit(args.query))
        except EmptyQueryError as exc:
            parser.error(str(exc))
    elif args.command == "chat":
        _chat(session)
    elif args.command == "web":
        from .web import create_app

        try:
            import uvicorn
        except ImportError as exc:  # pragma: no cover - runtime guard
            raise SystemExit(
                "uvicorn is required to launch the web server. Install the optional"
                " dependencies with 'pip install fastapi uvicorn'."
            ) from exc

        uvicorn.run(create_app(session=session), host=args.host, port=args.port)
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
