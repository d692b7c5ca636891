"""Command line interface for DebugGo."""

import argparse
from typing import List, Optional

from loguru import logger
from openai import OpenAIError

from debuggo.logging_config import configure_logging
from debuggo.services.embedding import EmbeddingError
from debuggo.services.troubleshooting import TroubleshootingService
from debuggo.services.vector_db import (
    VectorStoreError,
    VectorStoreTransportError,
    get_qdrant_client,
)
from debuggo.settings import settings

QDRANT_HINT = "💡 Make sure Qdrant is running: docker run -p 6333:6333 qdrant/qdrant"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="debuggo", description="DebugGo - AI-Powered Error Analysis"
    )
    parser.add_argument(
        "--qdrant-url", type=str, help=f"Qdrant URL (default: {settings.qdrant_url})"
    )
    parser.add_argument(
        "--remote",
        action="store_true",
        help="Use OpenAI embeddings even if local embeddings are available",
    )

    subparsers = parser.add_subparsers(dest="command")

    log_parser = subparsers.add_parser("log", help="Log a new error and its fix")
    log_parser.add_argument("--error", type=str, help="The error you want to log")
    log_parser.add_argument("--solution", type=str, help="How you fixed the error")

    ask_parser = subparsers.add_parser("ask", help="Ask for a solution")
    ask_parser.add_argument("query", nargs="?", help="Description of the error")
    ask_parser.add_argument(
        "--no-diagnosis", action="store_true", help="Only show similar errors"
    )

    stats_parser = subparsers.add_parser("stats", help="Show database statistics")
    stats_parser.add_argument(
        "--all",
        action="store_true",
        dest="all_partitions",
        help="Count every vector size partition, not just the local one",
    )
    return parser


def build_service(args: argparse.Namespace) -> TroubleshootingService:
    vector_db = get_qdrant_client()
    if args.qdrant_url:
        vector_db.connect(args.qdrant_url)
    return TroubleshootingService(
        vector_db=vector_db,
        prefer_local=False if args.remote else None,
    )


def _prompt(message: str, value: Optional[str] = None) -> str:
    if value:
        return value.strip()
    return input(message).strip()


def show_stats(service: TroubleshootingService, all_partitions: bool = False) -> bool:
    try:
        if all_partitions:
            stats = service.get_partition_stats()
        else:
            stats = service.get_stats()
    except VectorStoreError as e:
        print(f"⚠️ Warning: Could not connect to Qdrant ({e})")
        print("💡 To use full functionality, start Qdrant: docker run -p 6333:6333 qdrant/qdrant")
        return False
    print(f"📊 Database: {stats['total_embeddings']} stored errors")
    for partition in stats.get("partitions", []):
        print(
            f"   {partition['collection']}: {partition['total_embeddings']} stored errors"
            f" (vector size {partition['vector_size']})"
        )
    return True


def _print_backend(
    service: TroubleshootingService, backend: str, local_message: str
) -> None:
    if backend == "local":
        print(local_message)
    elif not service.prefer_local:
        print("Using OpenAI embeddings (costs money)")
    else:
        print("⚠️  Local embeddings not available, using OpenAI (costs money)")


def run_log(
    service: TroubleshootingService,
    error_text: Optional[str] = None,
    solution_text: Optional[str] = None,
) -> int:
    error_text = _prompt("\nEnter the error you want to log: ", error_text)
    solution_text = _prompt(
        "\nHow did you fix this error? (Describe the solution): ", solution_text
    )
    if not error_text:
        print("Nothing to log.")
        return 1

    print("\n📝 Logging error and generating embedding...")
    logged = service.log_error(error_text, solution_text)

    _print_backend(service, logged.backend, "✅ Using local embeddings (free!)")
    print("✅ Error and solution stored successfully!")
    print("📊 The error has been indexed and will be available for future searches.")
    print("📋 Summary:")
    print(f"   Problem: {logged.error_text}")
    print(f"   Solution: {logged.solution_text}")
    return 0


def run_ask(
    service: TroubleshootingService,
    query_text: Optional[str] = None,
    diagnose: bool = True,
) -> int:
    query_text = _prompt("\nDescribe the error you need help with: ", query_text)
    if not query_text:
        print("Nothing to search for.")
        return 1

    print("\n🔍 Searching for similar errors...")
    result = service.ask_for_solution(query_text, diagnose=diagnose)

    _print_backend(service, result.backend, "✅ Using local embeddings for search (free!)")

    found = len(result.similar_documents) if result.has_matches else 0
    print(f"\n📋 Found {found} similar error(s):")
    for index, doc in enumerate(result.similar_documents, start=1):
        print(f"\n--- Similar Error {index} ---\n{doc}")

    if not diagnose:
        return 0
    if result.diagnosis_error:
        print(f"Error generating solution: {result.diagnosis_error}")
        return 1
    if result.diagnosis is None:
        print("❌ OPENAI_API_KEY not found for generating AI solutions")
        print("Refer similar docs above!")
        return 0

    print("\n🔥 AI Diagnosis:")
    print("================")
    print(result.diagnosis)
    return 0


def run_menu(service: TroubleshootingService) -> int:
    print("🔧 DebugGo - AI-Powered Error Analysis")
    print("=====================================")
    show_stats(service)

    print("1. Log new error")
    print("2. Ask for solution")
    choice = input("\nChoose an option (1 or 2): ").strip()

    if choice == "1":
        return run_log(service)
    if choice == "2":
        return run_ask(service)

    print("Invalid choice. Please run the program again and select 1 or 2.")
    return 1


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point of the ``debuggo`` command."""
    args = build_parser().parse_args(argv)
    configure_logging()

    service = build_service(args)
    try:
        if args.command == "log":
            return run_log(service, args.error, args.solution)
        if args.command == "ask":
            return run_ask(service, args.query, diagnose=not args.no_diagnosis)
        if args.command == "stats":
            return 0 if show_stats(service, args.all_partitions) else 1
        return run_menu(service)
    except VectorStoreError as e:
        logger.error(f"Vector store operation failed: {e}")
        print(f"Error: {e}")
        if isinstance(e, VectorStoreTransportError):
            print(QDRANT_HINT)
        return 1
    except (EmbeddingError, OpenAIError) as e:
        logger.error(f"Embedding failed: {e}")
        print(f"Error generating embedding: {e}")
        return 1
    finally:
        service.vector_db.close()
