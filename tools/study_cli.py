from __future__ import annotations

"""CLI utility to chunk a document and inspect retrieval for a query."""

import argparse
import asyncio
import sys
from dataclasses import replace
from pathlib import Path

from study_assistant.app.dependencies import get_assistant, get_pipeline, get_store
from study_assistant.app.log_config import configure_logging
from study_assistant.app.metrics import metrics_payload
from study_assistant.app.settings import settings
from study_assistant.loaders.pdf import extract_pdf_text
from study_assistant.loaders.text import extract_text_file
from study_assistant.rag.assistant import AssistantError
from study_assistant.rag.llm import LLMError
from study_assistant.rag.pipeline import Extractor
from study_assistant.rag.retrieval import RetrievalConfigError, find_relevant_chunks
from study_assistant.rag.types import STATUS_COMPLETED, StoredDocument


def _extractor(path: Path) -> Extractor:
    if path.suffix.lower() == ".pdf":
        return lambda: extract_pdf_text(path)
    return lambda: extract_text_file(path)


def _preview(text: str, limit: int = 80) -> str:
    if len(text) <= limit:
        return text
    return text[:limit].rsplit(" ", 1)[0] + "..."


async def _load(path: Path) -> StoredDocument:
    document = get_store().create(title=path.stem)
    processed = await get_pipeline().process(document.document_id, _extractor(path))
    if processed is None or processed.status != STATUS_COMPLETED:
        error = processed.error if processed else "document disappeared"
        raise SystemExit(f"Could not process {path}: {error}")
    return processed


def _cmd_chunk(args: argparse.Namespace) -> None:
    document = asyncio.run(_load(args.path))
    print(f"{document.title}: {len(document.chunks)} chunks")
    for chunk in document.chunks:
        words = len(chunk.content.split())
        print(
            f"#{chunk.chunk_index} page={chunk.page_number} words={words} "
            f"{_preview(chunk.content)}"
        )


def _cmd_ask(args: argparse.Namespace) -> None:
    async def _run() -> None:
        document = await _load(args.path)
        try:
            relevant = find_relevant_chunks(document.chunks, args.query, top_k=args.top_k)
        except RetrievalConfigError as exc:
            raise SystemExit(str(exc)) from exc
        for item in relevant:
            print(f"#{item.chunk_index} score={item.score} {_preview(item.content)}")
        if not args.generate:
            return
        try:
            assistant = replace(get_assistant(), top_k=args.top_k)
            answer = await assistant.chat(document.document_id, args.query)
        except (AssistantError, LLMError) as exc:
            raise SystemExit(str(exc)) from exc
        print()
        print(answer.answer)

    asyncio.run(_run())


def main() -> None:
    """Chunk a PDF or text file and show the chunks relevant to a query."""
    parser = argparse.ArgumentParser(description="Inspect document chunking and retrieval.")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level.")
    parser.add_argument(
        "--show-metrics",
        action="store_true",
        help="Print Prometheus metrics after the command.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    chunk_parser = subparsers.add_parser("chunk", help="Print the chunks of a document.")
    chunk_parser.add_argument("path", type=Path, help="PDF or UTF-8 text file.")
    chunk_parser.set_defaults(func=_cmd_chunk)

    ask_parser = subparsers.add_parser("ask", help="Rank chunks for a question.")
    ask_parser.add_argument("path", type=Path, help="PDF or UTF-8 text file.")
    ask_parser.add_argument("query", help="Question or concept to look up.")
    ask_parser.add_argument("--top-k", type=int, default=settings.top_k, help="Chunks to return.")
    ask_parser.add_argument(
        "--generate",
        action="store_true",
        help="Also ask the configured LLM provider for an answer.",
    )
    ask_parser.set_defaults(func=_cmd_ask)

    args = parser.parse_args()
    configure_logging(args.log_level)
    args.func(args)
    if args.show_metrics:
        payload, _ = metrics_payload()
        sys.stdout.write(payload.decode("utf-8"))


if __name__ == "__main__":
    main()
