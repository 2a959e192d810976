#!/usr/bin/env python3
"""Regulatory review chain runner.

Ingests one guidance document, runs the four-agent chain over it and writes
``agent_chain_results.json``.

Usage:
    # Text or Markdown guidance
    python -m scripts.run_chain guidance.md

    # Scanned PDF (Traditional Chinese OCR)
    python -m scripts.run_chain guidance.pdf --output out/

    # Feed an edited intermediate text as the chain's initial input
    python -m scripts.run_chain guidance.pdf --input-text edited_handoff.txt

    # Ingest only (print the OCR text, no LLM calls)
    python -m scripts.run_chain guidance.pdf --dry-run
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

# Add backend to path for imports
_backend = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(_backend))

# Load .env before importing app modules
from dotenv import load_dotenv
load_dotenv(_backend / ".env")

import structlog

structlog.configure(
    processors=[
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ]
)

from workbench.core.config import settings
from workbench.modules.agents.client import ModelClient
from workbench.modules.chain.executor import ChainExecutor
from workbench.modules.ingestion.service import (
    IngestionError,
    UnsupportedDocumentError,
    apply_document,
    detect_kind,
    extract_document,
)
from workbench.modules.workspace.export import export_json
from workbench.modules.workspace.metrics import STATUS_TABLE, average_latency, completion_score
from workbench.modules.workspace.state import Workspace

logger = structlog.get_logger()


async def run(args: argparse.Namespace) -> int:
    workspace = Workspace()

    try:
        kind = detect_kind(args.document.name, None)
    except UnsupportedDocumentError as exc:
        logger.error("Unsupported document", error=str(exc))
        return 1

    try:
        document = extract_document(
            args.document.read_bytes(),
            kind,
            on_status=lambda status: logger.info(status),
        )
    except IngestionError as exc:
        logger.error("Ingestion failed", error=str(exc), pages_completed=exc.pages_completed)
        return 1
    apply_document(workspace, document)

    print(f"\n{'='*60}")
    print(f"  REGULATORY REVIEW CHAIN")
    print(f"{'='*60}")
    print(f"  Document:      {args.document}")
    print(f"  Kind:          {document.kind}")
    print(f"  Chars:         {workspace.metrics.chars:,}")
    print(f"  OCR pages:     {workspace.metrics.ocr_pages}")
    print(f"  Agents:        {', '.join(a.name for a in workspace.agents_run_config)}")
    print(f"{'='*60}\n")

    if args.dry_run:
        print(workspace.raw_text)
        return 0

    initial_input = args.input_text.read_text(encoding="utf-8") if args.input_text else None

    executor = ChainExecutor(workspace, ModelClient())
    result = await executor.run(initial_input)

    for entry in result.run_log:
        print(f"  {entry.agent_name} ({entry.model}) completed in {entry.latency_display}s")
    if result.error:
        print(f"  ERROR: {result.error}")

    score = completion_score(workspace.metrics)
    print(f"\n{'='*60}")
    print(f"  Agents run:    {workspace.metrics.agents_run}")
    print(f"  Total latency: {workspace.metrics.latency:.2f}s")
    print(f"  Avg latency:   {average_latency(workspace.metrics):.2f}s")
    print(f"  Status:        {STATUS_TABLE[score][0]}")
    print(f"  Est. cost:     ${result.usage.get('total_cost_usd', 0.0):.4f}")
    print(f"{'='*60}\n")

    args.output.mkdir(parents=True, exist_ok=True)
    out_path = args.output / settings.export_filename
    out_path.write_text(export_json(workspace), encoding="utf-8")
    logger.info("Results exported", path=str(out_path))

    return 0 if result.status == "completed" else 2


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the regulatory review agent chain")
    parser.add_argument("document", type=Path,
                        help="Guidance document (.txt, .md or .pdf)")
    parser.add_argument("--input-text", type=Path, default=None,
                        help="Use this file as the first agent's input instead of the document text")
    parser.add_argument("--output", type=Path, default=Path("."),
                        help="Directory for agent_chain_results.json")
    parser.add_argument("--dry-run", action="store_true",
                        help="Ingest and print the text without calling any model")

    args = parser.parse_args()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
