"""Command line interface for the Hansard engine."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Optional

from .clients import load_roster_file
from .config import AppConfig, load_config
from .core.errors import HansardError
from .core.types import UnmatchedSpeaker
from .pipeline import PipelineEvent, aggregate_records
from .runtime import create_analyzer, create_escalation, create_pipeline, open_storage

LOGGER = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Hansard transcript parser and speaker resolver")
    parser.add_argument("--config", type=Path, help="Path to an explicit configuration file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    roster = subparsers.add_parser("roster", help="Replace the stored roster with a JSON file")
    roster.add_argument("path", type=Path, help="JSON list of legislators")

    importer = subparsers.add_parser("import", help="Parse a directory of text transcripts")
    importer.add_argument("directory", type=Path, help="Directory containing *.txt transcripts")
    importer.add_argument("--limit", type=int, help="Maximum number of transcripts to import")

    analyze = subparsers.add_parser("analyze", help="Analyse one transcript for one legislator")
    analyze.add_argument("path", type=Path, help="Text transcript")
    analyze.add_argument("--legislator", required=True, help="Legislator id from the roster")
    analyze.add_argument("--document-id", help="Identifier reported in the result")

    summary = subparsers.add_parser("summary", help="Summarise the most recently stored transcripts")
    summary.add_argument("--limit", type=int, default=25, help="Number of transcripts to include")

    unmatched = subparsers.add_parser("unmatched", help="List unmatched speakers")
    unmatched.add_argument("--document", help="Only speakers of this document")
    unmatched.add_argument("--unmapped-only", action="store_true", help="Hide speakers that are already mapped")

    suggest = subparsers.add_parser("suggest", help="Rank candidate legislators for an unmatched speaker")
    suggest.add_argument("speaker_id", type=int)
    suggest.add_argument("--limit", type=int, help="Number of suggestions")

    mapping = subparsers.add_parser("map", help="Confirm the legislator behind an unmatched speaker")
    mapping.add_argument("speaker_id", type=int)
    mapping.add_argument("legislator_id")
    mapping.add_argument("--confidence", type=float, default=1.0)
    mapping.add_argument("--notes")
    mapping.add_argument("--mapped-by")
    return parser


def _print_json(payload: Any) -> None:
    json.dump(payload, sys.stdout, ensure_ascii=False, indent=2, default=str)
    sys.stdout.write("\n")


def _unmatched_dict(speaker: UnmatchedSpeaker) -> dict:
    data = asdict(speaker)
    data["failure_reason"] = speaker.failure_reason.value
    return data


def _log_event(event: PipelineEvent) -> None:
    if event.kind in {"error", "skipped"}:
        return
    LOGGER.info("[%s] %s", event.kind, event.message or "")


def _run(args: argparse.Namespace, config: AppConfig) -> int:
    if args.command == "import":
        resources = create_pipeline(config, args.directory)
        try:
            processed = resources.pipeline.run(limit=args.limit, progress_callback=_log_event)
            LOGGER.info("Imported %s transcripts", processed)
            return 0
        finally:
            resources.close()

    storage = open_storage(config)
    try:
        if args.command == "roster":
            count = storage.replace_legislators(load_roster_file(args.path))
            LOGGER.info("Stored %s legislators", count)
        elif args.command == "analyze":
            analyzer = create_analyzer(config, storage)
            text = args.path.read_text(encoding="utf8")
            result = analyzer.analyze(
                text, args.legislator, document_id=args.document_id or args.path.stem, filename=args.path.name
            )
            _print_json(result.as_dict())
        elif args.command == "summary":
            _print_json(aggregate_records(storage.list_records(limit=args.limit)).as_dict())
        elif args.command == "unmatched":
            speakers = create_escalation(config, storage).list_unmatched(
                document_id=args.document, unmapped_only=args.unmapped_only
            )
            _print_json([_unmatched_dict(speaker) for speaker in speakers])
        elif args.command == "suggest":
            suggestions = create_escalation(config, storage).suggest(args.speaker_id, limit=args.limit)
            _print_json([asdict(suggestion) for suggestion in suggestions])
        elif args.command == "map":
            mapping = create_escalation(config, storage).confirm_mapping(
                args.speaker_id,
                args.legislator_id,
                confidence=args.confidence,
                notes=args.notes,
                mapped_by=args.mapped_by,
            )
            _print_json(asdict(mapping))
        return 0
    finally:
        storage.dispose()


def main(argv: Optional[list[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    parser = _build_parser()
    args = parser.parse_args(argv)
    config = load_config(args.config)
    try:
        return _run(args, config)
    except HansardError as exc:
        LOGGER.error("%s", exc)
        return 1


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
