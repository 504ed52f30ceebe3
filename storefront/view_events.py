#!/usr/bin/env python3
"""Event log viewer for the storefront.

Reads the JSONL files written by ``logging_config.JSONLFileHandler`` and shows
API failures, rejected forms and database maintenance events.

Usage:
    python -m storefront.view_events                     # Summary + recent events
    python -m storefront.view_events --type api_error    # Events of one type
    python -m storefront.view_events --level ERROR       # Only errors and worse
    python -m storefront.view_events --export out.json   # Export matching events
"""

import argparse
import json
import logging
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .config import LOG_DIR

logger = logging.getLogger(__name__)

# Keys every entry carries; anything else is event data
_BASE_KEYS = ("timestamp", "level", "logger", "message", "event_type")


def format_timestamp(iso_string: str) -> str:
    """Format ISO timestamp to readable string."""
    try:
        dt = datetime.fromisoformat(iso_string)
        return dt.strftime("%Y-%m-%d %H:%M:%S")
    except (ValueError, TypeError):
        return iso_string


def load_events(
    log_dir: Path,
    event_type: Optional[str] = None,
    min_level: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """Read all log entries from ``log_dir``, oldest first.

    Lines that are not valid JSON are skipped with a warning.
    """
    threshold = logging.getLevelName(min_level.upper()) if min_level else None
    if threshold is not None and not isinstance(threshold, int):
        raise ValueError(f"Unknown log level: {min_level}")

    events: List[Dict[str, Any]] = []
    for path in sorted(Path(log_dir).glob("storefront_*.jsonl")):
        with open(path, encoding="utf-8") as f:
            for lineno, line in enumerate(f, 1):
                if not line.strip():
                    continue
                try:
                    entry = json.loads(line)
                except json.JSONDecodeError:
                    logger.warning(f"Skipping malformed line {path.name}:{lineno}")
                    continue
                if event_type and entry.get("event_type") != event_type:
                    continue
                if threshold is not None:
                    level = logging.getLevelName(entry.get("level", "NOTSET"))
                    if not isinstance(level, int) or level < threshold:
                        continue
                events.append(entry)
    return events


def summarize(events: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    """Counts by event type and level."""
    events = list(events)
    return {
        "total": len(events),
        "by_type": dict(Counter(e.get("event_type", "log") for e in events).most_common()),
        "by_level": dict(Counter(e.get("level", "NOTSET") for e in events).most_common()),
    }


def print_event(entry: Dict[str, Any]) -> None:
    """Pretty print a single entry."""
    print(f"\n{'-'*70}")
    print(
        f"{format_timestamp(entry.get('timestamp', ''))} "
        f"[{entry.get('level', '?')}] {entry.get('event_type', 'log')}"
    )
    print(f"  {entry.get('message', '')}")
    for key, value in entry.items():
        if key in _BASE_KEYS:
            continue
        if isinstance(value, (dict, list)):
            print(f"  {key}: {json.dumps(value, ensure_ascii=False)[:100]}")
        else:
            print(f"  {key}: {str(value)[:100]}")


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="View storefront event logs")
    parser.add_argument(
        "--log-dir",
        type=Path,
        default=LOG_DIR,
        help="Directory holding storefront_*.jsonl files",
    )
    parser.add_argument(
        "--type",
        type=str,
        help="Filter by event type (api_error, form_rejected, db_dump, ...)",
    )
    parser.add_argument(
        "--level",
        type=str,
        help="Minimum level to show (DEBUG, INFO, WARNING, ERROR)",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=20,
        help="Max events to display, newest last (default: 20)",
    )
    parser.add_argument(
        "--export",
        type=Path,
        help="Write matching events to this JSON file instead of printing them",
    )
    args = parser.parse_args(argv)

    try:
        events = load_events(args.log_dir, event_type=args.type, min_level=args.level)
    except ValueError as e:
        parser.error(str(e))

    if args.export:
        args.export.write_text(
            json.dumps(events, ensure_ascii=False, indent=2), encoding="utf-8"
        )
        print(f"\n✅ Exported {len(events)} event(s) to {args.export}")
        return 0

    summary = summarize(events)
    print("\n" + "=" * 70)
    print("EVENT SUMMARY")
    print("=" * 70)
    print(f"\nTotal: {summary['total']}")
    if summary["by_type"]:
        print("\nBy type:")
        for event_type, count in summary["by_type"].items():
            print(f"  {event_type}: {count}")
    if summary["by_level"]:
        print("\nBy level:")
        for level, count in summary["by_level"].items():
            print(f"  {level}: {count}")

    if not events:
        print("\n✅ No events found!")
        return 0

    recent = events[-args.limit:] if args.limit > 0 else events
    print(f"\nShowing {len(recent)} of {len(events)} event(s)")
    for entry in recent:
        print_event(entry)
    print("\n" + "=" * 70)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
