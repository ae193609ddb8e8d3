"""Get a personal class schedule from my.itmo.ru as JSON or table.

Standalone CLI script. Logs in to ITMO ID with the PKCE flow, fetches the
personal schedule for a date range and prints the flattened lesson records.

Run with: python scripts/fetch_schedule.py
Table:    python scripts/fetch_schedule.py --table
Range:    python scripts/fetch_schedule.py --start 2024-09-02 --end 2024-09-08
Next week: python scripts/fetch_schedule.py --week-offset 1
To file:  python scripts/fetch_schedule.py --output data/schedule.json

Credentials come from ITMO_USER / ITMO_PASS (.env) unless --user is given,
in which case the password is prompted for.

Exit codes:
  0 = success (JSON or table on stdout, or file written for --output)
  1 = error (message on stderr)
"""

import argparse
import getpass
import json
import os
import sys
from datetime import date, timedelta
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# Add project root to path for src imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from src.myitmo.auth import TokenAcquirer  # noqa: E402
from src.myitmo.config import get_config  # noqa: E402
from src.myitmo.errors import ItmoClientError  # noqa: E402
from src.myitmo.logging import setup_logging  # noqa: E402
from src.myitmo.schedule import ScheduleFetcher  # noqa: E402

# Table columns: header -> lesson fields tried in order
_TABLE_COLUMNS: list[tuple[str, tuple[str, ...]]] = [
    ("Date", ("date",)),
    ("Time", ("time_start",)),
    ("Subject", ("subject", "name")),
    ("Type", ("type",)),
    ("Room", ("room",)),
    ("Teacher", ("teacher_name", "teacher")),
]


def _log(msg: str) -> None:
    """Write diagnostic messages to stderr so stdout stays clean for JSON."""
    print(msg, file=sys.stderr)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CLI arguments using argparse."""
    parser = argparse.ArgumentParser(
        description="Get the personal class schedule from my.itmo.ru.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--user",
        type=str,
        default=None,
        help="ITMO ID username (default: ITMO_USER). Prompts for the password.",
    )
    parser.add_argument(
        "--start",
        type=date.fromisoformat,
        default=None,
        help="First day, YYYY-MM-DD (default: Monday of the selected week).",
    )
    parser.add_argument(
        "--end",
        type=date.fromisoformat,
        default=None,
        help="Last day, YYYY-MM-DD (default: Sunday of the selected week).",
    )
    parser.add_argument(
        "--week-offset",
        type=int,
        default=0,
        help="Week relative to the current one when --start/--end are omitted.",
    )

    output_group = parser.add_mutually_exclusive_group()
    output_group.add_argument(
        "--table",
        action="store_true",
        help="Output a human-readable table to stdout.",
    )
    output_group.add_argument(
        "--output",
        type=str,
        default=None,
        help="Write the JSON records to this file instead of stdout.",
    )
    return parser.parse_args(argv)


def _compute_date_range(
    start: date | None,
    end: date | None,
    week_offset: int = 0,
    reference: date | None = None,
) -> tuple[date, date]:
    """Resolve the requested range, defaulting to Monday-Sunday of a week.

    Explicit start/end win; missing ends are filled from the week that
    contains `reference` (default: today) shifted by `week_offset` weeks.
    """
    if reference is None:
        reference = date.today()

    monday = reference - timedelta(days=reference.weekday()) + timedelta(
        weeks=week_offset
    )
    sunday = monday + timedelta(days=6)

    start = start or monday
    end = end or sunday
    if end < start:
        raise ValueError(f"End date {end} is before start date {start}")
    return start, end


def _format_table(records: list[dict[str, str]]) -> str:
    """Format lesson records as a human-readable table.

    Columns: Date | Time | Subject | Type | Room | Teacher
    """
    if not records:
        return "(no classes scheduled)"

    headers = [header for header, _fields in _TABLE_COLUMNS]

    rows = []
    for record in records:
        row = []
        for _header, fields in _TABLE_COLUMNS:
            value = next((record[f] for f in fields if record.get(f)), "-")
            if fields[0] == "time_start" and value != "-" and record.get("time_end"):
                value = f"{value}-{record['time_end']}"
            row.append(value)
        rows.append(row)

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    header_line = " | ".join(h.ljust(widths[i]) for i, h in enumerate(headers))
    separator = "-+-".join("-" * w for w in widths)

    row_lines = []
    for row in rows:
        row_lines.append(
            " | ".join(cell.ljust(widths[i]) for i, cell in enumerate(row))
        )

    return "\n".join([header_line, separator, *row_lines])


def _run(args: argparse.Namespace) -> None:
    config = get_config()
    setup_logging(json_output=config.log_json, log_level=config.log_level)

    start, end = _compute_date_range(args.start, args.end, args.week_offset)

    if args.user:
        username = args.user
        password = getpass.getpass(f"Password for {username}: ")
    else:
        username, password = config.itmo_user, config.itmo_pass
    if not username or not password:
        _log("  ERROR: No credentials (set ITMO_USER / ITMO_PASS or pass --user)")
        sys.exit(1)

    _log(f"fetch_schedule: {start} .. {end}")

    access_token = TokenAcquirer(config).acquire_token(username, password)
    _log("  Logged in")

    with ScheduleFetcher(config) as fetcher:
        records = fetcher.fetch_lessons(access_token, start, end)
    _log(f"  Fetched {len(records)} lessons")

    if args.table:
        print(_format_table(records))
    elif args.output:
        output_file = Path(args.output)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(
            json.dumps(records, indent=2, ensure_ascii=False), encoding="utf-8"
        )
        _log(f"  Wrote {args.output}")
    else:
        print(json.dumps(records, indent=2, ensure_ascii=False))

    _log("fetch_schedule: done")


def main(args: argparse.Namespace) -> None:
    try:
        _run(args)
    except (ItmoClientError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main(_parse_args())
