"""CLI entry point for gsheet_api.

Usage:
    python -m gsheet_api values <spreadsheet_id_or_url> <sheet> [--format cells]
    python -m gsheet_api info <spreadsheet_id_or_url>
    python -m gsheet_api parse-range <range>
"""

from __future__ import annotations

import argparse
import asyncio
import json
import re
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from gsheet_api.client import GoogleSheetClient
from gsheet_api.config import LOG_LEVELS, Settings, get_settings
from gsheet_api.exceptions import GSheetError
from gsheet_api.logging import configure_logging
from gsheet_api.transport import LocalFileTransport
from gsheet_api.utils import format_range, parse_range


def parse_spreadsheet_id(id_or_url: str) -> str:
    """Extract spreadsheet ID from a URL or return as-is if already an ID."""
    # https://docs.google.com/spreadsheets/d/SPREADSHEET_ID/edit...
    url_pattern = r"docs\.google\.com/spreadsheets/d/([a-zA-Z0-9_-]+)"
    match = re.search(url_pattern, id_or_url)
    if match:
        return match.group(1)
    return id_or_url


def _build_client(args: argparse.Namespace) -> GoogleSheetClient:
    if args.golden_dir:
        return GoogleSheetClient(LocalFileTransport(Path(args.golden_dir)))
    settings: Settings = args.settings
    if args.service_account:
        settings = settings.model_copy(
            update={"service_account_path": args.service_account}
        )
    return GoogleSheetClient.from_settings(settings)


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


async def cmd_values(args: argparse.Namespace) -> int:
    """Print the values of a sheet."""
    spreadsheet_id = parse_spreadsheet_id(args.spreadsheet)

    async with _build_client(args) as client:
        sheet = client.spreadsheet(spreadsheet_id).sheet(args.sheet)
        if args.format == "cells":
            cells = await sheet.get_all_cells()
            _print_json([cell.to_dict() for cell in cells])
        elif args.format == "map":
            cell_map = await sheet.get_cell_map()
            _print_json(
                {
                    column: {str(row): cell.value for row, cell in rows.items()}
                    for column, rows in cell_map.items()
                }
            )
        else:
            value_range = await sheet.get_all_values()
            _print_json(value_range.to_dict())
    return 0


async def cmd_info(args: argparse.Namespace) -> int:
    """Print spreadsheet title and sheet properties."""
    spreadsheet_id = parse_spreadsheet_id(args.spreadsheet)

    async with _build_client(args) as client:
        spreadsheet = await client.spreadsheet(spreadsheet_id).get()

    print(f"{spreadsheet.title} ({spreadsheet.spreadsheet_id})")
    for sheet in spreadsheet.sheets:
        hidden = " [hidden]" if sheet.hidden else ""
        print(
            f"  {sheet.index}: {sheet.title} (id={sheet.sheet_id}, "
            f"{sheet.row_count}x{sheet.column_count}){hidden}"
        )
    return 0


def cmd_parse_range(args: argparse.Namespace) -> int:
    """Print the 1-based bounds of an A1 range."""
    grid_range = parse_range(args.range)
    _print_json(
        {
            "range": format_range(grid_range),
            "startRow": grid_range.start_row,
            "endRow": grid_range.end_row,
            "startColumn": grid_range.start_column,
            "endColumn": grid_range.end_column,
            "wire": grid_range.to_wire(),
        }
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gsheet-api",
        description="Read Google Sheets values from the command line",
    )
    parser.add_argument(
        "--service-account",
        help="Path to service account JSON file (or set SERVICE_ACCOUNT_PATH)",
    )
    parser.add_argument(
        "--golden-dir",
        help="Read from local golden files instead of the API",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Minimum log level (default: GSHEET_LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Write logs as JSON lines (or set GSHEET_LOG_JSON)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    values_parser = subparsers.add_parser("values", help="Print the values of a sheet")
    values_parser.add_argument("spreadsheet", help="Spreadsheet ID or URL")
    values_parser.add_argument("sheet", help="Sheet title")
    values_parser.add_argument(
        "--format",
        choices=["values", "cells", "map"],
        default="values",
        help="values: raw ValueRange, cells: addressed cell list, "
        "map: values grouped by column then row",
    )

    info_parser = subparsers.add_parser("info", help="Print spreadsheet metadata")
    info_parser.add_argument("spreadsheet", help="Spreadsheet ID or URL")

    range_parser = subparsers.add_parser(
        "parse-range", help="Show the row/column bounds of an A1 range"
    )
    range_parser.add_argument("range", help='A1 range, e.g. "Sheet1!A1:B10"')

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        args.settings = get_settings()
    except ValidationError as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1
    configure_logging(
        json_output=args.json_logs or args.settings.log_json,
        log_level=args.log_level or args.settings.log_level,
    )

    try:
        if args.command == "values":
            return asyncio.run(cmd_values(args))
        if args.command == "info":
            return asyncio.run(cmd_info(args))
        return cmd_parse_range(args)
    except GSheetError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
