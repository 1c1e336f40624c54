"""
A1 notation helpers for gsheet_api.

Converts between A1 references ("B3", "Sheet1!A1:B10") and 1-based column
and row indexes. Column letters use bijective base 26: A=1 ... Z=26, AA=27.
"""

from __future__ import annotations

import string

from loguru import logger

from gsheet_api.exceptions import InvalidRangeError, InvalidReferenceError
from gsheet_api.models import GridRange

_LETTERS = frozenset(string.ascii_letters)
_DIGITS = frozenset(string.digits)


def parse_cell_reference(text: str) -> tuple[int, int]:
    """Convert an A1 cell reference to 1-based (column_index, row_index).

    Examples:
        A1 -> (1, 1), B3 -> (2, 3), AA10 -> (27, 10), aa10 -> (27, 10)

    Raises:
        InvalidReferenceError: On any character other than leading ASCII
            letters followed by ASCII digits, or if either index is zero.
    """
    column = 0
    row = 0
    in_column = True

    for char in text:
        if in_column and char in _LETTERS:
            column = column * 26 + (ord(char.upper()) - ord("A") + 1)
        elif char in _DIGITS:
            in_column = False
            row = row * 10 + (ord(char) - ord("0"))
        else:
            raise InvalidReferenceError(text, f"unexpected character {char!r}")

    if column == 0:
        raise InvalidReferenceError(text, "missing column letters")
    if row == 0:
        raise InvalidReferenceError(text, "missing or zero row number")
    return column, row


def format_column(column_index: int) -> str:
    """Convert a 1-based column index to A1 column letter(s).

    Examples:
        1 -> A, 26 -> Z, 27 -> AA, 52 -> AZ, 703 -> AAA
    """
    if column_index <= 0:
        raise InvalidReferenceError(str(column_index), "column index must be >= 1")

    letters: list[str] = []
    n = column_index
    while n > 0:
        n, rem = divmod(n - 1, 26)
        letters.append(chr(ord("A") + rem))
    return "".join(reversed(letters))


def format_cell_reference(column_index: int, row_index: int) -> str:
    """Convert 1-based column and row indexes to an A1 address like "C10"."""
    if row_index <= 0:
        raise InvalidReferenceError(str(row_index), "row index must be >= 1")
    return f"{format_column(column_index)}{row_index}"


def split_sheet_qualifier(text: str) -> tuple[str, str]:
    """Split "Sheet1!A1:B10" into ("Sheet1", "A1:B10").

    Raises:
        InvalidRangeError: If there is no "!" or more than one.
    """
    stripped = text.strip()
    parts = stripped.split("!")
    if len(parts) != 2:
        raise InvalidRangeError(
            text, "expected exactly one '!' between sheet name and range"
        )
    return parts[0], parts[1]


def parse_range(text: str) -> GridRange:
    """Parse an A1 range into a 1-based inclusive GridRange.

    Accepts "A1:B10", a single cell "C3" (a 1x1 range) and sheet-qualified
    ranges such as "Sheet1!A1:B10". The sheet name is discarded.

    Raises:
        InvalidRangeError: On a malformed range or reversed bounds.
        InvalidReferenceError: If either cell reference is malformed.
    """
    range_part = text.strip()
    if "!" in range_part:
        _, range_part = split_sheet_qualifier(range_part)

    tokens = range_part.split(":")
    if len(tokens) == 1:
        start = end = tokens[0]
    elif len(tokens) == 2:
        start, end = tokens
    else:
        raise InvalidRangeError(text, "expected at most one ':'")

    start_column, start_row = parse_cell_reference(start)
    end_column, end_row = parse_cell_reference(end)

    if start_row > end_row or start_column > end_column:
        logger.debug("Rejecting reversed range {}", text)
        raise InvalidRangeError(text, "range start must not be after range end")

    return GridRange(
        start_row=start_row,
        end_row=end_row,
        start_column=start_column,
        end_column=end_column,
    )


def format_range(grid_range: GridRange) -> str:
    """Convert a GridRange back to A1 notation.

    Examples:
        GridRange(1, 1, 1, 1) -> A1, GridRange(1, 10, 1, 2) -> A1:B10
    """
    start = format_cell_reference(grid_range.start_column, grid_range.start_row)
    if grid_range.row_count == 1 and grid_range.column_count == 1:
        return start
    end = format_cell_reference(grid_range.end_column, grid_range.end_row)
    return f"{start}:{end}"


def quote_sheet_title(title: str) -> str:
    """Escape sheet title for use in A1 notation ranges.

    Sheet names containing spaces, special characters, starting with
    digits, or that read as a cell reference ("Q1", "FY2024") need to be
    wrapped in single quotes.
    """
    needs_quoting = (
        " " in title
        or "'" in title
        or "!" in title
        or ":" in title
        or (len(title) > 0 and title[0].isdigit())
        or _is_cell_reference(title)
    )
    if needs_quoting:
        escaped = title.replace("'", "''")
        return f"'{escaped}'"
    return title


def _is_cell_reference(text: str) -> bool:
    try:
        parse_cell_reference(text)
    except InvalidReferenceError:
        return False
    return True


def qualify_range(sheet_title: str, range_text: str) -> str:
    """Prefix a range with its sheet, e.g. ("My Sheet", "A1") -> 'My Sheet'!A1."""
    return f"{quote_sheet_title(sheet_title)}!{range_text}"
