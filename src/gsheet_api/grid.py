"""Reconcile value arrays with the range they were read from.

The values API omits trailing empty rows and cells, so a ValueRange for
"A1:C3" may carry fewer rows, or shorter rows, than the range describes.
The functions here walk every coordinate of the range and emit one Cell per
coordinate, with ``value=None`` wherever the array has no entry.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from gsheet_api.exceptions import MissingRangeError
from gsheet_api.models import Cell
from gsheet_api.utils import format_column, parse_range

if TYPE_CHECKING:
    from collections.abc import Iterator

    from gsheet_api.models import ValueRange


def to_cell_list(
    sheet_id: str, sheet_title: str, value_range: ValueRange
) -> list[Cell]:
    """Convert a ValueRange to addressed cells in row-major order.

    Args:
        sheet_id: Identifier carried on every Cell
        sheet_title: Sheet title carried on every Cell
        value_range: ValueRange as returned by the API

    Returns:
        Exactly ``row_count * column_count`` cells: A1, B1, ..., A2, B2, ...

    Raises:
        MissingRangeError: If ``value_range.range`` is None.
        InvalidRangeError, InvalidReferenceError: If the range is malformed.
    """
    return list(_iter_cells(sheet_id, sheet_title, value_range))


def to_column_grouped_map(
    sheet_id: str, sheet_title: str, value_range: ValueRange
) -> dict[str, dict[int, Cell]]:
    """Convert a ValueRange to cells keyed by column letter, then row index.

    Every column of the range maps every row of the range, including rows
    whose value is absent, so ``result["B"][3]`` always exists for "A1:C3".
    """
    grouped: dict[str, dict[int, Cell]] = {}
    for cell in _iter_cells(sheet_id, sheet_title, value_range):
        grouped.setdefault(cell.column_letter, {})[cell.row_index] = cell
    return grouped


def _iter_cells(
    sheet_id: str, sheet_title: str, value_range: ValueRange
) -> Iterator[Cell]:
    if value_range.range is None:
        raise MissingRangeError()

    grid_range = parse_range(value_range.range)
    # Always indexed as values[row][column]; callers request ROWS
    values = value_range.values or []

    # Letters depend only on the column, compute them once per range
    letters = {
        col: format_column(col)
        for col in range(grid_range.start_column, grid_range.end_column + 1)
    }

    for row_index in range(grid_range.start_row, grid_range.end_row + 1):
        for col_index in range(grid_range.start_column, grid_range.end_column + 1):
            value = _lookup(
                values,
                row_index - grid_range.start_row,
                col_index - grid_range.start_column,
            )
            letter = letters[col_index]
            yield Cell(
                address=f"{letter}{row_index}",
                sheet_id=sheet_id,
                sheet_title=sheet_title,
                value=value,
                column_index=col_index,
                column_letter=letter,
                row_index=row_index,
            )


def _lookup(values: list[list[str]], row: int, column: int) -> str | None:
    if row >= len(values):
        return None
    line = values[row]
    if column >= len(line):
        return None
    return line[column]
