"""Typed models for Google Sheets API payloads.

JSON responses are mapped into frozen dataclasses through ``from_dict``.
Objects that are sent back to the API provide ``to_dict`` producing the
camelCase wire shape.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from gsheet_api.exceptions import DeserializationError


class Dimension(str, Enum):
    """Major dimension of a 2-D value array."""

    DIMENSION_UNSPECIFIED = "DIMENSION_UNSPECIFIED"
    ROWS = "ROWS"
    COLUMNS = "COLUMNS"


class ValueRenderOption(str, Enum):
    """How values should be represented in the output."""

    FORMATTED_VALUE = "FORMATTED_VALUE"
    UNFORMATTED_VALUE = "UNFORMATTED_VALUE"
    FORMULA = "FORMULA"


class DateTimeRenderOption(str, Enum):
    """How dates, times and durations should be represented in the output."""

    SERIAL_NUMBER = "SERIAL_NUMBER"
    FORMATTED_STRING = "FORMATTED_STRING"


class ValueInputOption(str, Enum):
    """How input data should be interpreted."""

    INPUT_VALUE_OPTION_UNSPECIFIED = "INPUT_VALUE_OPTION_UNSPECIFIED"
    RAW = "RAW"
    USER_ENTERED = "USER_ENTERED"


@dataclass(frozen=True)
class GridRange:
    """A rectangular bound over rows and columns.

    All indexes are 1-based and inclusive, matching A1 notation ("A1:B2" is
    rows 1..2, columns 1..2). Use ``to_wire`` to obtain the API's 0-based,
    half-open ``GridRange`` object.
    """

    start_row: int
    end_row: int
    start_column: int
    end_column: int

    @property
    def row_count(self) -> int:
        return self.end_row - self.start_row + 1

    @property
    def column_count(self) -> int:
        return self.end_column - self.start_column + 1

    def to_wire(self, sheet_id: int | None = None) -> dict[str, int]:
        """Convert to the API GridRange dict (0-based, end exclusive)."""
        result = {
            "startRowIndex": self.start_row - 1,
            "endRowIndex": self.end_row,
            "startColumnIndex": self.start_column - 1,
            "endColumnIndex": self.end_column,
        }
        if sheet_id is not None:
            result["sheetId"] = sheet_id
        return result


@dataclass(frozen=True)
class Cell:
    """One addressed cell of a value range."""

    address: str
    sheet_id: str
    sheet_title: str
    value: str | None
    column_index: int
    column_letter: str
    row_index: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "sheetId": self.sheet_id,
            "sheetTitle": self.sheet_title,
            "value": self.value,
            "columnIndex": self.column_index,
            "columnLetter": self.column_letter,
            "rowIndex": self.row_index,
        }


@dataclass(frozen=True)
class ValueRange:
    """Data within a range of a spreadsheet.

    ``values`` is a list of rows (or columns, for ``Dimension.COLUMNS``).
    Trailing empty rows and cells are omitted by the API, so inner lists may
    be shorter than the range they describe.
    """

    range: str | None = None
    major_dimension: Dimension | None = None
    values: list[list[str]] | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ValueRange:
        major = data.get("majorDimension")
        try:
            major_dimension = Dimension(major) if major is not None else None
        except ValueError as e:
            raise DeserializationError(f"Unknown majorDimension: {major!r}") from e

        return cls(
            range=data.get("range"),
            major_dimension=major_dimension,
            values=_parse_values(data.get("values")),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        if self.range is not None:
            result["range"] = self.range
        if self.major_dimension is not None:
            result["majorDimension"] = self.major_dimension.value
        if self.values is not None:
            result["values"] = self.values
        return result


@dataclass(frozen=True)
class BatchValueRanges:
    """Response of values:batchGet."""

    spreadsheet_id: str
    value_ranges: tuple[ValueRange, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BatchValueRanges:
        return cls(
            spreadsheet_id=data.get("spreadsheetId", ""),
            value_ranges=tuple(
                ValueRange.from_dict(vr) for vr in data.get("valueRanges", [])
            ),
        )


@dataclass(frozen=True)
class UpdateValuesResponse:
    """Response when updating a range of values."""

    spreadsheet_id: str
    updated_range: str
    updated_rows: int = 0
    updated_columns: int = 0
    updated_cells: int = 0
    updated_data: ValueRange | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> UpdateValuesResponse:
        updated_data = data.get("updatedData")
        return cls(
            spreadsheet_id=data.get("spreadsheetId", ""),
            updated_range=data.get("updatedRange", ""),
            updated_rows=data.get("updatedRows", 0),
            updated_columns=data.get("updatedColumns", 0),
            updated_cells=data.get("updatedCells", 0),
            updated_data=(
                ValueRange.from_dict(updated_data) if updated_data is not None else None
            ),
        )


@dataclass(frozen=True)
class BatchUpdateValuesResponse:
    """Response of values:batchUpdate."""

    spreadsheet_id: str
    total_updated_rows: int = 0
    total_updated_columns: int = 0
    total_updated_cells: int = 0
    total_updated_sheets: int = 0
    responses: tuple[UpdateValuesResponse, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BatchUpdateValuesResponse:
        return cls(
            spreadsheet_id=data.get("spreadsheetId", ""),
            total_updated_rows=data.get("totalUpdatedRows", 0),
            total_updated_columns=data.get("totalUpdatedColumns", 0),
            total_updated_cells=data.get("totalUpdatedCells", 0),
            total_updated_sheets=data.get("totalUpdatedSheets", 0),
            responses=tuple(
                UpdateValuesResponse.from_dict(r) for r in data.get("responses", [])
            ),
        )


@dataclass(frozen=True)
class SheetProperties:
    """Properties of a single sheet within a spreadsheet."""

    sheet_id: int
    title: str
    index: int = 0
    sheet_type: str = "GRID"
    hidden: bool = False
    row_count: int = 0
    column_count: int = 0
    frozen_row_count: int = 0
    frozen_column_count: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SheetProperties:
        grid_props = data.get("gridProperties", {})
        return cls(
            sheet_id=data.get("sheetId", 0),
            title=data.get("title", "Sheet1"),
            index=data.get("index", 0),
            sheet_type=data.get("sheetType", "GRID"),
            hidden=data.get("hidden", False),
            row_count=grid_props.get("rowCount", 0),
            column_count=grid_props.get("columnCount", 0),
            frozen_row_count=grid_props.get("frozenRowCount", 0),
            frozen_column_count=grid_props.get("frozenColumnCount", 0),
        )


@dataclass(frozen=True)
class Spreadsheet:
    """A spreadsheet and the properties of its sheets.

    Formatting, charts, filters and grid data are not modelled; the
    original response is kept on ``raw``.
    """

    spreadsheet_id: str
    title: str
    locale: str | None = None
    time_zone: str | None = None
    spreadsheet_url: str | None = None
    sheets: tuple[SheetProperties, ...] = ()
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Spreadsheet:
        props = data.get("properties", {})
        return cls(
            spreadsheet_id=data.get("spreadsheetId", ""),
            title=props.get("title", ""),
            locale=props.get("locale"),
            time_zone=props.get("timeZone"),
            spreadsheet_url=data.get("spreadsheetUrl"),
            sheets=tuple(
                SheetProperties.from_dict(sheet.get("properties", {}))
                for sheet in data.get("sheets", [])
            ),
            raw=data,
        )

    def sheet(self, title: str) -> SheetProperties | None:
        """Find a sheet by title."""
        for sheet in self.sheets:
            if sheet.title == title:
                return sheet
        return None


def _parse_values(values: Any) -> list[list[str]] | None:
    """Validate a wire values array and render its scalars as text."""
    if values is None:
        return None
    if not isinstance(values, list):
        raise DeserializationError(
            f"ValueRange.values must be a list of lists, got {type(values).__name__}"
        )

    rows: list[list[str]] = []
    for row in values:
        if not isinstance(row, list):
            raise DeserializationError(
                f"ValueRange.values rows must be lists, got {type(row).__name__}"
            )
        rows.append([_value_to_string(v) for v in row])
    return rows


def _value_to_string(value: Any) -> str:
    # UNFORMATTED_VALUE reads return numbers and booleans
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            raise DeserializationError(f"Non-finite cell value: {value!r}")
        return str(format_json_number(value))
    if isinstance(value, str):
        return value
    raise DeserializationError(f"Unsupported cell value: {value!r}")


def format_json_number(value: float) -> float | int:
    """Format a number for JSON, converting integers to int type.

    This prevents numbers like 1.0 from appearing in output.
    """
    if value == int(value):
        return int(value)
    return value
