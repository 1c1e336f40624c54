"""
Google Sheets API Types

Wire shapes of the Google Sheets API v4 objects this package sends and
receives. These TypedDict classes provide static type checking for request
and response objects without runtime overhead; the typed domain models in
``gsheet_api.models`` are built from them.
"""

from __future__ import annotations

from typing import Any, TypedDict

# =============================================================================
# Values
# =============================================================================


class ValueRange(TypedDict, total=False):
    """Data within a range of the spreadsheet."""

    # The major dimension of the values.
    # Enum values:
    #   "DIMENSION_UNSPECIFIED": The default value, do not use.
    #   "ROWS": Operates on the rows of a sheet.
    #   "COLUMNS": Operates on the columns of a sheet.
    majorDimension: str

    # The range the values cover, in A1 notation. For output, this range
    # indicates the entire requested range, even though the values will
    # exclude trailing rows and columns.
    range: str

    # The data that was read or to be written. Empty trailing rows and
    # columns are omitted.
    values: list[list[Any]]


class BatchGetValuesResponse(TypedDict, total=False):
    """The response when retrieving more than one range of values."""

    # The ID of the spreadsheet the data was retrieved from.
    spreadsheetId: str

    # The requested values, in the same order as the requested ranges.
    valueRanges: list[ValueRange]


class BatchUpdateValuesRequest(TypedDict, total=False):
    """The request for updating more than one range of values."""

    # The new values to apply to the spreadsheet.
    data: list[ValueRange]

    # Determines if the update response should include the values of the
    # cells that were updated.
    includeValuesInResponse: bool

    # Determines how dates, times, and durations in the response should be
    # rendered.
    responseDateTimeRenderOption: str

    # Determines how values in the response should be rendered.
    responseValueRenderOption: str

    # How the input data should be interpreted.
    # Enum values:
    #   "INPUT_VALUE_OPTION_UNSPECIFIED": Default input value. Do not use.
    #   "RAW": The values the user has entered will not be parsed.
    #   "USER_ENTERED": The values will be parsed as if typed into the UI.
    valueInputOption: str


class UpdateValuesResponse(TypedDict, total=False):
    """The response when updating a range of values."""

    spreadsheetId: str
    updatedCells: int
    updatedColumns: int
    updatedData: ValueRange
    updatedRange: str
    updatedRows: int


class BatchUpdateValuesResponse(TypedDict, total=False):
    """The response when updating more than one range of values."""

    # One UpdateValuesResponse per requested range, in the same order.
    responses: list[UpdateValuesResponse]
    spreadsheetId: str
    totalUpdatedCells: int
    totalUpdatedColumns: int
    totalUpdatedRows: int
    totalUpdatedSheets: int


# =============================================================================
# Spreadsheet metadata
# =============================================================================


class GridProperties(TypedDict, total=False):
    """Properties of a grid."""

    columnCount: int
    frozenColumnCount: int
    frozenRowCount: int
    rowCount: int


class SheetProperties(TypedDict, total=False):
    """Properties of a sheet."""

    gridProperties: GridProperties
    hidden: bool
    index: int
    sheetId: int
    sheetType: str
    title: str


class Sheet(TypedDict, total=False):
    """A sheet in a spreadsheet. Only the properties are modelled."""

    properties: SheetProperties


class SpreadsheetProperties(TypedDict, total=False):
    """Properties of a spreadsheet."""

    locale: str
    timeZone: str
    title: str


class Spreadsheet(TypedDict, total=False):
    """Resource that represents a spreadsheet."""

    properties: SpreadsheetProperties
    sheets: list[Sheet]
    spreadsheetId: str
    spreadsheetUrl: str
