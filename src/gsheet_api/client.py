"""GoogleSheetClient - Main API for gsheet_api.

Operations are reached through a small chain of objects:

    client.spreadsheet(spreadsheet_id)   -> SpreadsheetOperations
        .get(options)                    -> Spreadsheet
        .sheet(title)                    -> SheetOperations
            .get_all_values(options)     -> ValueRange
            .get_all_cells(options)      -> list[Cell]
            .get_cell_map(options)       -> dict[column, dict[row, Cell]]
            .batch_get_values(ranges)    -> BatchValueRanges
            .batch_update_values(data)   -> BatchUpdateValuesResponse

Request parameters are collected in plain option dataclasses. Every A1
range supplied by the caller is validated before a request is sent.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from loguru import logger

from gsheet_api.auth import ServiceAccountAuth
from gsheet_api.config import get_settings
from gsheet_api.exceptions import InvalidRangeError, MissingRangeError
from gsheet_api.grid import to_cell_list, to_column_grouped_map
from gsheet_api.models import (
    BatchUpdateValuesResponse,
    BatchValueRanges,
    DateTimeRenderOption,
    Dimension,
    Spreadsheet,
    ValueInputOption,
    ValueRange,
    ValueRenderOption,
)
from gsheet_api.transport import GoogleSheetsTransport
from gsheet_api.utils import parse_range, qualify_range, quote_sheet_title

if TYPE_CHECKING:
    from types import TracebackType

    from gsheet_api import api_types
    from gsheet_api.config import Settings
    from gsheet_api.models import Cell
    from gsheet_api.transport import Transport


@dataclass(frozen=True)
class ValueReadOptions:
    """Query parameters for reading values."""

    major_dimension: Dimension = Dimension.ROWS
    value_render_option: ValueRenderOption = ValueRenderOption.FORMATTED_VALUE
    date_time_render_option: DateTimeRenderOption = DateTimeRenderOption.SERIAL_NUMBER

    def to_params(self) -> list[tuple[str, str]]:
        return [
            ("majorDimension", self.major_dimension.value),
            ("valueRenderOption", self.value_render_option.value),
            ("dateTimeRenderOption", self.date_time_render_option.value),
        ]


@dataclass(frozen=True)
class GetSpreadsheetOptions:
    """Query parameters for fetching spreadsheet metadata."""

    ranges: tuple[str, ...] = ()
    include_grid_data: bool = False
    exclude_tables_in_banded_ranges: bool = False

    def to_params(self) -> list[tuple[str, str]]:
        params = [("ranges", r) for r in self.ranges]
        if self.include_grid_data:
            params.append(("includeGridData", "true"))
        if self.exclude_tables_in_banded_ranges:
            params.append(("excludeTablesInBandedRanges", "true"))
        return params


@dataclass(frozen=True)
class ValueUpdateOptions:
    """Body parameters for values:batchUpdate."""

    value_input_option: ValueInputOption = ValueInputOption.USER_ENTERED
    include_values_in_response: bool = False
    response_value_render_option: ValueRenderOption = ValueRenderOption.FORMATTED_VALUE
    response_date_time_render_option: DateTimeRenderOption = (
        DateTimeRenderOption.SERIAL_NUMBER
    )


class GoogleSheetClient:
    """Client for the Google Sheets values API.

    Example:
        >>> from gsheet_api import GoogleSheetClient
        >>> async with GoogleSheetClient.from_settings() as client:
        ...     spreadsheet = client.spreadsheet("1BxiMVs0XRA5nFMdKvBdBZjgmUUqptlbs")
        ...     cells = await spreadsheet.sheet("Sheet1").get_all_cells()
    """

    def __init__(self, transport: Transport) -> None:
        """Initialize the client.

        Args:
            transport: Transport implementation for API calls
        """
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> GoogleSheetClient:
        """Build a service-account authenticated client from configuration."""
        settings = settings or get_settings()
        auth = ServiceAccountAuth.from_settings(settings)
        transport = GoogleSheetsTransport(
            auth,
            base_url=settings.api_base_url,
            timeout=settings.timeout,
        )
        return cls(transport)

    @property
    def transport(self) -> Transport:
        return self._transport

    def spreadsheet(self, spreadsheet_id: str) -> SpreadsheetOperations:
        """Operations on the spreadsheet with the given ID (from its URL)."""
        return SpreadsheetOperations(self, spreadsheet_id)

    async def close(self) -> None:
        await self._transport.close()

    async def __aenter__(self) -> GoogleSheetClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()


class SpreadsheetOperations:
    """Operations on a single spreadsheet."""

    def __init__(self, client: GoogleSheetClient, spreadsheet_id: str) -> None:
        self.client = client
        self.spreadsheet_id = spreadsheet_id

    def sheet(self, title: str) -> SheetOperations:
        return SheetOperations(self, title)

    async def get(self, options: GetSpreadsheetOptions | None = None) -> Spreadsheet:
        """Fetch spreadsheet properties and the properties of its sheets."""
        options = options or GetSpreadsheetOptions()
        for range_text in options.ranges:
            parse_range(range_text)

        data = await self.client.transport.get_spreadsheet(
            self.spreadsheet_id, options.to_params()
        )
        return Spreadsheet.from_dict(dict(data))


class SheetOperations:
    """Operations on a single sheet, addressed by title."""

    def __init__(self, spreadsheet: SpreadsheetOperations, sheet_title: str) -> None:
        self.spreadsheet = spreadsheet
        self.sheet_title = sheet_title

    @property
    def _transport(self) -> Transport:
        return self.spreadsheet.client.transport

    @property
    def _spreadsheet_id(self) -> str:
        return self.spreadsheet.spreadsheet_id

    async def get_all_values(
        self, options: ValueReadOptions | None = None
    ) -> ValueRange:
        """Read every value of the sheet."""
        options = options or ValueReadOptions()
        data = await self._transport.get_values(
            self._spreadsheet_id,
            quote_sheet_title(self.sheet_title),
            options.to_params(),
        )
        return ValueRange.from_dict(dict(data))

    async def get_all_cells(
        self, options: ValueReadOptions | None = None
    ) -> list[Cell]:
        """Read the sheet as addressed cells in row-major order.

        Values are always requested with ``majorDimension=ROWS``.

        Raises:
            MissingRangeError: If the response carries no range.
        """
        value_range = await self._get_row_major_values(options)
        return to_cell_list(self._spreadsheet_id, self.sheet_title, value_range)

    async def get_cell_map(
        self, options: ValueReadOptions | None = None
    ) -> dict[str, dict[int, Cell]]:
        """Read the sheet as cells keyed by column letter, then row index."""
        value_range = await self._get_row_major_values(options)
        return to_column_grouped_map(
            self._spreadsheet_id, self.sheet_title, value_range
        )

    async def batch_get_values(
        self,
        ranges: list[str],
        options: ValueReadOptions | None = None,
    ) -> BatchValueRanges:
        """Read several ranges of this sheet, e.g. ["A1:B2", "D5"].

        Ranges are relative to this sheet and are validated before the
        request is sent.
        """
        options = options or ValueReadOptions()
        qualified = [self._qualify(r) for r in ranges]
        data = await self._transport.batch_get_values(
            self._spreadsheet_id, qualified, options.to_params()
        )
        return BatchValueRanges.from_dict(dict(data))

    async def batch_update_values(
        self,
        updates: dict[str, list[list[str]]],
        options: ValueUpdateOptions | None = None,
    ) -> BatchUpdateValuesResponse:
        """Write values to several ranges of this sheet.

        Args:
            updates: Mapping of range (relative to this sheet) to rows of values
            options: How the values are interpreted and what is returned
        """
        options = options or ValueUpdateOptions()
        data: list[api_types.ValueRange] = [
            {
                "range": self._qualify(range_text),
                "majorDimension": Dimension.ROWS.value,
                "values": [list(row) for row in values],
            }
            for range_text, values in updates.items()
        ]
        body: api_types.BatchUpdateValuesRequest = {
            "valueInputOption": options.value_input_option.value,
            "data": data,
            "includeValuesInResponse": options.include_values_in_response,
            "responseValueRenderOption": options.response_value_render_option.value,
            "responseDateTimeRenderOption": (
                options.response_date_time_render_option.value
            ),
        }
        result = await self._transport.batch_update_values(self._spreadsheet_id, body)
        return BatchUpdateValuesResponse.from_dict(dict(result))

    def _qualify(self, range_text: str) -> str:
        # Raises before any request is issued
        if "!" in range_text:
            raise InvalidRangeError(
                range_text, f"ranges must be relative to sheet {self.sheet_title!r}"
            )
        parse_range(range_text)
        return qualify_range(self.sheet_title, range_text)

    async def _get_row_major_values(
        self, options: ValueReadOptions | None
    ) -> ValueRange:
        # Cells are reconciled as values[row][column]
        options = replace(
            options or ValueReadOptions(), major_dimension=Dimension.ROWS
        )
        value_range = await self.get_all_values(options)
        self._require_range(value_range)
        return value_range

    def _require_range(self, value_range: ValueRange) -> None:
        if value_range.range is None:
            logger.warning(
                "Values response for sheet {!r} has no range", self.sheet_title
            )
            raise MissingRangeError()
