"""Tests for GoogleSheetClient operations."""

from __future__ import annotations

import httpx
import pytest

from gsheet_api import (
    GetSpreadsheetOptions,
    GoogleSheetClient,
    GoogleSheetsTransport,
    InvalidRangeError,
    InvalidReferenceError,
    LocalFileTransport,
    MissingRangeError,
    StaticTokenAuth,
    ValueInputOption,
    ValueReadOptions,
    ValueRenderOption,
    ValueUpdateOptions,
)
from gsheet_api.models import Dimension

DEMO_SPREADSHEET_ID = "demo_spreadsheet"


def _recording_client(seen: list[httpx.Request]) -> GoogleSheetClient:
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"spreadsheetId": "abc"})

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    transport = GoogleSheetsTransport(StaticTokenAuth("t"), client=http_client)
    return GoogleSheetClient(transport)


class TestSpreadsheetOperations:
    """Tests for spreadsheet-level operations."""

    async def test_get(self, client: GoogleSheetClient) -> None:
        spreadsheet = await client.spreadsheet(DEMO_SPREADSHEET_ID).get()

        assert spreadsheet.spreadsheet_id == DEMO_SPREADSHEET_ID
        assert spreadsheet.title == "Quarterly Budget"
        assert [s.title for s in spreadsheet.sheets] == ["Sheet1", "Raw Data"]
        raw_data = spreadsheet.sheet("Raw Data")
        assert raw_data is not None
        assert raw_data.hidden
        assert spreadsheet.sheets[0].frozen_row_count == 1

    async def test_get_options_sent_as_params(self) -> None:
        seen: list[httpx.Request] = []
        client = _recording_client(seen)

        await client.spreadsheet("abc").get(
            GetSpreadsheetOptions(ranges=("A1:B2",), include_grid_data=True)
        )

        params = seen[0].url.params
        assert params.get_list("ranges") == ["A1:B2"]
        assert params["includeGridData"] == "true"
        assert "excludeTablesInBandedRanges" not in params

    async def test_get_rejects_bad_range_before_request(self) -> None:
        seen: list[httpx.Request] = []
        client = _recording_client(seen)

        with pytest.raises(InvalidRangeError):
            await client.spreadsheet("abc").get(
                GetSpreadsheetOptions(ranges=("A1:B2", "B2:A1"))
            )
        assert seen == []


class TestSheetOperations:
    """Tests for sheet-level operations against golden files."""

    async def test_get_all_values(self, client: GoogleSheetClient) -> None:
        sheet = client.spreadsheet(DEMO_SPREADSHEET_ID).sheet("Sheet1")
        value_range = await sheet.get_all_values()

        assert value_range.range == "Sheet1!A1:C3"
        assert value_range.major_dimension is Dimension.ROWS
        assert value_range.values is not None
        assert value_range.values[0] == ["Item", "Q1", "Q2"]

    async def test_get_all_cells(self, client: GoogleSheetClient) -> None:
        sheet = client.spreadsheet(DEMO_SPREADSHEET_ID).sheet("Sheet1")
        cells = await sheet.get_all_cells()

        assert len(cells) == 9
        assert [c.address for c in cells[:4]] == ["A1", "B1", "C1", "A2"]
        by_address = {c.address: c.value for c in cells}
        assert by_address["C2"] is None
        assert by_address["B3"] == ""
        assert by_address["C3"] == "340"
        assert all(c.sheet_id == DEMO_SPREADSHEET_ID for c in cells)
        assert all(c.sheet_title == "Sheet1" for c in cells)

    async def test_get_cell_map(self, client: GoogleSheetClient) -> None:
        sheet = client.spreadsheet(DEMO_SPREADSHEET_ID).sheet("Sheet1")
        cell_map = await sheet.get_cell_map()

        assert sorted(cell_map) == ["A", "B", "C"]
        assert cell_map["B"][2].value == "1200"
        assert cell_map["C"][2].value is None

    async def test_sheet_title_with_space(self, client: GoogleSheetClient) -> None:
        cells = (
            await client.spreadsheet(DEMO_SPREADSHEET_ID)
            .sheet("Raw Data")
            .get_all_cells()
        )

        assert [(c.address, c.value) for c in cells] == [
            ("A1", "1"),
            ("B1", "2.5"),
            ("A2", "TRUE"),
            ("B2", ""),
        ]

    async def test_cell_like_sheet_title_is_quoted(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200, json={"range": "'Q1'!A1:A1", "values": [["x"]]}
            )

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        transport = GoogleSheetsTransport(StaticTokenAuth("t"), client=http_client)
        sheet = GoogleSheetClient(transport).spreadsheet("sid").sheet("Q1")

        cells = await sheet.get_all_cells()

        path = seen[0].url.raw_path
        assert path.startswith(b"/v4/spreadsheets/sid/values/%27Q1%27?")
        assert [(c.address, c.sheet_title) for c in cells] == [("A1", "Q1")]

    async def test_missing_range(self, client: GoogleSheetClient) -> None:
        sheet = client.spreadsheet(DEMO_SPREADSHEET_ID).sheet("Broken")

        with pytest.raises(MissingRangeError):
            await sheet.get_all_cells()
        with pytest.raises(MissingRangeError):
            await sheet.get_cell_map()

    async def test_read_options_sent_as_params(self) -> None:
        seen: list[httpx.Request] = []
        client = _recording_client(seen)

        await client.spreadsheet("abc").sheet("Sheet1").get_all_values(
            ValueReadOptions(
                major_dimension=Dimension.COLUMNS,
                value_render_option=ValueRenderOption.UNFORMATTED_VALUE,
            )
        )

        params = seen[0].url.params
        assert params["majorDimension"] == "COLUMNS"
        assert params["valueRenderOption"] == "UNFORMATTED_VALUE"
        assert params["dateTimeRenderOption"] == "SERIAL_NUMBER"

    async def test_cells_always_requested_by_rows(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200, json={"range": "Sheet1!A1:B1", "values": [["x", "y"]]}
            )

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        transport = GoogleSheetsTransport(StaticTokenAuth("t"), client=http_client)
        sheet = GoogleSheetClient(transport).spreadsheet("abc").sheet("Sheet1")

        cells = await sheet.get_all_cells(
            ValueReadOptions(major_dimension=Dimension.COLUMNS)
        )

        assert seen[0].url.params["majorDimension"] == "ROWS"
        assert [(c.address, c.value) for c in cells] == [("A1", "x"), ("B1", "y")]

    async def test_batch_get_values(self, client: GoogleSheetClient) -> None:
        result = (
            await client.spreadsheet(DEMO_SPREADSHEET_ID)
            .sheet("Sheet1")
            .batch_get_values(["A1:B2", "D1:D2"])
        )

        assert [vr.range for vr in result.value_ranges] == [
            "Sheet1!A1:B2",
            "Sheet1!D1:D2",
        ]
        assert result.value_ranges[1].values is None

    async def test_batch_get_rejects_qualified_range(
        self, client: GoogleSheetClient
    ) -> None:
        sheet = client.spreadsheet(DEMO_SPREADSHEET_ID).sheet("Sheet1")

        with pytest.raises(InvalidRangeError, match="relative to sheet"):
            await sheet.batch_get_values(["Other!A1"])

    async def test_batch_get_rejects_malformed_range(
        self, client: GoogleSheetClient
    ) -> None:
        sheet = client.spreadsheet(DEMO_SPREADSHEET_ID).sheet("Sheet1")

        with pytest.raises(InvalidReferenceError):
            await sheet.batch_get_values(["A1", "1A"])

    async def test_batch_update_values(
        self, client: GoogleSheetClient, local_transport: LocalFileTransport
    ) -> None:
        result = (
            await client.spreadsheet(DEMO_SPREADSHEET_ID)
            .sheet("Raw Data")
            .batch_update_values(
                {"A1:B2": [["a", "b"], ["c", "d"]], "D4": [["=SUM(A1:A2)"]]},
                ValueUpdateOptions(value_input_option=ValueInputOption.RAW),
            )
        )

        assert result.total_updated_cells == 5
        assert [r.updated_range for r in result.responses] == [
            "'Raw Data'!A1:B2",
            "'Raw Data'!D4",
        ]
        body = local_transport.batch_updates[0]["body"]
        assert body["valueInputOption"] == "RAW"
        assert body["includeValuesInResponse"] is False
        assert body["data"][0] == {
            "range": "'Raw Data'!A1:B2",
            "majorDimension": "ROWS",
            "values": [["a", "b"], ["c", "d"]],
        }

    async def test_batch_update_validates_before_request(
        self, client: GoogleSheetClient, local_transport: LocalFileTransport
    ) -> None:
        sheet = client.spreadsheet(DEMO_SPREADSHEET_ID).sheet("Sheet1")

        with pytest.raises(InvalidRangeError):
            await sheet.batch_update_values({"A1": [["ok"]], "C3:A1": [["bad"]]})
        assert local_transport.batch_updates == []


async def test_client_context_manager_closes_transport() -> None:
    """Leaving the async context closes the owned HTTP client."""
    transport = GoogleSheetsTransport(StaticTokenAuth("t"))

    async with GoogleSheetClient(transport) as client:
        assert client.transport is transport

    assert transport._client.is_closed
