"""gsheet_api - Typed async client for the Google Sheets values API.

Authenticates with a service account, reads and writes cell ranges, and
maps JSON payloads to typed models. Values read from a sheet can be
reconciled into addressed cells with A1 coordinates.
"""

__version__ = "0.1.0"

from gsheet_api.auth import (
    AccessToken,
    AuthProvider,
    ServiceAccountAuth,
    StaticTokenAuth,
)
from gsheet_api.client import (
    GetSpreadsheetOptions,
    GoogleSheetClient,
    SheetOperations,
    SpreadsheetOperations,
    ValueReadOptions,
    ValueUpdateOptions,
)
from gsheet_api.config import Settings, get_settings
from gsheet_api.exceptions import (
    A1NotationError,
    APIError,
    AuthenticationError,
    AuthError,
    DeserializationError,
    GSheetError,
    InvalidRangeError,
    InvalidReferenceError,
    MissingRangeError,
    NotFoundError,
    TransportError,
)
from gsheet_api.grid import to_cell_list, to_column_grouped_map
from gsheet_api.models import (
    BatchUpdateValuesResponse,
    BatchValueRanges,
    Cell,
    DateTimeRenderOption,
    Dimension,
    GridRange,
    SheetProperties,
    Spreadsheet,
    UpdateValuesResponse,
    ValueInputOption,
    ValueRange,
    ValueRenderOption,
)
from gsheet_api.transport import (
    GoogleSheetsTransport,
    LocalFileTransport,
    Transport,
)
from gsheet_api.utils import (
    format_cell_reference,
    format_column,
    format_range,
    parse_cell_reference,
    parse_range,
    split_sheet_qualifier,
)

__all__ = [
    "A1NotationError",
    "APIError",
    "AccessToken",
    "AuthError",
    "AuthProvider",
    "AuthenticationError",
    "BatchUpdateValuesResponse",
    "BatchValueRanges",
    "Cell",
    "DateTimeRenderOption",
    "DeserializationError",
    "Dimension",
    "GSheetError",
    "GetSpreadsheetOptions",
    "GoogleSheetClient",
    "GoogleSheetsTransport",
    "GridRange",
    "InvalidRangeError",
    "InvalidReferenceError",
    "LocalFileTransport",
    "MissingRangeError",
    "NotFoundError",
    "ServiceAccountAuth",
    "Settings",
    "SheetOperations",
    "SheetProperties",
    "Spreadsheet",
    "SpreadsheetOperations",
    "StaticTokenAuth",
    "Transport",
    "TransportError",
    "UpdateValuesResponse",
    "ValueInputOption",
    "ValueRange",
    "ValueReadOptions",
    "ValueRenderOption",
    "ValueUpdateOptions",
    "__version__",
    "format_cell_reference",
    "format_column",
    "format_range",
    "get_settings",
    "parse_cell_reference",
    "parse_range",
    "split_sheet_qualifier",
    "to_cell_list",
    "to_column_grouped_map",
]
