"""
Tests for the tabular store.

GoogleSheetsStore runs against FakeSpreadsheet (see conftest), so these
check the exact Sheets API calls made, not just the results.
"""

import gspread
import pytest

from sheetledger.services.storage import (
    ACCOUNTS_TAB,
    ALLOCATION_TAB,
    LEDGER_TAB,
    REQUIRED_TABS,
    TAB_HEADERS,
    USERS_TAB,
    GoogleSheetsClient,
    StoreConnectionError,
    StoreError,
    append_range,
    column_letter,
    data_range,
    header_range,
    parse_number,
)
from sheetledger.services.storage import google_sheets


class TestRanges:
    """Tests for A1 range helpers."""

    def test_column_letter(self):
        assert column_letter(1) == "A"
        assert column_letter(8) == "H"
        assert column_letter(26) == "Z"
        assert column_letter(27) == "AA"

    def test_ledger_ranges(self):
        """Test the three ranges of the ledger tab."""
        assert data_range(LEDGER_TAB) == "Ledger!A2:H"
        assert append_range(LEDGER_TAB) == "Ledger!A:H"
        assert header_range(LEDGER_TAB) == "Ledger!A1:H1"

    def test_allocation_ranges(self):
        assert data_range(ALLOCATION_TAB) == "Config_Allocation!A2:C"
        assert header_range(ALLOCATION_TAB) == "Config_Allocation!A1:C1"


class TestParseNumber:
    """Tests for tolerant numeric parsing."""

    @pytest.mark.parametrize("raw, expected", [
        ("12.5", 12.5),
        (" 7 ", 7.0),
        ("-3", -3.0),
        (40, 40.0),
        ("N/A", 0.0),
        ("", 0.0),
        (None, 0.0),
        ("nan", 0.0),
        (True, 0.0),
    ])
    def test_parse_number(self, raw, expected):
        assert parse_number(raw) == expected


class TestPrimitives:
    """Tests for read / append / update / clear."""

    def test_read_returns_data_rows(self, make_spreadsheet, store_for):
        """Test that reading the data range skips the header."""
        spreadsheet = make_spreadsheet(
            Meta_Users=[["u1", "Alice", "Admin", "a@example.com"]],
        )
        store = store_for(spreadsheet)

        rows = store.read(data_range(USERS_TAB))

        assert rows == [["u1", "Alice", "Admin", "a@example.com"]]

    def test_read_empty_range(self, store):
        """Test that a range with no values reads as an empty list."""
        assert store.read(data_range(LEDGER_TAB)) == []

    def test_append_uses_configured_input_option(self, store, spreadsheet):
        """Test that appends send USER_ENTERED values."""
        store.append(append_range(USERS_TAB), [["u1", "Alice", "User", ""]])

        call = spreadsheet.calls_to("values_append")[0]
        assert call[1] == "Meta_Users!A:D"
        assert call[2] == {"values": [["u1", "Alice", "User", ""]]}
        assert spreadsheet.data_rows(USERS_TAB) == [["u1", "Alice", "User", ""]]

    def test_append_goes_after_existing_rows(self, make_spreadsheet, store_for):
        spreadsheet = make_spreadsheet(Meta_Users=[["u1", "Alice", "User", ""]])
        store = store_for(spreadsheet)

        store.append(append_range(USERS_TAB), [["u2", "Bob", "User", ""]])

        assert [r[0] for r in spreadsheet.data_rows(USERS_TAB)] == ["u1", "u2"]

    def test_update_overwrites_range(self, store, spreadsheet):
        store.update("Meta_Users!A1:D1", [["a", "b", "c", "d"]])
        assert spreadsheet.tabs[USERS_TAB][0] == ["a", "b", "c", "d"]

    def test_clear_keeps_header(self, make_spreadsheet, store_for):
        """Test that clearing the data range leaves row 1 alone."""
        spreadsheet = make_spreadsheet(
            Config_Allocation=[["Savings", "50", ""], ["Fun", "20", ""]],
        )
        store = store_for(spreadsheet)

        store.clear(data_range(ALLOCATION_TAB))

        assert spreadsheet.data_rows(ALLOCATION_TAB) == []
        assert spreadsheet.tabs[ALLOCATION_TAB][0] == TAB_HEADERS[ALLOCATION_TAB]

    @pytest.mark.parametrize("method, call", [
        ("values_get", lambda s: s.read("Ledger!A2:H")),
        ("values_append", lambda s: s.append("Ledger!A:H", [["x"]])),
        ("values_update", lambda s: s.update("Ledger!A1:H1", [["x"]])),
        ("values_clear", lambda s: s.clear("Ledger!A2:H")),
    ])
    def test_backend_failure_raises_store_error(self, spreadsheet, store, method, call):
        """Test that every API failure surfaces as StoreError with its range."""
        spreadsheet.fail_on.add(method)

        with pytest.raises(StoreError) as exc_info:
            call(store)

        assert exc_info.value.range.startswith("Ledger!")
        assert exc_info.value.operation in {"read", "append", "update", "clear"}


class TestEnsureSchema:
    """Tests for tab and header provisioning."""

    def test_provisions_empty_spreadsheet(self, empty_spreadsheet, store_for):
        """Test that all five tabs are created in one batch with headers."""
        store = store_for(empty_spreadsheet)

        result = store.ensure_schema()

        assert result.created_tabs == REQUIRED_TABS
        assert result.headers_written == REQUIRED_TABS
        assert result.changed is True
        assert len(empty_spreadsheet.calls_to("batch_update")) == 1
        assert len(empty_spreadsheet.calls_to("values_update")) == 5
        for tab, header in TAB_HEADERS.items():
            assert empty_spreadsheet.tabs[tab][0] == header

    def test_new_tabs_use_configured_grid(self, empty_spreadsheet, store_for):
        store_for(empty_spreadsheet).ensure_schema()

        body = empty_spreadsheet.calls_to("batch_update")[0][1]
        grid = body["requests"][0]["addSheet"]["properties"]["gridProperties"]
        assert grid == {"rowCount": 1000, "columnCount": 20}

    def test_second_call_makes_no_writes(self, empty_spreadsheet, store_for):
        """Test idempotence: a provisioned spreadsheet is only read."""
        store = store_for(empty_spreadsheet)
        store.ensure_schema()
        writes_after_first = len(empty_spreadsheet.mutating_calls)

        result = store.ensure_schema()

        assert result.created_tabs == []
        assert result.headers_written == []
        assert result.changed is False
        assert len(empty_spreadsheet.mutating_calls) == writes_after_first

    def test_only_missing_pieces_are_written(self, make_spreadsheet, store_for):
        """Test that existing tabs and headers are left alone."""
        spreadsheet = make_spreadsheet(Meta_Users=[["u1", "Alice", "User", ""]])
        del spreadsheet.tabs[LEDGER_TAB]
        spreadsheet.tabs[ACCOUNTS_TAB] = []

        result = store_for(spreadsheet).ensure_schema()

        assert result.created_tabs == [LEDGER_TAB]
        assert result.headers_written == [ACCOUNTS_TAB, LEDGER_TAB]
        assert spreadsheet.data_rows(USERS_TAB) == [["u1", "Alice", "User", ""]]

    def test_metadata_failure_raises(self, spreadsheet, store):
        spreadsheet.fail_on.add("fetch_sheet_metadata")
        with pytest.raises(StoreError):
            store.ensure_schema()
        assert spreadsheet.mutating_calls == []


class TestGoogleSheetsClient:
    """Tests for opening a spreadsheet with a caller's token."""

    def test_authorize_failure(self, monkeypatch):
        def refuse(credentials):
            raise RuntimeError("invalid_grant")

        monkeypatch.setattr(google_sheets.gspread, "authorize", refuse)
        client = GoogleSheetsClient("bad-token", "sheet-1")

        with pytest.raises(StoreConnectionError):
            client.get_spreadsheet()

    def test_spreadsheet_not_found(self, monkeypatch):
        """Test that an unknown id becomes StoreConnectionError."""
        class FakeGspreadClient:
            def open_by_key(self, key):
                raise gspread.SpreadsheetNotFound(key)

        monkeypatch.setattr(
            google_sheets.gspread, "authorize", lambda credentials: FakeGspreadClient()
        )
        client = GoogleSheetsClient("token", "missing-sheet")

        with pytest.raises(StoreConnectionError) as exc_info:
            client.get_spreadsheet()
        assert "missing-sheet" in str(exc_info.value)

    def test_token_is_passed_to_credentials(self, monkeypatch, make_spreadsheet):
        seen = {}

        class FakeGspreadClient:
            def open_by_key(self, key):
                seen["key"] = key
                return make_spreadsheet()

        def authorize(credentials):
            seen["token"] = credentials.token
            return FakeGspreadClient()

        monkeypatch.setattr(google_sheets.gspread, "authorize", authorize)
        GoogleSheetsClient("user-token", "sheet-9").get_spreadsheet()

        assert seen == {"token": "user-token", "key": "sheet-9"}
