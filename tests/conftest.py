"""
Shared fixtures.

No real API calls in tests: FakeSpreadsheet implements the part of the
gspread Spreadsheet surface that GoogleSheetsStore uses, keeps tabs as
lists of rows, and records every call so tests can count writes.
"""

import builtins
import re

import pytest

from sheetledger.services.storage import (
    TAB_HEADERS,
    GoogleSheetsClient,
    GoogleSheetsStore,
)
from sheetledger.web import create_app


MUTATING = {"batch_update", "values_append", "values_update", "values_clear"}


class FakeAPIError(Exception):
    """Stands in for gspread's APIError (which needs a real HTTP response)."""


def _parse_range(range_: str):
    """'Ledger!A2:H' -> ('Ledger', 2, None); 'Meta_Users!A1:D1' -> ('Meta_Users', 1, 1)."""
    tab, _, cells = range_.partition("!")
    parts = cells.split(":")
    start_digits = re.sub(r"[^0-9]", "", parts[0])
    start = int(start_digits) if start_digits else 1
    if len(parts) > 1:
        end_digits = re.sub(r"[^0-9]", "", parts[1])
        end = int(end_digits) if end_digits else None
    else:
        end = start if start_digits else None
    return tab, start, end


def _trim(rows):
    while rows and not any(rows[-1]):
        rows.pop()
    return rows


class FakeSpreadsheet:
    """In-memory spreadsheet with call recording and failure injection."""

    def __init__(self, tabs=None):
        self.tabs = {name: [list(row) for row in rows] for name, rows in (tabs or {}).items()}
        self.calls = []
        self.fail_on = set()

    def _record(self, method, *args):
        self.calls.append((method,) + args)
        if method in self.fail_on:
            raise FakeAPIError(f"{method}: PERMISSION_DENIED")

    @property
    def mutating_calls(self):
        return [c for c in self.calls if c[0] in MUTATING]

    def calls_to(self, method):
        return [c for c in self.calls if c[0] == method]

    def _tab(self, tab):
        if tab not in self.tabs:
            raise FakeAPIError(f"Unable to parse range: {tab}")
        return self.tabs[tab]

    def data_rows(self, tab):
        """Rows below the header, trailing blanks removed."""
        return _trim([list(r) for r in self.tabs[tab][1:]])

    # gspread.Spreadsheet surface ------------------------------------------

    def fetch_sheet_metadata(self, params=None):
        self._record("fetch_sheet_metadata")
        return {"sheets": [{"properties": {"title": t}} for t in self.tabs]}

    def batch_update(self, body):
        self._record("batch_update", body)
        for request in body["requests"]:
            title = request["addSheet"]["properties"]["title"]
            self.tabs[title] = []
        return {"replies": []}

    def values_get(self, range, params=None):
        self._record("values_get", range)
        tab, start, end = _parse_range(range)
        rows = self._tab(tab)
        selected = _trim([list(r) for r in rows[start - 1:end]])
        response = {"range": range, "majorDimension": "ROWS"}
        if selected:
            response["values"] = [[str(c) for c in row] for row in selected]
        return response

    def values_append(self, range, params=None, body=None):
        self._record("values_append", range, body)
        tab, _, _ = _parse_range(range)
        rows = _trim(self._tab(tab))
        rows.extend(list(row) for row in body["values"])
        return {"updates": {"updatedRows": len(body["values"])}}

    def values_update(self, range, params=None, body=None):
        self._record("values_update", range, body)
        tab, start, _ = _parse_range(range)
        rows = self._tab(tab)
        for offset, row in enumerate(body["values"]):
            index = start - 1 + offset
            while len(rows) <= index:
                rows.append([])
            rows[index] = list(row)
        return {"updatedRows": len(body["values"])}

    def values_clear(self, range):
        self._record("values_clear", range)
        tab, start, end = _parse_range(range)
        rows = self._tab(tab)
        stop = len(rows) if end is None else min(end, len(rows))
        for index in builtins.range(start - 1, stop):
            rows[index] = []
        return {}


def provisioned_tabs(**data):
    """All five tabs with headers; keyword args add data rows per tab."""
    tabs = {}
    for tab, header in TAB_HEADERS.items():
        tabs[tab] = [list(header)] + [list(r) for r in data.get(tab, [])]
    return tabs


@pytest.fixture
def spreadsheet():
    return FakeSpreadsheet(provisioned_tabs())


@pytest.fixture
def empty_spreadsheet():
    return FakeSpreadsheet({"Sheet1": []})


@pytest.fixture
def make_spreadsheet():
    """Build a provisioned FakeSpreadsheet; keyword args seed data rows."""
    def build(**data):
        return FakeSpreadsheet(provisioned_tabs(**data))
    return build


def make_store(spreadsheet, token="test-token", spreadsheet_id="sheet-1"):
    return GoogleSheetsStore(
        GoogleSheetsClient(token, spreadsheet_id, spreadsheet=spreadsheet)
    )


@pytest.fixture
def store(spreadsheet):
    return make_store(spreadsheet)


@pytest.fixture
def store_for():
    return make_store


@pytest.fixture
def opened_stores():
    """(access_token, spreadsheet_id) of every store the app opened."""
    return []


@pytest.fixture
def app(spreadsheet, opened_stores):
    def factory(access_token, spreadsheet_id):
        opened_stores.append((access_token, spreadsheet_id))
        return make_store(spreadsheet, access_token, spreadsheet_id)

    return create_app(
        store_factory=factory,
        config={"TESTING": True, "SECRET_KEY": "test-secret"},
    )


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers():
    return {
        "Authorization": "Bearer test-token",
        "X-Ledger-User": "alice@example.com",
    }
