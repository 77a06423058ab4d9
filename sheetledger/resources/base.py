"""
Resource Service Base

Five services (Users, Accounts, Categories, Allocations, Ledger) share
one shape: each owns one tab, maps its rows to a record model, lists by
full-range read plus Python-side filtering, and creates by appending
exactly one row.

DESIGN DECISION: Services translate StoreError into UpstreamStoreError
with an operation-level message ("Failed to create account"), log the
failing operation and range, and never retry.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Callable, Generic, Iterator, Optional, Sequence, TypeVar
from uuid import uuid4

from sheetledger.audit import AuditLogger
from sheetledger.errors import UpstreamStoreError, ValidationError
from sheetledger.models.records import LedgerModel
from sheetledger.services.storage import (
    StoreError,
    TabularStore,
    append_range,
    data_range,
)
from sheetledger.validation import PayloadValidator


RecordT = TypeVar("RecordT", bound=LedgerModel)


def new_id() -> str:
    """Fresh random identifier for a new record."""
    return str(uuid4())


def cell(row: Sequence[str], index: int, default: str = "") -> str:
    """Cell value by index; short rows read as the default."""
    try:
        value = row[index]
    except IndexError:
        return default
    return default if value is None else value


class ResourceService(ABC, Generic[RecordT]):
    """
    Shared plumbing for the tab-backed services.

    Subclasses set `tab`, `entity` and implement `_row_to_record`.
    """

    tab: str = ""
    entity: str = ""

    def __init__(
        self,
        store: TabularStore,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._audit = audit_logger or AuditLogger()

    @property
    def read_range(self) -> str:
        return data_range(self.tab)

    @property
    def write_range(self) -> str:
        return append_range(self.tab)

    @abstractmethod
    def _row_to_record(self, row: Sequence[str]) -> RecordT:
        """Map one raw sheet row to its record model."""
        pass

    @contextmanager
    def _guard(self, action: str) -> Iterator[None]:
        """Convert store failures into an upstream error, logged once."""
        try:
            yield
        except StoreError as e:
            self._audit.log_store_error(
                operation=e.operation or action,
                range_=e.range or None,
                error_message=str(e),
            )
            raise UpstreamStoreError(f"Failed to {action}", cause=e) from e

    def _validate(self, validator: PayloadValidator, payload: Any):
        try:
            return validator.validate(payload)
        except ValidationError as e:
            self._audit.log_validation_failed(self.entity, e.fields, e.message)
            raise

    def _read_records(self) -> list[RecordT]:
        with self._guard(f"get {self.entity}s"):
            rows = self._store.read(self.read_range)
        return [self._row_to_record(row) for row in rows if any(row)]

    def _filter(
        self,
        records: list[RecordT],
        predicates: Sequence[Callable[[RecordT], bool]],
    ) -> list[RecordT]:
        return [r for r in records if all(p(r) for p in predicates)]

    def _append_one(self, row: list[Any], record_id: str) -> None:
        with self._guard(f"create {self.entity}"):
            self._store.append(self.write_range, [row])
        self._audit.log_record_created(self.entity, record_id)

    def list(self) -> list[RecordT]:
        """All records of the tab, in insertion order."""
        return self._read_records()
