"""
Surplus allocation targets (Config_Allocation tab).

Unlike the other tabs, allocations have no per-row identifier. The
whole collection is rewritten on every save: clear the data range,
then append the new rows. Two concurrent saves can interleave so that
one clear wipes the other's append; last write wins.
"""

import math
from typing import Any, Sequence

from pydantic import ValidationError as PydanticValidationError

from sheetledger.aggregation import apply_allocation_edit, total_percent
from sheetledger.errors import ValidationError
from sheetledger.models.records import Allocation
from sheetledger.resources.base import ResourceService, cell
from sheetledger.services.storage import ALLOCATION_TAB, parse_number
from sheetledger.validation import is_blank


class AllocationService(ResourceService[Allocation]):

    tab = ALLOCATION_TAB
    entity = "allocation"

    def _row_to_record(self, row: Sequence[str]) -> Allocation:
        return Allocation(
            alloc_type=cell(row, 0),
            target_percent=parse_number(cell(row, 1)),
            description=cell(row, 2),
        )

    @staticmethod
    def _record_to_row(allocation: Allocation) -> list:
        return [
            allocation.alloc_type,
            allocation.target_percent,
            allocation.description,
        ]

    def _parse(self, allocations: Any) -> list:
        if allocations is None:
            raise ValidationError.missing(["allocations"])
        if not isinstance(allocations, (list, tuple)):
            raise ValidationError("allocations must be a list", ["allocations"])

        parsed = []
        bad_fields = []
        for index, item in enumerate(allocations):
            if isinstance(item, Allocation):
                parsed.append(item)
                continue
            if not isinstance(item, dict) or is_blank(item.get("allocType", item.get("alloc_type"))):
                bad_fields.append(f"allocations[{index}].allocType")
                continue
            try:
                parsed.append(Allocation.model_validate(item))
            except PydanticValidationError as e:
                for err in e.errors():
                    name = err["loc"][0] if err.get("loc") else "item"
                    bad_fields.append(f"allocations[{index}].{name}")

        if bad_fields:
            raise ValidationError(f"Invalid allocations: {', '.join(bad_fields)}", bad_fields)
        return parsed

    @staticmethod
    def _parse_index(index: Any) -> int:
        """Integer position; integral floats such as 1.0 are accepted."""
        if isinstance(index, bool):
            raise ValidationError("index must be an integer", ["index"])
        if isinstance(index, int):
            return index
        try:
            number = float(str(index).strip())
        except (TypeError, ValueError):
            raise ValidationError("index must be an integer", ["index"])
        if not math.isfinite(number) or not number.is_integer():
            raise ValidationError("index must be an integer", ["index"])
        return int(number)

    @staticmethod
    def _parse_percent(value: Any) -> float:
        if isinstance(value, bool):
            raise ValidationError("targetPercent must be a number", ["targetPercent"])
        try:
            percent = float(value)
        except (TypeError, ValueError):
            raise ValidationError("targetPercent must be a number", ["targetPercent"])
        if not math.isfinite(percent):
            raise ValidationError("targetPercent must be a finite number", ["targetPercent"])
        return percent

    def replace_all(self, allocations: Any):
        """
        Replace the whole collection.

        The sum of target percentages is NOT checked here; keeping it at
        or below 100 is the job of apply_allocation_edit.
        """
        try:
            parsed = self._parse(allocations)
        except ValidationError as e:
            self._audit.log_validation_failed(self.entity, e.fields, e.message)
            raise

        with self._guard("update allocation"):
            self._store.clear(self.read_range)
            if parsed:
                self._store.append(
                    self.read_range,
                    [self._record_to_row(a) for a in parsed],
                )

        self._audit.log_allocations_replaced(len(parsed), total_percent(parsed))
        return parsed

    def edit(self, index: Any, new_percent: Any):
        """
        Change one bucket's percentage and save the whole collection.

        The edit is clamped by apply_allocation_edit so that the total
        does not exceed 100.
        """
        index = self._parse_index(index)
        if new_percent is None:
            raise ValidationError.missing(["targetPercent"])
        new_percent = self._parse_percent(new_percent)

        current = self._read_records()
        if not 0 <= index < len(current):
            raise ValidationError(f"No allocation at index {index}", ["index"])

        return self.replace_all(apply_allocation_edit(current, index, new_percent))
