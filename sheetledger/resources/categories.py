"""Income and expense categories (Meta_Categories tab)."""

from typing import Any, Mapping, Sequence

from sheetledger.models.records import Category, NewCategory
from sheetledger.resources.base import ResourceService, cell, new_id
from sheetledger.services.storage import CATEGORIES_TAB
from sheetledger.validation import PayloadValidator


class CategoryService(ResourceService[Category]):

    tab = CATEGORIES_TAB
    entity = "category"

    validator = PayloadValidator(NewCategory, required=["categoryName", "type"])

    def _row_to_record(self, row: Sequence[str]) -> Category:
        return Category(
            category_id=cell(row, 0),
            category_name=cell(row, 1),
            type=cell(row, 2),
        )

    def create(self, payload: Mapping[str, Any]) -> Category:
        new_category = self._validate(self.validator, payload)
        category = Category(
            category_id=new_id(),
            category_name=new_category.category_name,
            type=new_category.type.value,
        )
        self._append_one(
            [category.category_id, category.category_name, category.type],
            category.category_id,
        )
        return category
