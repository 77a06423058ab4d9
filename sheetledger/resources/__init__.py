"""Resource services: one per ledger tab."""

from sheetledger.resources.base import ResourceService, new_id
from sheetledger.resources.users import UserService
from sheetledger.resources.accounts import AccountService
from sheetledger.resources.categories import CategoryService
from sheetledger.resources.allocations import AllocationService
from sheetledger.resources.ledger import LedgerService

__all__ = [
    "AccountService",
    "AllocationService",
    "CategoryService",
    "LedgerService",
    "ResourceService",
    "UserService",
    "new_id",
]
