"""Session gate package."""

from sheetledger.auth.session import (
    SessionContext,
    current_session,
    end_session,
    require_session,
    resolve_session,
    start_session,
)

__all__ = [
    "SessionContext",
    "current_session",
    "end_session",
    "require_session",
    "resolve_session",
    "start_session",
]
