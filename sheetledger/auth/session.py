"""
Session Gate

Every resource endpoint runs behind this gate. A request is let through
only if it carries BOTH:
1. An authenticated principal (who is asking)
2. An OAuth2 access token usable against Google Sheets

Two ways to present them:
- API clients: `Authorization: Bearer <token>` plus the principal in the
  configured user header (X-Ledger-User by default)
- Browsers: Flask's signed session cookie, filled by POST /auth/session

DESIGN DECISION: The gate keeps no state of its own. The token is never
stored in a global; it travels inside the SessionContext handed to the
store factory.
"""

from functools import wraps
from typing import Any, Callable, Mapping, Optional
from uuid import UUID

from flask import g, request, session
from pydantic import BaseModel, Field

from sheetledger.audit import create_correlation_id
from sheetledger.config import get_settings
from sheetledger.errors import AuthError


SESSION_USER_KEY = "user"
SESSION_TOKEN_KEY = "access_token"


class SessionContext(BaseModel):
    """
    Explicit per-request context.

    Replaces any ambient client-side state: the selected spreadsheet is
    named by each request and attached here.
    """

    principal: str
    access_token: str = Field(repr=False)
    spreadsheet_id: Optional[str] = None
    correlation_id: UUID = Field(default_factory=create_correlation_id)

    def for_spreadsheet(self, spreadsheet_id: str) -> "SessionContext":
        return self.model_copy(update={"spreadsheet_id": spreadsheet_id})


def _principal_from_session_user(user: Any) -> str:
    if isinstance(user, Mapping):
        for key in ("email", "id", "name"):
            value = user.get(key)
            if value:
                return str(value)
        return ""
    return str(user) if user else ""


def resolve_session(req=None) -> SessionContext:
    """
    Resolve the principal and access token of a request.

    Raises:
        AuthError: If either is missing
    """
    req = req or request
    user_header = get_settings().app.user_header

    authorization = req.headers.get("Authorization", "")
    if authorization.lower().startswith("bearer "):
        token = authorization[len("bearer "):].strip()
        principal = req.headers.get(user_header, "").strip()
    else:
        token = session.get(SESSION_TOKEN_KEY) or ""
        principal = _principal_from_session_user(session.get(SESSION_USER_KEY))

    if not principal:
        raise AuthError(reason="no authenticated principal")
    if not token:
        raise AuthError(reason="no access token")

    correlation_id = getattr(g, "correlation_id", None) or create_correlation_id()
    return SessionContext(
        principal=principal,
        access_token=token,
        correlation_id=correlation_id,
    )


def require_session(view: Callable) -> Callable:
    """
    Decorator: reject the request with 401 before the view runs unless
    a session resolves. The context is stored on `g.session_context`.
    """
    @wraps(view)
    def wrapped(*args, **kwargs):
        try:
            g.session_context = resolve_session()
        except AuthError as e:
            audit = getattr(g, "audit", None)
            if audit is not None:
                audit.log_auth_rejected(e.reason, request.path)
            raise
        return view(*args, **kwargs)
    return wrapped


def current_session() -> SessionContext:
    """The context resolved by require_session for this request."""
    context = getattr(g, "session_context", None)
    if context is None:
        raise AuthError(reason="session not resolved")
    return context


def start_session(user: Any, access_token: str) -> None:
    """Store the identity provider's result in the signed session cookie."""
    session[SESSION_USER_KEY] = user
    session[SESSION_TOKEN_KEY] = access_token


def end_session() -> None:
    session.pop(SESSION_USER_KEY, None)
    session.pop(SESSION_TOKEN_KEY, None)
