"""Dashboard login for staff.

One shared password opens a cookie session for the admin routes. Sessions
live in process memory, so a restart logs every device out.
"""
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional
from fastapi import APIRouter, HTTPException, Request, Response
from pydantic import BaseModel

from app.core.config import settings

router = APIRouter(prefix="/api/auth")
logger = logging.getLogger(__name__)

SESSION_COOKIE = "session_token"
SESSION_TTL = timedelta(hours=24)


class DashboardSession(BaseModel):
    """A logged-in dashboard device."""
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return (now or datetime.now(timezone.utc)) > self.expires_at


_sessions: Dict[str, DashboardSession] = {}


class LoginRequest(BaseModel):
    password: str


class SessionInfo(BaseModel):
    authenticated: bool
    expires_at: Optional[str] = None


def create_session_token() -> str:
    """Generate an unguessable URL-safe token."""
    return secrets.token_urlsafe(32)


def password_matches(candidate: str) -> bool:
    return secrets.compare_digest(
        candidate.encode("utf-8"), settings.dashboard_password.encode("utf-8")
    )


def prune_expired_sessions() -> None:
    now = datetime.now(timezone.utc)
    for token in [t for t, s in _sessions.items() if s.is_expired(now)]:
        del _sessions[token]


def create_session(response: Response) -> str:
    """Open a dashboard session and attach its cookie to the response."""
    prune_expired_sessions()
    token = create_session_token()
    now = datetime.now(timezone.utc)
    _sessions[token] = DashboardSession(created_at=now, expires_at=now + SESSION_TTL)

    response.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        httponly=True,
        max_age=int(SESSION_TTL.total_seconds()),
        samesite="lax",
    )
    return token


def lookup_session(token: Optional[str]) -> Optional[DashboardSession]:
    """Return the live session for a token, dropping it once expired."""
    if not token:
        return None
    session = _sessions.get(token)
    if session is None:
        return None
    if session.is_expired():
        del _sessions[token]
        return None
    return session


def verify_session(token: Optional[str]) -> bool:
    return lookup_session(token) is not None


async def require_auth(request: Request) -> bool:
    """Router dependency guarding the admin endpoints."""
    if not verify_session(request.cookies.get(SESSION_COOKIE)):
        raise HTTPException(status_code=401, detail="Authentication required")
    return True


@router.post("/login")
async def login(login_req: LoginRequest, response: Response):
    if not password_matches(login_req.password):
        logger.warning("[AUTH] Rejected dashboard login")
        raise HTTPException(status_code=401, detail="Invalid password")

    token = create_session(response)
    logger.info(f"[AUTH] Dashboard session opened ({len(_sessions)} active)")
    return {
        "success": True,
        "message": "Login successful",
        "expires_at": _sessions[token].expires_at.isoformat(),
    }


@router.post("/logout")
async def logout(request: Request, response: Response):
    _sessions.pop(request.cookies.get(SESSION_COOKIE, ""), None)
    response.delete_cookie(SESSION_COOKIE)
    return {"success": True, "message": "Logged out"}


@router.get("/session", response_model=SessionInfo)
async def get_session_info(request: Request) -> SessionInfo:
    """Report whether the caller's cookie holds a live session."""
    session = lookup_session(request.cookies.get(SESSION_COOKIE))
    if session is None:
        return SessionInfo(authenticated=False)
    return SessionInfo(authenticated=True, expires_at=session.expires_at.isoformat())
