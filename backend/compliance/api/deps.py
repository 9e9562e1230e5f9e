"""
Shared route dependencies: bearer-token auth, role checks, activity logging, and the
scheduler/store objects the app builds at startup (kept on app.state).
"""
import json
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

import jwt
from fastapi import Depends, Header, HTTPException, Request
from sqlalchemy.orm import Session

from compliance.config import settings
from compliance.db.session import get_db
from compliance.scheduler.runner import ComplianceScheduler
from compliance.services.activity_log_service import record_activity
from compliance.services.compliance_store import ComplianceStore

JWT_ALGORITHM = "HS256"


@dataclass(frozen=True)
class CurrentUser:
    user_id: int
    role: str
    email: str | None = None
    name: str | None = None


def get_current_user(authorization: str | None = Header(None)) -> CurrentUser:
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Access token required")
    token = authorization.split(" ", 1)[1].strip()
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[JWT_ALGORITHM])
        return CurrentUser(
            user_id=int(payload["userId"]),
            role=str(payload["role"]),
            email=payload.get("email"),
            name=payload.get("name"),
        )
    except (jwt.PyJWTError, KeyError, TypeError, ValueError):
        raise HTTPException(status_code=403, detail="Invalid or expired token")


def require_role(*roles: str) -> Callable[..., CurrentUser]:
    def _require(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in roles:
            raise HTTPException(status_code=403, detail="Insufficient permissions")
        return user

    return _require


def log_activity(action: str) -> Callable[..., Awaitable[None]]:
    """Dependency that records `action` for the authenticated caller before the handler runs.

    Non-GET requests also record the request body (already read and cached by FastAPI).
    """

    async def _log(
        request: Request,
        user: CurrentUser = Depends(get_current_user),
        db: Session = Depends(get_db),
    ) -> None:
        body: Any = None
        if request.method != "GET":
            raw = await request.body()
            if raw:
                try:
                    body = json.loads(raw)
                except ValueError:
                    body = raw.decode("utf-8", errors="replace")
        record_activity(
            db,
            user.user_id,
            action,
            details={"method": request.method, "url": str(request.url.path), "body": body},
            ip_address=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent"),
        )

    return _log


def get_compliance_scheduler(request: Request) -> ComplianceScheduler:
    return request.app.state.compliance_scheduler


def get_compliance_store(request: Request) -> ComplianceStore:
    return request.app.state.compliance_store
