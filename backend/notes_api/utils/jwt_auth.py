from __future__ import annotations

import logging
import os
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from notes_api.storage.db import MAX_ROW_ID

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)


def _secret() -> str:
    s = os.getenv("JWT_SECRET", "")
    if not s:
        # tests/dev set it in env; mandatory anywhere tokens are issued
        raise RuntimeError("JWT_SECRET is not set")
    return s


def _algo() -> str:
    return os.getenv("JWT_ALGORITHM", "HS256")


def _exp_minutes() -> int:
    try:
        return int(os.getenv("JWT_EXP_MINUTES", "15"))
    except ValueError:
        return 15


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def _parse_user_id(raw: object) -> Optional[int]:
    try:
        user_id = int(str(raw).strip())
    except ValueError:
        return None
    return user_id if 0 < user_id <= MAX_ROW_ID else None


def create_access_token(user_id: int) -> str:
    now = datetime.now(timezone.utc)
    exp = now + timedelta(minutes=_exp_minutes())
    payload = {"sub": str(user_id), "iat": int(now.timestamp()), "exp": int(exp.timestamp())}
    return jwt.encode(payload, _secret(), algorithm=_algo())


def decode_token(token: str) -> dict:
    return jwt.decode(token, _secret(), algorithms=[_algo()])


def get_current_user_id(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    x_user_id: Optional[str] = Header(default=None, alias="X-User-Id"),
) -> int:
    """
    Resolve the requesting user's id or abort with 401.

    - Prefer JWT (Authorization: Bearer ...), `sub` holds the user id
    - Fallback to X-User-Id (tests + demo)
    """
    if creds is not None and creds.scheme.lower() == "bearer":
        try:
            payload = decode_token(creds.credentials)
        except JWTError:
            logger.debug("rejected bearer token")
            raise _unauthorized("Invalid or expired token")
        user_id = _parse_user_id(payload.get("sub"))
        if user_id is None:
            raise _unauthorized("Invalid token")
        return user_id

    if x_user_id is not None:
        user_id = _parse_user_id(x_user_id)
        if user_id is None:
            logger.debug("rejected X-User-Id header %r", x_user_id)
            raise _unauthorized("Invalid user id")
        return user_id

    raise _unauthorized("Missing credentials")
