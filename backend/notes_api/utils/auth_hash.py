"""Password hashing for account registration and login.

bcrypt through passlib's CryptContext, with pbkdf2_sha256 as the fallback
scheme when no bcrypt backend initializes. `BCRYPT_ROUNDS` (int) sets the
cost for whichever scheme ends up active.
"""
from __future__ import annotations

import logging
import os
from typing import Optional

from passlib.context import CryptContext

logger = logging.getLogger(__name__)


def _rounds() -> Optional[int]:
    raw = os.getenv("BCRYPT_ROUNDS")
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        return None


def _context_for(scheme: str, rounds: Optional[int]) -> CryptContext:
    options = {f"{scheme}__rounds": rounds} if rounds else {}
    return CryptContext(schemes=[scheme], deprecated="auto", **options)


def _build_context() -> CryptContext:
    rounds = _rounds()
    try:
        ctx = _context_for("bcrypt", rounds)
        # forces backend loading now instead of on the first login
        ctx.hash("probe")
        return ctx
    except Exception as exc:
        logger.warning("bcrypt unavailable (%s); hashing passwords with pbkdf2_sha256", exc)
        return _context_for("pbkdf2_sha256", rounds)


pwd_context = _build_context()


def hash_password(plain: str) -> str:
    if plain is None:
        raise ValueError("Password must not be None")
    return pwd_context.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    """True if `plain` matches `hashed`; malformed hashes count as a mismatch."""
    if plain is None or hashed is None:
        return False
    try:
        return pwd_context.verify(plain, hashed)
    except ValueError:
        return False
