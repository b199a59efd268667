from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from notes_api.api.deps import get_users_store
from notes_api.models.auth import LoginRequest, RegisteredUser, RegisterRequest, TokenResponse
from notes_api.storage.users_store import UserExistsError, UsersStore
from notes_api.utils.auth_hash import hash_password, verify_password
from notes_api.utils.jwt_auth import create_access_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=RegisteredUser)
def register(req: RegisterRequest, users: UsersStore = Depends(get_users_store)) -> RegisteredUser:
    try:
        rec = users.create(req.username, hash_password(req.password))
    except UserExistsError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User exists")

    logger.info("registered user %s", rec.id)
    return RegisteredUser(id=rec.id, username=rec.username)


@router.post("/login", response_model=TokenResponse)
def login(req: LoginRequest, users: UsersStore = Depends(get_users_store)) -> TokenResponse:
    rec = users.get_by_username(req.username)
    if rec is None or not verify_password(req.password, rec.hashed_password):
        logger.debug("failed login for %s", req.username)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    return TokenResponse(access_token=create_access_token(rec.id))
