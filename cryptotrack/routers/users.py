# cryptotrack/routers/users.py
# Demo-only user records; there is no login and passwords are never returned.
from __future__ import annotations

from fastapi import APIRouter, Depends, status

from cryptotrack.deps import current_user, get_store
from cryptotrack.errors import http_error, not_found
from cryptotrack.schemas import ErrorCode, User, UserCreate, UserPublic
from cryptotrack.store import DuplicateUsernameError, RecordStore

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/me", response_model=UserPublic)
def me(user: User = Depends(current_user)):
    return user


@router.get("/{user_id}", response_model=UserPublic)
def get_user(user_id: int, store: RecordStore = Depends(get_store)):
    user = store.get_user(user_id)
    if user is None:
        raise not_found("User")
    return user


@router.post("", response_model=UserPublic, status_code=status.HTTP_201_CREATED)
def create_user(body: UserCreate, store: RecordStore = Depends(get_store)):
    try:
        return store.create_user(body.username, body.password)
    except DuplicateUsernameError as e:
        raise http_error(ErrorCode.CONFLICT, str(e), status.HTTP_409_CONFLICT) from e
