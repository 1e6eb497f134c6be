# cryptotrack/routers/settings.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from cryptotrack.deps import current_user, get_store
from cryptotrack.schemas import SettingsUpdate, User, UserSettings
from cryptotrack.store import RecordStore

logger = logging.getLogger("cryptotrack.settings")

router = APIRouter(prefix="/api/settings", tags=["settings"])


@router.get("", response_model=UserSettings)
def get_settings(user: User = Depends(current_user), store: RecordStore = Depends(get_store)):
    lookup = store.get_or_create_settings(user.id)
    if lookup.created:
        logger.info("created default settings for user %s", user.id)
    return lookup.settings


@router.put("", response_model=UserSettings)
def update_settings(
    body: SettingsUpdate, user: User = Depends(current_user), store: RecordStore = Depends(get_store)
):
    return store.update_settings(user.id, body.model_dump(exclude_unset=True, exclude_none=True))
