# src/taskflow/profile.py

"""
Local profile: a display name kept on this machine only.

The server knows nothing about it; it is stored as JSON under the `profile`
storage key and dropped on logout.
"""

from __future__ import annotations

import json
import logging

from .core.ports import KeyValueStorage
from .core.validation import ProfileDraft, require_valid, validate_profile
from .session.storage import PROFILE_KEY
from .session.store import Session

logger = logging.getLogger(__name__)

DISPLAY_NAME_MAX_LEN = 20


def _stored_name(storage: KeyValueStorage) -> str | None:
    raw = storage.get_item(PROFILE_KEY)
    if not raw:
        return None
    try:
        data = json.loads(raw)
    except ValueError:
        logger.warning("Stored profile is not valid JSON; ignoring it.")
        return None
    if isinstance(data, dict):
        name = data.get("name")
        if isinstance(name, str) and name.strip():
            return name.strip()
    return None


def display_name(session: Session | None, storage: KeyValueStorage) -> str:
    name = _stored_name(storage)
    if name:
        return name
    if session is not None and session.email:
        local = session.email.split("@")[0]
        if local:
            return local[:DISPLAY_NAME_MAX_LEN]
    return "User"


def initials(name: str | None) -> str:
    return (name or "TF")[:2].upper()


def save_profile(draft: ProfileDraft, storage: KeyValueStorage) -> str:
    """Validate and persist the display name. Returns the saved name."""
    require_valid(validate_profile(draft))
    name = draft.name.strip()
    storage.set_item(PROFILE_KEY, json.dumps({"name": name}, ensure_ascii=False))
    logger.info("Profile saved.")
    return name
