# src/taskflow/core/validation.py

"""
Form validation.

Each validator returns a dict of field -> message (empty dict means valid).
Messages are user-facing and field-scoped; `require_valid` turns a non-empty
result into a ValidationError for callers that want to raise.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from .errors import ValidationError

EMAIL_REGEX = re.compile(r"\S+@\S+\.\S+")

TITLE_MAX_LEN = 100
PASSWORD_MIN_LEN = 6
NAME_MIN_LEN = 2


@dataclass(slots=True)
class LoginDraft:
    email: str = ""
    password: str = ""


@dataclass(slots=True)
class SignupDraft:
    name: str = ""
    email: str = ""
    password: str = ""
    confirm_password: str = ""


@dataclass(slots=True)
class ProfileDraft:
    name: str = ""
    email: str = ""


def is_valid_email(value: str) -> bool:
    return EMAIL_REGEX.search(value or "") is not None


def _check_email(errors: dict[str, str], email: str, *, invalid_msg: str) -> None:
    if not email.strip():
        errors["email"] = "Email is required"
    elif not is_valid_email(email):
        errors["email"] = invalid_msg


def validate_login(draft: LoginDraft) -> dict[str, str]:
    errors: dict[str, str] = {}
    _check_email(errors, draft.email, invalid_msg="Invalid email format")
    if not draft.password:
        errors["password"] = "Password is required"
    elif len(draft.password) < PASSWORD_MIN_LEN:
        errors["password"] = f"Minimum {PASSWORD_MIN_LEN} characters"
    return errors


def validate_signup(draft: SignupDraft) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not draft.name.strip():
        errors["name"] = "Name is required"
    elif len(draft.name.strip()) < NAME_MIN_LEN:
        errors["name"] = f"Min {NAME_MIN_LEN} characters"
    _check_email(errors, draft.email, invalid_msg="Invalid email")
    if not draft.password:
        errors["password"] = "Password is required"
    elif len(draft.password) < PASSWORD_MIN_LEN:
        errors["password"] = f"Min {PASSWORD_MIN_LEN} characters"
    if draft.password != draft.confirm_password:
        errors["confirm_password"] = "Passwords do not match"
    return errors


def validate_task(title: str) -> dict[str, str]:
    """Title is required (after trimming) and at most 100 characters; description is free-form."""
    errors: dict[str, str] = {}
    clean = (title or "").strip()
    if not clean:
        errors["title"] = "Title is required"
    elif len(clean) > TITLE_MAX_LEN:
        errors["title"] = f"Max {TITLE_MAX_LEN} characters"
    return errors


def validate_profile(draft: ProfileDraft) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not draft.name.strip():
        errors["name"] = "Name is required"
    elif len(draft.name.strip()) < NAME_MIN_LEN:
        errors["name"] = f"Min {NAME_MIN_LEN} characters"
    _check_email(errors, draft.email, invalid_msg="Invalid email format")
    return errors


def require_valid(errors: dict[str, str]) -> None:
    if errors:
        raise ValidationError(errors)
