"""
core/profile_store.py
────────────────────────────────────────────────────────────────────────
Field-level access to `UserProfile` plus its persisted byte form.

Profiles are frozen, so `set_field` hands back a copy with exactly one
field overwritten. Field names may be given camelCase (as persisted) or
snake_case (as declared on the model).
"""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from core.errors import CorruptState
from core.models.profile import UserProfile

_LOG = logging.getLogger(__name__)

PROFILE_KEY = "userProfile"

# camelCase / snake_case → attribute name
_ATTRS: dict[str, str] = {}
for _name, _info in UserProfile.model_fields.items():
    _ATTRS[_name] = _name
    _ATTRS[_info.alias or _name] = _name

# keys every persisted profile must carry
PERSISTED_FIELDS: tuple[str, ...] = tuple(
    info.alias or name for name, info in UserProfile.model_fields.items()
)


def resolve_field(field: str) -> str | None:
    return _ATTRS.get(field)


def set_field(profile: UserProfile, field: str, value: str) -> UserProfile:
    """Return a copy of `profile` with one field overwritten. Values are not validated."""
    attr = resolve_field(field)
    if attr is None:
        raise KeyError(f"unknown profile field: {field}")
    return profile.model_copy(update={attr: value})


def get_field(profile: UserProfile, field: str) -> str:
    attr = resolve_field(field)
    if attr is None:
        return ""
    return getattr(profile, attr)


def serialize(profile: UserProfile) -> bytes:
    return profile.model_dump_json(by_alias=True).encode("utf-8")


def deserialize(raw: bytes | str) -> UserProfile:
    """
    Decode a persisted profile.

    Anything other than exactly the persisted record (bad JSON, a non-object,
    a missing or unknown key, a non-string value) raises
    `CorruptState`.
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise CorruptState(f"profile is not valid JSON: {exc}", key=PROFILE_KEY) from exc

    if not isinstance(data, dict):
        raise CorruptState("profile is not a JSON object", key=PROFILE_KEY)

    missing = [f for f in PERSISTED_FIELDS if f not in data]
    if missing:
        raise CorruptState(f"profile is missing {', '.join(missing)}", key=PROFILE_KEY)

    unknown = sorted(set(data) - set(PERSISTED_FIELDS))
    if unknown:
        raise CorruptState(f"profile has unknown keys {', '.join(unknown)}", key=PROFILE_KEY)

    try:
        profile = UserProfile.model_validate(data)
    except ValidationError as exc:
        raise CorruptState(f"profile has invalid values: {exc}", key=PROFILE_KEY) from exc

    _LOG.debug("profile decoded (goal=%r, diet=%r)", profile.main_goal, profile.diet)
    return profile
