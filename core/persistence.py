"""
core/persistence.py
────────────────────────────────────────────────────────────────────────
Encode / decode `NavigationState` to the local key-value store.

Entries (all UTF-8 bytes):

    userProgress      notStarted | inQuestionnaire | completed
    currentView       accountCreation | questionnaire | loading | summary | dashboard
    userProfile       JSON record, camelCase keys
    questionIndex     decimal int     (optional on read → 0)
    progressFraction  decimal float   (optional on read → derived)

Restoring is all-or-nothing: `load_state` either returns a complete
snapshot or raises. The dashboard tab is never stored.
"""

from __future__ import annotations

import logging
import math
from typing import Mapping, Protocol, Sequence

from core.errors import CorruptState, MissingState
from core.navigation import (
    PLAN_PROGRESS,
    SIGN_IN_PROGRESS,
    AppView,
    NavigationState,
    UserProgress,
)
from core.profile_store import PROFILE_KEY, deserialize, serialize
from core.questions import QUESTIONS, Question

_LOG = logging.getLogger(__name__)

USER_PROGRESS_KEY = "userProgress"
CURRENT_VIEW_KEY = "currentView"
QUESTION_INDEX_KEY = "questionIndex"
PROGRESS_KEY = "progressFraction"

REQUIRED_KEYS = (USER_PROGRESS_KEY, CURRENT_VIEW_KEY, PROFILE_KEY)
STATE_KEYS = REQUIRED_KEYS + (QUESTION_INDEX_KEY, PROGRESS_KEY)


class KeyValueStore(Protocol):
    async def read(self, key: str) -> bytes | None: ...

    async def write(self, key: str, value: bytes) -> None: ...

    async def write_many(self, entries: Mapping[str, bytes]) -> None: ...

    async def delete(self, key: str) -> None: ...


class MemoryKeyValueStore:
    """Process-local store; last write wins."""

    def __init__(self, initial: Mapping[str, bytes] | None = None) -> None:
        self.data: dict[str, bytes] = dict(initial or {})

    async def read(self, key: str) -> bytes | None:
        return self.data.get(key)

    async def write(self, key: str, value: bytes) -> None:
        self.data[key] = bytes(value)

    async def write_many(self, entries: Mapping[str, bytes]) -> None:
        self.data.update({k: bytes(v) for k, v in entries.items()})

    async def delete(self, key: str) -> None:
        self.data.pop(key, None)


# ──────────────────────────────────────────────────────────────────────
#  Pure encode / decode
# ──────────────────────────────────────────────────────────────────────
def dump_state(state: NavigationState) -> dict[str, bytes]:
    return {
        USER_PROGRESS_KEY: state.user_progress.value.encode("utf-8"),
        CURRENT_VIEW_KEY: state.current_view.value.encode("utf-8"),
        PROFILE_KEY: serialize(state.profile),
        QUESTION_INDEX_KEY: str(state.question_index).encode("utf-8"),
        PROGRESS_KEY: repr(float(state.progress)).encode("utf-8"),
    }


def load_state(
    entries: Mapping[str, bytes | None],
    questions: Sequence[Question] = QUESTIONS,
) -> NavigationState:
    """
    Rebuild a snapshot from raw store entries.

    Raises `MissingState` when nothing was ever stored and `CorruptState`
    when anything stored is incomplete or undecodable.
    """
    present = {k: entries.get(k) for k in STATE_KEYS if entries.get(k) is not None}
    if not present:
        raise MissingState("no persisted onboarding state")

    missing = [k for k in REQUIRED_KEYS if k not in present]
    if missing:
        raise CorruptState(f"persisted state is missing {', '.join(missing)}", key=missing[0])

    user_progress = _enum(UserProgress, present[USER_PROGRESS_KEY], USER_PROGRESS_KEY)
    view = _enum(AppView, present[CURRENT_VIEW_KEY], CURRENT_VIEW_KEY)
    profile = deserialize(present[PROFILE_KEY])

    total = len(questions)
    index = 0
    if QUESTION_INDEX_KEY in present:
        index = _index(present[QUESTION_INDEX_KEY], total)

    if PROGRESS_KEY in present:
        progress = _fraction(present[PROGRESS_KEY])
        if view is AppView.questionnaire and not _progress_matches(progress, index, total):
            raise CorruptState(
                f"progressFraction {progress!r} does not match question {index}/{total}",
                key=PROGRESS_KEY,
            )
    else:
        progress = _default_progress(view, index, total)

    return NavigationState(
        current_view=view,
        user_progress=user_progress,
        question_index=index,
        progress=progress,
        profile=profile,
    )


def _text(raw: bytes, key: str) -> str:
    try:
        return raw.decode("utf-8")
    except (AttributeError, UnicodeDecodeError) as exc:
        raise CorruptState(f"{key} is not UTF-8 text", key=key) from exc


def _enum(enum_cls, raw: bytes, key: str):
    text = _text(raw, key)
    try:
        return enum_cls(text)
    except ValueError as exc:
        raise CorruptState(f"{key} has unknown value {text!r}", key=key) from exc


def _index(raw: bytes, total: int) -> int:
    text = _text(raw, QUESTION_INDEX_KEY)
    try:
        value = int(text) if text.isdigit() else -1
    except ValueError:
        value = -1
    if not 0 <= value <= total:
        raise CorruptState(f"questionIndex out of range: {text!r}", key=QUESTION_INDEX_KEY)
    return value


def _fraction(raw: bytes) -> float:
    text = _text(raw, PROGRESS_KEY)
    try:
        value = float(text)
    except ValueError as exc:
        raise CorruptState(f"progressFraction is not a number: {text!r}", key=PROGRESS_KEY) from exc
    if math.isnan(value) or not 0.0 <= value <= 1.0:
        raise CorruptState(f"progressFraction out of range: {text!r}", key=PROGRESS_KEY)
    return value


def _progress_matches(progress: float, index: int, total: int) -> bool:
    # index 0 is either fresh from sign-in (0.2) or stepped back to (0.0)
    if index == 0:
        return any(math.isclose(progress, p) for p in (0.0, SIGN_IN_PROGRESS))
    return math.isclose(progress, index / total)


def _default_progress(view: AppView, index: int, total: int) -> float:
    # stores written before index/progress were persisted
    if view is AppView.account_creation:
        return 0.0
    if view is AppView.questionnaire:
        return index / total if index else SIGN_IN_PROGRESS
    return PLAN_PROGRESS


# ──────────────────────────────────────────────────────────────────────
#  Store helpers
# ──────────────────────────────────────────────────────────────────────
async def read_entries(store: KeyValueStore) -> dict[str, bytes | None]:
    return {key: await store.read(key) for key in STATE_KEYS}


async def write_state(store: KeyValueStore, state: NavigationState) -> dict[str, bytes]:
    entries = dump_state(state)
    await store.write_many(entries)
    _LOG.debug("persisted %s/%s", state.current_view.value, state.user_progress.value)
    return entries


async def discard_state(store: KeyValueStore) -> None:
    for key in STATE_KEYS:
        await store.delete(key)
