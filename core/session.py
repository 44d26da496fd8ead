"""
core/session.py
────────────────────────────────────────────────────────────────────────
The single writer of onboarding state.

`OnboardingSession` holds the current `NavigationState`, runs actions
through `core.navigation.reduce`, persists every change that touches a
stored entry and pushes the new snapshot to subscribers. It also owns the
loading timer: entering `loading` starts one, leaving `loading` (or
closing the session) cancels it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Sequence

from config import settings
from core.errors import CorruptState, MissingState
from core.loading import LoadingTimer
from core.navigation import Action, AppView, LoadingFinished, NavigationState, reduce
from core.persistence import (
    KeyValueStore,
    discard_state,
    dump_state,
    load_state,
    read_entries,
    write_state,
)
from core.questions import QUESTIONS, Question
from core.recommendation import recommendations

_LOG = logging.getLogger(__name__)

Subscriber = Callable[[NavigationState], None]


class OnboardingSession:
    def __init__(
        self,
        store: KeyValueStore,
        questions: Sequence[Question] = QUESTIONS,
        loading_interval: float | None = None,
        loading_step: float | None = None,
        fresh_start: bool | None = None,
    ) -> None:
        self._store = store
        self._questions = tuple(questions)
        self._interval = settings.loading_interval if loading_interval is None else loading_interval
        self._step = settings.loading_step if loading_step is None else loading_step
        self._fresh_start = settings.fresh_start if fresh_start is None else fresh_start
        self._state = NavigationState()
        self._persisted: dict[str, bytes] | None = None
        self._timer: LoadingTimer | None = None
        self._subscribers: list[Subscriber] = []
        # one transition at a time: reduce, write, timer, notify
        self._lock = asyncio.Lock()

    # ─────────────────────────────── reads ─────────────────────────── #
    @property
    def state(self) -> NavigationState:
        return self._state

    @property
    def questions(self) -> tuple[Question, ...]:
        return self._questions

    @property
    def current_question(self) -> Question | None:
        return self._state.question(self._questions)

    @property
    def loading_timer(self) -> LoadingTimer | None:
        return self._timer

    @property
    def loading_progress(self) -> float:
        return self._timer.progress if self._timer is not None else 0.0

    def recommendations(self) -> list[str]:
        return recommendations(self._state.profile.main_goal, self._state.profile.diet)

    # ─────────────────────────────── lifecycle ─────────────────────── #
    async def load(self) -> NavigationState:
        """Restore persisted state, or start fresh when there is none (or it is unusable)."""
        async with self._lock:
            return await self._load()

    async def _load(self) -> NavigationState:
        state = NavigationState()
        if self._fresh_start:
            _LOG.info("fresh start – persisted state ignored")
        else:
            entries = await read_entries(self._store)
            try:
                state = load_state(entries, self._questions)
                self._persisted = {k: v for k, v in entries.items() if v is not None}
                _LOG.info(
                    "restored %s/%s at question %d",
                    state.current_view.value,
                    state.user_progress.value,
                    state.question_index,
                )
            except MissingState:
                _LOG.debug("no persisted state → initial state")
            except CorruptState as exc:
                _LOG.warning("discarding persisted state (%s): %s", exc.key, exc)
                await discard_state(self._store)
                self._persisted = None

        self._state = state
        self._sync_timer(state, restored=True)
        self._notify(state)
        return state

    async def close(self) -> None:
        timer = self._timer
        self._timer = None
        if timer is not None:
            timer.cancel()
            await timer.wait()
        self._subscribers.clear()

    # ─────────────────────────────── actions ───────────────────────── #
    async def dispatch(self, action: Action) -> NavigationState:
        async with self._lock:
            return await self._apply(action)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    # ─────────────────────────────── internals ─────────────────────── #
    async def _apply(self, action: Action) -> NavigationState:
        """Run one transition; the in-memory state only moves once it is stored."""
        new = reduce(self._state, action, self._questions)
        await self._persist(new)
        self._state = new
        self._sync_timer(new)
        self._notify(new)
        return new

    async def _persist(self, state: NavigationState) -> None:
        entries = dump_state(state)
        if entries == self._persisted:
            _LOG.debug("stored entries unchanged – skip write")
            return
        self._persisted = await write_state(self._store, state)

    def _notify(self, state: NavigationState) -> None:
        for callback in list(self._subscribers):
            callback(state)

    def _sync_timer(self, new: NavigationState, restored: bool = False) -> None:
        if new.current_view is AppView.loading:
            if self._timer is None or restored:
                self._start_timer()
            return
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _start_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        timer = LoadingTimer(lambda: self._on_loading_complete(timer), self._interval, self._step)
        self._timer = timer
        timer.start()

    async def _on_loading_complete(self, timer: LoadingTimer) -> None:
        async with self._lock:
            if timer is not self._timer or self._state.current_view is not AppView.loading:
                _LOG.debug("loading finished after leaving the loading view – ignored")
                return
            await self._apply(LoadingFinished())
