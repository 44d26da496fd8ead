# tests/test_session.py
"""
OnboardingSession against the in-memory store – no DB, no HTTP.
"""
from __future__ import annotations

import asyncio
import logging

import pytest

from core.errors import InvalidTransition
from core.navigation import (
    AnswerQuestion,
    AppView,
    ConfirmPlan,
    DashboardTab,
    EditProfile,
    GoToDashboard,
    Reset,
    SelectTab,
    SignIn,
    SkipQuestion,
    SubmitMeasurements,
    UserProgress,
)
from core.persistence import (
    CURRENT_VIEW_KEY,
    QUESTION_INDEX_KEY,
    USER_PROGRESS_KEY,
    MemoryKeyValueStore,
    load_state,
)
from core.session import OnboardingSession

ANSWERS = ["⚖️ Lose Weight", "3-4 times a week", "No", "Yes", "🥬 Vegan", "Male"]


class CountingStore(MemoryKeyValueStore):
    def __init__(self, initial=None) -> None:
        super().__init__(initial)
        self.writes = 0

    async def write_many(self, entries) -> None:
        self.writes += 1
        await super().write_many(entries)


class SlowFirstWriteStore(MemoryKeyValueStore):
    """Holds the first write after `delay` is set long enough for another dispatch to start."""

    def __init__(self) -> None:
        super().__init__()
        self.delay = 0.0

    async def write_many(self, entries) -> None:
        delay, self.delay = self.delay, 0.0
        if delay:
            await asyncio.sleep(delay)
        await super().write_many(entries)


class FailingSummaryStore(MemoryKeyValueStore):
    async def write_many(self, entries) -> None:
        if entries.get(CURRENT_VIEW_KEY) == b"summary":
            raise OSError("disk full")
        await super().write_many(entries)


def _session(store, **kw) -> OnboardingSession:
    kw.setdefault("loading_interval", 0)
    kw.setdefault("fresh_start", False)
    return OnboardingSession(store, **kw)


async def _complete_questionnaire(session: OnboardingSession) -> None:
    await session.dispatch(SignIn())
    for value in ANSWERS:
        await session.dispatch(AnswerQuestion(value))
    await session.dispatch(SubmitMeasurements("Metric", "180", "80"))


# ── load ────────────────────────────────────────────────────────────
def test_cold_start_without_state():
    store = MemoryKeyValueStore()

    async def main():
        s = _session(store)
        return await s.load()

    state = asyncio.run(main())
    assert state.current_view is AppView.account_creation
    assert state.user_progress is UserProgress.not_started
    assert store.data == {}


def test_sign_in_is_persisted():
    store = MemoryKeyValueStore()

    async def main():
        s = _session(store)
        await s.load()
        return await s.dispatch(SignIn())

    state = asyncio.run(main())
    assert state.progress == pytest.approx(0.2)
    assert store.data[CURRENT_VIEW_KEY] == b"questionnaire"
    assert store.data[USER_PROGRESS_KEY] == b"inQuestionnaire"


def test_restart_resumes_mid_questionnaire():
    store = MemoryKeyValueStore()

    async def first():
        s = _session(store)
        await s.load()
        await s.dispatch(SignIn())
        await s.dispatch(AnswerQuestion("🌟 Improve Health"))
        await s.dispatch(SkipQuestion())
        await s.close()

    async def second():
        s = _session(store)
        return await s.load()

    asyncio.run(first())
    state = asyncio.run(second())
    assert state.current_view is AppView.questionnaire
    assert state.question_index == 2
    assert state.profile.main_goal == "🌟 Improve Health"
    assert store.data[QUESTION_INDEX_KEY] == b"2"


def test_unknown_view_falls_back_fully_and_discards():
    store = MemoryKeyValueStore()

    async def seed():
        s = _session(store)
        await s.load()
        await s.dispatch(SignIn())
        await s.dispatch(SkipQuestion())

    asyncio.run(seed())
    store.data[CURRENT_VIEW_KEY] = b"somewhereElse"

    async def main():
        return await _session(store).load()

    state = asyncio.run(main())
    assert (state.current_view, state.user_progress, state.question_index) == (
        AppView.account_creation,
        UserProgress.not_started,
        0,
    )
    assert store.data == {}


def test_fresh_start_ignores_stored_state_but_still_writes():
    store = MemoryKeyValueStore({CURRENT_VIEW_KEY: b"dashboard"})

    async def main():
        s = _session(store, fresh_start=True)
        state = await s.load()
        await s.dispatch(SignIn())
        return state

    state = asyncio.run(main())
    assert state.current_view is AppView.account_creation
    assert store.data[CURRENT_VIEW_KEY] == b"questionnaire"


# ── loading timer ───────────────────────────────────────────────────
def test_loading_moves_to_summary_exactly_once():
    store = MemoryKeyValueStore()
    views = []

    async def main():
        s = _session(store, loading_step=0.1)
        await s.load()
        s.subscribe(lambda st: views.append(st.current_view))
        await _complete_questionnaire(s)
        state = await s.dispatch(ConfirmPlan())
        assert state.current_view is AppView.loading
        assert state.progress == pytest.approx(0.8)
        timer = s.loading_timer
        await timer.wait()
        await asyncio.sleep(0)
        return s

    s = asyncio.run(main())
    assert s.state.current_view is AppView.summary
    assert views.count(AppView.summary) == 1
    assert store.data[CURRENT_VIEW_KEY] == b"summary"
    assert s.loading_timer is None


def test_leaving_loading_cancels_timer():
    store = MemoryKeyValueStore()

    async def main():
        s = _session(store, loading_interval=0.01, loading_step=0.01)
        await s.load()
        await _complete_questionnaire(s)
        await s.dispatch(ConfirmPlan())
        timer = s.loading_timer
        await asyncio.sleep(0.03)
        await s.dispatch(Reset())
        await timer.wait()
        await asyncio.sleep(0.05)
        return s, timer

    s, timer = asyncio.run(main())
    assert timer.cancelled and not timer.fired
    assert s.state.current_view is AppView.account_creation
    assert store.data[CURRENT_VIEW_KEY] == b"accountCreation"


def test_restoring_into_loading_restarts_timer():
    store = MemoryKeyValueStore()

    async def seed():
        s = _session(store, loading_interval=10)
        await s.load()
        await _complete_questionnaire(s)
        await s.dispatch(ConfirmPlan())
        await s.close()

    async def main():
        s = _session(store, loading_step=0.5)
        state = await s.load()
        assert state.current_view is AppView.loading
        await s.loading_timer.wait()
        return s.state

    asyncio.run(seed())
    assert asyncio.run(main()).current_view is AppView.summary


def test_close_cancels_running_timer():
    store = MemoryKeyValueStore()

    async def main():
        s = _session(store, loading_interval=10)
        await s.load()
        await _complete_questionnaire(s)
        await s.dispatch(ConfirmPlan())
        timer = s.loading_timer
        await s.close()
        return s, timer

    s, timer = asyncio.run(main())
    assert timer.cancelled
    assert s.state.current_view is AppView.loading


# ── dashboard / profile ─────────────────────────────────────────────
def test_tab_switch_never_hits_the_store():
    store = CountingStore()

    async def main():
        s = _session(store, loading_step=0.5)
        await s.load()
        await _complete_questionnaire(s)
        await s.dispatch(ConfirmPlan())
        await s.loading_timer.wait()
        await s.dispatch(GoToDashboard())
        before = store.writes
        await s.dispatch(SelectTab(DashboardTab.profile))
        return s, before

    s, before = asyncio.run(main())
    assert store.writes == before
    assert s.state.selected_tab is DashboardTab.profile


def test_profile_edit_is_persisted_and_recommendations_follow():
    store = MemoryKeyValueStore()

    async def main():
        s = _session(store)
        await s.load()
        await _complete_questionnaire(s)
        assert "Vitamin B12" in s.recommendations()[3]
        await s.dispatch(EditProfile("diet", "🍖 Omnivore"))
        return s

    s = asyncio.run(main())
    assert "CLA" in s.recommendations()[3]
    assert b"Omnivore" in store.data["userProfile"]


def test_invalid_action_leaves_state_and_store_alone():
    store = CountingStore()

    async def main():
        s = _session(store)
        await s.load()
        with pytest.raises(InvalidTransition):
            await s.dispatch(ConfirmPlan())
        return s

    s = asyncio.run(main())
    assert s.state.current_view is AppView.account_creation
    assert store.writes == 0


def test_unsubscribe_stops_notifications():
    seen = []

    async def main():
        s = _session(MemoryKeyValueStore())
        await s.load()
        unsubscribe = s.subscribe(seen.append)
        await s.dispatch(SignIn())
        unsubscribe()
        await s.dispatch(SkipQuestion())

    asyncio.run(main())
    assert len(seen) == 1


# ── concurrency ─────────────────────────────────────────────────────
def test_overlapping_dispatches_store_what_memory_holds():
    store = SlowFirstWriteStore()

    async def main():
        s = _session(store)
        await s.load()
        await s.dispatch(SignIn())
        store.delay = 0.05
        await asyncio.gather(
            s.dispatch(EditProfile("age", "30")),
            s.dispatch(EditProfile("gender", "Male")),
        )
        return s

    s = asyncio.run(main())
    assert s.state.profile.age == "30"
    assert s.state.profile.gender == "Male"
    assert load_state(store.data) == s.state


def test_failed_write_on_loading_finish_is_logged_and_state_kept(caplog):
    store = FailingSummaryStore()

    async def main():
        s = _session(store, loading_step=0.5)
        await s.load()
        await _complete_questionnaire(s)
        await s.dispatch(ConfirmPlan())
        await s.loading_timer.wait()
        return s

    with caplog.at_level(logging.ERROR, logger="core.loading"):
        s = asyncio.run(main())
    assert s.state.current_view is AppView.loading
    assert store.data[CURRENT_VIEW_KEY] == b"loading"
    failures = [r for r in caplog.records if r.name == "core.loading" and r.exc_info]
    assert failures and isinstance(failures[0].exc_info[1], OSError)
