"""
core/navigation.py
────────────────────────────────────────────────────────────────────────
Screen-level state machine.

    accountCreation → questionnaire → loading → summary → dashboard
                   ←  (back at q0)

`NavigationState` is an immutable snapshot; `reduce(state, action)`
returns the next snapshot or raises `InvalidTransition`. Nothing here
touches storage or timers – `core.session.OnboardingSession` owns those.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Sequence, Union

from core.errors import InvalidTransition
from core.models.profile import UserProfile
from core.profile_store import set_field
from core.questionnaire import QuestionnaireTracker
from core.questions import QUESTIONS, Question

_LOG = logging.getLogger(__name__)

SIGN_IN_PROGRESS = 0.2
PLAN_PROGRESS = 0.8  # the loading screen runs its own 0 → 1 counter


class AppView(str, Enum):
    account_creation = "accountCreation"
    questionnaire = "questionnaire"
    loading = "loading"
    summary = "summary"
    dashboard = "dashboard"


class UserProgress(str, Enum):
    not_started = "notStarted"
    in_questionnaire = "inQuestionnaire"
    completed = "completed"


class DashboardTab(str, Enum):
    settings = "settings"
    home = "home"
    profile = "profile"


class SignInMethod(str, Enum):
    email = "email"
    google = "google"
    apple = "apple"


@dataclass(frozen=True)
class NavigationState:
    current_view: AppView = AppView.account_creation
    user_progress: UserProgress = UserProgress.not_started
    question_index: int = 0
    progress: float = 0.0
    profile: UserProfile = field(default_factory=UserProfile)
    selected_tab: DashboardTab = DashboardTab.home  # never persisted

    def question(self, questions: Sequence[Question] = QUESTIONS) -> Question | None:
        if self.current_view is not AppView.questionnaire:
            return None
        if 0 <= self.question_index < len(questions):
            return questions[self.question_index]
        return None


# ──────────────────────────────────────────────────────────────────────
#  Actions
# ──────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class SignIn:
    method: SignInMethod = SignInMethod.email


@dataclass(frozen=True)
class AnswerQuestion:
    value: str


@dataclass(frozen=True)
class SkipQuestion:
    pass


@dataclass(frozen=True)
class GoBack:
    pass


@dataclass(frozen=True)
class SubmitMeasurements:
    unit_system: str
    height: str
    weight: str


@dataclass(frozen=True)
class ConfirmPlan:
    pass


@dataclass(frozen=True)
class LoadingFinished:
    pass


@dataclass(frozen=True)
class GoToDashboard:
    pass


@dataclass(frozen=True)
class SelectTab:
    tab: DashboardTab


@dataclass(frozen=True)
class EditProfile:
    field: str
    value: str


@dataclass(frozen=True)
class Reset:
    pass


Action = Union[
    SignIn,
    AnswerQuestion,
    SkipQuestion,
    GoBack,
    SubmitMeasurements,
    ConfirmPlan,
    LoadingFinished,
    GoToDashboard,
    SelectTab,
    EditProfile,
    Reset,
]


# ──────────────────────────────────────────────────────────────────────
#  Reducer
# ──────────────────────────────────────────────────────────────────────
def reduce(
    state: NavigationState,
    action: Action,
    questions: Sequence[Question] = QUESTIONS,
) -> NavigationState:
    handler = _HANDLERS.get(type(action))
    if handler is None:
        raise TypeError(f"unsupported action: {action!r}")
    new = handler(state, action, questions)
    if new.current_view is not state.current_view:
        _LOG.info(
            "%s → %s (%s)", state.current_view.value, new.current_view.value, type(action).__name__
        )
    return new


def _require(state: NavigationState, action: Action, *views: AppView) -> None:
    if state.current_view not in views:
        raise InvalidTransition(type(action).__name__, state.current_view.value)


def _tracker(state: NavigationState, questions: Sequence[Question]) -> QuestionnaireTracker:
    return QuestionnaireTracker(questions, state.question_index, state.profile)


def _from_tracker(state: NavigationState, t: QuestionnaireTracker) -> NavigationState:
    return replace(state, question_index=t.index, progress=t.progress, profile=t.profile)


def _sign_in(state, action: SignIn, questions):
    _require(state, action, AppView.account_creation)
    # all sign-in buttons lead to the same place; the method is informational
    _LOG.info("sign-in via %s", action.method.value)
    return replace(
        state,
        current_view=AppView.questionnaire,
        user_progress=UserProgress.in_questionnaire,
        question_index=0,
        progress=SIGN_IN_PROGRESS,
    )


def _answer(state, action: AnswerQuestion, questions):
    _require(state, action, AppView.questionnaire)
    t = _tracker(state, questions)
    q = t.current_question
    if q is None or q.is_measurements:
        raise InvalidTransition(type(action).__name__, state.current_view.value)
    t.answer(t.index, action.value)
    return _from_tracker(state, t)


def _skip(state, action: SkipQuestion, questions):
    _require(state, action, AppView.questionnaire)
    t = _tracker(state, questions)
    if t.is_complete():
        raise InvalidTransition(type(action).__name__, state.current_view.value)
    t.skip()
    return _from_tracker(state, t)


def _back(state, action: GoBack, questions):
    _require(state, action, AppView.questionnaire)
    t = _tracker(state, questions)
    if t.back():
        return _from_tracker(state, t)
    return replace(state, current_view=AppView.account_creation, question_index=0)


def _submit_measurements(state, action: SubmitMeasurements, questions):
    _require(state, action, AppView.questionnaire)
    t = _tracker(state, questions)
    q = t.current_question
    if q is None or not q.is_measurements:
        raise InvalidTransition(type(action).__name__, state.current_view.value)
    profile = t.profile
    profile = set_field(profile, "unitSystem", action.unit_system)
    profile = set_field(profile, "height", action.height)
    profile = set_field(profile, "weight", action.weight)
    t.profile = profile
    t.advance()
    return _from_tracker(state, t)


def _confirm_plan(state, action: ConfirmPlan, questions):
    _require(state, action, AppView.questionnaire)
    if not _tracker(state, questions).is_complete():
        raise InvalidTransition(type(action).__name__, state.current_view.value)
    return replace(
        state,
        current_view=AppView.loading,
        user_progress=UserProgress.completed,
        progress=PLAN_PROGRESS,
    )


def _loading_finished(state, action: LoadingFinished, questions):
    _require(state, action, AppView.loading)
    return replace(state, current_view=AppView.summary)


def _go_to_dashboard(state, action: GoToDashboard, questions):
    _require(state, action, AppView.summary, AppView.dashboard)
    return replace(
        state,
        current_view=AppView.dashboard,
        user_progress=UserProgress.completed,
    )


def _select_tab(state, action: SelectTab, questions):
    _require(state, action, AppView.dashboard)
    return replace(state, selected_tab=action.tab)


def _edit_profile(state, action: EditProfile, questions):
    return replace(state, profile=set_field(state.profile, action.field, action.value))


def _reset(state, action: Reset, questions):
    return NavigationState()


_HANDLERS: dict[type, Callable[..., NavigationState]] = {
    SignIn: _sign_in,
    AnswerQuestion: _answer,
    SkipQuestion: _skip,
    GoBack: _back,
    SubmitMeasurements: _submit_measurements,
    ConfirmPlan: _confirm_plan,
    LoadingFinished: _loading_finished,
    GoToDashboard: _go_to_dashboard,
    SelectTab: _select_tab,
    EditProfile: _edit_profile,
    Reset: _reset,
}
