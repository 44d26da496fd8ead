# api/v1/onboarding.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status

from core.errors import InvalidTransition
from core.models.profile import UserProfile
from core.navigation import (
    Action,
    AnswerQuestion,
    ConfirmPlan,
    EditProfile,
    GoBack,
    GoToDashboard,
    Reset,
    SelectTab,
    SignIn,
    SkipQuestion,
    SubmitMeasurements,
)
from core.session import OnboardingSession
from api.v1.schemas import (
    AnswerIn,
    MeasurementsIn,
    ProfileEditIn,
    ProfileOut,
    ProfileRow,
    ProfileView,
    QuestionOut,
    SignInIn,
    StateOut,
    TabIn,
)

_LOG = logging.getLogger(__name__)

router = APIRouter()


# ───────────────────────── helpers ──────────────────────────
def get_onboarding_session(request: Request) -> OnboardingSession:
    session = getattr(request.app.state, "session", None)
    if session is None:
        raise HTTPException(status.HTTP_503_SERVICE_UNAVAILABLE, "session not loaded")
    return session


def _profile_out(profile: UserProfile) -> ProfileOut:
    return ProfileOut(**profile.model_dump(by_alias=True))


def _state_out(session: OnboardingSession) -> StateOut:
    st = session.state
    q = session.current_question
    return StateOut(
        currentView=st.current_view,
        userProgress=st.user_progress,
        questionIndex=st.question_index,
        totalQuestions=len(session.questions),
        progressFraction=st.progress,
        loadingProgress=session.loading_progress,
        selectedTab=st.selected_tab,
        question=(
            QuestionOut(
                index=st.question_index,
                title=q.title,
                options=list(q.options),
                measurements=q.is_measurements,
            )
            if q is not None
            else None
        ),
        userProfile=_profile_out(st.profile),
    )


async def _apply(session: OnboardingSession, action: Action) -> StateOut:
    try:
        await session.dispatch(action)
    except InvalidTransition as exc:
        _LOG.info("rejected %s in %s", exc.action, exc.view)
        raise HTTPException(status.HTTP_409_CONFLICT, str(exc)) from exc
    return _state_out(session)


# ───────────────────────── read ─────────────────────────────
@router.get("/state", response_model=StateOut)
async def get_state(session: OnboardingSession = Depends(get_onboarding_session)) -> StateOut:
    return _state_out(session)


@router.get("/profile", response_model=ProfileView)
async def get_profile(
    session: OnboardingSession = Depends(get_onboarding_session),
) -> ProfileView:
    profile = session.state.profile
    return ProfileView(
        profile=_profile_out(profile),
        rows=[ProfileRow(title=t, value=v) for t, v in profile.rows()],
    )


# ───────────────────────── actions ──────────────────────────
@router.post("/sign-in", response_model=StateOut)
async def sign_in(
    body: SignInIn | None = None,
    session: OnboardingSession = Depends(get_onboarding_session),
) -> StateOut:
    method = body.method if body is not None else SignInIn().method
    return await _apply(session, SignIn(method))


@router.post("/answer", response_model=StateOut)
async def answer(
    body: AnswerIn,
    session: OnboardingSession = Depends(get_onboarding_session),
) -> StateOut:
    return await _apply(session, AnswerQuestion(body.value))


@router.post("/skip", response_model=StateOut)
async def skip(session: OnboardingSession = Depends(get_onboarding_session)) -> StateOut:
    return await _apply(session, SkipQuestion())


@router.post("/back", response_model=StateOut)
async def back(session: OnboardingSession = Depends(get_onboarding_session)) -> StateOut:
    return await _apply(session, GoBack())


@router.post("/measurements", response_model=StateOut)
async def measurements(
    body: MeasurementsIn,
    session: OnboardingSession = Depends(get_onboarding_session),
) -> StateOut:
    height, weight = body.encoded()
    return await _apply(session, SubmitMeasurements(body.unit_system.value, height, weight))


@router.post("/confirm-plan", response_model=StateOut)
async def confirm_plan(session: OnboardingSession = Depends(get_onboarding_session)) -> StateOut:
    return await _apply(session, ConfirmPlan())


@router.post("/dashboard", response_model=StateOut)
async def go_to_dashboard(
    session: OnboardingSession = Depends(get_onboarding_session),
) -> StateOut:
    return await _apply(session, GoToDashboard())


@router.post("/tab", response_model=StateOut)
async def select_tab(
    body: TabIn,
    session: OnboardingSession = Depends(get_onboarding_session),
) -> StateOut:
    return await _apply(session, SelectTab(body.tab))


@router.patch("/profile", response_model=StateOut)
async def edit_profile(
    body: ProfileEditIn,
    session: OnboardingSession = Depends(get_onboarding_session),
) -> StateOut:
    try:
        return await _apply(session, EditProfile(body.field, body.value))
    except KeyError as exc:
        raise HTTPException(status.HTTP_422_UNPROCESSABLE_ENTITY, f"unknown field {body.field!r}") from exc


@router.post("/reset", response_model=StateOut)
async def reset(session: OnboardingSession = Depends(get_onboarding_session)) -> StateOut:
    return await _apply(session, Reset())
