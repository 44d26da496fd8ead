# api/v1/recs.py
from __future__ import annotations

from fastapi import APIRouter, Depends, status

from core.recommendation import split_icon
from core.session import OnboardingSession
from api.v1.onboarding import get_onboarding_session
from api.v1.schemas import RecItem, RecResponse

router = APIRouter()


@router.get("", response_model=RecResponse, status_code=status.HTTP_200_OK)
async def recommend(
    session: OnboardingSession = Depends(get_onboarding_session),
) -> RecResponse:
    """Suggestions for the stored goal/diet, as shown on the summary screen."""
    profile = session.state.profile
    recs = session.recommendations()
    items = []
    for rec in recs:
        icon, text = split_icon(rec)
        items.append(RecItem(icon=icon, text=text))
    return RecResponse(
        mainGoal=profile.main_goal,
        diet=profile.diet,
        recommendations=recs,
        items=items,
    )
