# api/v1/router.py
from fastapi import APIRouter

from . import onboarding, recs

api_router = APIRouter()

api_router.include_router(onboarding.router, prefix="/onboarding", tags=["Onboarding"])
api_router.include_router(recs.router, prefix="/recommendations", tags=["Recommendations"])
