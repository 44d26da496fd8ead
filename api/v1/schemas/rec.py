# api/v1/schemas/rec.py
from __future__ import annotations

from typing import List

from pydantic import BaseModel


class RecItem(BaseModel):
    icon: str
    text: str


class RecResponse(BaseModel):
    mainGoal: str
    diet: str
    recommendations: List[str]
    items: List[RecItem]
