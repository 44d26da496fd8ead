# api/v1/schemas/onboarding.py
from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field, model_validator

from core.measurements import (
    HEIGHT_CM_RANGE,
    HEIGHT_FEET_RANGE,
    HEIGHT_INCHES_RANGE,
    UnitSystem,
    encode_height,
    encode_weight,
    weight_range,
)
from core.navigation import AppView, DashboardTab, SignInMethod, UserProgress


class ProfileOut(BaseModel):
    mainGoal: str
    healthConcerns: str
    takingMedications: str
    diet: str
    activityLevel: str
    age: str
    gender: str
    preferredForm: str
    height: str
    weight: str
    unitSystem: str


class ProfileRow(BaseModel):
    title: str
    value: str


class ProfileView(BaseModel):
    profile: ProfileOut
    rows: List[ProfileRow]


class QuestionOut(BaseModel):
    index: int
    title: str
    options: List[str]
    measurements: bool = False


class StateOut(BaseModel):
    currentView: AppView
    userProgress: UserProgress
    questionIndex: int
    totalQuestions: int
    progressFraction: float
    loadingProgress: float
    selectedTab: DashboardTab
    question: QuestionOut | None = None
    userProfile: ProfileOut


# ───────────────────────── requests ─────────────────────────
class SignInIn(BaseModel):
    method: SignInMethod = SignInMethod.email


class AnswerIn(BaseModel):
    value: str


class TabIn(BaseModel):
    tab: DashboardTab


class ProfileEditIn(BaseModel):
    field: str = Field(..., examples=["age", "preferredForm"])
    value: str


class MeasurementsIn(BaseModel):
    """Picker values for the height/weight step; missing values use the picker defaults."""

    unit_system: UnitSystem = Field(UnitSystem.metric, alias="unitSystem")
    height_cm: int | None = Field(None, alias="heightCm")
    feet: int | None = None
    inches: int | None = None
    weight: int | None = None

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="after")
    def _check_ranges(self) -> "MeasurementsIn":
        checks = [(self.weight, weight_range(self.unit_system), "weight")]
        if self.unit_system is UnitSystem.metric:
            checks.append((self.height_cm, HEIGHT_CM_RANGE, "heightCm"))
        else:
            checks.append((self.feet, HEIGHT_FEET_RANGE, "feet"))
            checks.append((self.inches, HEIGHT_INCHES_RANGE, "inches"))
        for value, allowed, name in checks:
            if value is not None and value not in allowed:
                raise ValueError(f"{name} must be between {allowed.start} and {allowed.stop - 1}")
        return self

    def encoded(self) -> tuple[str, str]:
        height = encode_height(self.unit_system, self.height_cm, self.feet, self.inches)
        return height, encode_weight(self.unit_system, self.weight)
