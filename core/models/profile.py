from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# profile-screen order
_LABELS: dict[str, str] = {
    "main_goal": "Main Goal",
    "health_concerns": "Health Concerns",
    "taking_medications": "Taking Medications",
    "diet": "Diet",
    "activity_level": "Activity Level",
    "age": "Age",
    "gender": "Gender",
    "preferred_form": "Preferred Form",
    "height": "Height",
    "weight": "Weight",
}


class UserProfile(BaseModel):
    """Questionnaire answers. Every value is a plain string."""

    main_goal: str = Field("", alias="mainGoal")
    health_concerns: str = Field("", alias="healthConcerns")
    taking_medications: str = Field("", alias="takingMedications")
    diet: str = ""
    activity_level: str = Field("", alias="activityLevel")
    age: str = ""
    gender: str = ""
    preferred_form: str = Field("", alias="preferredForm")
    height: str = ""
    weight: str = ""
    unit_system: str = Field("Metric", alias="unitSystem")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def rows(self) -> list[tuple[str, str]]:
        return [(label, getattr(self, name)) for name, label in _LABELS.items()]
