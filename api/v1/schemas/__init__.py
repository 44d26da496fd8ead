"""Re-export individual schema modules for easy imports."""

from .onboarding import (
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
from .rec import RecItem, RecResponse

__all__ = [
    "AnswerIn",
    "MeasurementsIn",
    "ProfileEditIn",
    "ProfileOut",
    "ProfileRow",
    "ProfileView",
    "QuestionOut",
    "SignInIn",
    "StateOut",
    "TabIn",
    "RecItem",
    "RecResponse",
]
