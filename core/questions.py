from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Question:
    title: str
    options: tuple[str, ...] = ()

    @property
    def is_measurements(self) -> bool:
        return not self.options


QUESTIONS: tuple[Question, ...] = (
    Question(
        "What's your main fitness goal?",
        (
            "🏋️ Build Muscle",
            "⚖️ Lose Weight",
            "🏃‍♂️ Boost Endurance",
            "💪 Enhance Recovery",
            "🌟 Improve Health",
            "✨ Other",
        ),
    ),
    Question(
        "How often do you exercise?",
        ("Rarely", "1-2 times a week", "3-4 times a week", "5+ times a week"),
    ),
    Question("Any health concerns or allergies?", ("Yes", "No")),
    Question("Taking any medications or supplements?", ("Yes", "No")),
    Question(
        "What's your diet like?",
        ("🍖 Omnivore", "🥕 Vegetarian", "🥬 Vegan", "🐟 Pescatarian", "🌍 Other"),
    ),
    Question("Choose gender", ("Male", "Female", "Other", "Prefer not to say")),
    Question("What's your height and weight?"),  # answered with the measurement pickers
)

# question position → profile attribute; the measurements question has no entry
FIELD_BY_INDEX: dict[int, str] = {
    0: "main_goal",
    1: "activity_level",
    2: "health_concerns",
    3: "taking_medications",
    4: "diet",
    5: "gender",
}

MEASUREMENTS_INDEX = 6
