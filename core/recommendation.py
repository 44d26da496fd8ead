"""
core/recommendation.py
────────────────────────────────────────────────────────────────────────
Supplement suggestions shown on the summary screen.

Pure lookup: goal → four suggestions, with per-diet overrides of single
positions. Goals and diets are matched on their label, so both the
questionnaire option ("⚖️ Lose Weight") and the bare label ("Lose Weight")
work. Unknown or empty goals get the "Other" list.
"""

from __future__ import annotations

import logging

_LOG = logging.getLogger(__name__)

DEFAULT_GOAL = "Other"

RECOMMENDATIONS: dict[str, tuple[str, ...]] = {
    "Build Muscle": (
        "🥛 Whey Protein Powder: Supports muscle protein synthesis and is ideal for post-workout recovery.",
        "🔋 Creatine Monohydrate: Enhances strength and power output, increasing muscle mass over time.",
        "🧬 Branched-Chain Amino Acids (BCAAs): Reduces muscle soreness and aids in muscle recovery and growth.",
        "⚡ Beta-Alanine: Delays muscle fatigue during intense workouts, improving overall performance.",
    ),
    "Lose Weight": (
        "🍵 Green Tea Extract: May boost metabolism and support fat oxidation.",
        "🥕 Fiber Supplements: Promotes satiety and aids in digestive health.",
        "🔥 L-Carnitine: Assists in fat metabolism, helping convert fat into energy.",
        "💧 Conjugated Linoleic Acid (CLA): May help reduce body fat and improve lean muscle mass.",
    ),
    "Boost Endurance": (
        "⚡ Beta-Alanine: Delays muscle fatigue and improves exercise performance.",
        "🧂 Electrolyte Supplements: Maintains hydration and replenishes essential minerals lost through sweat.",
        "🌡️ L-Citrulline: Enhances nitric oxide production, improving blood flow and endurance.",
        "🔋 Beetroot Extract: Increases nitric oxide levels, enhancing stamina and endurance.",
    ),
    "Enhance Recovery": (
        "🐟 Omega-3 Fatty Acids: Reduces inflammation and supports joint health.",
        "🧘 Magnesium: Aids in muscle relaxation and supports sleep quality.",
        "🌿 Turmeric (Curcumin): Has anti-inflammatory properties and may reduce muscle soreness.",
        "🌿 Ashwagandha: Helps reduce stress and cortisol levels, promoting recovery.",
    ),
    "Improve Health": (
        "🌈 Multivitamin: Provides essential nutrients and supports overall health.",
        "🦴 Calcium and Vitamin D: Maintains bone density and supports bone health.",
        "❤️ Coenzyme Q10: Supports heart health and enhances energy production.",
        "🌱 Probiotics: Supports gut health and improves digestion.",
    ),
    DEFAULT_GOAL: (
        "💡 Personalized Consultation: Based on your unique goals, consider a personalized consultation for tailored supplement advice.",
        "🌿 Adaptogenic Herbs: Support overall wellness and help the body adapt to stress.",
        "💤 Melatonin: Supports healthy sleep patterns, essential for recovery and well-being.",
        "💧 Hydration Enhancers: Ensure optimal hydration for overall health.",
    ),
}

VITAMIN_B12 = (
    "💊 Vitamin B12 Supplement: Addresses common deficiency in plant-based diets "
    "and supports energy levels."
)

# (goal, diet) → {position: replacement}
DIET_OVERRIDES: dict[tuple[str, str], dict[int, str]] = {
    ("Lose Weight", "Vegan"): {3: VITAMIN_B12},
    ("Lose Weight", "Vegetarian"): {3: VITAMIN_B12},
}


def label(option: str) -> str:
    """Drop a leading emoji/symbol token: "⚖️ Lose Weight" → "Lose Weight"."""
    text = option.strip()
    head, sep, rest = text.partition(" ")
    if sep and head and not any(ch.isalnum() for ch in head):
        return rest.strip()
    return text


def split_icon(recommendation: str) -> tuple[str, str]:
    """ "🍵 Green Tea Extract: …" → ("🍵", "Green Tea Extract: …") """
    head, sep, rest = recommendation.partition(" ")
    if sep and not any(ch.isalnum() for ch in head):
        return head, rest
    return "", recommendation


def recommendations(main_goal: str, diet: str) -> list[str]:
    goal = label(main_goal)
    recs = list(RECOMMENDATIONS.get(goal, RECOMMENDATIONS[DEFAULT_GOAL]))
    for pos, text in DIET_OVERRIDES.get((goal, label(diet)), {}).items():
        recs[pos] = text
    _LOG.debug("recommendations for goal=%r diet=%r → %d items", goal, diet, len(recs))
    return recs
