"""
Application-wide constants for the academic administration app.

This module contains the curriculum constants used by the progression engine
and the default curriculum loaded by `flask seed-curriculum`.
"""

# Orientation track and its placeholder step never take part in progression
ORIENTATION_LEVEL = "ESS"
WELCOME_STEP = "WELCOME"

SESSION = "SESSION"
CLUB = "CLUB"
OTHER = "OTHER"

# Every fifth step is a jump step
JUMP_STEP_INTERVAL = 5

# Regular steps need this many successful sessions and clubs
REQUIRED_SESSIONS = 2
REQUIRED_CLUBS = 1

STEPS_PER_LEVEL = 5

STANDARD_LEVEL_CODES = [
    "BN1", "BN2", "BN3",
    "IN1", "IN2", "IN3",
    "AU1", "AU2", "AU3",
]


def _standard_levels():
    levels = []
    for index, code in enumerate(STANDARD_LEVEL_CODES):
        first = index * STEPS_PER_LEVEL + 1
        numbers = range(first, first + STEPS_PER_LEVEL)
        levels.append({
            "code": code,
            "description": f"Level {code}",
            "steps": [f"Step {n}" for n in numbers],
            "clubs": [f"TRAINING - Step {n}" for n in numbers],
            "is_parallel": False,
            "sort_order": index + 2,
        })
    return levels


DEFAULT_CURRICULUM = [
    {
        "code": ORIENTATION_LEVEL,
        "description": "English Speaking Sessions",
        "steps": ["Step 0"],
        "clubs": [],
        "is_parallel": True,
        "sort_order": 0,
    },
    {
        "code": WELCOME_STEP,
        "description": "Welcome session",
        "steps": [WELCOME_STEP],
        "clubs": [],
        "is_parallel": False,
        "sort_order": 1,
    },
] + _standard_levels()
