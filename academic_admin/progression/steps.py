"""
Step label parsing and class record classification.

Step labels look like "Step 7". Club activities carry the step in a
"TRAINING - Step 7" label. Migrated rows often have no explicit type, so the
label patterns below are the compatibility fallback for them; an explicit
type tag always wins.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from academic_admin.utils.constants import CLUB, JUMP_STEP_INTERVAL, OTHER, SESSION

_STEP_NUMBER_RE = re.compile(r'Step\s*(\d+)', re.IGNORECASE)
_TRAINING_RE = re.compile(r'^TRAINING\s*-', re.IGNORECASE)
_SESSION_LABEL_RE = re.compile(r'^Step\s+\d+$', re.IGNORECASE)


def parse_step_number(label: Optional[str]) -> Optional[int]:
    """Extract N from "Step N" (also inside "TRAINING - Step N"). None if absent."""
    if not label:
        return None
    match = _STEP_NUMBER_RE.search(label)
    return int(match.group(1)) if match else None


def is_jump_step(label: Optional[str]) -> bool:
    number = parse_step_number(label)
    return number is not None and number > 0 and number % JUMP_STEP_INTERVAL == 0


def next_step_label(label: Optional[str]) -> Optional[str]:
    number = parse_step_number(label)
    if number is None:
        return None
    return f"Step {number + 1}"


@dataclass(frozen=True)
class ClassOutcome:
    """
    Fixed-shape view of a class record used by the completion rules.

    `attended` is resolved once here: the authoritative flag when it was
    recorded, otherwise the legacy attendance column.
    """
    id: Optional[str]
    level: Optional[str]
    step: Optional[str]
    type: Optional[str]
    attended: bool
    participated: bool
    failed_jump: bool

    @classmethod
    def from_record(cls, record) -> "ClassOutcome":
        attended = record.attended
        if attended is None:
            attended = record.attendance
        return cls(
            id=record.id,
            level=record.level,
            step=record.step,
            type=(record.type or None),
            attended=bool(attended),
            participated=bool(record.participated),
            failed_jump=bool(record.failed_jump),
        )

    @property
    def step_number(self) -> Optional[int]:
        return parse_step_number(self.step)


def classify(outcome: ClassOutcome) -> str:
    """Return SESSION, CLUB or OTHER for a class outcome."""
    if outcome.type:
        tag = outcome.type.strip().upper()
        if tag in (SESSION, CLUB):
            return tag
        return OTHER

    # Legacy rows without a type tag
    if outcome.step:
        if _TRAINING_RE.match(outcome.step):
            return CLUB
        if _SESSION_LABEL_RE.match(outcome.step.strip()):
            return SESSION
    return OTHER


def is_successful(outcome: ClassOutcome) -> bool:
    return outcome.attended or outcome.participated
