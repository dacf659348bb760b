"""
Step completion rules.

Regular steps need two successful sessions and one successful TRAINING club.
Jump steps (every fifth step) only need one registered class. Any class of
the step flagged as a failed jump vetoes completion, and a manual override
short-circuits everything.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from academic_admin.models import ClassRecord, StepOverride
from academic_admin.progression.steps import (
    ClassOutcome,
    classify,
    is_jump_step,
    is_successful,
    parse_step_number,
)
from academic_admin.utils.constants import CLUB, REQUIRED_CLUBS, REQUIRED_SESSIONS, SESSION

logger = logging.getLogger('progression')


@dataclass(frozen=True)
class StepEvaluation:
    step: str
    is_jump: bool
    completed: bool
    total_classes: int = 0
    sessions: int = 0
    successful_sessions: int = 0
    clubs: int = 0
    successful_clubs: int = 0
    failed_jump: bool = False
    override: Optional[bool] = None

    @property
    def has_override(self):
        return self.override is not None

    @property
    def message(self):
        """Guidance shown to the student when the step is not complete yet."""
        if self.completed:
            return None
        if self.override is False:
            return "Marked incomplete by an administrator"
        if self.failed_jump:
            return "Jump step not passed" if self.is_jump else "Marked as not passed"
        if self.is_jump:
            return "Jump step class missing"
        if self.successful_sessions >= REQUIRED_SESSIONS:
            return "Missing a TRAINING club"
        if self.successful_sessions == 1 and self.successful_clubs == 0:
            return "Missing one session and a TRAINING club"
        if self.successful_sessions == 1:
            return "Missing one session to finish the step"
        if self.successful_clubs >= REQUIRED_CLUBS:
            return "Missing two sessions"
        return "Missing two sessions and a TRAINING club"


def resolve_override(student_id, step) -> Optional[bool]:
    """Return the stored override for (student, step), or None when there is none."""
    if not student_id or not step:
        return None
    row = StepOverride.query.filter_by(student_id=student_id, step=step).first()
    if row is None:
        return None
    return bool(row.is_completed)


def evaluate_step(step: str, outcomes: Iterable[ClassOutcome], override: Optional[bool] = None) -> StepEvaluation:
    """
    Apply the completion rules to the class outcomes of one level.

    Outcomes for other steps are ignored; matching is by step number so
    "TRAINING - Step 7" counts toward "Step 7".
    """
    is_jump = is_jump_step(step)
    if override is not None:
        return StepEvaluation(step=step, is_jump=is_jump, completed=override, override=override)

    number = parse_step_number(step)
    if number is None:
        return StepEvaluation(step=step, is_jump=False, completed=False)

    of_step = [o for o in outcomes if o.step_number == number]
    session_outcomes = [o for o in of_step if classify(o) == SESSION]
    club_outcomes = [o for o in of_step if classify(o) == CLUB]
    successful_sessions = sum(1 for o in session_outcomes if is_successful(o))
    successful_clubs = sum(1 for o in club_outcomes if is_successful(o))
    failed_jump = any(o.failed_jump for o in of_step)

    if failed_jump:
        completed = False
    elif is_jump:
        completed = len(of_step) > 0
    else:
        completed = successful_sessions >= REQUIRED_SESSIONS and successful_clubs >= REQUIRED_CLUBS

    return StepEvaluation(
        step=step,
        is_jump=is_jump,
        completed=completed,
        total_classes=len(of_step),
        sessions=len(session_outcomes),
        successful_sessions=successful_sessions,
        clubs=len(club_outcomes),
        successful_clubs=successful_clubs,
        failed_jump=failed_jump,
    )


def load_outcomes(student_id, level):
    records = ClassRecord.query.filter_by(academic_record_id=student_id, level=level).all()
    return [ClassOutcome.from_record(record) for record in records]


def is_step_complete(student_id, level, step, override_student_id=None) -> bool:
    """
    Decide whether `step` of `level` is complete for a student.

    The override is looked up under `override_student_id` (the student's
    canonical identity) and, when present, is final.
    """
    override = resolve_override(override_student_id or student_id, step)
    if override is not None:
        logger.info(f"Override for {override_student_id or student_id}/{step}: completed={override}")
        return override

    if parse_step_number(step) is None:
        return False

    evaluation = evaluate_step(step, load_outcomes(student_id, level))
    logger.info(
        f"Step {step} ({level}) for {student_id}: jump={evaluation.is_jump}, "
        f"sessions={evaluation.successful_sessions}/{REQUIRED_SESSIONS}, "
        f"clubs={evaluation.successful_clubs}/{REQUIRED_CLUBS}, "
        f"failed_jump={evaluation.failed_jump}, completed={evaluation.completed}"
    )
    return evaluation.completed
