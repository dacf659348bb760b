"""
Automatic step promotion.

evaluate_and_advance() runs after a class evaluation is saved. It checks
whether that evaluation completed the student's current step and, if so,
moves the student to the next step or, at the end of the curriculum,
graduates them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from academic_admin.extensions import db
from academic_admin.models import AcademicRecord, ClassRecord
from academic_admin.progression.advancement import advance, revoke_access
from academic_admin.progression.catalog import load_catalog
from academic_admin.progression.completion import is_step_complete
from academic_admin.progression.steps import parse_step_number
from academic_admin.utils.constants import ORIENTATION_LEVEL, WELCOME_STEP

logger = logging.getLogger('progression')


@dataclass(frozen=True)
class ProgressionResult:
    advanced: bool
    from_level: str
    from_step: str
    to_level: Optional[str] = None
    to_step: Optional[str] = None
    graduated: bool = False

    def to_dict(self):
        data = {
            'advanced': self.advanced,
            'from': {'level': self.from_level, 'step': self.from_step},
        }
        if self.advanced:
            data['to'] = {'level': self.to_level, 'step': self.to_step}
        if self.graduated:
            data['graduated'] = True
        return data


def override_key_for(academic_record):
    """Prefer the linked identity record's id when it differs from the academic record."""
    person_id = academic_record.person_id
    if person_id and person_id != academic_record.id:
        return person_id
    return academic_record.id


def _current_position(academic_record, level):
    """Return the (level, step) of the track that `level` belongs to."""
    if academic_record.parallel_level and academic_record.parallel_level == level:
        return academic_record.parallel_level, academic_record.parallel_step
    return academic_record.level, academic_record.step


def evaluate_and_advance(class_record_id) -> Optional[ProgressionResult]:
    """
    Promote the owner of a freshly evaluated class record if it completed their step.

    Returns None when there is nothing to do (unknown record, excluded track,
    stale step, step missing from the catalog, step not complete).
    Persistence errors propagate.
    """
    record = db.session.get(ClassRecord, class_record_id) if class_record_id else None
    if record is None:
        logger.debug(f"Class record {class_record_id} not found; skipping progression")
        return None

    student_id, level, step = record.academic_record_id, record.level, record.step
    if not (student_id and level and step):
        logger.debug(f"Class record {record.id} has no student/level/step; skipping progression")
        return None

    if level == ORIENTATION_LEVEL or step == WELCOME_STEP:
        logger.debug(f"Class record {record.id} belongs to {level}/{step}; not part of progression")
        return None

    if parse_step_number(step) is None:
        logger.debug(f"Class record {record.id} has unparseable step {step!r}")
        return None

    academic_record = db.session.get(AcademicRecord, student_id)
    if academic_record is None:
        logger.debug(f"Student {student_id} not found; skipping progression")
        return None

    if _current_position(academic_record, level) != (level, step):
        logger.debug(
            f"Class record {record.id} is for {level}/{step} but student {student_id} "
            f"is at {_current_position(academic_record, level)}; skipping"
        )
        return None

    catalog = load_catalog()
    if catalog.find_level_by_step_label(step) is None:
        logger.warning(f"Step {step!r} of class record {record.id} is not in the catalog; skipping progression")
        return None

    if not is_step_complete(student_id, level, step, override_key_for(academic_record)):
        return None

    successor = catalog.successor(step)
    if successor is None:
        revoke_access(academic_record)
        logger.info(f"Student {student_id} completed {level}/{step}, the last step of the curriculum")
        return ProgressionResult(advanced=False, graduated=True, from_level=level, from_step=step)

    next_step, entry = successor
    advance(academic_record, entry.level_code, next_step, entry.is_parallel)
    logger.info(f"Student {student_id} promoted {level}/{step} -> {entry.level_code}/{next_step}")
    return ProgressionResult(
        advanced=True,
        from_level=level,
        from_step=step,
        to_level=entry.level_code,
        to_step=next_step,
    )


def find_student(student_id):
    """Look a student up by academic record id, document number, or linked person id."""
    if not student_id:
        return None
    academic_record = db.session.get(AcademicRecord, student_id)
    if academic_record is not None:
        return academic_record
    return (
        AcademicRecord.query
        .filter((AcademicRecord.numero_id == student_id) | (AcademicRecord.person_id == student_id))
        .first()
    )


def change_step(academic_record, step_number):
    """
    Move a student to "Step <step_number>" by hand.

    The owning level comes from the catalog, and parallel levels are written
    to the parallel track.

    Raises:
        LookupError: no level contains that step.
        SQLAlchemyError: the write failed and was rolled back.
    """
    new_step = f"Step {int(step_number)}"
    entry = load_catalog().find_level_by_step_label(new_step)
    if entry is None:
        raise LookupError(f"No level contains {new_step}")

    if entry.is_parallel:
        previous = (academic_record.parallel_level, academic_record.parallel_step)
    else:
        previous = (academic_record.level, academic_record.step)

    advance(academic_record, entry.level_code, new_step, entry.is_parallel)
    return {
        'studentId': academic_record.id,
        'previousLevel': previous[0],
        'previousStep': previous[1],
        'level': entry.level_code,
        'step': new_step,
        'isParallel': entry.is_parallel,
    }
