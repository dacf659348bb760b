"""
Per-step progress report for a student ("how am I doing?").

Uses the same completion rules as automatic promotion, so a step reported as
complete is exactly a step the engine would promote from.
"""

from academic_admin.models import ClassRecord, StepOverride
from academic_admin.progression.catalog import load_catalog
from academic_admin.progression.completion import evaluate_step
from academic_admin.progression.engine import override_key_for
from academic_admin.progression.steps import ClassOutcome, is_successful, parse_step_number
from academic_admin.utils.constants import ORIENTATION_LEVEL, WELCOME_STEP


def _percentage(part, whole):
    return round(part * 100 / whole) if whole else 0


def build_progress_report(academic_record):
    """
    Build the progress report for a student's primary level.

    Args:
        academic_record (AcademicRecord): the student.

    Returns:
        dict: student summary, per-step progress and attendance statistics.
    """
    level = academic_record.level
    records = (
        ClassRecord.query
        .filter_by(academic_record_id=academic_record.id)
        .order_by(ClassRecord.event_date.desc())
        .all()
    )
    outcomes = [ClassOutcome.from_record(r) for r in records]
    of_level = [
        o for o in outcomes
        if o.level == level and o.level != ORIENTATION_LEVEL and o.step != WELCOME_STEP
    ]

    entry = load_catalog().get_level(level)
    steps = [s for s in (entry.steps if entry else ()) if s != WELCOME_STEP]
    steps.sort(key=lambda s: parse_step_number(s) or 0)

    overrides = {
        o.step: bool(o.is_completed)
        for o in StepOverride.query.filter_by(student_id=override_key_for(academic_record)).all()
    }

    progress_by_step = []
    for step in steps:
        evaluation = evaluate_step(step, of_level, overrides.get(step))
        progress_by_step.append({
            'step': step,
            'isJump': evaluation.is_jump,
            'totalClasses': evaluation.total_classes,
            'sessions': evaluation.sessions,
            'successfulSessions': evaluation.successful_sessions,
            'clubs': evaluation.clubs,
            'successfulClubs': evaluation.successful_clubs,
            'failedJump': evaluation.failed_jump,
            'completed': evaluation.completed,
            'message': evaluation.message,
            'hasOverride': evaluation.has_override,
            'overrideCompleted': evaluation.override,
        })

    steps_completed = sum(1 for s in progress_by_step if s['completed'])
    attended = sum(1 for o in outcomes if is_successful(o))
    absences = sum(1 for r in records if r.attended is False)
    pending = sum(1 for r in records if r.attended is None)

    return {
        'student': {
            'id': academic_record.id,
            'numeroId': academic_record.numero_id,
            'name': " ".join(p for p in (academic_record.first_name, academic_record.last_name) if p),
            'level': academic_record.level,
            'step': academic_record.step,
            'parallelLevel': academic_record.parallel_level,
            'parallelStep': academic_record.parallel_step,
            'email': academic_record.contact_email,
        },
        'progress': {
            'currentLevel': level,
            'totalSteps': len(steps),
            'stepsCompleted': steps_completed,
            'progressPercentage': _percentage(steps_completed, len(steps)),
            'progressByStep': progress_by_step,
        },
        'stats': {
            'totalClasses': len(records),
            'attended': attended,
            'absences': absences,
            'pending': pending,
            'attendancePercentage': _percentage(attended, len(records)),
        },
    }
