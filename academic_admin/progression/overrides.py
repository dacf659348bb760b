"""Administrator-managed step overrides."""

from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError

from academic_admin.extensions import db
from academic_admin.models import StepOverride
from academic_admin.progression.engine import override_key_for


def list_step_overrides(academic_record):
    return (
        StepOverride.query
        .filter_by(student_id=override_key_for(academic_record))
        .order_by(StepOverride.step)
        .all()
    )


def set_step_override(academic_record, step, is_completed, completed_at=None,
                      actor_name=None, actor_email=None):
    """
    Create or update the override for one step of a student.

    Returns:
        tuple: (StepOverride, created) where created is False for an update.
    """
    student_id = override_key_for(academic_record)
    override = StepOverride.query.filter_by(student_id=student_id, step=step).first()
    created = override is None
    completed_at = completed_at or datetime.now(timezone.utc).replace(tzinfo=None)
    actor_name = actor_name or 'System'

    try:
        if created:
            override = StepOverride(
                student_id=student_id,
                numero_id=academic_record.numero_id,
                level=academic_record.level,
                step=step,
                created_by=actor_name,
                created_by_email=actor_email,
            )
            db.session.add(override)
        override.is_completed = bool(is_completed)
        override.completed_at = completed_at
        override.updated_by = actor_name
        override.updated_by_email = actor_email
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise

    return override, created


def clear_step_override(academic_record, step):
    """Delete the override for a step. Returns True if one existed."""
    try:
        deleted = StepOverride.query.filter_by(
            student_id=override_key_for(academic_record),
            step=step,
        ).delete(synchronize_session=False)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
    return deleted > 0
