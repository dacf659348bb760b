"""
Saving a class evaluation and triggering automatic promotion.
"""

from sqlalchemy.exc import SQLAlchemyError

from academic_admin.extensions import db
from academic_admin.models import ClassRecord
from academic_admin.progression.engine import evaluate_and_advance
from academic_admin.utils.helpers import coerce_bool

# payload key -> (column, is boolean)
EVALUATION_FIELDS = {
    'attended': ('attended', True),
    'participated': ('participated', True),
    'failedJump': ('failed_jump', True),
    'grade': ('grade', False),
    'advisorNotes': ('advisor_notes', False),
    'comments': ('comments', False),
}


class EvaluationError(ValueError):
    """Invalid evaluation payload."""


def extract_evaluation_fields(payload):
    """
    Pick the allowed evaluation fields out of a request payload.

    Raises:
        EvaluationError: no allowed field present, or a malformed boolean.
    """
    updates = {}
    for key, (column, is_bool) in EVALUATION_FIELDS.items():
        if key not in payload or payload[key] is None:
            continue
        value = payload[key]
        if is_bool:
            try:
                value = coerce_bool(value)
            except ValueError as e:
                raise EvaluationError(f"{key}: {e}") from e
        else:
            value = str(value)
        updates[column] = value

    if not updates:
        raise EvaluationError("No valid fields to update")
    return updates


def save_evaluation(class_record_id, updates):
    """
    Store an evaluation on a class record, then run automatic promotion.

    Returns:
        tuple: (ClassRecord or None when not found, ProgressionResult or None)
    """
    record = db.session.get(ClassRecord, class_record_id)
    if record is None:
        return None, None

    try:
        for column, value in updates.items():
            setattr(record, column, value)
        if 'attended' in updates:
            # Legacy duplicate kept in sync for older readers
            record.attendance = updates['attended']
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise

    return record, evaluate_and_advance(record.id)
