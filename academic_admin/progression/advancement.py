"""
Writes that finish a progression: moving a student to a new step, or
revoking platform access when the curriculum is finished.

Both writes touch the academic record and the linked person record inside a
single commit, so readers never see one store updated and the other stale.
"""

import logging

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from academic_admin.extensions import db
from academic_admin.models import UserRole
from academic_admin.utils.helpers import local_today

logger = logging.getLogger('progression')


def _assign(target, level, step, is_parallel):
    if is_parallel:
        target.parallel_level = level
        target.parallel_step = step
    else:
        target.level = level
        target.step = step


def advance(academic_record, next_level, next_step, is_parallel=False):
    """
    Assign `next_level`/`next_step` to the student's primary or parallel track.

    Args:
        academic_record (AcademicRecord): the student's progression record.
        next_level (str): level code to assign.
        next_step (str): step label to assign.
        is_parallel (bool): write the parallel fields instead of the primary ones.

    Raises:
        SQLAlchemyError: the commit failed; the session is rolled back and
            neither store is changed.
    """
    try:
        _assign(academic_record, next_level, next_step, is_parallel)
        academic_record.essential_date = local_today()
        if academic_record.person is not None:
            _assign(academic_record.person, next_level, next_step, is_parallel)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception(f"Failed to assign {next_level}/{next_step} to {academic_record.id}")
        raise

    track = "parallel" if is_parallel else "primary"
    logger.info(f"Student {academic_record.id} assigned {next_level}/{next_step} ({track} track)")


def revoke_access(academic_record):
    """
    Delete the login credential of a graduating student.

    A missing credential (or a student without contact email) is not an
    error. Returns True when a credential was deleted.

    Raises:
        SQLAlchemyError: the delete failed; the session is rolled back.
    """
    email = academic_record.contact_email
    if not email:
        logger.info(f"Graduated student {academic_record.id} has no contact email; nothing to revoke")
        return False

    try:
        deleted = (
            UserRole.query
            .filter(func.lower(UserRole.email) == email.strip().lower())
            .delete(synchronize_session=False)
        )
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception(f"Failed to revoke access for graduated student {academic_record.id}")
        raise

    logger.info(f"Graduated student {academic_record.id}: removed {deleted} credential(s) for {email}")
    return deleted > 0
