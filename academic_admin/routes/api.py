"""
API routes for the academic administration app.

JSON endpoints used by the dashboard: saving class evaluations (which drives
automatic step promotion), step overrides, manual step changes and the
student progress report. All routes require an admin session.
"""

from flask import Blueprint, request, jsonify, current_app
from sqlalchemy.exc import SQLAlchemyError

from academic_admin.auth import admin_required, get_current_admin
from academic_admin.extensions import limiter
from academic_admin.progression import change_step, find_student
from academic_admin.progression.evaluations import (
    EvaluationError,
    extract_evaluation_fields,
    save_evaluation,
)
from academic_admin.progression.overrides import (
    clear_step_override,
    list_step_overrides,
    set_step_override,
)
from academic_admin.progression.report import build_progress_report
from academic_admin.utils.helpers import coerce_bool, parse_iso_datetime

# Create blueprint
api_bp = Blueprint('api', __name__, url_prefix='/api')


def _student_or_404(student_id):
    student = find_student(student_id)
    if student is None:
        return None, (jsonify(error='Student not found'), 404)
    return student, None


def _database_error():
    return jsonify(error='Database error'), 500


# -------------------- EVALUATIONS --------------------

@api_bp.route('/academic/evaluation', methods=['POST'])
@limiter.limit("120 per minute")
@admin_required
def save_class_evaluation():
    """
    Save the evaluation of one class record, then run automatic promotion.

    Body: {classRecordId, attended?, participated?, failedJump?, grade?,
    advisorNotes?, comments?}
    """
    payload = request.get_json(silent=True) or {}
    class_record_id = payload.get('classRecordId')
    if not class_record_id:
        return jsonify(error='classRecordId is required'), 400

    try:
        updates = extract_evaluation_fields(payload)
    except EvaluationError as e:
        return jsonify(error=str(e)), 400

    try:
        record, progression = save_evaluation(class_record_id, updates)
    except SQLAlchemyError:
        current_app.logger.exception(f"Error saving evaluation for class record {class_record_id}")
        return _database_error()

    if record is None:
        return jsonify(error='Class record not found'), 404

    return jsonify(
        success=True,
        classRecord=record.to_dict(),
        progression=progression.to_dict() if progression else None,
    )


# -------------------- PROGRESS --------------------

@api_bp.route('/students/<student_id>/progress', methods=['GET'])
@admin_required
def student_progress(student_id):
    """Per-step progress report for a student's current level."""
    student, error = _student_or_404(student_id)
    if error:
        return error
    return jsonify(build_progress_report(student))


@api_bp.route('/students/<student_id>/step', methods=['POST'])
@admin_required
def change_student_step(student_id):
    """Move a student to another step by hand. Body: {step: <number>}."""
    student, error = _student_or_404(student_id)
    if error:
        return error

    payload = request.get_json(silent=True) or {}
    try:
        step_number = int(payload.get('step'))
    except (TypeError, ValueError):
        return jsonify(error='step must be a number'), 400

    try:
        result = change_step(student, step_number)
    except LookupError as e:
        return jsonify(error=str(e)), 404
    except SQLAlchemyError:
        current_app.logger.exception(f"Error changing step for student {student_id}")
        return _database_error()

    current_app.logger.info(
        f"Step changed by hand for {student.id}: "
        f"{result['previousLevel']}/{result['previousStep']} -> {result['level']}/{result['step']}"
    )
    return jsonify(success=True, **result)


# -------------------- STEP OVERRIDES --------------------

@api_bp.route('/students/<student_id>/step-overrides', methods=['GET'])
@admin_required
def get_step_overrides(student_id):
    student, error = _student_or_404(student_id)
    if error:
        return error
    return jsonify(overrides=[o.to_dict() for o in list_step_overrides(student)])


@api_bp.route('/students/<student_id>/step-overrides', methods=['POST'])
@admin_required
def upsert_step_override(student_id):
    """Mark a step complete or incomplete. Body: {step, isCompleted, completedAt?}."""
    student, error = _student_or_404(student_id)
    if error:
        return error

    payload = request.get_json(silent=True) or {}
    step = str(payload.get('step') or '').strip()
    if not step:
        return jsonify(error='step is required'), 400
    try:
        is_completed = coerce_bool(payload.get('isCompleted'))
        completed_at = parse_iso_datetime(payload.get('completedAt'))
    except ValueError as e:
        return jsonify(error=str(e)), 400
    if is_completed is None:
        return jsonify(error='isCompleted is required'), 400

    admin = get_current_admin()
    try:
        override, created = set_step_override(
            student,
            step,
            is_completed,
            completed_at=completed_at,
            actor_name=admin.email.split('@')[0],
            actor_email=admin.email,
        )
    except SQLAlchemyError:
        current_app.logger.exception(f"Error saving step override for {student_id}/{step}")
        return _database_error()

    action = 'created' if created else 'updated'
    current_app.logger.info(f"Step override {action} for {student.id}/{step}: completed={is_completed}")
    return jsonify(success=True, message=f"Override {action} for {step}", override=override.to_dict())


@api_bp.route('/students/<student_id>/step-overrides', methods=['DELETE'])
@admin_required
def delete_step_override(student_id):
    student, error = _student_or_404(student_id)
    if error:
        return error

    payload = request.get_json(silent=True) or {}
    step = str(payload.get('step') or request.args.get('step') or '').strip()
    if not step:
        return jsonify(error='step is required'), 400

    try:
        deleted = clear_step_override(student, step)
    except SQLAlchemyError:
        current_app.logger.exception(f"Error deleting step override for {student_id}/{step}")
        return _database_error()

    if not deleted:
        return jsonify(error='Override not found'), 404
    return jsonify(success=True, message=f"Override removed for {step}")
