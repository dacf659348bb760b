"""
Database models for the academic administration app.

All SQLAlchemy models are defined here with proper relationships and properties.
Times are stored as UTC in the database.

A student's level/step assignment lives in two places: the identity record
(Person) and the progression record (AcademicRecord). Both are written
together by the progression engine.
"""

import uuid
from datetime import datetime, timezone

from academic_admin.extensions import db
from academic_admin.utils.helpers import format_utc_iso


def _utc_now():
    """Helper function for timezone-aware datetime defaults in SQLAlchemy models."""
    return datetime.now(timezone.utc)


def _new_id():
    return uuid.uuid4().hex


# -------------------- STUDENTS --------------------

class Person(db.Model):
    """Identity record for a student: names, contact data and current assignment."""
    __tablename__ = 'people'

    id = db.Column(db.String(64), primary_key=True, default=_new_id)
    numero_id = db.Column(db.String(32), nullable=True, index=True)  # National document number
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=True)
    email = db.Column(db.String(255), nullable=True, index=True)
    phone = db.Column(db.String(32), nullable=True)

    level = db.Column(db.String(20), nullable=True)
    step = db.Column(db.String(50), nullable=True)
    parallel_level = db.Column(db.String(20), nullable=True)
    parallel_step = db.Column(db.String(50), nullable=True)

    created_at = db.Column(db.DateTime, default=_utc_now)
    updated_at = db.Column(db.DateTime, default=_utc_now, onupdate=_utc_now)

    @property
    def full_name(self):
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def __repr__(self):
        return f'<Person {self.id} {self.level}/{self.step}>'


class AcademicRecord(db.Model):
    """
    Progression record for a student.

    Class records point here. person_id cross-references the identity record,
    which may be a different row (and id) than this one.
    """
    __tablename__ = 'academic_records'

    id = db.Column(db.String(64), primary_key=True, default=_new_id)
    person_id = db.Column(db.String(64), db.ForeignKey('people.id', ondelete='SET NULL'), nullable=True)
    numero_id = db.Column(db.String(32), nullable=True, index=True)
    first_name = db.Column(db.String(100), nullable=True)
    last_name = db.Column(db.String(100), nullable=True)
    email = db.Column(db.String(255), nullable=True)

    level = db.Column(db.String(20), nullable=True)
    step = db.Column(db.String(50), nullable=True)
    parallel_level = db.Column(db.String(20), nullable=True)
    parallel_step = db.Column(db.String(50), nullable=True)

    # Local date (YYYY-MM-DD) of the last step assignment
    essential_date = db.Column(db.String(10), nullable=True)

    created_at = db.Column(db.DateTime, default=_utc_now)
    updated_at = db.Column(db.DateTime, default=_utc_now, onupdate=_utc_now)

    person = db.relationship('Person', backref=db.backref('academic_records', lazy='dynamic'))
    class_records = db.relationship(
        'ClassRecord',
        backref='academic_record',
        lazy='dynamic',
        cascade='all, delete-orphan',
    )

    @property
    def contact_email(self):
        """Contact identifier used for the login credential."""
        if self.person and self.person.email:
            return self.person.email
        return self.email

    def __repr__(self):
        return f'<AcademicRecord {self.id} {self.level}/{self.step}>'


# -------------------- CLASSES --------------------

class ClassRecord(db.Model):
    """
    Outcome of one scheduled activity (session, club, ...) for a student.

    `attended` is authoritative. `attendance` is the legacy duplicate flag kept
    for migrated rows where `attended` was never filled in.
    """
    __tablename__ = 'class_records'

    id = db.Column(db.String(64), primary_key=True, default=_new_id)
    academic_record_id = db.Column(
        db.String(64),
        db.ForeignKey('academic_records.id', ondelete='CASCADE'),
        nullable=False,
    )
    event_id = db.Column(db.String(64), nullable=True)
    level = db.Column(db.String(20), nullable=True)
    step = db.Column(db.String(50), nullable=True)
    type = db.Column(db.String(20), nullable=True)  # SESSION, CLUB, COMPLEMENTARIA, WELCOME... NULL on migrated rows
    event_name = db.Column(db.String(200), nullable=True)
    advisor = db.Column(db.String(64), nullable=True)
    event_date = db.Column(db.DateTime, nullable=True)

    attended = db.Column(db.Boolean, nullable=True)
    attendance = db.Column(db.Boolean, nullable=True)
    participated = db.Column(db.Boolean, nullable=True)
    failed_jump = db.Column(db.Boolean, default=False, nullable=False)

    grade = db.Column(db.String(20), nullable=True)
    advisor_notes = db.Column(db.Text, nullable=True)
    comments = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, default=_utc_now)
    updated_at = db.Column(db.DateTime, default=_utc_now, onupdate=_utc_now)

    __table_args__ = (
        db.Index('ix_class_records_student_level', 'academic_record_id', 'level'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'academicRecordId': self.academic_record_id,
            'eventId': self.event_id,
            'level': self.level,
            'step': self.step,
            'type': self.type,
            'attended': self.attended,
            'participated': self.participated,
            'failedJump': self.failed_jump,
            'grade': self.grade,
            'advisorNotes': self.advisor_notes,
            'comments': self.comments,
        }

    def __repr__(self):
        return f'<ClassRecord {self.id} {self.level}/{self.step} type={self.type}>'


# -------------------- CURRICULUM --------------------

class Level(db.Model):
    """
    Curriculum level: an ordered list of step labels plus the clubs offered.

    Parallel levels are tracked in the parallel_level/parallel_step fields of
    a student instead of the primary ones.
    """
    __tablename__ = 'levels'

    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(20), unique=True, nullable=False)
    description = db.Column(db.String(200), nullable=True)
    steps = db.Column(db.JSON, nullable=False, default=list)
    clubs = db.Column(db.JSON, nullable=False, default=list)
    is_parallel = db.Column(db.Boolean, default=False, nullable=False)
    sort_order = db.Column(db.Integer, nullable=True)

    def __repr__(self):
        flag = " parallel" if self.is_parallel else ""
        return f'<Level {self.code}{flag} steps={len(self.steps or [])}>'


class StepOverride(db.Model):
    """Administrator decision that marks a step complete or incomplete for a student."""
    __tablename__ = 'step_overrides'

    id = db.Column(db.String(64), primary_key=True, default=_new_id)
    student_id = db.Column(db.String(64), nullable=False)
    numero_id = db.Column(db.String(32), nullable=True)
    level = db.Column(db.String(20), nullable=True)
    step = db.Column(db.String(50), nullable=False)
    is_completed = db.Column(db.Boolean, nullable=False)
    completed_at = db.Column(db.DateTime, nullable=True)

    created_by = db.Column(db.String(100), nullable=True)
    created_by_email = db.Column(db.String(255), nullable=True)
    updated_by = db.Column(db.String(100), nullable=True)
    updated_by_email = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, default=_utc_now)
    updated_at = db.Column(db.DateTime, default=_utc_now, onupdate=_utc_now)

    __table_args__ = (
        db.UniqueConstraint('student_id', 'step', name='uq_step_overrides_student_step'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'studentId': self.student_id,
            'level': self.level,
            'step': self.step,
            'isCompleted': self.is_completed,
            'completedAt': format_utc_iso(self.completed_at),
            'updatedBy': self.updated_by,
        }


# -------------------- CREDENTIALS --------------------

class UserRole(db.Model):
    """Platform login credential. Removed when a student graduates."""
    __tablename__ = 'user_roles'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.Text, nullable=True)
    role = db.Column(db.String(30), nullable=False, default='ESTUDIANTE')
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=_utc_now)

    def __repr__(self):
        return f'<UserRole {self.email} ({self.role})>'
