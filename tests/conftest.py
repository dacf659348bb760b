import os
import sys
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Override env vars for testing
os.environ["SECRET_KEY"] = "test-secret"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["FLASK_ENV"] = "testing"
os.environ.setdefault("RATELIMIT_STORAGE_URI", "memory://")

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

import pytest
from academic_admin import app as flask_app, db
from academic_admin.models import AcademicRecord, ClassRecord, Level, Person, UserRole
from academic_admin.progression import invalidate_catalog
from academic_admin.utils.constants import DEFAULT_CURRICULUM


@pytest.fixture
def app():
    """Provide the Flask app instance for tests."""
    flask_app.config.update(
        TESTING=True,
        WTF_CSRF_ENABLED=False,
        SQLALCHEMY_DATABASE_URI="sqlite:///:memory:",
        ENV="testing",
        SESSION_COOKIE_SECURE=False,
    )
    yield flask_app


@pytest.fixture
def client(app):
    ctx = app.app_context()
    ctx.push()
    db.create_all()
    client = flask_app.test_client()
    yield client
    db.session.remove()
    db.drop_all()
    ctx.pop()


@pytest.fixture(autouse=True)
def fresh_catalog():
    """The step catalog is cached process-wide; start every test without it."""
    invalidate_catalog()
    yield
    invalidate_catalog()


@pytest.fixture
def curriculum(client):
    """The default curriculum: ESS, WELCOME and Step 1..Step 45 over nine levels."""
    for definition in DEFAULT_CURRICULUM:
        db.session.add(Level(**definition))
    db.session.commit()
    return DEFAULT_CURRICULUM


@pytest.fixture
def make_student(client):
    """Create a person + linked academic record at the given position."""
    def _make(level="BN1", step="Step 1", email="student@example.com",
              parallel_level=None, parallel_step=None, with_person=True):
        person = None
        if with_person:
            person = Person(
                first_name="Ana",
                last_name="Gomez",
                email=email,
                numero_id="1020304050",
                level=level,
                step=step,
                parallel_level=parallel_level,
                parallel_step=parallel_step,
            )
            db.session.add(person)
            db.session.flush()
        academic = AcademicRecord(
            person_id=person.id if person else None,
            numero_id="1020304050",
            first_name="Ana",
            last_name="Gomez",
            email=None if with_person else email,
            level=level,
            step=step,
            parallel_level=parallel_level,
            parallel_step=parallel_step,
        )
        db.session.add(academic)
        db.session.commit()
        return academic
    return _make


@pytest.fixture
def add_class(client):
    """Attach a class record to a student; defaults to an attended session."""
    def _add(student, step, level=None, type="SESSION", attended=True,
             participated=False, failed_jump=False, attendance=None):
        record = ClassRecord(
            academic_record_id=student.id,
            level=level or student.level,
            step=step,
            type=type,
            attended=attended,
            attendance=attendance,
            participated=participated,
            failed_jump=failed_jump,
        )
        db.session.add(record)
        db.session.commit()
        return record
    return _add


@pytest.fixture
def admin_client(client):
    """Test client with an authenticated admin session."""
    db.session.add(UserRole(email="coordinator@example.com", role="ADMIN", is_active=True))
    db.session.commit()
    with client.session_transaction() as sess:
        sess["admin_email"] = "coordinator@example.com"
    return client
