from sqlalchemy.exc import SQLAlchemyError

from academic_admin import db
from academic_admin.models import StepOverride
from academic_admin.progression import is_step_complete


def _url(student):
    return f'/api/students/{student.id}/step-overrides'


def test_requires_admin_session(client, make_student):
    student = make_student()
    assert client.get(_url(student)).status_code == 401


def test_unknown_student(admin_client):
    resp = admin_client.get('/api/students/missing/step-overrides')
    assert resp.status_code == 404
    assert resp.json['error'] == 'Student not found'


def test_create_override(admin_client, make_student):
    student = make_student(level='BN1', step='Step 3')

    resp = admin_client.post(_url(student), json={'step': 'Step 3', 'isCompleted': True})

    assert resp.status_code == 200
    assert resp.json['message'] == 'Override created for Step 3'
    override = resp.json['override']
    assert override['studentId'] == student.person_id
    assert override['isCompleted'] is True
    assert override['updatedBy'] == 'coordinator'
    assert is_step_complete(student.id, 'BN1', 'Step 3', student.person_id) is True


def test_update_override(admin_client, make_student):
    student = make_student()
    admin_client.post(_url(student), json={'step': 'Step 1', 'isCompleted': True})

    resp = admin_client.post(_url(student), json={
        'step': 'Step 1',
        'isCompleted': 'false',
        'completedAt': '2026-03-01T10:00:00Z',
    })

    assert resp.status_code == 200
    assert resp.json['message'] == 'Override updated for Step 1'
    assert resp.json['override']['completedAt'] == '2026-03-01T10:00:00Z'
    rows = StepOverride.query.all()
    assert len(rows) == 1
    assert rows[0].is_completed is False
    assert rows[0].created_by_email == 'coordinator@example.com'


def test_override_validation(admin_client, make_student):
    student = make_student()

    assert admin_client.post(_url(student), json={'isCompleted': True}).status_code == 400
    assert admin_client.post(_url(student), json={'step': 'Step 1'}).status_code == 400
    assert admin_client.post(_url(student), json={'step': 'Step 1', 'isCompleted': 'maybe'}).status_code == 400
    resp = admin_client.post(_url(student), json={'step': 'Step 1', 'isCompleted': True, 'completedAt': 'yesterday'})
    assert resp.status_code == 400


def test_list_overrides(admin_client, make_student):
    student = make_student()
    admin_client.post(_url(student), json={'step': 'Step 2', 'isCompleted': False})
    admin_client.post(_url(student), json={'step': 'Step 1', 'isCompleted': True})

    resp = admin_client.get(_url(student))

    assert resp.status_code == 200
    assert [(o['step'], o['isCompleted']) for o in resp.json['overrides']] == [
        ('Step 1', True),
        ('Step 2', False),
    ]


def test_delete_override(admin_client, make_student):
    student = make_student()
    admin_client.post(_url(student), json={'step': 'Step 1', 'isCompleted': True})

    resp = admin_client.delete(_url(student), json={'step': 'Step 1'})
    assert resp.status_code == 200
    assert StepOverride.query.count() == 0

    resp = admin_client.delete(_url(student), query_string={'step': 'Step 1'})
    assert resp.status_code == 404


def test_delete_requires_step(admin_client, make_student):
    student = make_student()
    assert admin_client.delete(_url(student)).status_code == 400


def test_override_database_error(monkeypatch, admin_client, make_student):
    student = make_student()
    url = _url(student)

    def raise_error(*args, **kwargs):
        raise SQLAlchemyError("fail")
    monkeypatch.setattr(db.session, 'commit', raise_error)

    resp = admin_client.post(url, json={'step': 'Step 1', 'isCompleted': True})
    assert resp.status_code == 500
    assert resp.json['error'] == 'Database error'
