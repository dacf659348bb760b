from academic_admin import db
from academic_admin.models import StepOverride
from academic_admin.progression.report import build_progress_report


def test_report_for_level(curriculum, make_student, add_class):
    student = make_student(level='BN1', step='Step 3')
    for step in ('Step 1', 'Step 1', 'TRAINING - Step 1', 'Step 2', 'Step 2', 'TRAINING - Step 2'):
        add_class(student, step, type='CLUB' if step.startswith('TRAINING') else 'SESSION')
    add_class(student, 'Step 3')
    add_class(student, 'Step 3', attended=False)
    add_class(student, 'Step 3', attended=None)
    add_class(student, 'Step 0', level='ESS')

    report = build_progress_report(student)

    progress = report['progress']
    assert progress['currentLevel'] == 'BN1'
    assert progress['totalSteps'] == 5
    assert progress['stepsCompleted'] == 2
    assert progress['progressPercentage'] == 40
    by_step = {s['step']: s for s in progress['progressByStep']}
    assert [s['step'] for s in progress['progressByStep']] == ['Step 1', 'Step 2', 'Step 3', 'Step 4', 'Step 5']
    assert by_step['Step 3']['successfulSessions'] == 1
    assert by_step['Step 3']['message'] == 'Missing one session and a TRAINING club'
    assert by_step['Step 5']['isJump'] is True
    assert by_step['Step 5']['message'] == 'Jump step class missing'

    stats = report['stats']
    assert stats['totalClasses'] == 10
    assert stats['attended'] == 8
    assert stats['absences'] == 1
    assert stats['pending'] == 1
    assert stats['attendancePercentage'] == 80

    assert report['student']['name'] == 'Ana Gomez'
    assert report['student']['email'] == 'student@example.com'


def test_report_reflects_overrides(curriculum, make_student):
    student = make_student(level='BN1', step='Step 1')
    db.session.add(StepOverride(student_id=student.person_id, step='Step 4', is_completed=True))
    db.session.commit()

    report = build_progress_report(student)

    step4 = report['progress']['progressByStep'][3]
    assert step4['completed'] is True
    assert step4['hasOverride'] is True
    assert step4['overrideCompleted'] is True
    assert step4['message'] is None


def test_report_for_student_without_classes(curriculum, make_student):
    report = build_progress_report(make_student(level='WELCOME', step='WELCOME'))

    assert report['progress']['totalSteps'] == 0
    assert report['progress']['progressPercentage'] == 0
    assert report['stats']['attendancePercentage'] == 0


def test_progress_endpoint(admin_client, curriculum, make_student):
    student = make_student(level='BN2', step='Step 7')

    resp = admin_client.get(f'/api/students/{student.numero_id}/progress')

    assert resp.status_code == 200
    assert resp.json['student']['id'] == student.id
    assert resp.json['progress']['currentLevel'] == 'BN2'


def test_progress_endpoint_unknown_student(admin_client):
    assert admin_client.get('/api/students/missing/progress').status_code == 404


def test_change_step_endpoint(admin_client, curriculum, make_student):
    student = make_student(level='BN1', step='Step 2')

    resp = admin_client.post(f'/api/students/{student.id}/step', json={'step': '8'})

    assert resp.status_code == 200
    assert resp.json['success'] is True
    assert (resp.json['level'], resp.json['step']) == ('BN2', 'Step 8')


def test_change_step_endpoint_validation(admin_client, curriculum, make_student):
    student = make_student()
    url = f'/api/students/{student.id}/step'

    assert admin_client.post(url, json={'step': 'eight'}).status_code == 400
    assert admin_client.post(url, json={}).status_code == 400
    assert admin_client.post(url, json={'step': 99}).status_code == 404
