"""
Flask CLI commands for curriculum setup and progression maintenance.
"""

import click
from flask.cli import with_appcontext

from academic_admin.extensions import db
from academic_admin.models import Level
from academic_admin.progression import evaluate_and_advance, find_student
from academic_admin.progression.report import build_progress_report
from academic_admin.utils.constants import DEFAULT_CURRICULUM


@click.command('seed-curriculum')
@with_appcontext
def seed_curriculum_command():
    """
    Load the default curriculum into the levels table.

    Existing levels are updated in place, so the command can be re-run safely.
    """
    click.echo("=" * 70)
    click.echo("CURRICULUM SEED")
    click.echo("=" * 70)

    created = updated = 0
    for definition in DEFAULT_CURRICULUM:
        level = Level.query.filter_by(code=definition['code']).first()
        if level is None:
            level = Level(code=definition['code'])
            db.session.add(level)
            created += 1
            click.echo(f"  ✓ Created level {definition['code']}")
        else:
            updated += 1
            click.echo(f"  ⊙ Level {definition['code']} already exists, refreshing")
        level.description = definition['description']
        level.steps = list(definition['steps'])
        level.clubs = list(definition['clubs'])
        level.is_parallel = definition['is_parallel']
        level.sort_order = definition['sort_order']

    db.session.commit()
    click.echo(f"Created {created} levels, refreshed {updated}")


@click.command('evaluate-class-record')
@click.argument('class_record_id')
@with_appcontext
def evaluate_class_record_command(class_record_id):
    """Run automatic promotion for one class record."""
    result = evaluate_and_advance(class_record_id)
    if result is None:
        click.echo("No progression: nothing to do for this class record")
        return

    origin = f"{result.from_level}/{result.from_step}"
    if result.graduated:
        click.echo(f"🎓 Graduated after {origin}; platform access revoked")
    else:
        click.echo(f"➡️  Promoted {origin} -> {result.to_level}/{result.to_step}")


@click.command('progress-report')
@click.argument('student_id')
@with_appcontext
def progress_report_command(student_id):
    """Print the per-step progress of a student."""
    student = find_student(student_id)
    if student is None:
        raise click.ClickException(f"Student {student_id} not found")

    report = build_progress_report(student)
    progress = report['progress']
    click.echo(
        f"{report['student']['name'] or student.id} - level {progress['currentLevel']}: "
        f"{progress['stepsCompleted']}/{progress['totalSteps']} steps ({progress['progressPercentage']}%)"
    )
    for step in progress['progressByStep']:
        mark = "✓" if step['completed'] else "✗"
        detail = f" - {step['message']}" if step['message'] else ""
        click.echo(f"  {mark} {step['step']}{detail}")


def init_app(app):
    """Register CLI commands with Flask app."""
    app.cli.add_command(seed_curriculum_command)
    app.cli.add_command(evaluate_class_record_command)
    app.cli.add_command(progress_report_command)
