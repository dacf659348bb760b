"""Create people, academic records, class records, levels, step overrides and user roles

Revision ID: 4c1d2e3f5a6b
Revises:
Create Date: 2026-10-19 09:00:00.000000

The student's level/step assignment is stored on both people and
academic_records; class_records reference academic_records.
"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4c1d2e3f5a6b'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'people',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('numero_id', sa.String(length=32), nullable=True),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=32), nullable=True),
        sa.Column('level', sa.String(length=20), nullable=True),
        sa.Column('step', sa.String(length=50), nullable=True),
        sa.Column('parallel_level', sa.String(length=20), nullable=True),
        sa.Column('parallel_step', sa.String(length=50), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_people_numero_id', 'people', ['numero_id'])
    op.create_index('ix_people_email', 'people', ['email'])

    op.create_table(
        'academic_records',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('person_id', sa.String(length=64), nullable=True),
        sa.Column('numero_id', sa.String(length=32), nullable=True),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('level', sa.String(length=20), nullable=True),
        sa.Column('step', sa.String(length=50), nullable=True),
        sa.Column('parallel_level', sa.String(length=20), nullable=True),
        sa.Column('parallel_step', sa.String(length=50), nullable=True),
        sa.Column('essential_date', sa.String(length=10), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['person_id'], ['people.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_academic_records_numero_id', 'academic_records', ['numero_id'])

    op.create_table(
        'class_records',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('academic_record_id', sa.String(length=64), nullable=False),
        sa.Column('event_id', sa.String(length=64), nullable=True),
        sa.Column('level', sa.String(length=20), nullable=True),
        sa.Column('step', sa.String(length=50), nullable=True),
        sa.Column('type', sa.String(length=20), nullable=True),
        sa.Column('event_name', sa.String(length=200), nullable=True),
        sa.Column('advisor', sa.String(length=64), nullable=True),
        sa.Column('event_date', sa.DateTime(), nullable=True),
        sa.Column('attended', sa.Boolean(), nullable=True),
        sa.Column('attendance', sa.Boolean(), nullable=True),
        sa.Column('participated', sa.Boolean(), nullable=True),
        sa.Column('failed_jump', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('grade', sa.String(length=20), nullable=True),
        sa.Column('advisor_notes', sa.Text(), nullable=True),
        sa.Column('comments', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['academic_record_id'], ['academic_records.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_class_records_student_level', 'class_records', ['academic_record_id', 'level'])

    op.create_table(
        'levels',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('code', sa.String(length=20), nullable=False),
        sa.Column('description', sa.String(length=200), nullable=True),
        sa.Column('steps', sa.JSON(), nullable=False),
        sa.Column('clubs', sa.JSON(), nullable=False),
        sa.Column('is_parallel', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('sort_order', sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('code')
    )

    op.create_table(
        'step_overrides',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('student_id', sa.String(length=64), nullable=False),
        sa.Column('numero_id', sa.String(length=32), nullable=True),
        sa.Column('level', sa.String(length=20), nullable=True),
        sa.Column('step', sa.String(length=50), nullable=False),
        sa.Column('is_completed', sa.Boolean(), nullable=False),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.Column('created_by', sa.String(length=100), nullable=True),
        sa.Column('created_by_email', sa.String(length=255), nullable=True),
        sa.Column('updated_by', sa.String(length=100), nullable=True),
        sa.Column('updated_by_email', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('student_id', 'step', name='uq_step_overrides_student_step')
    )

    op.create_table(
        'user_roles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.Text(), nullable=True),
        sa.Column('role', sa.String(length=30), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email')
    )


def downgrade():
    op.drop_table('user_roles')
    op.drop_table('step_overrides')
    op.drop_table('levels')
    op.drop_index('ix_class_records_student_level', table_name='class_records')
    op.drop_table('class_records')
    op.drop_index('ix_academic_records_numero_id', table_name='academic_records')
    op.drop_table('academic_records')
    op.drop_index('ix_people_email', table_name='people')
    op.drop_index('ix_people_numero_id', table_name='people')
    op.drop_table('people')
