"""Create the course tracker schema

Revision ID: 0001a7c3d9e4
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001a7c3d9e4'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

STATUSES = "('Done', 'Pending', 'Not Started')"
STATUS_FIELDS = (
    'formative_one_grading', 'formative_two_grading', 'summative_grading',
    'course_moderation', 'intranet_sync', 'grade_book_status',
)


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    """Create identity, reference data, offering, activity and notification tables."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password', sa.String(255), nullable=False),
        sa.Column('first_name', sa.String(50), nullable=False),
        sa.Column('last_name', sa.String(50), nullable=False),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.UniqueConstraint('email', name='uq_users_email'),
        sa.CheckConstraint('length(first_name) BETWEEN 2 AND 50', name='ck_users_first_name'),
        sa.CheckConstraint('length(last_name) BETWEEN 2 AND 50', name='ck_users_last_name'),
        sa.CheckConstraint("role IN ('manager', 'facilitator', 'student')", name='ck_users_role'),
    )
    op.create_index('ix_users_email', 'users', ['email'])
    op.create_index('ix_users_role', 'users', ['role'])

    op.create_table(
        'cohorts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(50), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('max_students', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.UniqueConstraint('name', name='uq_cohorts_name'),
        sa.CheckConstraint('length(name) BETWEEN 3 AND 50', name='ck_cohorts_name'),
        sa.CheckConstraint('end_date > start_date', name='ck_cohorts_end_date'),
        sa.CheckConstraint('max_students BETWEEN 1 AND 100', name='ck_cohorts_max_students'),
    )

    op.create_table(
        'classes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(10), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('semester', sa.String(1), nullable=False),
        sa.Column('description', sa.String(255), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('name', name='uq_classes_name'),
        sa.CheckConstraint('length(name) BETWEEN 4 AND 10', name='ck_classes_name'),
        sa.CheckConstraint('year BETWEEN 2020 AND 2030', name='ck_classes_year'),
        sa.CheckConstraint("semester IN ('S', 'J', '1', '2')", name='ck_classes_semester'),
    )

    op.create_table(
        'modules',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('code', sa.String(10), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('credits', sa.Integer(), nullable=False),
        sa.Column('duration_weeks', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.UniqueConstraint('code', name='uq_modules_code'),
        sa.CheckConstraint('length(code) BETWEEN 3 AND 10', name='ck_modules_code'),
        sa.CheckConstraint('length(name) BETWEEN 5 AND 100', name='ck_modules_name'),
        sa.CheckConstraint('credits BETWEEN 1 AND 10', name='ck_modules_credits'),
        sa.CheckConstraint('duration_weeks BETWEEN 1 AND 52', name='ck_modules_duration_weeks'),
    )

    op.create_table(
        'modes',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(20), nullable=False),
        sa.Column('description', sa.String(255), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('name', name='uq_modes_name'),
        sa.CheckConstraint("name IN ('online', 'in-person', 'hybrid')", name='ck_modes_name'),
    )

    op.create_table(
        'managers',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('department', sa.String(100), nullable=True),
        sa.Column('permissions', sa.JSON(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('user_id', name='uq_managers_user_id'),
    )

    op.create_table(
        'facilitators',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('employee_id', sa.String(50), nullable=True),
        sa.Column('specialization', sa.String(100), nullable=True),
        sa.Column('qualifications', sa.JSON(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('user_id', name='uq_facilitators_user_id'),
        sa.UniqueConstraint('employee_id', name='uq_facilitators_employee_id'),
    )

    op.create_table(
        'students',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('student_id', sa.String(50), nullable=False),
        sa.Column('cohort_id', sa.Integer(), sa.ForeignKey('cohorts.id'), nullable=False),
        sa.Column('enrollment_date', sa.Date(), nullable=False, server_default=sa.func.current_date()),
        sa.Column('status', sa.String(20), nullable=False, server_default='active'),
        *_timestamps(),
        sa.UniqueConstraint('user_id', name='uq_students_user_id'),
        sa.UniqueConstraint('student_id', name='uq_students_student_id'),
        sa.CheckConstraint("status IN ('active', 'inactive', 'graduated', 'dropped')", name='ck_students_status'),
    )
    op.create_index('ix_students_cohort_id', 'students', ['cohort_id'])

    op.create_table(
        'course_offerings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('module_id', sa.Integer(), sa.ForeignKey('modules.id'), nullable=False),
        sa.Column('class_id', sa.Integer(), sa.ForeignKey('classes.id'), nullable=False),
        sa.Column('cohort_id', sa.Integer(), sa.ForeignKey('cohorts.id'), nullable=False),
        sa.Column('facilitator_id', sa.Integer(), sa.ForeignKey('facilitators.id'), nullable=False),
        sa.Column('mode_id', sa.Integer(), sa.ForeignKey('modes.id'), nullable=False),
        sa.Column('trimester', sa.String(1), nullable=False),
        sa.Column('intake_period', sa.String(3), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('max_enrollment', sa.Integer(), nullable=False, server_default='30'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.CheckConstraint("trimester IN ('1', '2', '3')", name='ck_course_offerings_trimester'),
        sa.CheckConstraint("intake_period IN ('HT1', 'HT2', 'FT')", name='ck_course_offerings_intake_period'),
        sa.CheckConstraint('end_date > start_date', name='ck_course_offerings_end_date'),
        sa.CheckConstraint('max_enrollment BETWEEN 1 AND 100', name='ck_course_offerings_max_enrollment'),
    )
    for column in ('module_id', 'class_id', 'cohort_id', 'facilitator_id', 'mode_id'):
        op.create_index(f'ix_course_offerings_{column}', 'course_offerings', [column])
    op.create_index(
        'uq_course_offerings_active_tuple',
        'course_offerings',
        ['module_id', 'class_id', 'cohort_id', 'trimester', 'intake_period'],
        unique=True,
        postgresql_where=sa.text('is_active'),
        sqlite_where=sa.text('is_active = 1'),
    )

    op.create_table(
        'activity_trackers',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('allocation_id', sa.Integer(), sa.ForeignKey('course_offerings.id'), nullable=False),
        sa.Column('week_number', sa.Integer(), nullable=False),
        sa.Column('attendance', sa.JSON(), nullable=False),
        *[sa.Column(name, sa.String(20), nullable=False, server_default='Not Started') for name in STATUS_FIELDS],
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('due_date', sa.Date(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('allocation_id', 'week_number', name='uq_activity_trackers_allocation_week'),
        sa.CheckConstraint('week_number BETWEEN 1 AND 52', name='ck_activity_trackers_week_number'),
        *[sa.CheckConstraint(f'{name} IN {STATUSES}', name=f'ck_activity_trackers_{name}') for name in STATUS_FIELDS],
    )
    op.create_index('ix_activity_trackers_allocation_id', 'activity_trackers', ['allocation_id'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('type', sa.String(30), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('sent_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('metadata', sa.JSON(), nullable=False),
        sa.CheckConstraint(
            "type IN ('reminder', 'alert', 'info', 'warning', 'activity_submitted')",
            name='ck_notifications_type',
        ),
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])


def downgrade() -> None:
    """Drop every course tracker table, dependents first."""
    op.drop_table('notifications')
    op.drop_table('activity_trackers')
    op.drop_index('uq_course_offerings_active_tuple', table_name='course_offerings')
    op.drop_table('course_offerings')
    op.drop_table('students')
    op.drop_table('facilitators')
    op.drop_table('managers')
    op.drop_table('modes')
    op.drop_table('modules')
    op.drop_table('classes')
    op.drop_table('cohorts')
    op.drop_table('users')
