"""create attendance schema

Revision ID: a1c4e2f90b7d
Revises:
Create Date: 2026-10-17 09:12:41.208113

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1c4e2f90b7d'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


# Every table carries the indexed id and created_at columns of the declarative base
TABLES = (
    'users', 'user_preferences', 'classes', 'students', 'attendance',
    'fees', 'notifications', 'password_reset_codes', 'report_schedules',
)


def _base_columns():
    return [
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def _enum(name, *values):
    return sa.Enum(*values, name=name, native_enum=False, length=20)


def upgrade() -> None:
    op.create_table(
        'users',
        *_base_columns(),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('password', sa.String(255), nullable=False),
        sa.Column('avatar', sa.String(500)),
        sa.Column('role', _enum('userrole', 'admin', 'teacher'), nullable=False),
        sa.Column('is_approved', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_is_approved', 'users', ['is_approved'])

    op.create_table(
        'user_preferences',
        *_base_columns(),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('push_notifications', sa.Boolean(), nullable=False),
        sa.Column('email_updates', sa.Boolean(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        'classes',
        *_base_columns(),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('subject', sa.String(100), nullable=False),
        sa.Column('teacher', sa.String(100), nullable=False),
        sa.Column('time', sa.String(50), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date()),
        sa.Column('status', _enum('classstatus', 'active', 'completed'), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('fee', sa.Numeric(10, 2), nullable=False),
    )
    op.create_index('ix_classes_name', 'classes', ['name'])
    op.create_index('ix_classes_end_date', 'classes', ['end_date'])
    op.create_index('ix_classes_status', 'classes', ['status'])

    op.create_table(
        'students',
        *_base_columns(),
        sa.Column('class_id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('student_id', sa.String(20)),
        sa.Column('father_name', sa.String(100), nullable=False),
        sa.Column('gender', sa.String(10), nullable=False),
        sa.Column('email', sa.String(255)),
        sa.Column('phone', sa.String(20)),
        sa.Column('avatar', sa.String(500)),
    )
    op.create_index('ix_students_class_id', 'students', ['class_id'])
    op.create_index('ix_students_student_id', 'students', ['student_id'])
    op.create_index('ix_students_email', 'students', ['email'])

    op.create_table(
        'attendance',
        *_base_columns(),
        sa.Column('student_id', sa.Uuid(), nullable=False),
        sa.Column('class_id', sa.Uuid(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('status', _enum('attendancestatus', 'present', 'absent', 'late'), nullable=False),
        sa.UniqueConstraint('class_id', 'student_id', 'date', name='uq_attendance_class_student_date'),
    )
    op.create_index('ix_attendance_student_id', 'attendance', ['student_id'])
    op.create_index('ix_attendance_class_id', 'attendance', ['class_id'])
    op.create_index('ix_attendance_date', 'attendance', ['date'])

    op.create_table(
        'fees',
        *_base_columns(),
        sa.Column('student_id', sa.Uuid(), nullable=False),
        sa.Column('class_id', sa.Uuid(), nullable=False),
        sa.Column('fee_to_be_paid', sa.Numeric(10, 2), nullable=False),
        sa.Column('fee_paid', sa.Numeric(10, 2)),
        sa.Column('fee_unpaid', sa.Numeric(10, 2)),
        sa.Column('payment_date', sa.Date()),
        sa.UniqueConstraint('student_id', 'class_id', name='uq_fee_student_class'),
    )
    op.create_index('ix_fees_student_id', 'fees', ['student_id'])
    op.create_index('ix_fees_class_id', 'fees', ['class_id'])

    op.create_table(
        'notifications',
        *_base_columns(),
        sa.Column('title', sa.String(200), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('type', _enum('notificationtype', 'success', 'error', 'warning', 'info',
                                'class', 'student', 'attendance', 'fee'), nullable=False),
        sa.Column('entity_type', _enum('entitytype', 'class', 'student', 'attendance', 'user', 'fee')),
        sa.Column('entity_id', sa.String(64)),
        sa.Column('actor_name', sa.String(100)),
        sa.Column('action', sa.String(20)),
        sa.Column('is_read', sa.Boolean(), nullable=False),
        sa.Column('user_id', sa.Uuid()),
    )
    op.create_index('ix_notifications_entity_id', 'notifications', ['entity_id'])
    op.create_index('ix_notifications_is_read', 'notifications', ['is_read'])
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])

    op.create_table(
        'password_reset_codes',
        *_base_columns(),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('code', sa.String(6), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('is_used', sa.Boolean(), nullable=False),
    )
    op.create_index('ix_password_reset_codes_email', 'password_reset_codes', ['email'])

    op.create_table(
        'report_schedules',
        *_base_columns(),
        sa.Column('type', _enum('scheduletype', 'weekly', 'monthly'), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('class_id', sa.Uuid()),
        sa.Column('student_id', sa.Uuid()),
        sa.Column('next_run', sa.DateTime(timezone=True), nullable=False),
        sa.Column('last_run', sa.DateTime(timezone=True)),
    )
    op.create_index('ix_report_schedules_next_run', 'report_schedules', ['next_run'])

    for table in TABLES:
        op.create_index(f'ix_{table}_id', table, ['id'])
        op.create_index(f'ix_{table}_created_at', table, ['created_at'])


def downgrade() -> None:
    op.drop_table('report_schedules')
    op.drop_table('password_reset_codes')
    op.drop_table('notifications')
    op.drop_table('fees')
    op.drop_table('attendance')
    op.drop_table('students')
    op.drop_table('classes')
    op.drop_table('user_preferences')
    op.drop_table('users')
