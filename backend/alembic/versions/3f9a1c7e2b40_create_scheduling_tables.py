"""create_scheduling_tables

Revision ID: 3f9a1c7e2b40
Revises:
Create Date: 2026-02-02 10:14:37.512904

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '3f9a1c7e2b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create branches, staff, demand templates and shift assignment tables."""
    op.create_table(
        'branches',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('code', sa.String(length=20), nullable=False),
        sa.Column('address', sa.String(length=300), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('code')
    )
    op.create_index('ix_branches_id', 'branches', ['id'])
    op.create_index('ix_branches_name', 'branches', ['name'], unique=True)

    op.create_table(
        'employees',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('branch_id', sa.Integer(), sa.ForeignKey('branches.id'), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('email', sa.String(length=200), nullable=True),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('contract_type', sa.Enum('full_time', 'part_time', 'temporary', 'seasonal', name='contracttype'), nullable=False),
        sa.Column('weekly_min_hours', sa.Numeric(5, 2), nullable=False),
        sa.Column('weekly_max_hours', sa.Numeric(5, 2), nullable=False),
        sa.Column('free_days_per_month', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_employees_id', 'employees', ['id'])
    op.create_index('ix_employees_branch_id', 'employees', ['branch_id'])
    op.create_index('ix_employees_name', 'employees', ['name'])

    op.create_table(
        'work_areas',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('branch_id', sa.Integer(), sa.ForeignKey('branches.id'), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.String(length=500), nullable=True),
        sa.Column('color', sa.String(length=7), nullable=False),
        sa.Column('display_order', sa.Integer(), nullable=True),
        sa.Column('is_deleted', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_work_areas_id', 'work_areas', ['id'])
    op.create_index('ix_work_areas_branch_id', 'work_areas', ['branch_id'])
    op.create_index('ix_work_areas_is_deleted', 'work_areas', ['is_deleted'])

    op.create_table(
        'work_roles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('work_area_id', sa.Integer(), sa.ForeignKey('work_areas.id'), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.String(length=500), nullable=True),
        sa.Column('is_deleted', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_work_roles_id', 'work_roles', ['id'])
    op.create_index('ix_work_roles_work_area_id', 'work_roles', ['work_area_id'])
    op.create_index('ix_work_roles_is_deleted', 'work_roles', ['is_deleted'])

    op.create_table(
        'employee_work_roles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id'), nullable=False),
        sa.Column('work_role_id', sa.Integer(), sa.ForeignKey('work_roles.id'), nullable=False),
        sa.Column('is_primary', sa.Boolean(), nullable=True),
        sa.Column('priority', sa.Integer(), nullable=False),
        sa.Column('is_deleted', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('employee_id', 'work_role_id', name='uq_employee_work_role')
    )
    op.create_index('ix_employee_work_roles_id', 'employee_work_roles', ['id'])
    op.create_index('ix_employee_work_roles_employee_id', 'employee_work_roles', ['employee_id'])
    op.create_index('ix_employee_work_roles_work_role_id', 'employee_work_roles', ['work_role_id'])
    op.create_index('ix_employee_work_roles_is_deleted', 'employee_work_roles', ['is_deleted'])

    op.create_table(
        'employee_availability',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id'), nullable=False),
        sa.Column('unavailable_date', sa.Date(), nullable=False),
        sa.Column('reason', sa.String(length=300), nullable=True),
        sa.Column('is_deleted', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_employee_availability_id', 'employee_availability', ['id'])
    op.create_index('ix_employee_availability_employee_id', 'employee_availability', ['employee_id'])
    op.create_index('ix_employee_availability_unavailable_date', 'employee_availability', ['unavailable_date'])

    op.create_table(
        'shift_templates',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('branch_id', sa.Integer(), sa.ForeignKey('branches.id'), nullable=False),
        sa.Column('work_area_id', sa.Integer(), sa.ForeignKey('work_areas.id'), nullable=False),
        sa.Column('work_role_id', sa.Integer(), sa.ForeignKey('work_roles.id'), nullable=False),
        sa.Column('day_of_week', sa.Integer(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('break_minutes', sa.Integer(), nullable=True),
        sa.Column('lunch_minutes', sa.Integer(), nullable=True),
        sa.Column('required_count', sa.Integer(), nullable=False),
        sa.Column('notes', sa.String(length=500), nullable=True),
        sa.Column('is_deleted', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_shift_templates_id', 'shift_templates', ['id'])
    op.create_index('ix_shift_templates_branch_id', 'shift_templates', ['branch_id'])
    op.create_index('ix_shift_templates_day_of_week', 'shift_templates', ['day_of_week'])
    op.create_index('ix_shift_templates_is_deleted', 'shift_templates', ['is_deleted'])

    op.create_table(
        'special_dates',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('branch_id', sa.Integer(), sa.ForeignKey('branches.id'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.String(length=500), nullable=True),
        sa.Column('is_deleted', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_special_dates_id', 'special_dates', ['id'])
    op.create_index('ix_special_dates_branch_id', 'special_dates', ['branch_id'])
    op.create_index('ix_special_dates_date', 'special_dates', ['date'])
    op.create_index(
        'uq_special_dates_branch_date_active',
        'special_dates',
        ['branch_id', 'date'],
        unique=True,
        sqlite_where=sa.text('is_deleted = 0'),
        postgresql_where=sa.text('is_deleted = false')
    )

    op.create_table(
        'special_date_templates',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('special_date_id', sa.Integer(), sa.ForeignKey('special_dates.id'), nullable=False),
        sa.Column('work_area_id', sa.Integer(), sa.ForeignKey('work_areas.id'), nullable=False),
        sa.Column('work_role_id', sa.Integer(), sa.ForeignKey('work_roles.id'), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('break_minutes', sa.Integer(), nullable=True),
        sa.Column('lunch_minutes', sa.Integer(), nullable=True),
        sa.Column('required_count', sa.Integer(), nullable=False),
        sa.Column('notes', sa.String(length=500), nullable=True),
        sa.Column('is_deleted', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_special_date_templates_id', 'special_date_templates', ['id'])
    op.create_index('ix_special_date_templates_special_date_id', 'special_date_templates', ['special_date_id'])

    op.create_table(
        'shift_assignments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('branch_id', sa.Integer(), sa.ForeignKey('branches.id'), nullable=False),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id'), nullable=False),
        sa.Column('work_area_id', sa.Integer(), sa.ForeignKey('work_areas.id'), nullable=False),
        sa.Column('work_role_id', sa.Integer(), sa.ForeignKey('work_roles.id'), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('break_minutes', sa.Integer(), nullable=True),
        sa.Column('lunch_minutes', sa.Integer(), nullable=True),
        sa.Column('worked_hours', sa.Numeric(5, 2), nullable=False),
        sa.Column('notes', sa.String(length=500), nullable=True),
        sa.Column('is_approved', sa.Boolean(), nullable=True),
        sa.Column('approved_by', sa.Integer(), nullable=True),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_deleted', sa.Boolean(), nullable=True),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_shift_assignments_id', 'shift_assignments', ['id'])
    op.create_index('ix_shift_assignments_employee_id', 'shift_assignments', ['employee_id'])
    op.create_index('ix_shift_assignments_date', 'shift_assignments', ['date'])
    op.create_index('ix_shift_assignments_is_deleted', 'shift_assignments', ['is_deleted'])
    op.create_index('ix_shift_assignments_branch_date', 'shift_assignments', ['branch_id', 'date'])

    op.create_table(
        'schedule_configurations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('branch_id', sa.Integer(), sa.ForeignKey('branches.id'), nullable=False),
        sa.Column('hours_per_day', sa.Numeric(4, 2), nullable=False),
        sa.Column('free_day_color', sa.String(length=7), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('branch_id')
    )
    op.create_index('ix_schedule_configurations_id', 'schedule_configurations', ['id'])

    op.create_table(
        'audit_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('action', sa.Enum('shifts_generated', 'shift_approved', 'shift_deleted', name='auditaction'), nullable=False),
        sa.Column('entity_type', sa.String(length=50), nullable=False),
        sa.Column('entity_id', sa.Integer(), nullable=True),
        sa.Column('user_id', sa.String(length=100), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('old_values', sa.JSON(), nullable=True),
        sa.Column('new_values', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_audit_logs_id', 'audit_logs', ['id'])
    op.create_index('ix_audit_logs_action', 'audit_logs', ['action'])
    op.create_index('ix_audit_logs_created_at', 'audit_logs', ['created_at'])


def downgrade() -> None:
    """Drop the scheduling tables and their enum types."""
    op.drop_table('audit_logs')
    op.drop_table('schedule_configurations')
    op.drop_table('shift_assignments')
    op.drop_table('special_date_templates')
    op.drop_table('special_dates')
    op.drop_table('shift_templates')
    op.drop_table('employee_availability')
    op.drop_table('employee_work_roles')
    op.drop_table('work_roles')
    op.drop_table('work_areas')
    op.drop_table('employees')
    op.drop_table('branches')

    sa.Enum(name='auditaction').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='contracttype').drop(op.get_bind(), checkfirst=True)
