"""Create HRMS schema

Revision ID: 001_hrms
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID, JSONB

# revision identifiers
revision = '001_hrms'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('NOW()'), nullable=False),
    ]


def _uuid_pk():
    return sa.Column('id', UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()'))


def upgrade():
    """Create organization, people, time, compensation and document tables"""

    # ====================
    # ORGANIZATION
    # ====================
    op.create_table(
        'groups',
        _uuid_pk(),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('logo_url', sa.String(500), nullable=True),
        sa.Column('primary_color', sa.String(20), server_default='#3B82F6', nullable=False),
        sa.Column('settings', JSONB, nullable=True),
        *_timestamps(),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        'companies',
        _uuid_pk(),
        sa.Column('group_id', UUID(as_uuid=True), sa.ForeignKey('groups.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('legal_name', sa.String(255), nullable=False),
        sa.Column('code', sa.String(20), unique=True, nullable=False),
        sa.Column('gstin', sa.String(15), nullable=True),
        sa.Column('pan', sa.String(10), nullable=True),
        sa.Column('tan', sa.String(10), nullable=True),
        sa.Column('registered_address', sa.Text, nullable=False),
        sa.Column('city', sa.String(100), nullable=True),
        sa.Column('state', sa.String(100), nullable=True),
        sa.Column('pincode', sa.String(10), nullable=True),
        sa.Column('country', sa.String(50), server_default='India', nullable=False),
        sa.Column('settings', JSONB, nullable=True),
        sa.Column('is_active', sa.Boolean, server_default='true', nullable=False),
        *_timestamps(),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_companies_group_id', 'companies', ['group_id'])
    op.create_index('ix_companies_code', 'companies', ['code'])

    # head_id FK is added after employees exists
    op.create_table(
        'departments',
        _uuid_pk(),
        sa.Column('company_id', UUID(as_uuid=True), sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('code', sa.String(20), nullable=True),
        sa.Column('description', sa.Text, nullable=True),
        sa.Column('parent_id', UUID(as_uuid=True), sa.ForeignKey('departments.id', ondelete='SET NULL'), nullable=True),
        sa.Column('level', sa.Integer, server_default='1', nullable=False),
        sa.Column('path', sa.String(500), nullable=True),
        sa.Column('head_id', UUID(as_uuid=True), nullable=True),
        sa.Column('is_active', sa.Boolean, server_default='true', nullable=False),
        *_timestamps(),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_departments_company_id', 'departments', ['company_id'])

    op.create_table(
        'roles',
        _uuid_pk(),
        sa.Column('company_id', UUID(as_uuid=True), sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False),
        sa.Column('department_id', UUID(as_uuid=True), sa.ForeignKey('departments.id', ondelete='SET NULL'), nullable=True),
        sa.Column('title', sa.String(100), nullable=False),
        sa.Column('code', sa.String(20), nullable=True),
        sa.Column('job_description', sa.Text, nullable=True),
        sa.Column('is_sales_role', sa.Boolean, server_default='false', nullable=False),
        sa.Column('is_active', sa.Boolean, server_default='true', nullable=False),
        *_timestamps(),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_roles_company_id', 'roles', ['company_id'])

    # ====================
    # EMPLOYEES
    # ====================
    op.create_table(
        'employees',
        _uuid_pk(),
        sa.Column('group_id', UUID(as_uuid=True), sa.ForeignKey('groups.id', ondelete='SET NULL'), nullable=True),
        sa.Column('company_id', UUID(as_uuid=True), sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=True),
        sa.Column('department_id', UUID(as_uuid=True), sa.ForeignKey('departments.id', ondelete='SET NULL'), nullable=True),
        sa.Column('role_id', UUID(as_uuid=True), sa.ForeignKey('roles.id', ondelete='SET NULL'), nullable=True),
        sa.Column('employee_code', sa.String(30), unique=True, nullable=False),
        sa.Column('first_name', sa.String(100), server_default='', nullable=False),
        sa.Column('last_name', sa.String(100), nullable=True),
        sa.Column('personal_email', sa.String(255), unique=True, nullable=False),
        sa.Column('work_email', sa.String(255), unique=True, nullable=True),
        sa.Column('phone', sa.String(20), unique=True, nullable=True),
        sa.Column('clerk_id', sa.String(64), unique=True, nullable=True),
        sa.Column('profile_picture', sa.String(500), nullable=True),
        sa.Column('joining_date', sa.Date, nullable=False),
        sa.Column('status', sa.String(20), server_default='active', nullable=False),
        sa.Column('reporting_manager_id', UUID(as_uuid=True), sa.ForeignKey('employees.id', ondelete='SET NULL'), nullable=True),
        *_timestamps(),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('ix_employees_company_id', 'employees', ['company_id'])
    op.create_index('ix_employees_employee_code', 'employees', ['employee_code'])
    op.create_index('ix_employees_personal_email', 'employees', ['personal_email'])
    op.create_index('ix_employees_clerk_id', 'employees', ['clerk_id'])
    op.create_index('ix_employees_status', 'employees', ['status'])

    op.create_foreign_key(
        'fk_departments_head_id', 'departments', 'employees',
        ['head_id'], ['id'], ondelete='SET NULL'
    )

    # ====================
    # ATTENDANCE
    # ====================
    op.create_table(
        'attendance',
        _uuid_pk(),
        sa.Column('employee_id', UUID(as_uuid=True), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('company_id', UUID(as_uuid=True), sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False),
        sa.Column('attendance_date', sa.Date, nullable=False),
        sa.Column('check_in', sa.DateTime(timezone=True), nullable=True),
        sa.Column('check_out', sa.DateTime(timezone=True), nullable=True),
        sa.Column('work_hours', sa.Numeric(4, 2), nullable=True),
        sa.Column('overtime_hours', sa.Numeric(4, 2), nullable=True),
        sa.Column('check_in_location', JSONB, nullable=True),
        sa.Column('check_out_location', JSONB, nullable=True),
        sa.Column('status', sa.String(20), server_default='pending', nullable=False),
        sa.Column('is_late', sa.Boolean, server_default='false', nullable=False),
        sa.Column('is_locked', sa.Boolean, server_default='false', nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('employee_id', 'attendance_date', name='uq_attendance_employee_date'),
    )
    op.create_index('idx_attendance_employee', 'attendance', ['employee_id'])
    op.create_index('idx_attendance_date', 'attendance', ['attendance_date'])

    # ====================
    # LEAVE
    # ====================
    op.create_table(
        'leave_types',
        _uuid_pk(),
        sa.Column('company_id', UUID(as_uuid=True), sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('code', sa.String(20), nullable=False),
        sa.Column('is_paid', sa.Boolean, server_default='true', nullable=False),
        sa.Column('annual_quota', sa.Integer, nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_leave_types_company_id', 'leave_types', ['company_id'])

    op.create_table(
        'leave_applications',
        _uuid_pk(),
        sa.Column('employee_id', UUID(as_uuid=True), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('leave_type_id', UUID(as_uuid=True), sa.ForeignKey('leave_types.id', ondelete='CASCADE'), nullable=False),
        sa.Column('start_date', sa.Date, nullable=False),
        sa.Column('end_date', sa.Date, nullable=False),
        sa.Column('days', sa.Numeric(4, 1), nullable=False),
        sa.Column('reason', sa.Text, nullable=True),
        sa.Column('status', sa.String(20), server_default='pending', nullable=False),
        sa.Column('approved_by_id', UUID(as_uuid=True), sa.ForeignKey('employees.id', ondelete='SET NULL'), nullable=True),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('idx_leave_applications_employee', 'leave_applications', ['employee_id'])
    op.create_index('ix_leave_applications_status', 'leave_applications', ['status'])

    # ====================
    # PAYROLL
    # ====================
    op.create_table(
        'salary_structures',
        _uuid_pk(),
        sa.Column('employee_id', UUID(as_uuid=True), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('company_id', UUID(as_uuid=True), sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=True),
        sa.Column('basic', sa.Numeric(12, 2), nullable=False),
        sa.Column('hra', sa.Numeric(12, 2), server_default='0', nullable=False),
        sa.Column('conveyance', sa.Numeric(12, 2), server_default='0'),
        sa.Column('medical', sa.Numeric(12, 2), server_default='0'),
        sa.Column('special_allowance', sa.Numeric(12, 2), server_default='0'),
        sa.Column('pf_employee', sa.Numeric(12, 2), server_default='0'),
        sa.Column('pf_employer', sa.Numeric(12, 2), server_default='0'),
        sa.Column('esi_employee', sa.Numeric(12, 2), server_default='0'),
        sa.Column('esi_employer', sa.Numeric(12, 2), server_default='0'),
        sa.Column('pt', sa.Numeric(12, 2), server_default='0'),
        sa.Column('is_active', sa.Boolean, server_default='true', nullable=False),
        *_timestamps(),
    )
    op.create_index('idx_salary_structures_employee', 'salary_structures', ['employee_id', 'is_active'])

    op.create_table(
        'payroll_runs',
        _uuid_pk(),
        sa.Column('company_id', UUID(as_uuid=True), sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False),
        sa.Column('month', sa.Integer, nullable=False),
        sa.Column('year', sa.Integer, nullable=False),
        sa.Column('status', sa.String(20), server_default='draft', nullable=False),
        sa.Column('total_payout', sa.Numeric(15, 2), server_default='0'),
        sa.Column('stats', JSONB, nullable=True),
        sa.Column('processed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('paid_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('company_id', 'month', 'year', name='uq_payroll_company_period'),
    )

    op.create_table(
        'payroll_run_employees',
        sa.Column('payroll_run_id', UUID(as_uuid=True), sa.ForeignKey('payroll_runs.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('employee_id', UUID(as_uuid=True), sa.ForeignKey('employees.id', ondelete='CASCADE'), primary_key=True),
    )

    # ====================
    # SALES & INCENTIVES
    # ====================
    op.create_table(
        'sales_data',
        _uuid_pk(),
        sa.Column('employee_id', UUID(as_uuid=True), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('company_id', UUID(as_uuid=True), sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False),
        sa.Column('sale_date', sa.Date, nullable=False),
        sa.Column('target_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('achieved_amount', sa.Numeric(12, 2), server_default='0'),
        sa.Column('achievement_percentage', sa.Numeric(7, 2), server_default='0'),
        sa.Column('details', JSONB, nullable=True),
        *_timestamps(),
    )
    op.create_index('idx_sales_data_employee_date', 'sales_data', ['employee_id', 'sale_date'])

    op.create_table(
        'incentives',
        _uuid_pk(),
        sa.Column('employee_id', UUID(as_uuid=True), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('company_id', UUID(as_uuid=True), sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False),
        sa.Column('month', sa.Integer, nullable=False),
        sa.Column('year', sa.Integer, nullable=False),
        sa.Column('total_incentive', sa.Numeric(12, 2), nullable=False),
        sa.Column('status', sa.String(20), server_default='pending', nullable=False),
        sa.Column('breakdown', JSONB, nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('employee_id', 'month', 'year', name='uq_incentive_employee_period'),
    )

    # ====================
    # DOCUMENTS
    # ====================
    op.create_table(
        'documents',
        _uuid_pk(),
        sa.Column('employee_id', UUID(as_uuid=True), sa.ForeignKey('employees.id', ondelete='CASCADE'), nullable=False),
        sa.Column('company_id', UUID(as_uuid=True), sa.ForeignKey('companies.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('type', sa.String(30), nullable=False),
        sa.Column('url', sa.String(1000), nullable=False),
        sa.Column('status', sa.String(20), server_default='pending', nullable=False),
        *_timestamps(),
    )
    op.create_index('idx_documents_company', 'documents', ['company_id'])
    op.create_index('idx_documents_employee', 'documents', ['employee_id'])


def downgrade():
    """Drop all HRMS tables"""
    op.drop_table('documents')
    op.drop_table('incentives')
    op.drop_table('sales_data')
    op.drop_table('payroll_run_employees')
    op.drop_table('payroll_runs')
    op.drop_table('salary_structures')
    op.drop_table('leave_applications')
    op.drop_table('leave_types')
    op.drop_table('attendance')
    op.drop_constraint('fk_departments_head_id', 'departments', type_='foreignkey')
    op.drop_table('employees')
    op.drop_table('roles')
    op.drop_table('departments')
    op.drop_table('companies')
    op.drop_table('groups')
