"""initial_schema

Membuat tabel organisasi, karyawan, akun, role/akses dan permintaan
persetujuan, lalu mengisi katalog ``master_access``.

Revision ID: 5c2d8e41a7b3
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from app.utils.constants import ACCESS_CATALOGUE

# revision identifiers, used by Alembic.
revision: str = '5c2d8e41a7b3'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _audit_columns(soft_delete: bool = True) -> list[sa.Column]:
    columns = [
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
    ]
    if soft_delete:
        columns.insert(0, sa.Column('deleted_at', sa.DateTime(), nullable=True))
    return columns


def _status_column() -> sa.Column:
    return sa.Column('status', sa.Boolean(), server_default=sa.true(), nullable=False)


def upgrade() -> None:
    # Organisation tree
    op.create_table(
        'companies',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('code', sa.String(20), nullable=False, unique=True),
        sa.Column('name', sa.String(200), nullable=False),
        _status_column(),
        *_audit_columns(),
    )
    op.create_table(
        'branches',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id'), nullable=False),
        sa.Column('code', sa.String(20), nullable=False, unique=True),
        sa.Column('name', sa.String(200), nullable=False),
        _status_column(),
        *_audit_columns(),
    )
    op.create_table(
        'divisions',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('branch_id', sa.Integer(), sa.ForeignKey('branches.id'), nullable=True),
        sa.Column('code', sa.String(20), nullable=False, unique=True),
        sa.Column('name', sa.String(200), nullable=False),
        _status_column(),
        *_audit_columns(),
    )
    op.create_table(
        'sub_divisions',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('division_id', sa.Integer(), sa.ForeignKey('divisions.id'), nullable=False),
        sa.Column('code', sa.String(20), nullable=False, unique=True),
        sa.Column('name', sa.String(200), nullable=False),
        _status_column(),
        *_audit_columns(),
    )
    op.create_table(
        'positions',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('code', sa.String(20), nullable=False, unique=True),
        sa.Column('name', sa.String(200), nullable=False),
        _status_column(),
        *_audit_columns(),
    )

    # Employees
    op.create_table(
        'employees',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('nik', sa.String(16), nullable=False, unique=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('email', sa.String(200), nullable=True, unique=True),
        sa.Column('phone', sa.String(30), nullable=True),
        sa.Column('picture', sa.String(500), nullable=True),
        _status_column(),
        *_audit_columns(),
    )
    op.create_index('ix_employees_nik', 'employees', ['nik'])
    op.create_table(
        'employee_work_details',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id'), nullable=False),
        sa.Column('company_id', sa.Integer(), sa.ForeignKey('companies.id'), nullable=False),
        sa.Column('branch_id', sa.Integer(), sa.ForeignKey('branches.id'), nullable=False),
        sa.Column('division_id', sa.Integer(), sa.ForeignKey('divisions.id'), nullable=False),
        sa.Column('sub_division_id', sa.Integer(), sa.ForeignKey('sub_divisions.id'), nullable=True),
        sa.Column('position_id', sa.Integer(), sa.ForeignKey('positions.id'), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('is_latest', sa.Boolean(), server_default=sa.false(), nullable=False),
        *_audit_columns(),
    )
    op.create_index(
        'ix_employee_work_details_employee_id', 'employee_work_details', ['employee_id']
    )

    # Roles and access codes
    op.create_table(
        'roles',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(100), nullable=False, unique=True),
        sa.Column('description', sa.String(300), nullable=True),
        _status_column(),
        *_audit_columns(),
    )
    master_access = op.create_table(
        'master_access',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('code', sa.String(100), nullable=False, unique=True),
        sa.Column('name', sa.String(200), nullable=False),
        sa.Column('module', sa.String(50), nullable=True),
        _status_column(),
        *_audit_columns(),
    )
    op.create_table(
        'role_access',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('role_id', sa.Integer(), sa.ForeignKey('roles.id'), nullable=False),
        sa.Column('access_id', sa.Integer(), sa.ForeignKey('master_access.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint('role_id', 'access_id', name='uq_role_access'),
    )
    op.create_index('ix_role_access_role_id', 'role_access', ['role_id'])

    # Accounts
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id'), nullable=False, unique=True),
        sa.Column('role_id', sa.Integer(), sa.ForeignKey('roles.id'), nullable=False),
        sa.Column('password', sa.String(200), nullable=False),
        _status_column(),
        sa.Column('last_login_at', sa.DateTime(), nullable=True),
        sa.Column('last_activity_at', sa.DateTime(), nullable=True),
        *_audit_columns(),
    )
    op.create_table(
        'user_approvals',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('type', sa.String(30), nullable=False),
        sa.Column('status', sa.String(20), server_default='pending', nullable=False),
        sa.Column('fields', sa.JSON(), nullable=True),
        *_audit_columns(soft_delete=False),
    )
    op.create_index('ix_user_approvals_user_id', 'user_approvals', ['user_id'])

    op.bulk_insert(
        master_access,
        [
            {'code': code, 'name': name, 'module': module, 'status': True}
            for code, name, module in ACCESS_CATALOGUE
        ],
    )


def downgrade() -> None:
    op.drop_index('ix_user_approvals_user_id', table_name='user_approvals')
    op.drop_table('user_approvals')
    op.drop_table('users')
    op.drop_index('ix_role_access_role_id', table_name='role_access')
    op.drop_table('role_access')
    op.drop_table('master_access')
    op.drop_table('roles')
    op.drop_index('ix_employee_work_details_employee_id', table_name='employee_work_details')
    op.drop_table('employee_work_details')
    op.drop_index('ix_employees_nik', table_name='employees')
    op.drop_table('employees')
    op.drop_table('positions')
    op.drop_table('sub_divisions')
    op.drop_table('divisions')
    op.drop_table('branches')
    op.drop_table('companies')
