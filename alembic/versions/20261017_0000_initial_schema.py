"""initial_schema

Revision ID: 20261017_0000
Revises:
Create Date: 2026-10-17 00:00:00.000000+00:00

"""
from alembic import op
import sqlalchemy as sa

from jobboard.database_types import GUID, StringList


revision = '20261017_0000'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create users table
    op.create_table(
        'users',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('password_hash', sa.String(), nullable=True),
        sa.Column('role', sa.Enum('EMPLOYER', 'CANDIDATE', 'ADMIN', name='user_role'), nullable=False),
        sa.Column(
            'provider',
            sa.Enum('MANUAL', 'GOOGLE', 'FACEBOOK', 'APPLE', 'LINKEDIN', name='auth_provider'),
            nullable=False
        ),
        sa.Column('blocked', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('block_reason', sa.String(), nullable=True),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('company', sa.String(length=255), nullable=True),
        sa.Column('position', sa.String(length=255), nullable=True),
        sa.Column('skills', StringList(), nullable=True),
        sa.Column('image', sa.String(length=500), nullable=True),
        sa.Column('last_login_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_role'), 'users', ['role'], unique=False)

    # Single active refresh token per user
    op.create_table(
        'user_sessions',
        sa.Column('user_id', GUID(), nullable=False),
        sa.Column('refresh_token_hash', sa.String(length=64), nullable=False, server_default=''),
        sa.Column('rotation_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('issued_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('user_id')
    )

    # Create jobs table
    op.create_table(
        'jobs',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('employer_id', GUID(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('requirements', StringList(), nullable=False),
        sa.Column('responsibilities', StringList(), nullable=False),
        sa.Column('company', sa.String(length=255), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=False),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('experience', sa.String(), nullable=False),
        sa.Column('salary_min', sa.Integer(), nullable=False),
        sa.Column('salary_max', sa.Integer(), nullable=False),
        sa.Column('salary_currency', sa.String(length=10), nullable=False, server_default='USD'),
        sa.Column('skills', StringList(), nullable=False),
        sa.Column('benefits', StringList(), nullable=False),
        sa.Column('remote', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('deadline', sa.DateTime(), nullable=True),
        sa.Column('status', sa.String(), nullable=False, server_default='ACTIVE'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['employer_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_jobs_employer_id'), 'jobs', ['employer_id'], unique=False)
    op.create_index(op.f('ix_jobs_status'), 'jobs', ['status'], unique=False)
    op.create_index('idx_jobs_status_created', 'jobs', ['status', 'created_at'], unique=False)

    # Create applications table
    op.create_table(
        'applications',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('job_id', GUID(), nullable=False),
        sa.Column('candidate_id', GUID(), nullable=False),
        sa.Column('employer_id', GUID(), nullable=False),
        sa.Column('status', sa.String(), nullable=False, server_default='PENDING'),
        sa.Column('cover_letter', sa.Text(), nullable=False),
        sa.Column('resume', sa.String(length=500), nullable=False),
        sa.Column('mobile_number', sa.String(length=20), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('expected_salary_amount', sa.Integer(), nullable=True),
        sa.Column('expected_salary_currency', sa.String(length=10), nullable=True),
        sa.Column('availability', sa.String(), nullable=False, server_default='NEGOTIABLE'),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('employer_notes', sa.Text(), nullable=True),
        sa.Column('applied_at', sa.DateTime(), nullable=False),
        sa.Column('reviewed_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['job_id'], ['jobs.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['candidate_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['employer_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('job_id', 'candidate_id', name='uq_application_job_candidate')
    )
    op.create_index('idx_applications_candidate_status', 'applications', ['candidate_id', 'status'], unique=False)
    op.create_index('idx_applications_employer_status', 'applications', ['employer_id', 'status'], unique=False)
    op.create_index('idx_applications_applied_at', 'applications', ['applied_at'], unique=False)


def downgrade() -> None:
    op.drop_index('idx_applications_applied_at', table_name='applications')
    op.drop_index('idx_applications_employer_status', table_name='applications')
    op.drop_index('idx_applications_candidate_status', table_name='applications')
    op.drop_table('applications')

    op.drop_index('idx_jobs_status_created', table_name='jobs')
    op.drop_index(op.f('ix_jobs_status'), table_name='jobs')
    op.drop_index(op.f('ix_jobs_employer_id'), table_name='jobs')
    op.drop_table('jobs')

    op.drop_table('user_sessions')

    op.drop_index(op.f('ix_users_role'), table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')

    sa.Enum(name='auth_provider').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='user_role').drop(op.get_bind(), checkfirst=True)
