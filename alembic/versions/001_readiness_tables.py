"""Create assessment, score, scoring_config and audit_log tables

Revision ID: readiness_001
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'readiness_001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create readiness scoring tables"""

    op.create_table('assessments',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=True),
        sa.Column('prototype', sa.Boolean(), nullable=True),
        sa.Column('revenue', sa.Boolean(), nullable=True),
        sa.Column('full_time_team', sa.Boolean(), nullable=True),
        sa.Column('term_sheets', sa.Boolean(), nullable=True),
        sa.Column('cap_table', sa.Boolean(), nullable=True),
        sa.Column('external_capital', sa.Boolean(), nullable=True),
        sa.Column('mrr', sa.String(length=20), nullable=True),
        sa.Column('employees', sa.String(length=20), nullable=True),
        sa.Column('investors', sa.String(length=20), nullable=True),
        sa.Column('milestones', sa.String(length=20), nullable=True),
        sa.Column('funding_goal', sa.String(length=100), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_assessments_user_id', 'assessments', ['user_id'])
    op.create_index('idx_assessments_created_at', 'assessments', ['created_at'])

    op.create_table('scores',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('assessment_id', sa.String(length=36), nullable=False),
        sa.Column('user_id', sa.String(length=36), nullable=True),
        sa.Column('business_idea', sa.Integer(), nullable=False),
        sa.Column('business_idea_explanation', sa.Text(), nullable=False),
        sa.Column('financials', sa.Integer(), nullable=False),
        sa.Column('financials_explanation', sa.Text(), nullable=False),
        sa.Column('team', sa.Integer(), nullable=False),
        sa.Column('team_explanation', sa.Text(), nullable=False),
        sa.Column('traction', sa.Integer(), nullable=False),
        sa.Column('traction_explanation', sa.Text(), nullable=False),
        sa.Column('total_score', sa.Integer(), nullable=False),
        sa.Column('readiness', sa.String(length=30), nullable=True),
        sa.Column('sector', sa.String(length=30), nullable=True),
        sa.Column('stage', sa.String(length=20), nullable=True),
        sa.Column('config_version', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['assessment_id'], ['assessments.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('assessment_id', name='uq_scores_assessment_id')
    )
    op.create_index('ix_scores_user_id', 'scores', ['user_id'])
    op.create_index('idx_scores_total_score', 'scores', ['total_score'])

    op.create_table('scoring_config',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('config_name', sa.String(length=100), nullable=False),
        sa.Column('config_data', sa.JSON(), nullable=False),
        sa.Column('change_reason', sa.Text(), nullable=True),
        sa.Column('created_by', sa.String(length=100), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('version')
    )
    # At most one active configuration
    op.create_index(
        'uq_scoring_config_single_active',
        'scoring_config',
        ['is_active'],
        unique=True,
        sqlite_where=sa.text('is_active = 1'),
        postgresql_where=sa.text('is_active'),
    )

    op.create_table('audit_log',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('table_name', sa.String(length=100), nullable=False),
        sa.Column('record_id', sa.String(length=36), nullable=False),
        sa.Column('action', sa.String(length=20), nullable=False),
        sa.Column('old_values', sa.JSON(), nullable=True),
        sa.Column('new_values', sa.JSON(), nullable=True),
        sa.Column('user_id', sa.String(length=100), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_audit_log_record_id', 'audit_log', ['record_id'])
    op.create_index('idx_audit_log_table_created', 'audit_log', ['table_name', 'created_at'])


def downgrade() -> None:
    """Drop readiness scoring tables"""
    op.drop_index('idx_audit_log_table_created', table_name='audit_log')
    op.drop_index('ix_audit_log_record_id', table_name='audit_log')
    op.drop_table('audit_log')
    op.drop_index('uq_scoring_config_single_active', table_name='scoring_config')
    op.drop_table('scoring_config')
    op.drop_index('idx_scores_total_score', table_name='scores')
    op.drop_index('ix_scores_user_id', table_name='scores')
    op.drop_table('scores')
    op.drop_index('idx_assessments_created_at', table_name='assessments')
    op.drop_index('ix_assessments_user_id', table_name='assessments')
    op.drop_table('assessments')
