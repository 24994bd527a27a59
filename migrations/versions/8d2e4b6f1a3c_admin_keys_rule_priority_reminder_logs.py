"""admin_keys_rule_priority_reminder_logs

Revision ID: 8d2e4b6f1a3c
Revises: 3c1f0a9e2b7d
Create Date: 2026-10-17 15:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8d2e4b6f1a3c'
down_revision: Union[str, Sequence[str], None] = '3c1f0a9e2b7d'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

DEFAULT_RULE_PRIORITIES = {
    'auto_reject_30_days': 10,
    'screening_follow_up': 20,
    'interview_reminder': 30,
    'feedback_reminder': 40,
    'offer_congratulations': 50,
    'manual_rejection': 60,
}


def upgrade() -> None:
    """Upgrade schema."""
    bind = op.get_bind()
    inspector = sa.inspect(bind)

    api_key_columns = {column["name"] for column in inspector.get_columns("api_keys")}
    if "is_admin" not in api_key_columns:
        op.add_column(
            'api_keys',
            sa.Column('is_admin', sa.Boolean(), nullable=False, server_default=sa.false()),
        )

    rule_columns = {column["name"] for column in inspector.get_columns("automation_rules")}
    if "priority" not in rule_columns:
        op.add_column(
            'automation_rules',
            sa.Column('priority', sa.Integer(), nullable=False, server_default='100'),
        )
        op.create_index(op.f('ix_automation_rules_priority'), 'automation_rules', ['priority'], unique=False)

        rules = sa.table('automation_rules', sa.column('id', sa.String()), sa.column('priority', sa.Integer()))
        for rule_id, priority in DEFAULT_RULE_PRIORITIES.items():
            op.execute(rules.update().where(rules.c.id == rule_id).values(priority=priority))

    log_columns = {column["name"] for column in inspector.get_columns("automation_logs")}
    if "interview_id" not in log_columns:
        op.add_column('automation_logs', sa.Column('interview_id', sa.Integer(), nullable=True))
        op.add_column('automation_logs', sa.Column('interview_scheduled_at', sa.DateTime(), nullable=True))
        op.create_index(op.f('ix_automation_logs_interview_id'), 'automation_logs', ['interview_id'], unique=False)
        op.create_foreign_key(
            'fk_automation_logs_interview_id', 'automation_logs', 'interviews', ['interview_id'], ['id']
        )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_constraint('fk_automation_logs_interview_id', 'automation_logs', type_='foreignkey')
    op.drop_index(op.f('ix_automation_logs_interview_id'), table_name='automation_logs')
    op.drop_column('automation_logs', 'interview_scheduled_at')
    op.drop_column('automation_logs', 'interview_id')
    op.drop_index(op.f('ix_automation_rules_priority'), table_name='automation_rules')
    op.drop_column('automation_rules', 'priority')
    op.drop_column('api_keys', 'is_admin')
