"""add session_record table

Revision ID: 4c2a9e7d1b10
Revises:
Create Date: 2026-10-16 00:00:00
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4c2a9e7d1b10'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    if 'session_record' in insp.get_table_names():
        return
    op.create_table(
        'session_record',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('channel_id', sa.String(length=128), nullable=False),
        sa.Column('game', sa.String(length=32), nullable=False),
        sa.Column('outcome', sa.String(length=32), nullable=False),
        sa.Column('rounds_played', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('winner_id', sa.String(length=128), nullable=True),
        sa.Column('scores', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('finished_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_session_record_channel_id', 'session_record', ['channel_id'])


def downgrade():
    op.drop_index('ix_session_record_channel_id', table_name='session_record')
    op.drop_table('session_record')
