"""create_tournament_tables

Revision ID: 3a1f0c9d2b7e
Revises:
Create Date: 2026-10-17 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3a1f0c9d2b7e'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

STATUSES = ('pending', 'active', 'finished')


def upgrade() -> None:
    op.create_table(
        'groups',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )
    op.create_index(op.f('ix_groups_id'), 'groups', ['id'], unique=False)

    op.create_table(
        'teams',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('group_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.ForeignKeyConstraint(['group_id'], ['groups.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_teams_id'), 'teams', ['id'], unique=False)
    op.create_index(op.f('ix_teams_group_id'), 'teams', ['group_id'], unique=False)

    op.create_table(
        'rounds',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('number', sa.Integer(), nullable=False),
        sa.Column('type', sa.Enum('group', 'semi', 'final', name='round_type'), nullable=True),
        sa.Column('status', sa.Enum(*STATUSES, name='round_status'), nullable=False),
        sa.Column('is_paused', sa.Boolean(), nullable=False),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('total_paused_time', sa.Integer(), nullable=False),
        sa.Column('paused_time_at_start', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_pause_start', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('number')
    )
    op.create_index(op.f('ix_rounds_id'), 'rounds', ['id'], unique=False)

    op.create_table(
        'matches',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('round_id', sa.Integer(), nullable=False),
        sa.Column('court', sa.Integer(), nullable=False),
        sa.Column('team1_id', sa.Integer(), nullable=False),
        sa.Column('team2_id', sa.Integer(), nullable=False),
        sa.Column('score1', sa.Integer(), nullable=False),
        sa.Column('score2', sa.Integer(), nullable=False),
        sa.Column('status', sa.Enum(*STATUSES, name='match_status'), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['round_id'], ['rounds.id'], ),
        sa.ForeignKeyConstraint(['team1_id'], ['teams.id'], ),
        sa.ForeignKeyConstraint(['team2_id'], ['teams.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('round_id', 'court', name='unique_round_court'),
        sa.CheckConstraint('team1_id <> team2_id', name='match_distinct_teams'),
        sa.CheckConstraint('score1 >= 0 AND score2 >= 0', name='match_scores_non_negative'),
        sa.CheckConstraint('court >= 1', name='match_court_positive')
    )
    op.create_index(op.f('ix_matches_id'), 'matches', ['id'], unique=False)
    op.create_index(op.f('ix_matches_round_id'), 'matches', ['round_id'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_matches_round_id'), table_name='matches')
    op.drop_index(op.f('ix_matches_id'), table_name='matches')
    op.drop_table('matches')
    op.drop_index(op.f('ix_rounds_id'), table_name='rounds')
    op.drop_table('rounds')
    op.drop_index(op.f('ix_teams_group_id'), table_name='teams')
    op.drop_index(op.f('ix_teams_id'), table_name='teams')
    op.drop_table('teams')
    op.drop_index(op.f('ix_groups_id'), table_name='groups')
    op.drop_table('groups')
    sa.Enum(name='match_status').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='round_status').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='round_type').drop(op.get_bind(), checkfirst=True)
