"""Item comments, feedback, fixer interest and demographics

Revision ID: rc002_item_activity
Revises: rc001_initial_schema
Create Date: 2026-10-17

Also adds `claimed_at` to the email outbox so a dispatcher can take a row
before sending it.
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'rc002_item_activity'
down_revision = 'rc001_initial_schema'
branch_labels = None
depends_on = None


def _timestamps(updated=True):
    cols = [sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now())]
    if updated:
        cols.append(sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()))
    return cols


def upgrade() -> None:
    op.create_table(
        'item_comments',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('item_id', sa.String(), sa.ForeignKey('items.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('comment', sa.Text(), nullable=False),
        *_timestamps(updated=False),
    )
    op.create_index('ix_item_comments_item_id', 'item_comments', ['item_id'])
    op.create_index('ix_item_comments_user_id', 'item_comments', ['user_id'])

    op.create_table(
        'item_feedback',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('item_id', sa.String(), sa.ForeignKey('items.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=False),
        sa.Column('comment', sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('item_id', 'user_id', name='uq_item_feedback_item_user'),
    )
    op.create_index('ix_item_feedback_item_id', 'item_feedback', ['item_id'])

    op.create_table(
        'fixer_interest',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('item_id', sa.String(), sa.ForeignKey('items.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('suggested_parts', sa.Text(), nullable=True),
        sa.Column('questions', sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('item_id', 'user_id', name='uq_fixer_interest_item_user'),
    )
    op.create_index('ix_fixer_interest_item_id', 'fixer_interest', ['item_id'])
    op.create_index('ix_fixer_interest_user_id', 'fixer_interest', ['user_id'])

    op.create_table(
        'registration_demographics',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('registration_id', sa.String(), sa.ForeignKey('registrations.id', ondelete='CASCADE'), nullable=True, unique=True),
        sa.Column('fixer_id', sa.String(), sa.ForeignKey('fixers.id', ondelete='CASCADE'), nullable=True, unique=True),
        sa.Column('age_group', sa.String(), nullable=True),
        sa.Column('gender', sa.String(), nullable=True),
        sa.Column('gender_self_describe', sa.String(), nullable=True),
        sa.Column('newcomer_to_canada', sa.Boolean(), nullable=True),
        *_timestamps(),
    )

    op.add_column('notification_outbox', sa.Column('claimed_at', sa.DateTime(timezone=True), nullable=True))


def downgrade() -> None:
    op.drop_column('notification_outbox', 'claimed_at')
    op.drop_table('registration_demographics')
    op.drop_table('fixer_interest')
    op.drop_table('item_feedback')
    op.drop_table('item_comments')
