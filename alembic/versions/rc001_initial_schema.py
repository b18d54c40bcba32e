"""Initial repair cafe schema

Revision ID: rc001_initial_schema
Revises:
Create Date: 2026-10-17

Creates users and magic-link tokens, venues, events, registrations with
their repair items, volunteer tables (fixers, RSVPs, helpers, skills),
notification preferences and the email outbox.
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'rc001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps(updated=True):
    cols = [sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now())]
    if updated:
        cols.append(sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()))
    return cols


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('role', sa.String(), nullable=False, server_default='attendee'),
        sa.Column('email_verified', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        *_timestamps(updated=False),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'skills',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False, unique=True),
        sa.Column('category', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
    )
    op.create_index('ix_skills_category', 'skills', ['category'])

    op.create_table(
        'user_skills',
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('skill_id', sa.String(), sa.ForeignKey('skills.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('self_rated', sa.Boolean(), nullable=False, server_default=sa.text('false')),
    )

    op.create_table(
        'auth_tokens',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('token_hash', sa.String(), nullable=False),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('used_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(updated=False),
    )
    op.create_index('ix_auth_tokens_user_id', 'auth_tokens', ['user_id'])
    op.create_index('ix_auth_tokens_token_hash', 'auth_tokens', ['token_hash'], unique=True)

    op.create_table(
        'venues',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('address', sa.String(), nullable=True),
        sa.Column('city', sa.String(), nullable=True),
        sa.Column('postal_code', sa.String(), nullable=True),
    )

    op.create_table(
        'events',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.Time(), nullable=False),
        sa.Column('end_time', sa.Time(), nullable=False),
        sa.Column('venue_id', sa.String(), sa.ForeignKey('venues.id'), nullable=True),
        sa.Column('capacity', sa.Integer(), nullable=False, server_default=sa.text('40')),
        sa.Column('status', sa.String(), nullable=False, server_default='draft'),
        sa.Column('waitlist_enabled', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('registration_opens_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_events_date', 'events', ['date'])

    op.create_table(
        'registrations',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('event_id', sa.String(), sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column(
            'status',
            sa.Enum('registered', 'waitlisted', 'checked_in', 'cancelled', name='registration_status_enum'),
            nullable=False,
            server_default='registered',
        ),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('qr_code', sa.String(), nullable=False),
        sa.Column('management_token', sa.String(), nullable=True),
        sa.Column('checked_in_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_registrations_event_id', 'registrations', ['event_id'])
    op.create_index('ix_registrations_user_id', 'registrations', ['user_id'])
    op.create_index('ix_registrations_qr_code', 'registrations', ['qr_code'], unique=True)
    op.create_index('ix_registrations_management_token', 'registrations', ['management_token'], unique=True)
    op.create_index('idx_registrations_event_status', 'registrations', ['event_id', 'status'])
    op.create_index('idx_registrations_event_user', 'registrations', ['event_id', 'user_id'])

    op.create_table(
        'items',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('registration_id', sa.String(), sa.ForeignKey('registrations.id', ondelete='CASCADE'), nullable=False),
        sa.Column('event_id', sa.String(), sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('problem', sa.Text(), nullable=False),
        sa.Column('item_type', sa.String(), nullable=True),
        sa.Column('suggested_skills', sa.JSON(), nullable=True),
        sa.Column(
            'status',
            sa.Enum('registered', 'in-progress', 'completed', 'cancelled', name='item_status_enum'),
            nullable=False,
            server_default='registered',
        ),
        sa.Column('fixer_id', sa.String(), sa.ForeignKey('users.id'), nullable=True),
        sa.Column('queue_position', sa.Integer(), nullable=True),

        # Outcome
        sa.Column('outcome', sa.String(), nullable=True),
        sa.Column('outcome_notes', sa.Text(), nullable=True),
        sa.Column('repair_method', sa.Text(), nullable=True),
        sa.Column('parts_used', sa.Text(), nullable=True),
        sa.Column('repair_started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('repair_completed_at', sa.DateTime(timezone=True), nullable=True),

        # Material composition for impact reporting
        sa.Column('weight_kg', sa.Float(), nullable=True),
        sa.Column('pct_electronic', sa.Float(), nullable=True),
        sa.Column('pct_metal', sa.Float(), nullable=True),
        sa.Column('pct_plastic', sa.Float(), nullable=True),
        sa.Column('pct_textile', sa.Float(), nullable=True),
        sa.Column('pct_other', sa.Float(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_items_registration_id', 'items', ['registration_id'])
    op.create_index('ix_items_event_id', 'items', ['event_id'])
    op.create_index('ix_items_user_id', 'items', ['user_id'])
    op.create_index('ix_items_fixer_id', 'items', ['fixer_id'])
    op.create_index('idx_items_event_status', 'items', ['event_id', 'status'])

    op.create_table(
        'fixers',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('skills', sa.Text(), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('availability', sa.Text(), nullable=True),
        sa.Column('comments', sa.Text(), nullable=True),
        sa.Column('photo_url', sa.String(), nullable=True),
        sa.Column('status', sa.String(), nullable=False, server_default='pending'),
        sa.Column('approved_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_fixers_email', 'fixers', ['email'], unique=True)

    op.create_table(
        'fixer_event_rsvps',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('fixer_id', sa.String(), sa.ForeignKey('fixers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('event_id', sa.String(), sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False),
        sa.Column('response', sa.String(), nullable=False),
        *_timestamps(updated=False),
        sa.UniqueConstraint('fixer_id', 'event_id', name='uq_fixer_event_rsvp'),
    )
    op.create_index('ix_fixer_event_rsvps_fixer_id', 'fixer_event_rsvps', ['fixer_id'])
    op.create_index('ix_fixer_event_rsvps_event_id', 'fixer_event_rsvps', ['event_id'])

    op.create_table(
        'helpers',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('phone', sa.String(), nullable=True),
        sa.Column('availability', sa.Text(), nullable=True),
        sa.Column('comments', sa.Text(), nullable=True),
        sa.Column('has_volunteered_before', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('roles', sa.JSON(), nullable=False),
        sa.Column('status', sa.String(), nullable=False, server_default='pending'),
        *_timestamps(updated=False),
    )
    op.create_index('ix_helpers_email', 'helpers', ['email'])

    op.create_table(
        'notification_preferences',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('notify_comments', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('notify_events', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('notify_daily_digest', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('notify_weekly_digest', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        *_timestamps(),
    )
    op.create_index('ix_notification_preferences_user_id', 'notification_preferences', ['user_id'], unique=True)

    op.create_table(
        'notification_outbox',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('kind', sa.String(50), nullable=False),
        sa.Column('user_id', sa.String(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('reference_id', sa.String(), nullable=True),
        sa.Column('recipient_email', sa.String(255), nullable=False),
        sa.Column('subject', sa.String(), nullable=False),
        sa.Column('text_body', sa.Text(), nullable=False),
        sa.Column('html_body', sa.Text(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('attempts', sa.Integer(), nullable=False, server_default=sa.text('0')),
        sa.Column('last_error', sa.Text(), nullable=True),
        sa.Column('external_id', sa.String(255), nullable=True),
        sa.Column('sent_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(updated=False),
    )
    op.create_index('ix_notification_outbox_kind', 'notification_outbox', ['kind'])
    op.create_index('ix_notification_outbox_reference_id', 'notification_outbox', ['reference_id'])
    op.create_index('idx_notification_outbox_status_created', 'notification_outbox', ['status', 'created_at'])


def downgrade() -> None:
    op.drop_table('notification_outbox')
    op.drop_table('notification_preferences')
    op.drop_table('helpers')
    op.drop_table('fixer_event_rsvps')
    op.drop_table('fixers')
    op.drop_table('items')
    op.drop_table('registrations')
    op.drop_table('events')
    op.drop_table('venues')
    op.drop_table('auth_tokens')
    op.drop_table('user_skills')
    op.drop_table('skills')
    op.drop_table('users')
    sa.Enum(name='item_status_enum').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='registration_status_enum').drop(op.get_bind(), checkfirst=True)
