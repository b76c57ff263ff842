"""Create users, notes, note_collaborators and refresh_tokens

Revision ID: 5b1f0c2d9a47
Revises:
Create Date: 2026-03-02 10:12:31.418275

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

from notevault.core.models.types import GUID, JSONList


# revision identifiers, used by Alembic.
revision: str = '5b1f0c2d9a47'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('length(name) <= 100', name='ck_users_name_len'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )
    op.create_index('idx_users_active', 'users', ['is_active'])

    op.create_table(
        'notes',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('archived', sa.Boolean(), nullable=False),
        sa.Column('pinned', sa.Boolean(), nullable=False),
        sa.Column('color', sa.String(length=7), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False),
        sa.Column('tags', JSONList(), nullable=False),
        sa.Column('reminders', JSONList(), nullable=False),
        sa.Column('is_public', sa.Boolean(), nullable=False),
        sa.Column('share_token', sa.String(length=128), nullable=True),
        sa.Column('owner_id', GUID(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('length(title) <= 200', name='ck_notes_title_len'),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('share_token'),
    )
    op.create_index('idx_notes_owner_id', 'notes', ['owner_id'])
    op.create_index('idx_notes_owner_order', 'notes', ['owner_id', 'order'])
    op.create_index('idx_notes_pinned_updated', 'notes', ['pinned', 'updated_at'])
    op.create_index('idx_notes_archived_updated', 'notes', ['archived', 'updated_at'])

    op.create_table(
        'note_collaborators',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('note_id', GUID(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['note_id'], ['notes.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('note_id', 'email', name='uq_note_collaborators_note_email'),
    )
    op.create_index('idx_note_collaborators_email', 'note_collaborators', ['email'])

    op.create_table(
        'refresh_tokens',
        sa.Column('id', GUID(), nullable=False),
        sa.Column('token', sa.String(length=255), nullable=False),
        sa.Column('user_id', GUID(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('revoked_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('token'),
    )
    op.create_index('idx_refresh_tokens_user_id', 'refresh_tokens', ['user_id'])
    op.create_index('idx_refresh_tokens_user_active', 'refresh_tokens', ['user_id', 'is_active'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('idx_refresh_tokens_user_active', table_name='refresh_tokens')
    op.drop_index('idx_refresh_tokens_user_id', table_name='refresh_tokens')
    op.drop_table('refresh_tokens')
    op.drop_index('idx_note_collaborators_email', table_name='note_collaborators')
    op.drop_table('note_collaborators')
    op.drop_index('idx_notes_archived_updated', table_name='notes')
    op.drop_index('idx_notes_pinned_updated', table_name='notes')
    op.drop_index('idx_notes_owner_order', table_name='notes')
    op.drop_index('idx_notes_owner_id', table_name='notes')
    op.drop_table('notes')
    op.drop_index('idx_users_active', table_name='users')
    op.drop_table('users')
