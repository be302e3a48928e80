"""Initial migration - create all base tables

Revision ID: 0_initial
Revises:
Create Date: 2025-01-01 00:00:00.000000
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

difficulty_level_enum = sa.Enum('beginner', 'intermediate', 'advanced', name='difficulty_level_enum')
problem_difficulty_enum = sa.Enum('easy', 'medium', 'hard', name='problem_difficulty_enum')
progress_status_enum = sa.Enum('not_started', 'in_progress', 'completed', name='progress_status_enum')


def upgrade() -> None:
    # ── users table ───────────────────────────────────────────────────
    op.create_table(
        'users',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('hashed_password', sa.String(255), nullable=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('google_id', sa.String(255), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email', name='uq_user_email'),
        sa.UniqueConstraint('google_id', name='uq_user_google_id'),
    )
    op.create_index('ix_users_email', 'users', ['email'])

    # ── lessons table ─────────────────────────────────────────────────
    op.create_table(
        'lessons',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('slug', sa.String(100), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('difficulty_level', difficulty_level_enum, nullable=False, server_default='beginner'),
        sa.Column('order_index', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_published', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('slug', name='uq_lesson_slug'),
    )
    op.create_index('ix_lessons_slug', 'lessons', ['slug'])

    # ── practice_problems table ───────────────────────────────────────
    op.create_table(
        'practice_problems',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('lesson_id', sa.Integer(), nullable=False),
        sa.Column('question', sa.Text(), nullable=False),
        sa.Column('choices', sa.JSON(), nullable=False),
        sa.Column('correct_answer', sa.String(500), nullable=False),
        sa.Column('explanation', sa.Text(), nullable=True),
        sa.Column('difficulty', problem_difficulty_enum, nullable=False, server_default='easy'),
        sa.Column('topic', sa.String(200), nullable=True),
        sa.Column('order_index', sa.Integer(), nullable=False, server_default='0'),
        sa.ForeignKeyConstraint(['lesson_id'], ['lessons.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_practice_problems_lesson_id', 'practice_problems', ['lesson_id'])

    # ── practice_attempts table ───────────────────────────────────────
    op.create_table(
        'practice_attempts',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('practice_id', sa.Integer(), nullable=True),
        sa.Column('user_answer', sa.String(500), nullable=False),
        sa.Column('is_correct', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('time_taken', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('attempted_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['practice_id'], ['practice_problems.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_practice_attempts_user_id', 'practice_attempts', ['user_id'])
    op.create_index('ix_practice_attempts_attempted_at', 'practice_attempts', ['attempted_at'])

    # ── user_lesson_progress table ────────────────────────────────────
    op.create_table(
        'user_lesson_progress',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.UUID(), nullable=False),
        sa.Column('lesson_id', sa.Integer(), nullable=True),
        sa.Column('status', progress_status_enum, nullable=False, server_default='not_started'),
        sa.Column('completion_percentage', sa.Float(), nullable=False, server_default='0'),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('last_accessed', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['lesson_id'], ['lessons.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'lesson_id', name='uq_user_lesson_progress'),
    )
    op.create_index('ix_user_lesson_progress_user_id', 'user_lesson_progress', ['user_id'])


def downgrade() -> None:
    op.drop_table('user_lesson_progress')
    op.drop_table('practice_attempts')
    op.drop_table('practice_problems')
    op.drop_table('lessons')
    op.drop_table('users')
    progress_status_enum.drop(op.get_bind(), checkfirst=True)
    problem_difficulty_enum.drop(op.get_bind(), checkfirst=True)
    difficulty_level_enum.drop(op.get_bind(), checkfirst=True)
