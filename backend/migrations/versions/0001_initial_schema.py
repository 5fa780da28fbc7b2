"""initial workout tracker schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-18 00:00:00.000000
"""
import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps(*, updated: bool = True):
    cols = [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]
    if updated:
        cols.append(
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)
        )
    return cols


def upgrade():
    op.create_table(
        'exercises',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('length(name) > 0', name=op.f('ck_exercises_name_not_empty')),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_exercises')),
        sa.UniqueConstraint('name', name='uq_exercises_name'),
    )
    op.create_table(
        'workouts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=255), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('length(name) > 0', name=op.f('ck_workouts_name_not_empty')),
        sa.CheckConstraint(
            'completed_at IS NULL OR completed_at >= started_at',
            name=op.f('ck_workouts_completed_after_started'),
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_workouts')),
    )
    op.create_index('ix_workouts_user_started', 'workouts', ['user_id', 'started_at'])
    op.create_table(
        'workout_exercises',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('workout_id', sa.Integer(), nullable=False),
        sa.Column('exercise_id', sa.Integer(), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False),
        *_timestamps(updated=False),
        sa.CheckConstraint('"order" >= 0', name=op.f('ck_workout_exercises_order_not_negative')),
        sa.ForeignKeyConstraint(
            ['workout_id'], ['workouts.id'],
            name=op.f('fk_workout_exercises_workout_id_workouts'),
            ondelete='CASCADE',
        ),
        sa.ForeignKeyConstraint(
            ['exercise_id'], ['exercises.id'],
            name=op.f('fk_workout_exercises_exercise_id_exercises'),
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_workout_exercises')),
        sa.UniqueConstraint('workout_id', 'order', name='uq_workout_exercises_workout_order'),
    )
    op.create_index('ix_workout_exercises_exercise', 'workout_exercises', ['exercise_id'])
    op.create_table(
        'sets',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('workout_exercise_id', sa.Integer(), nullable=False),
        sa.Column('set_number', sa.Integer(), nullable=False),
        sa.Column('weight_kg', sa.Numeric(precision=6, scale=2), nullable=False),
        sa.Column('reps', sa.Integer(), nullable=False),
        *_timestamps(updated=False),
        sa.CheckConstraint('set_number > 0', name=op.f('ck_sets_set_number_positive')),
        sa.CheckConstraint('weight_kg >= 0', name=op.f('ck_sets_weight_not_negative')),
        sa.CheckConstraint('reps > 0', name=op.f('ck_sets_reps_positive')),
        sa.ForeignKeyConstraint(
            ['workout_exercise_id'], ['workout_exercises.id'],
            name=op.f('fk_sets_workout_exercise_id_workout_exercises'),
            ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_sets')),
    )
    op.create_index('ix_sets_workout_exercise_number', 'sets', ['workout_exercise_id', 'set_number'])


def downgrade():
    op.drop_index('ix_sets_workout_exercise_number', table_name='sets')
    op.drop_table('sets')
    op.drop_index('ix_workout_exercises_exercise', table_name='workout_exercises')
    op.drop_table('workout_exercises')
    op.drop_index('ix_workouts_user_started', table_name='workouts')
    op.drop_table('workouts')
    op.drop_table('exercises')
