"""004: create completions table

Revision ID: 004
Revises: 003
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE completions (
            id                  VARCHAR(36)     PRIMARY KEY,
            task_id             VARCHAR(64)     NOT NULL,
            user_id             VARCHAR(64)     NOT NULL,
            completed_at        TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            completion_date     DATE            NOT NULL,
            CONSTRAINT uq_completions_task_user_date UNIQUE (task_id, user_id, completion_date)
        );
    """)
    op.execute("CREATE INDEX idx_completions_user_date ON completions (user_id, completion_date DESC);")
    op.execute("COMMENT ON COLUMN completions.completion_date IS 'Calendar day in HOUSEHOLD_TIMEZONE';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS completions CASCADE;")
