"""006: create notifications table

Revision ID: 006
Revises: 005
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "006"
down_revision: Union[str, None] = "005"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE notifications (
            id          UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            user_id     VARCHAR(64)     NOT NULL,
            kind        VARCHAR(30)     NOT NULL,
            message     VARCHAR(500)    NOT NULL,
            is_read     BOOLEAN         NOT NULL DEFAULT FALSE,
            created_at  TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_notifications_kind CHECK (
                kind IN ('task_complete', 'streak_milestone', 'streak_broken',
                         'balance_update', 'system')
            )
        );
    """)
    op.execute("CREATE INDEX idx_notifications_user_time ON notifications (user_id, created_at DESC);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS notifications CASCADE;")
