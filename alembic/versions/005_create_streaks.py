"""005: create streaks table

Revision ID: 005
Revises: 004
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE streaks (
            user_id                 VARCHAR(64) NOT NULL,
            routine_id              VARCHAR(64) NOT NULL,
            current_count           INT         NOT NULL DEFAULT 0,
            best_count              INT         NOT NULL DEFAULT 0,
            last_completion_date    DATE,
            verified_count          INT         NOT NULL DEFAULT 0,
            created_at              TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at              TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            PRIMARY KEY (user_id, routine_id),
            CONSTRAINT ck_streaks_current_gte_0 CHECK (current_count >= 0),
            CONSTRAINT ck_streaks_current_lte_best CHECK (current_count <= best_count)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_streaks_updated_at
            BEFORE UPDATE ON streaks
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute(
        "COMMENT ON COLUMN streaks.verified_count IS "
        "'current_count written by the last recalculation run';"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS streaks CASCADE;")
