"""002: create task and routine read-model tables

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Owned by the task/routine service; the ledger core only reads them.
    op.execute("""
        CREATE TABLE tasks (
            id              VARCHAR(64)     PRIMARY KEY,
            name            VARCHAR(200)    NOT NULL,
            value_cents     BIGINT          NOT NULL DEFAULT 0,
            schedule_days   SMALLINT[],
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_tasks_value_gte_0 CHECK (value_cents >= 0)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_tasks_updated_at
            BEFORE UPDATE ON tasks
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("""
        CREATE TABLE routines (
            id                  VARCHAR(64)     PRIMARY KEY,
            name                VARCHAR(200)    NOT NULL,
            assigned_user_id    VARCHAR(64),
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW()
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_routines_updated_at
            BEFORE UPDATE ON routines
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("CREATE INDEX idx_routines_assigned_user ON routines (assigned_user_id);")
    op.execute("""
        CREATE TABLE routine_tasks (
            routine_id  VARCHAR(64) NOT NULL REFERENCES routines (id) ON DELETE CASCADE,
            task_id     VARCHAR(64) NOT NULL REFERENCES tasks (id) ON DELETE CASCADE,
            position    INT         NOT NULL DEFAULT 0,
            PRIMARY KEY (routine_id, task_id)
        );
    """)
    op.execute("CREATE INDEX idx_routine_tasks_task ON routine_tasks (task_id);")
    op.execute("COMMENT ON COLUMN tasks.schedule_days IS '0=Sunday..6=Saturday; NULL or empty = every day';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS routine_tasks CASCADE;")
    op.execute("DROP TABLE IF EXISTS routines CASCADE;")
    op.execute("DROP TABLE IF EXISTS tasks CASCADE;")
