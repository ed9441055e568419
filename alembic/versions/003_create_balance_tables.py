"""003: create balance tables

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE balance_accounts (
            user_id             VARCHAR(64) PRIMARY KEY,
            current_balance     BIGINT      NOT NULL DEFAULT 0,
            version             BIGINT      NOT NULL DEFAULT 0,
            created_at          TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ NOT NULL DEFAULT NOW()
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_balance_accounts_updated_at
            BEFORE UPDATE ON balance_accounts
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("""
        CREATE TABLE balance_transactions (
            id              BIGSERIAL       PRIMARY KEY,
            user_id         VARCHAR(64)     NOT NULL,
            amount          BIGINT          NOT NULL,
            kind            VARCHAR(20)     NOT NULL,
            balance_after   BIGINT          NOT NULL,
            description     VARCHAR(500),
            reference_type  VARCHAR(30),
            reference_id    VARCHAR(140),
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_balance_tx_kind CHECK (
                kind IN ('earned', 'spent', 'adjustment', 'payout', 'bonus')
            ),
            CONSTRAINT ck_balance_tx_amount_nonzero CHECK (amount <> 0)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_balance_transactions_append_only
            BEFORE UPDATE OR DELETE ON balance_transactions
            FOR EACH ROW EXECUTE FUNCTION fn_reject_mutation();
    """)
    op.execute(
        "CREATE INDEX idx_balance_tx_user_time ON balance_transactions (user_id, created_at DESC);"
    )
    op.execute("""
        CREATE INDEX idx_balance_tx_reference
        ON balance_transactions (reference_type, reference_id)
        WHERE reference_id IS NOT NULL;
    """)
    op.execute(
        "COMMENT ON TABLE balance_transactions IS 'Append-only; all amounts in cents';"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS balance_transactions CASCADE;")
    op.execute("DROP TABLE IF EXISTS balance_accounts CASCADE;")
