"""001: accounts, residents and the updated_at trigger function

Revision ID: 001
Revises:
Create Date: 2026-10-05
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # gen_random_uuid() on PostgreSQL < 13
    op.execute("CREATE EXTENSION IF NOT EXISTS pgcrypto;")
    op.execute("""
        CREATE FUNCTION touch_updated_at() RETURNS TRIGGER
        LANGUAGE plpgsql AS $$
        BEGIN
            NEW.updated_at := NOW();
            RETURN NEW;
        END;
        $$;
    """)
    op.execute("""
        CREATE TABLE accounts (
            id              UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            email           VARCHAR(255)    NOT NULL,
            password_hash   VARCHAR(255)    NOT NULL,
            name            VARCHAR(120)    NOT NULL,
            role            VARCHAR(16)     NOT NULL DEFAULT 'RESIDENT',
            is_active       BOOLEAN         NOT NULL DEFAULT TRUE,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_accounts_email    UNIQUE (email),
            CONSTRAINT ck_accounts_role     CHECK (role IN ('ADMIN', 'RESIDENT'))
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_accounts_updated_at
            BEFORE UPDATE ON accounts
            FOR EACH ROW EXECUTE FUNCTION touch_updated_at();
    """)
    op.execute("""
        CREATE TABLE residents (
            id              UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            account_id      UUID            NOT NULL REFERENCES accounts (id),
            house_number    VARCHAR(32)     NOT NULL,
            phone           VARCHAR(32),
            is_active       BOOLEAN         NOT NULL DEFAULT TRUE,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_residents_account         UNIQUE (account_id),
            CONSTRAINT uq_residents_house_number    UNIQUE (house_number)
        );
    """)
    op.execute("CREATE INDEX idx_residents_active ON residents (is_active);")
    op.execute("""
        CREATE TRIGGER trg_residents_updated_at
            BEFORE UPDATE ON residents
            FOR EACH ROW EXECUTE FUNCTION touch_updated_at();
    """)
    op.execute("COMMENT ON TABLE residents IS 'Dwelling unit to account holder mapping; deactivated, never deleted';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS residents CASCADE;")
    op.execute("DROP TABLE IF EXISTS accounts CASCADE;")
    op.execute("DROP FUNCTION IF EXISTS touch_updated_at();")
