"""002: create charges table

Revision ID: 002
Revises: 001
Create Date: 2026-10-05
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE charges (
            id              UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            resident_id     UUID            NOT NULL REFERENCES residents (id),
            issued_by       UUID            NOT NULL REFERENCES accounts (id),
            type            VARCHAR(16)     NOT NULL,
            amount_cents    BIGINT          NOT NULL,
            due_date        DATE            NOT NULL,
            status          VARCHAR(16)     NOT NULL DEFAULT 'PENDING',
            paid_date       TIMESTAMPTZ,
            description     TEXT,
            gateway_ref     VARCHAR(255),
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_charges_amount_gte_0  CHECK (amount_cents >= 0),
            CONSTRAINT ck_charges_type CHECK (type IN ('MAINTENANCE', 'WATER', 'GATE')),
            CONSTRAINT ck_charges_status CHECK (
                status IN ('PENDING', 'PAID', 'OVERDUE', 'CANCELLED')
            ),
            CONSTRAINT ck_charges_paid_date CHECK ((status = 'PAID') = (paid_date IS NOT NULL))
        );
    """)
    op.execute("CREATE INDEX idx_charges_resident_created ON charges (resident_id, created_at DESC);")
    op.execute("CREATE INDEX idx_charges_status_due ON charges (status, due_date);")
    op.execute("CREATE UNIQUE INDEX uq_charges_gateway_ref ON charges (gateway_ref) WHERE gateway_ref IS NOT NULL;")
    op.execute("""
        CREATE TRIGGER trg_charges_updated_at
            BEFORE UPDATE ON charges
            FOR EACH ROW EXECUTE FUNCTION touch_updated_at();
    """)
    op.execute("COMMENT ON TABLE charges IS 'Billable obligations; PENDING -> PAID | OVERDUE, OVERDUE -> PAID';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS charges CASCADE;")
