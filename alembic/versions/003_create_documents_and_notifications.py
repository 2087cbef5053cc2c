"""003: create documents and notifications tables

Revision ID: 003
Revises: 002
Create Date: 2026-10-05
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE documents (
            id              UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            resident_id     UUID            NOT NULL REFERENCES residents (id),
            issued_by       UUID            NOT NULL REFERENCES accounts (id),
            type            VARCHAR(16)     NOT NULL,
            title           VARCHAR(255)    NOT NULL,
            content         TEXT,
            file_ref        VARCHAR(255),
            is_read         BOOLEAN         NOT NULL DEFAULT FALSE,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_documents_type CHECK (
                type IN ('INVOICE', 'RECEIPT', 'NOTICE', 'STATEMENT')
            )
        );
    """)
    op.execute("CREATE INDEX idx_documents_resident_created ON documents (resident_id, created_at DESC);")
    op.execute("""
        CREATE TABLE notifications (
            id              UUID            PRIMARY KEY DEFAULT gen_random_uuid(),
            account_id      UUID            NOT NULL REFERENCES accounts (id) ON DELETE CASCADE,
            title           VARCHAR(255)    NOT NULL,
            message         TEXT            NOT NULL,
            type            VARCHAR(20)     NOT NULL DEFAULT 'GENERAL',
            is_read         BOOLEAN         NOT NULL DEFAULT FALSE,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_notifications_type CHECK (
                type IN ('PAYMENT_DUE', 'PAYMENT_RECEIVED', 'DOCUMENT_SENT', 'GENERAL')
            )
        );
    """)
    op.execute("CREATE INDEX idx_notifications_account_unread ON notifications (account_id, is_read, created_at DESC);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS notifications CASCADE;")
    op.execute("DROP TABLE IF EXISTS documents CASCADE;")
