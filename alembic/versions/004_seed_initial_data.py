"""004: seed the bootstrap administrator

Revision ID: 004
Revises: 003
Create Date: 2026-10-05

Password is 'admin12345' (bcrypt, 12 rounds). Change it after first login.
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ADMIN_ACCOUNT_ID = "00000000-0000-4000-a000-000000000001"


def upgrade() -> None:
    op.execute(f"""
        INSERT INTO accounts (id, email, password_hash, name, role)
        VALUES (
            '{ADMIN_ACCOUNT_ID}',
            'admin@residencial.example.com',
            crypt('admin12345', gen_salt('bf', 12)),
            'Administrator',
            'ADMIN'
        )
        ON CONFLICT (email) DO NOTHING;
    """)


def downgrade() -> None:
    op.execute(f"DELETE FROM accounts WHERE id = '{ADMIN_ACCOUNT_ID}';")
