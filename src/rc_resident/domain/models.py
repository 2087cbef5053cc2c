"""Domain models for rc_resident: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Resident:
    id: str
    account_id: str
    house_number: str
    phone: str | None
    is_active: bool
    name: str
    email: str
    created_at: datetime
    payment_count: int = 0
    document_count: int = 0
