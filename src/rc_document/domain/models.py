"""Domain models for rc_document."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Document:
    id: str
    resident_id: str
    issued_by: str
    type: str                       # DocumentType value
    title: str
    content: str | None
    file_ref: str | None            # filename relative to UPLOAD_DIR
    is_read: bool
    created_at: datetime
    account_id: str = ""
    house_number: str = ""
    resident_name: str = ""
