"""Repository Protocol: dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_resident.domain.models import Resident


class ResidentRepositoryProtocol(Protocol):
    async def get_by_id(self, db: AsyncSession, resident_id: str) -> Resident | None: ...

    async def list_residents(
        self,
        db: AsyncSession,
        is_active: bool | None,
        search: str | None,
        offset: int,
        limit: int,
    ) -> list[Resident]: ...

    async def count_residents(
        self, db: AsyncSession, is_active: bool | None, search: str | None
    ) -> int: ...

    async def list_active(
        self, db: AsyncSession, resident_ids: list[str] | None = None
    ) -> list[Resident]: ...

    async def set_active(
        self, db: AsyncSession, resident_id: str, is_active: bool
    ) -> Resident | None: ...
