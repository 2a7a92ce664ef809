"""Repository for Contract entity."""

from typing import Any, cast
from uuid import UUID

from sqlalchemy import func, update
from sqlalchemy.engine import CursorResult
from sqlmodel import col, select

from src.marketplace.models import Contract, ContractStatus, PartnerProfile, Project
from src.marketplace.models.base import utc_now
from src.marketplace.repositories.base import BaseRepository


class ContractRepository(BaseRepository[Contract]):
    model = Contract

    async def get_for_update(self, contract_id: UUID) -> Contract | None:
        """Load a contract and lock its row until the transaction ends."""
        result = await self.session.execute(
            select(Contract).where(Contract.id == contract_id).with_for_update()
        )
        return result.scalar_one_or_none()

    async def transition_status(
        self,
        contract_id: UUID,
        from_status: ContractStatus,
        to_status: ContractStatus,
        **values: Any,
    ) -> bool:
        """Move a contract between statuses only if it is still in `from_status`.

        Extra column values (e.g. end_date) are written in the same statement.
        """
        result = await self.session.execute(
            update(Contract)
            .where(
                col(Contract.id) == contract_id,
                col(Contract.status) == from_status.value,
            )
            .values(status=to_status.value, updated_at=utc_now(), **values)
        )
        return cast(CursorResult, result).rowcount == 1

    async def list_for_client(
        self,
        client_id: UUID,
        status: ContractStatus | None = None,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> tuple[list[Contract], str | None, bool]:
        """List contracts on projects owned by a client."""
        project_ids = select(Project.id).where(Project.client_id == client_id)
        query = select(Contract).where(col(Contract.project_id).in_(project_ids))
        if status is not None:
            query = query.where(Contract.status == status.value)
        return await self.paginate(query, cursor, limit)

    async def list_for_partner_user(
        self,
        user_id: UUID,
        status: ContractStatus | None = None,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> tuple[list[Contract], str | None, bool]:
        """List contracts held by the partner profile of a user."""
        profile_ids = select(PartnerProfile.id).where(PartnerProfile.user_id == user_id)
        query = select(Contract).where(col(Contract.partner_id).in_(profile_ids))
        if status is not None:
            query = query.where(Contract.status == status.value)
        return await self.paginate(query, cursor, limit)

    async def list_all(
        self,
        status: ContractStatus | None = None,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> tuple[list[Contract], str | None, bool]:
        query = select(Contract)
        if status is not None:
            query = query.where(Contract.status == status.value)
        return await self.paginate(query, cursor, limit)

    async def total_rate_for_client(self, client_id: UUID) -> float:
        """Sum of agreed rates over contracts on a client's projects."""
        project_ids = select(Project.id).where(Project.client_id == client_id)
        result = await self.session.execute(
            select(func.coalesce(func.sum(Contract.agreed_rate), 0)).where(
                col(Contract.project_id).in_(project_ids)
            )
        )
        return float(result.scalar_one())

    async def total_rate_for_partner(self, partner_id: UUID) -> float:
        """Sum of agreed rates over contracts held by a partner profile."""
        result = await self.session.execute(
            select(func.coalesce(func.sum(Contract.agreed_rate), 0)).where(
                Contract.partner_id == partner_id
            )
        )
        return float(result.scalar_one())
