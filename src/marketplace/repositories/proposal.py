"""Repository for Proposal entity."""

from typing import cast
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.engine import CursorResult
from sqlmodel import col, select

from src.marketplace.models import Proposal, ProposalStatus
from src.marketplace.models.base import utc_now
from src.marketplace.repositories.base import BaseRepository


class ProposalRepository(BaseRepository[Proposal]):
    model = Proposal

    async def get_active_for_partner(self, project_id: UUID, partner_id: UUID) -> Proposal | None:
        """Get the non-withdrawn proposal of a partner on a project, if any."""
        result = await self.session.execute(
            select(Proposal).where(
                Proposal.project_id == project_id,
                Proposal.partner_id == partner_id,
                Proposal.status != ProposalStatus.WITHDRAWN.value,
            )
        )
        return result.scalar_one_or_none()

    async def reject_pending(self, project_id: UUID, exclude_id: UUID | None = None) -> int:
        """Reject every pending proposal on a project except `exclude_id`.

        Returns:
            Number of proposals rejected.
        """
        stmt = (
            update(Proposal)
            .where(
                col(Proposal.project_id) == project_id,
                col(Proposal.status) == ProposalStatus.PENDING.value,
            )
            .values(status=ProposalStatus.REJECTED.value, updated_at=utc_now())
        )
        if exclude_id is not None:
            stmt = stmt.where(col(Proposal.id) != exclude_id)
        result = await self.session.execute(stmt)
        return cast(CursorResult, result).rowcount

    async def list_by_project(
        self,
        project_id: UUID,
        status: ProposalStatus | None = None,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> tuple[list[Proposal], str | None, bool]:
        query = select(Proposal).where(Proposal.project_id == project_id)
        if status is not None:
            query = query.where(Proposal.status == status.value)
        return await self.paginate(query, cursor, limit)

    async def list_by_partner(
        self,
        partner_id: UUID,
        status: ProposalStatus | None = None,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> tuple[list[Proposal], str | None, bool]:
        query = select(Proposal).where(Proposal.partner_id == partner_id)
        if status is not None:
            query = query.where(Proposal.status == status.value)
        return await self.paginate(query, cursor, limit)
