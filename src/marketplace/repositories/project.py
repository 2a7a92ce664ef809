"""Repository for Project entity."""

from typing import cast
from uuid import UUID

from sqlalchemy import delete, or_, update
from sqlalchemy.engine import CursorResult
from sqlmodel import col, select

from src.marketplace.models import Contract, Project, ProjectStatus, Proposal, Review
from src.marketplace.models.base import utc_now
from src.marketplace.repositories.base import BaseRepository
from src.marketplace.schemas.project import ProjectFilters


class ProjectRepository(BaseRepository[Project]):
    model = Project

    async def get_for_update(self, project_id: UUID) -> Project | None:
        """Load a project and lock its row until the transaction ends.

        On PostgreSQL concurrent writers serialize here; backends without
        row locks ignore FOR UPDATE.
        """
        result = await self.session.execute(
            select(Project).where(Project.id == project_id).with_for_update()
        )
        return result.scalar_one_or_none()

    async def transition_status(
        self,
        project_id: UUID,
        from_status: ProjectStatus,
        to_status: ProjectStatus,
    ) -> bool:
        """Move a project between statuses only if it is still in `from_status`.

        Returns:
            True if the row was updated, False if the project was not in `from_status`.
        """
        result = await self.session.execute(
            update(Project)
            .where(
                col(Project.id) == project_id,
                col(Project.status) == from_status.value,
            )
            .values(status=to_status.value, updated_at=utc_now())
        )
        return cast(CursorResult, result).rowcount == 1

    async def delete_cascade(self, project: Project) -> None:
        """Delete a project with its reviews, contracts and proposals."""
        contract_ids = select(Contract.id).where(Contract.project_id == project.id)
        await self.session.execute(
            delete(Review).where(col(Review.contract_id).in_(contract_ids))
        )
        await self.session.execute(delete(Contract).where(col(Contract.project_id) == project.id))
        await self.session.execute(delete(Proposal).where(col(Proposal.project_id) == project.id))
        await self.session.delete(project)
        await self.session.flush()

    async def list_filtered(
        self,
        filters: ProjectFilters,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> tuple[list[Project], str | None, bool]:
        """List projects matching browse filters, newest first."""
        query = select(Project).where(Project.status == filters.status.value)
        if filters.project_type is not None:
            query = query.where(Project.project_type == filters.project_type.value)
        if filters.budget_min is not None:
            query = query.where(Project.budget_max >= filters.budget_min)
        if filters.budget_max is not None:
            query = query.where(Project.budget_min <= filters.budget_max)
        if filters.search:
            pattern = f"%{filters.search}%"
            query = query.where(
                or_(col(Project.title).ilike(pattern), col(Project.description).ilike(pattern))
            )
        return await self.paginate(query, cursor, limit)

    async def list_by_client(
        self,
        client_id: UUID,
        status: ProjectStatus | None = None,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> tuple[list[Project], str | None, bool]:
        query = select(Project).where(Project.client_id == client_id)
        if status is not None:
            query = query.where(Project.status == status.value)
        return await self.paginate(query, cursor, limit)
