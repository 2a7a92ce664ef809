"""Project lifecycle: draft -> open -> in_progress -> completed, open -> cancelled.

in_progress is entered only by contract creation and completed only by
completing the active contract (see ContractService).
"""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.marketplace.core.db import transaction
from src.marketplace.core.exceptions import ForbiddenError, InvalidStateError, NotFoundError
from src.marketplace.core.logging import get_logger
from src.marketplace.models import Project, ProjectStatus
from src.marketplace.repositories import ProjectRepository, ProposalRepository
from src.marketplace.schemas.project import ProjectCreate, ProjectFilters, ProjectUpdate

logger = get_logger(__name__)


class ProjectService:
    def __init__(
        self,
        project_repo: ProjectRepository,
        proposal_repo: ProposalRepository,
        session: AsyncSession,
    ):
        self.project_repo = project_repo
        self.proposal_repo = proposal_repo
        self.session = session

    async def _get_owned(self, actor_id: UUID, project_id: UUID) -> Project:
        project = await self.project_repo.get_for_update(project_id)
        if project is None:
            raise NotFoundError("Project", "Project not found")
        if project.client_id != actor_id:
            raise ForbiddenError("NotProjectOwner", "Only the project owner can do this")
        return project

    async def get_project(self, project_id: UUID) -> Project:
        project = await self.project_repo.get_by_id(project_id)
        if project is None:
            raise NotFoundError("Project", "Project not found")
        return project

    async def list_projects(
        self,
        filters: ProjectFilters,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> tuple[list[Project], str | None, bool]:
        """Public project browse. Defaults to open projects."""
        return await self.project_repo.list_filtered(filters, cursor=cursor, limit=limit)

    async def list_client_projects(
        self,
        client_id: UUID,
        status: ProjectStatus | None = None,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> tuple[list[Project], str | None, bool]:
        return await self.project_repo.list_by_client(
            client_id, status=status, cursor=cursor, limit=limit
        )

    async def create_project(self, client_id: UUID, data: ProjectCreate) -> Project:
        """Create a project owned by `client_id`, open unless created as a draft."""
        status = ProjectStatus.DRAFT if data.as_draft else ProjectStatus.OPEN
        project = Project(
            client_id=client_id,
            title=data.title,
            description=data.description,
            project_type=data.project_type.value,
            budget_min=data.budget_min,
            budget_max=data.budget_max,
            status=status.value,
        )
        async with transaction(self.session):
            await self.project_repo.insert(project)

        logger.info(
            "Project created",
            project_id=str(project.id),
            client_id=str(client_id),
            status=project.status,
        )
        return project

    async def publish_project(self, actor_id: UUID, project_id: UUID) -> Project:
        """Move an owned draft project to open.

        Raises:
            NotFoundError, ForbiddenError, InvalidStateError("ProjectNotDraft")
        """
        async with transaction(self.session):
            project = await self._get_owned(actor_id, project_id)
            if project.status_enum != ProjectStatus.DRAFT:
                raise InvalidStateError("ProjectNotDraft", "Only draft projects can be published")
            await self.project_repo.update(project, {"status": ProjectStatus.OPEN.value})

        logger.info("Project published", project_id=str(project_id))
        return project

    async def update_project(
        self, actor_id: UUID, project_id: UUID, data: ProjectUpdate
    ) -> Project:
        """Patch descriptive fields of an owned project. Status is never patched.

        Raises:
            NotFoundError, ForbiddenError, InvalidStateError("InvalidBudgetRange")
        """
        patch = data.model_dump(exclude_unset=True)
        if data.project_type is not None:
            patch["project_type"] = data.project_type.value

        async with transaction(self.session):
            project = await self._get_owned(actor_id, project_id)

            budget_min = patch.get("budget_min", project.budget_min)
            budget_max = patch.get("budget_max", project.budget_max)
            if budget_min is not None and budget_max is not None and budget_min > budget_max:
                raise InvalidStateError(
                    "InvalidBudgetRange", "budget_min cannot exceed budget_max"
                )

            await self.project_repo.update(project, patch)

        logger.info("Project updated", project_id=str(project_id), fields=sorted(patch))
        return project

    async def delete_project(self, actor_id: UUID, project_id: UUID) -> None:
        """Delete an owned project with its proposals, contracts and reviews.

        Raises:
            NotFoundError, ForbiddenError, InvalidStateError("ProjectInProgress")
        """
        async with transaction(self.session):
            project = await self._get_owned(actor_id, project_id)
            if project.status_enum == ProjectStatus.IN_PROGRESS:
                raise InvalidStateError(
                    "ProjectInProgress", "Cannot delete a project with an active contract"
                )
            await self.project_repo.delete_cascade(project)

        logger.info("Project deleted", project_id=str(project_id))

    async def cancel_project(self, actor_id: UUID, project_id: UUID) -> Project:
        """Close an open project as cancelled and reject its pending proposals.

        Raises:
            NotFoundError, ForbiddenError, InvalidStateError("ProjectNotOpen")
        """
        async with transaction(self.session):
            project = await self._get_owned(actor_id, project_id)
            if project.status_enum != ProjectStatus.OPEN:
                raise InvalidStateError("ProjectNotOpen", "Only open projects can be cancelled")
            await self.project_repo.update(project, {"status": ProjectStatus.CANCELLED.value})
            rejected = await self.proposal_repo.reject_pending(project_id)

        logger.info("Project cancelled", project_id=str(project_id), rejected_proposals=rejected)
        return project
