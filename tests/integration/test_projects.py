"""Tests for project creation, editing, cancellation, deletion and browsing."""

from datetime import timedelta
from uuid import uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from src.marketplace.core.config import get_settings
from src.marketplace.core.exceptions import ForbiddenError, InvalidStateError, NotFoundError
from src.marketplace.models import (
    Contract,
    ContractStatus,
    Project,
    ProjectStatus,
    ProjectType,
    Proposal,
    ProposalStatus,
    Review,
    User,
)
from src.marketplace.models.base import utc_now
from src.marketplace.schemas import ProjectCreate, ProjectFilters, ProjectUpdate
from tests.helpers import Workflow, count, create_contract, create_project, create_proposal

pytestmark = pytest.mark.integration


class TestCreateAndPublish:
    async def test_created_open_by_default(self, workflow: Workflow, client_user: User):
        project = await workflow.projects.create_project(
            client_user.id,
            ProjectCreate(title="  Mobile app  ", description="iOS and Android", budget_max=800),
        )

        assert project.status == ProjectStatus.OPEN.value
        assert project.client_id == client_user.id
        assert project.title == "Mobile app"

    async def test_draft_then_publish(self, workflow: Workflow, client_user: User):
        draft = await workflow.projects.create_project(
            client_user.id,
            ProjectCreate(title="Data pipeline", description="ETL", as_draft=True),
        )
        assert draft.status == ProjectStatus.DRAFT.value

        published = await workflow.projects.publish_project(client_user.id, draft.id)

        assert published.status == ProjectStatus.OPEN.value

        with pytest.raises(InvalidStateError) as exc_info:
            await workflow.projects.publish_project(client_user.id, draft.id)
        assert exc_info.value.code == "ProjectNotDraft"

    async def test_only_owner_publishes(
        self, workflow: Workflow, db_session, client_user, outsider
    ):
        draft = await create_project(db_session, client_user, status=ProjectStatus.DRAFT)

        with pytest.raises(ForbiddenError):
            await workflow.projects.publish_project(outsider.id, draft.id)

    async def test_get_missing_project(self, workflow: Workflow):
        with pytest.raises(NotFoundError):
            await workflow.projects.get_project(uuid4())


class TestUpdateProject:
    async def test_owner_patches_fields(self, workflow: Workflow, open_project, client_user):
        project = await workflow.projects.update_project(
            client_user.id,
            open_project.id,
            ProjectUpdate(title="Rescoped", project_type=ProjectType.HOURLY),
        )

        assert project.title == "Rescoped"
        assert project.project_type == ProjectType.HOURLY.value
        assert project.description == open_project.description

    async def test_status_is_not_patchable(
        self, workflow: Workflow, db_session: AsyncSession, open_project, client_user
    ):
        patch = ProjectUpdate.model_validate({"title": "Renamed", "status": "completed"})

        await workflow.projects.update_project(client_user.id, open_project.id, patch)

        await db_session.refresh(open_project)
        assert open_project.status == ProjectStatus.OPEN.value
        assert open_project.title == "Renamed"

    async def test_budget_range_checked_against_stored_values(
        self, workflow: Workflow, db_session, client_user
    ):
        project = await create_project(db_session, client_user, budget_min=100, budget_max=200)

        with pytest.raises(InvalidStateError) as exc_info:
            await workflow.projects.update_project(
                client_user.id, project.id, ProjectUpdate(budget_min=300)
            )

        assert exc_info.value.code == "InvalidBudgetRange"
        await db_session.refresh(project)
        assert project.budget_min == 100

    async def test_non_owner_forbidden(self, workflow: Workflow, open_project, outsider):
        with pytest.raises(ForbiddenError):
            await workflow.projects.update_project(
                outsider.id, open_project.id, ProjectUpdate(title="Mine now")
            )

    async def test_budget_bound_can_be_cleared(
        self, workflow: Workflow, db_session, client_user
    ):
        project = await create_project(db_session, client_user, budget_min=100, budget_max=200)

        await workflow.projects.update_project(
            client_user.id, project.id, ProjectUpdate(budget_max=None)
        )

        await db_session.refresh(project)
        assert project.budget_max is None
        assert project.budget_min == 100
        assert project.title is not None


class TestCancelProject:
    async def test_cancel_rejects_pending_proposals(
        self, workflow: Workflow, db_session, open_project, client_user, partner_x, partner_y
    ):
        _, x_profile = partner_x
        _, y_profile = partner_y
        pending = await create_proposal(db_session, open_project, x_profile)
        withdrawn = await create_proposal(
            db_session, open_project, y_profile, status=ProposalStatus.WITHDRAWN
        )

        project = await workflow.projects.cancel_project(client_user.id, open_project.id)

        assert project.status == ProjectStatus.CANCELLED.value
        await db_session.refresh(pending)
        await db_session.refresh(withdrawn)
        assert pending.status == ProposalStatus.REJECTED.value
        assert withdrawn.status == ProposalStatus.WITHDRAWN.value

    @pytest.mark.parametrize(
        "status", [ProjectStatus.DRAFT, ProjectStatus.IN_PROGRESS, ProjectStatus.COMPLETED]
    )
    async def test_only_open_projects_cancel(
        self, workflow: Workflow, db_session, client_user, status
    ):
        project = await create_project(db_session, client_user, status=status)

        with pytest.raises(InvalidStateError) as exc_info:
            await workflow.projects.cancel_project(client_user.id, project.id)
        assert exc_info.value.code == "ProjectNotOpen"


class TestDeleteProject:
    async def test_delete_removes_dependents(
        self, workflow: Workflow, db_session, client_user, partner_x
    ):
        x_user, x_profile = partner_x
        project = await create_project(db_session, client_user, status=ProjectStatus.COMPLETED)
        await create_proposal(db_session, project, x_profile, status=ProposalStatus.ACCEPTED)
        contract = await create_contract(
            db_session, project, x_profile, status=ContractStatus.COMPLETED
        )
        db_session.add(
            Review(
                contract_id=contract.id,
                reviewer_id=client_user.id,
                reviewee_id=x_user.id,
                rating=5,
            )
        )
        await db_session.commit()

        await workflow.projects.delete_project(client_user.id, project.id)

        assert await count(db_session, Project, Project.id == project.id) == 0
        assert await count(db_session, Proposal, Proposal.project_id == project.id) == 0
        assert await count(db_session, Contract, Contract.project_id == project.id) == 0
        assert await count(db_session, Review, Review.contract_id == contract.id) == 0

    async def test_in_progress_project_cannot_be_deleted(
        self, workflow: Workflow, db_session, client_user, partner_x
    ):
        _, x_profile = partner_x
        project = await create_project(db_session, client_user, status=ProjectStatus.IN_PROGRESS)
        await create_contract(db_session, project, x_profile)

        with pytest.raises(InvalidStateError) as exc_info:
            await workflow.projects.delete_project(client_user.id, project.id)

        assert exc_info.value.code == "ProjectInProgress"
        assert await count(db_session, Contract, Contract.project_id == project.id) == 1

    async def test_non_owner_forbidden(
        self, workflow: Workflow, db_session, open_project, outsider
    ):
        with pytest.raises(ForbiddenError):
            await workflow.projects.delete_project(outsider.id, open_project.id)
        assert await count(db_session, Project, Project.id == open_project.id) == 1


class TestListProjects:
    async def test_browse_filters(self, workflow: Workflow, db_session, client_user):
        web = await create_project(
            db_session, client_user, title="Web shop", budget_min=1000, budget_max=3000
        )
        await create_project(
            db_session, client_user, title="Tiny fix", budget_min=50, budget_max=100
        )
        await create_project(
            db_session,
            client_user,
            title="Hourly support",
            project_type=ProjectType.HOURLY.value,
        )
        await create_project(db_session, client_user, status=ProjectStatus.DRAFT, title="Web draft")

        by_budget, _, _ = await workflow.projects.list_projects(ProjectFilters(budget_min=500))
        by_type, _, _ = await workflow.projects.list_projects(
            ProjectFilters(project_type=ProjectType.HOURLY)
        )
        by_search, _, _ = await workflow.projects.list_projects(ProjectFilters(search="web"))
        drafts, _, _ = await workflow.projects.list_projects(
            ProjectFilters(status=ProjectStatus.DRAFT)
        )

        assert web.id in {p.id for p in by_budget}
        assert all(p.budget_max >= 500 for p in by_budget)
        assert [p.title for p in by_type] == ["Hourly support"]
        assert [p.id for p in by_search] == [web.id]
        assert [p.title for p in drafts] == ["Web draft"]

    async def test_cursor_pagination_newest_first(
        self, workflow: Workflow, db_session, client_user
    ):
        base = utc_now()
        projects = [
            await create_project(db_session, client_user, created_at=base - timedelta(minutes=i))
            for i in range(3)
        ]

        first_page, cursor, has_more = await workflow.projects.list_client_projects(
            client_user.id, limit=2
        )
        second_page, next_cursor, more = await workflow.projects.list_client_projects(
            client_user.id, cursor=cursor, limit=2
        )

        assert [p.id for p in first_page] == [projects[0].id, projects[1].id]
        assert has_more is True and cursor is not None
        assert [p.id for p in second_page] == [projects[2].id]
        assert more is False and next_cursor is None

    async def test_cursor_pages_through_identical_timestamps(
        self, workflow: Workflow, db_session, client_user
    ):
        created_at = utc_now()
        projects = [
            await create_project(db_session, client_user, created_at=created_at) for _ in range(3)
        ]

        seen = []
        cursor = None
        while True:
            page, cursor, has_more = await workflow.projects.list_client_projects(
                client_user.id, cursor=cursor, limit=1
            )
            seen.extend(p.id for p in page)
            if not has_more:
                break

        assert sorted(seen) == sorted(p.id for p in projects)
        assert len(seen) == 3

    async def test_malformed_cursor_starts_over(
        self, workflow: Workflow, db_session, client_user
    ):
        project = await create_project(db_session, client_user)

        items, _, _ = await workflow.projects.list_client_projects(
            client_user.id, cursor="not-a-cursor"
        )

        assert [p.id for p in items] == [project.id]

    @pytest.mark.parametrize("limit", [0, -5])
    async def test_non_positive_limit_returns_one_row(
        self, workflow: Workflow, db_session, client_user, limit
    ):
        projects = [await create_project(db_session, client_user) for _ in range(2)]

        items, cursor, has_more = await workflow.projects.list_projects(
            ProjectFilters(), limit=limit
        )

        assert len(items) == 1 and items[0].id in {p.id for p in projects}
        assert has_more is True and cursor is not None

    async def test_limit_capped_at_max_page_size(
        self, workflow: Workflow, db_session, client_user, monkeypatch
    ):
        monkeypatch.setattr(get_settings(), "max_page_size", 2)
        for _ in range(3):
            await create_project(db_session, client_user)

        items, _, has_more = await workflow.projects.list_client_projects(
            client_user.id, limit=1000
        )

        assert len(items) == 2
        assert has_more is True

    async def test_default_page_size(
        self, workflow: Workflow, db_session, client_user, monkeypatch
    ):
        monkeypatch.setattr(get_settings(), "default_page_size", 1)
        for _ in range(2):
            await create_project(db_session, client_user)

        items, _, has_more = await workflow.projects.list_client_projects(client_user.id)

        assert len(items) == 1 and has_more is True

    async def test_client_projects_by_status(
        self, workflow: Workflow, db_session, client_user, outsider
    ):
        mine = await create_project(db_session, client_user, status=ProjectStatus.CANCELLED)
        await create_project(db_session, client_user)
        await create_project(db_session, outsider, status=ProjectStatus.CANCELLED)

        items, _, _ = await workflow.projects.list_client_projects(
            client_user.id, status=ProjectStatus.CANCELLED
        )

        assert [p.id for p in items] == [mine.id]
