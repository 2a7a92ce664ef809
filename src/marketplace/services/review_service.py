"""Reviews between the two parties of a completed contract."""

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.marketplace.core.db import transaction
from src.marketplace.core.exceptions import (
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
)
from src.marketplace.core.logging import get_logger
from src.marketplace.models import Contract, ContractStatus, NotificationType, Review
from src.marketplace.repositories import (
    ContractRepository,
    PartnerProfileRepository,
    ProjectRepository,
    ReviewRepository,
)
from src.marketplace.schemas.review import ReviewCreate, ReviewUpdate
from src.marketplace.services.notification_service import NotificationService

logger = get_logger(__name__)


class ReviewService:
    def __init__(
        self,
        review_repo: ReviewRepository,
        contract_repo: ContractRepository,
        project_repo: ProjectRepository,
        partner_repo: PartnerProfileRepository,
        session: AsyncSession,
        notifier: NotificationService | None = None,
    ):
        self.review_repo = review_repo
        self.contract_repo = contract_repo
        self.project_repo = project_repo
        self.partner_repo = partner_repo
        self.session = session
        self.notifier = notifier

    async def _contract_parties(self, contract: Contract) -> tuple[UUID, UUID]:
        """Return (client user id, partner user id) of a contract."""
        project = await self.project_repo.get_by_id(contract.project_id)
        partner = await self.partner_repo.get_by_id(contract.partner_id)
        if project is None or partner is None:
            raise NotFoundError("Contract", "Contract parties not found")
        return project.client_id, partner.user_id

    async def create_review(self, actor_id: UUID, data: ReviewCreate) -> Review:
        """Review the other party of a completed contract, once per reviewer.

        Raises:
            NotFoundError: Contract missing.
            InvalidStateError: "ContractNotCompleted" or "WrongReviewee".
            ForbiddenError: Caller is not a party to the contract.
            ConflictError: "DuplicateReview".
        """
        async with transaction(self.session):
            contract = await self.contract_repo.get_by_id(data.contract_id)
            if contract is None:
                raise NotFoundError("Contract", "Contract not found")
            if contract.status_enum != ContractStatus.COMPLETED:
                raise InvalidStateError(
                    "ContractNotCompleted", "Only completed contracts can be reviewed"
                )

            client_id, partner_user_id = await self._contract_parties(contract)
            if actor_id not in (client_id, partner_user_id):
                raise ForbiddenError("NotContractParty", "Not a party to this contract")

            other_party = partner_user_id if actor_id == client_id else client_id
            if data.reviewee_id != other_party:
                raise InvalidStateError(
                    "WrongReviewee", "Reviewee must be the other party of the contract"
                )

            existing = await self.review_repo.get_by_contract_and_reviewer(
                contract.id, actor_id
            )
            if existing is not None:
                raise ConflictError(
                    "DuplicateReview", "You have already reviewed this contract"
                )

            review = Review(
                contract_id=contract.id,
                reviewer_id=actor_id,
                reviewee_id=data.reviewee_id,
                rating=data.rating,
                comment=data.comment,
            )
            try:
                await self.review_repo.insert(review)
            except IntegrityError as e:
                raise ConflictError(
                    "DuplicateReview", "You have already reviewed this contract"
                ) from e

        logger.info(
            "Review created",
            review_id=str(review.id),
            contract_id=str(data.contract_id),
            rating=data.rating,
        )
        if self.notifier:
            await self.notifier.notify(
                data.reviewee_id,
                NotificationType.REVIEW_RECEIVED,
                "New review",
                f"You received a {data.rating}-star review",
                link=f"/contracts/{data.contract_id}/reviews",
            )
        return review

    async def update_review(
        self, actor_id: UUID, review_id: UUID, data: ReviewUpdate
    ) -> Review:
        """Edit one of the caller's reviews.

        Reviews written by someone else are reported as not found.
        """
        patch = data.model_dump(exclude_unset=True)
        async with transaction(self.session):
            review = await self.review_repo.get_by_id(review_id)
            if review is None or review.reviewer_id != actor_id:
                raise NotFoundError("Review", "Review not found")
            await self.review_repo.update(review, patch)

        logger.info("Review updated", review_id=str(review_id), fields=sorted(patch))
        return review

    async def delete_review(self, actor_id: UUID, review_id: UUID) -> None:
        """Delete one of the caller's reviews; others are reported as not found."""
        async with transaction(self.session):
            review = await self.review_repo.get_by_id(review_id)
            if review is None or review.reviewer_id != actor_id:
                raise NotFoundError("Review", "Review not found")
            await self.review_repo.delete(review)

        logger.info("Review deleted", review_id=str(review_id))

    async def list_user_reviews(
        self,
        user_id: UUID,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> tuple[list[Review], str | None, bool, float]:
        """List reviews received by a user.

        Returns:
            Tuple of (items, next_cursor, has_more, average_rating)
        """
        items, next_cursor, has_more = await self.review_repo.list_by_reviewee(
            user_id, cursor=cursor, limit=limit
        )
        _, average = await self.review_repo.rating_summary(user_id)
        return items, next_cursor, has_more, round(average, 2)

    async def list_contract_reviews(self, contract_id: UUID) -> list[Review]:
        """List the (at most two) reviews of a contract."""
        contract = await self.contract_repo.get_by_id(contract_id)
        if contract is None:
            raise NotFoundError("Contract", "Contract not found")
        reviews = await self.review_repo.find(
            Review.contract_id == contract_id, order_by=Review.created_at
        )
        return list(reviews)
