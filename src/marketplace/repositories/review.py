"""Repository for Review entity."""

from uuid import UUID

from sqlalchemy import func
from sqlmodel import select

from src.marketplace.models import Review
from src.marketplace.repositories.base import BaseRepository


class ReviewRepository(BaseRepository[Review]):
    model = Review

    async def get_by_contract_and_reviewer(
        self, contract_id: UUID, reviewer_id: UUID
    ) -> Review | None:
        result = await self.session.execute(
            select(Review).where(
                Review.contract_id == contract_id,
                Review.reviewer_id == reviewer_id,
            )
        )
        return result.scalar_one_or_none()

    async def list_by_reviewee(
        self,
        reviewee_id: UUID,
        cursor: str | None = None,
        limit: int | None = None,
    ) -> tuple[list[Review], str | None, bool]:
        query = select(Review).where(Review.reviewee_id == reviewee_id)
        return await self.paginate(query, cursor, limit)

    async def rating_summary(self, reviewee_id: UUID) -> tuple[int, float]:
        """Return (review count, average rating) for a reviewee; average is 0 without reviews."""
        result = await self.session.execute(
            select(func.count(Review.id), func.avg(Review.rating)).where(
                Review.reviewee_id == reviewee_id
            )
        )
        count, average = result.one()
        return int(count), float(average or 0)
