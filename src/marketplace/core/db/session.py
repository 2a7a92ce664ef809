"""Database session management and the transaction boundary."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from src.marketplace.core.db.engine import get_engine
from src.marketplace.core.exceptions import PersistenceFailureError
from src.marketplace.core.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def get_session(
    engine: AsyncEngine | None = None,
) -> AsyncGenerator[AsyncSession]:
    """Create a database session.

    Args:
        engine: Optional engine override for testing.
    """
    if engine is None:
        engine = get_engine()

    session_factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with session_factory() as session:
        yield session


@asynccontextmanager
async def transaction(session: AsyncSession) -> AsyncGenerator[AsyncSession]:
    """Run the enclosed writes as one all-or-nothing unit.

    Commits when the block exits normally. Any exception rolls back every
    write issued inside the block; SQLAlchemy errors are re-raised as
    PersistenceFailureError, domain errors propagate unchanged.
    """
    try:
        yield session
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error("Transaction rolled back", error=str(e))
        raise PersistenceFailureError("PersistenceFailure", "Database operation failed") from e
    except BaseException:
        await session.rollback()
        raise
