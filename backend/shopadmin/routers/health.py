import logging
from fastapi import APIRouter, Depends
from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shopadmin.db.database import get_session
from shopadmin.exceptions import store_error
from shopadmin.models import Category

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/api/v1/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}


@router.get("/api/v1/health/db")
async def health_db(session: AsyncSession = Depends(get_session)):
    """Check the store is reachable by counting categories."""
    try:
        count = await session.scalar(select(func.count()).select_from(Category))
    except SQLAlchemyError as e:
        logger.error(f"Database check failed: {e}")
        raise store_error("Database check failed", e)
    return {"status": "ok", "categories": count}
