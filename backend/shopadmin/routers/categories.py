from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from shopadmin.db.database import get_session
from shopadmin.schemas.category import CategoryInput, CategoryOut
from shopadmin.schemas.common import ActionResult
from shopadmin.services.category_service import category_service

router = APIRouter(prefix="/api/v1", tags=["categories"])


@router.get("/categories", response_model=list[CategoryOut])
async def list_categories(session: AsyncSession = Depends(get_session)):
    return await category_service.list_categories(session)


@router.post("/categories", response_model=ActionResult, status_code=201)
async def create_category(data: CategoryInput, session: AsyncSession = Depends(get_session)):
    return await category_service.create_category(session, data)


@router.put("/categories/{category_id}", response_model=ActionResult)
async def update_category(category_id: str, data: CategoryInput, session: AsyncSession = Depends(get_session)):
    return await category_service.update_category(session, category_id, data)


@router.delete("/categories/{category_id}", response_model=ActionResult)
async def delete_category(category_id: str, session: AsyncSession = Depends(get_session)):
    return await category_service.delete_category(session, category_id)
