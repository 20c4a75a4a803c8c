from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from shopadmin.db.database import get_session
from shopadmin.schemas.common import ActionResult
from shopadmin.schemas.product import ProductInput, ProductOut, ImageUploadResponse
from shopadmin.services.product_service import product_service, ImageFile

router = APIRouter(prefix="/api/v1", tags=["products"])


# Image routes come first so "/products/images" is not taken for a product id
@router.post("/products/images", response_model=ImageUploadResponse, status_code=201)
async def upload_images(files: list[UploadFile] = File(...)):
    images = [
        ImageFile(f.filename or "", f.content_type or "", await f.read())
        for f in files
    ]
    urls = await product_service.upload_product_images(images)
    return ImageUploadResponse(urls=urls)


@router.delete("/products/images", response_model=ActionResult)
async def delete_image(url: str = Query(...)):
    return await product_service.delete_product_image(url)


@router.get("/products", response_model=list[ProductOut])
async def list_products(session: AsyncSession = Depends(get_session)):
    return await product_service.list_products(session)


@router.post("/products", response_model=ActionResult, status_code=201)
async def create_product(data: ProductInput, session: AsyncSession = Depends(get_session)):
    return await product_service.create_product(session, data)


@router.get("/products/{product_id}", response_model=ProductOut)
async def get_product(product_id: str, session: AsyncSession = Depends(get_session)):
    return await product_service.get_product(session, product_id)


@router.put("/products/{product_id}", response_model=ActionResult)
async def update_product(product_id: str, data: ProductInput, session: AsyncSession = Depends(get_session)):
    return await product_service.update_product(session, product_id, data)


@router.delete("/products/{product_id}", response_model=ActionResult)
async def delete_product(product_id: str, session: AsyncSession = Depends(get_session)):
    return await product_service.delete_product(session, product_id)
