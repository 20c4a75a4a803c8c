import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from contextlib import asynccontextmanager

from shopadmin.config import Config
from shopadmin.db.database import db
from shopadmin.routers import health, categories, products, sales
from shopadmin.exceptions import AppException, app_exception_handler, generic_exception_handler
from shopadmin.storage import get_storage

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await db.connect()
    await db.create_tables()
    await get_storage().ensure_bucket()
    yield
    await db.disconnect()


app = FastAPI(
    title="Shop Admin API",
    version="1.0.0",
    description="Manage categories, products and time-boxed sales",
    lifespan=lifespan
)

# Register exception handlers
app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Public URLs of stored product images
app.mount("/media", StaticFiles(directory=Config.STORAGE_DIR, check_dir=False), name="media")

# Include routers
app.include_router(health.router)
app.include_router(categories.router)
app.include_router(products.router)
app.include_router(sales.router)
