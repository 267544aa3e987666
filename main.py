import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from core.database import engine
from models.base import Base
# Register every table on Base.metadata
from models.profile import Profile  # noqa: F401
from models.profile_image import ProfileImage  # noqa: F401

from routers.images import router as images_router
from routers.profile import router as profile_router
from routers.health import router as health_router
from routers.admin import router as admin_router

app = FastAPI(
    title="Talent Agency Backend",
    version="0.1.0",
    description="Profiles, listings and image galleries for the talent agency site",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

logger = logging.getLogger("uvicorn.error")


@app.middleware("http")
async def log_request_time(request: Request, call_next):
    start_time = time.perf_counter()
    response = await call_next(request)
    process_time = (time.perf_counter() - start_time) * 1000
    logger.info(
        f"{request.method} {request.url.path} completed in {process_time:.2f} ms"
    )
    return response

app.include_router(images_router)
app.include_router(profile_router)
app.include_router(health_router)
app.include_router(admin_router)


@app.on_event("startup")
async def on_startup():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@app.get("/")
async def root():
    return {"message": "Talent Agency Backend"}


@app.on_event("shutdown")
async def shutdown():
    await engine.dispose()
