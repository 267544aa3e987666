# routers/health.py
import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_db

router = APIRouter()
logger = logging.getLogger("uvicorn.error")


@router.get("/health", summary="Liveness and database reachability")
async def healthcheck(db: AsyncSession = Depends(get_db)):
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning("Health check: database unreachable: %s", e)
        return {"status": "degraded", "database": "unreachable"}
    return {"status": "ok", "database": "ok"}
