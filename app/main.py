"""Phish Shift Trainer - FastAPI app entry point."""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from app.core.config import get_settings
from app.core.errors import TrainingError
from app.core.logging import configure_logging
from app.db.base import Base
from app.db.session import SessionLocal, engine
from app.repositories.sql import SqlScenarioRepository
from app.routers import api
from app.services.seeding import seed_scenarios

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings)
    Base.metadata.create_all(bind=engine)

    if settings.seed_on_startup:
        with SessionLocal() as db:
            seed_scenarios(SqlScenarioRepository(db))
            db.commit()

    logger.info("{} ready", settings.app_name)
    yield


app = FastAPI(
    title=settings.app_name,
    description="Phishing-awareness shifts: outcome scoring, adaptive difficulty, incident chains",
    lifespan=lifespan,
)

app.include_router(api.router)


@app.exception_handler(TrainingError)
async def training_error_handler(request: Request, exc: TrainingError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.get("/health")
async def health():
    return {"status": "ok"}
