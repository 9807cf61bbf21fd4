# iqtest/main.py
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from iqtest.core.config import settings
from iqtest.db.base import Base
from iqtest.db.session import engine
from iqtest.engine.question_bank import get_question_bank

# Import routers (router objects, not modules)
from iqtest.api.questions import router as questions_router
from iqtest.api.results import router as results_router

# Register models on Base.metadata
import iqtest.models.test_result  # noqa: F401

SERVICE_NAME = "IQ Assessment"
VERSION = "1.0.0"

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    bank = get_question_bank()
    logger.info(f"{SERVICE_NAME} v{VERSION} ready ({len(bank)} questions)")
    yield


app = FastAPI(
    title=SERVICE_NAME,
    version=VERSION,
    lifespan=lifespan,
)

# --------------------------------------------------
# CORS CONFIG
# --------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    # allow origin variations on localhost (ports) during development
    allow_origin_regex=r"http://localhost(:[0-9]+)?",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --------------------------------------------------
# API ROUTES
# --------------------------------------------------

# Question draws (static bank)
app.include_router(
    questions_router,
    prefix="/api",
)

# Scored results (submit / fetch / history)
app.include_router(
    results_router,
    prefix="/api",
)

# --------------------------------------------------
# ROOT HEALTH CHECK
# --------------------------------------------------
@app.get("/")
def health_check():
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "version": VERSION,
        "test_duration_seconds": settings.TEST_DURATION_SECONDS,
    }
