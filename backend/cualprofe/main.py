import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import CORS_ORIGINS
from .database import Base, engine
from .log import setup_logging
from .routers import analytics, professors, tags

setup_logging()
logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)

app = FastAPI(title="CuálProfe API", openapi_url="/api/openapi.json")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(professors.router, prefix="/api")
app.include_router(tags.router, prefix="/api")
app.include_router(analytics.router, prefix="/api")

logger.info("CuálProfe API ready")


@app.get("/api/health")
def health_check() -> dict[str, str]:
    return {"status": "ok"}
