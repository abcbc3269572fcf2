from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from dotenv import load_dotenv

from api.routes import gitlab
from utils.logger import get_logger
from core.config import settings

load_dotenv()

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting gitlab-ci-analyzer")
    settings.validate()

    yield
    logger.info("Shutting down gitlab-ci-analyzer")


app = FastAPI(
    title="GitLab CI Analyzer",
    description="Discover, parse and query GitLab CI/CD pipeline definitions",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(gitlab.router, prefix="/api", tags=["gitlab"])


@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": "gitlab-ci-analyzer"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
