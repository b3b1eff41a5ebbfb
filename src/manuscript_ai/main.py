import tomllib
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from manuscript_ai.ai.manuscript.router import router as manuscript_router
from manuscript_ai.config import get_app_settings, get_client_base_url
from manuscript_ai.utils.logger import logger


def get_version() -> str:
    """Get the installed package version, falling back to pyproject.toml."""
    try:
        return version("manuscript-ai")
    except PackageNotFoundError:
        pyproject_path = Path(__file__).resolve().parents[2] / "pyproject.toml"
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
        return data["project"]["version"]


docs_enabled = get_app_settings().docs_enabled

app = FastAPI(
    title="Manuscript AI API",
    description="Retrieval-augmented chat over an ingested manuscript",
    version=get_version(),
    docs_url="/docs" if docs_enabled else None,
    redoc_url="/redoc" if docs_enabled else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[get_client_base_url()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(manuscript_router, prefix="/api")
logger.info("Manuscript router mounted at /api/manuscripts")


@app.get("/")
async def root():
    """Root endpoint."""
    return {"status": "ok", "message": "Manuscript AI API is running"}


@app.get("/healthcheck")
async def healthcheck():
    """Health check endpoint."""
    return {"status": "ok", "message": "Manuscript AI API is running"}
