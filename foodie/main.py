"""FastAPI application entry point."""

from contextlib import asynccontextmanager
import logging

from dotenv import load_dotenv

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Load environment variables from .env file
load_dotenv()

from foodie.api.routes import router
from foodie.core.config import settings
from foodie.core.errors import PlacesApiError, RepositoryError
from foodie.db.init_db import init_db
from foodie.db.session import engine

logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s %(levelname)s %(message)s")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Initialize database artifacts."""
    if settings.auto_create_schema:
        init_db(engine)
    yield
    engine.dispose()


app = FastAPI(title=settings.project_name, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)
app.include_router(router, prefix=settings.api_prefix)


@app.exception_handler(RepositoryError)
async def repository_error_handler(request: Request, exc: RepositoryError) -> JSONResponse:
    logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Something went wrong! Please try again"})


@app.exception_handler(PlacesApiError)
async def places_api_error_handler(request: Request, exc: PlacesApiError) -> JSONResponse:
    logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=502, content={"detail": "Places API is unavailable, please try again"})


WRONG_ENDPOINT_DETAIL = "Oops looks like you landed at the wrong endpoint"


@app.exception_handler(404)
async def not_found_handler(request: Request, exc: Exception) -> JSONResponse:
    # Unknown routes get a friendlier message; explicit 404s keep their own detail.
    detail = getattr(exc, "detail", None)
    if detail in (None, "Not Found"):
        detail = WRONG_ENDPOINT_DETAIL
    return JSONResponse(status_code=404, content={"detail": detail})


@app.get("/", tags=["root"])
async def root() -> dict[str, str]:
    """Basic sanity endpoint."""
    return {"message": "Foodie Places API is running"}
