"""
MacroPlan FastAPI application.

Wires the recipe, meal plan and taxonomy routers into one app and exposes
the root and health endpoints.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional, Tuple

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from macroplan.api.routes import plans, recipes, taxonomy
from macroplan.config import settings
from macroplan.db.database import SessionLocal
from macroplan.errors import MacroPlanError

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        f"Starting {settings.app_name} v{settings.app_version} "
        f"(pool={settings.generator_candidate_pool_size}, "
        f"servings={settings.generator_serving_options})"
    )
    yield
    logger.info(f"{settings.app_name} stopped")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Recipe catalog and macro-targeted weekly meal planning API",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(MacroPlanError)
async def macroplan_error_handler(request: Request, exc: MacroPlanError):
    """Application errors that escape a route keep the structured shape."""
    logger.error(f"{request.method} {request.url.path} failed: {exc.error_code.value} {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.to_response().model_dump()},
    )


for module in (recipes, plans, taxonomy):
    app.include_router(module.router)


def _probe_database() -> Tuple[str, Optional[str]]:
    """Run SELECT 1 and report (status, error message)."""
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning(f"Database health probe failed: {e}")
        return "unhealthy", str(e)
    finally:
        db.close()
    return "healthy", None


@app.get("/")
async def root():
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "status": "running",
        "docs": app.docs_url,
    }


@app.get("/health")
async def health_check():
    """Liveness plus database connectivity."""
    db_status, db_error = _probe_database()

    response = {
        "status": db_status,
        "version": settings.app_version,
        "database": db_status,
    }
    if db_error:
        response["database_error"] = db_error
    return response


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("macroplan.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
