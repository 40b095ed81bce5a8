"""Application factory for the Catalog OData API."""
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse
from scalar_fastapi import get_scalar_api_reference
from sqlalchemy.orm import Session

from config.database import get_db, settings
from config.logging_config import setup_logging
from controllers.category_controller import CategoryController
from controllers.metadata_controller import MetadataController
from controllers.seed_controller import SeedController
from query_options import QueryValidationError
from repositories.base_repository_impl import StorageError
from repositories.category_repository import CategoryRepository
from schemas.odata_schema import ODataErrorSchema
from services.category_service import CATEGORY_CAPABILITIES, CATEGORY_SCHEMA

logger = logging.getLogger(__name__)

ODATA_PREFIX = "/odata"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {app.title} v{app.version}")
    yield
    logger.info(f"Shutting down {app.title}")


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain errors to OData error bodies."""

    @app.exception_handler(QueryValidationError)
    async def query_validation_error_handler(request: Request, exc: QueryValidationError):
        logger.warning(f"Rejected {request.url.path}: {exc.option}: {exc.message}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ODataErrorSchema.of("InvalidQueryOption", exc.message, exc.option).to_body(),
        )

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError):
        # Details stay in the log, never in the response
        logger.error(f"Storage failure on {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ODataErrorSchema.of(
                "InternalServerError", "An error occurred while processing your request."
            ).to_body(),
        )


def create_fastapi_app() -> FastAPI:
    """Build the FastAPI application with all routers and handlers."""
    setup_logging(settings.log_level)

    app = FastAPI(
        title="Catalog OData API",
        description="Queryable Category collection with OData query options and a seed-data endpoint.",
        version="1.0.0",
        openapi_url="/openapi/v1.json",
        lifespan=lifespan,
    )

    register_exception_handlers(app)

    entity_sets = [(CATEGORY_SCHEMA, CATEGORY_CAPABILITIES)]
    app.include_router(MetadataController(entity_sets).router, prefix=ODATA_PREFIX)
    app.include_router(CategoryController().router, prefix=ODATA_PREFIX)
    app.include_router(SeedController().router)

    @app.get("/health_check", tags=["Health"])
    async def health_check(db: Session = Depends(get_db)):
        CategoryRepository(db).ping()
        return {"status": "ok"}

    @app.get("/scalar/v1", include_in_schema=False)
    async def scalar_api_reference():
        return get_scalar_api_reference(openapi_url=app.openapi_url, title=app.title)

    logger.debug(f"Registered {len(app.routes)} routes")
    return app
