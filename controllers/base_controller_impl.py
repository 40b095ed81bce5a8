"""Base controller implementation for OData entity sets, with FastAPI dependency injection."""
import logging
from typing import Any, Callable, List, Optional, Type

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from config.database import get_db
from controllers.base_controller import BaseController
from query_options import parse_query_options
from schemas.base_schema import BaseSchema
from schemas.odata_schema import ODataCollectionSchema, ODataErrorSchema

logger = logging.getLogger(__name__)

METADATA_ROUTE_NAME = "odata_metadata"


class BaseControllerImpl(BaseController):
    """
    Read-only OData entity-set controller.

    Registers GET /{entity_set}. Query options are read from the raw query
    string and handed to the service; the endpoint itself does no filtering.
    """

    def __init__(
        self,
        schema: Type[BaseSchema],
        service_factory: Callable[[Session], Any],
        entity_set: str,
        tags: List[str] = None,
    ):
        """
        Initialize the controller with dependency injection support.

        Args:
            schema: The Pydantic schema class for each row in the response
            service_factory: A callable that creates a service instance given a DB session
            entity_set: Entity set name used as the route path, e.g. "Categories"
            tags: Optional list of tags for API documentation
        """
        self.schema = schema
        self.service_factory = service_factory
        self.entity_set = entity_set
        self.router = APIRouter(tags=tags or [])

        self._register_routes()

    def _register_routes(self):
        """Register the collection route with documented OData query options."""

        @self.router.get(
            f"/{self.entity_set}",
            response_model=ODataCollectionSchema[self.schema],
            response_model_exclude_none=True,
            status_code=status.HTTP_200_OK,
            responses={status.HTTP_400_BAD_REQUEST: {"model": ODataErrorSchema}},
            name=f"get_{self.entity_set.lower()}",
        )
        async def get_collection(
            request: Request,
            db: Session = Depends(get_db),
            filter_: Optional[str] = Query(None, alias="$filter", description="Filter expression, e.g. contains(name,'oo')"),
            orderby: Optional[str] = Query(None, alias="$orderby", description="Comma separated 'property [asc|desc]'"),
            expand: Optional[str] = Query(None, alias="$expand", description="Navigation properties to expand"),
            count: Optional[str] = Query(None, alias="$count", description="'true' to include @odata.count"),
            top: Optional[str] = Query(None, alias="$top", description="Maximum number of rows (no server cap)"),
            skip: Optional[str] = Query(None, alias="$skip", description="Number of rows to skip"),
        ):
            return await self._get_collection(request, db)

        logger.debug(f"{self.__class__.__name__}: Registered {len(self.router.routes)} routes.")

    async def _get_collection(self, request: Request, db: Session):
        options = parse_query_options(request.query_params.multi_items())
        service = self.service_factory(db)
        result = service.query(options)
        context = f"{request.url_for(METADATA_ROUTE_NAME)}#{self.entity_set}"
        return ODataCollectionSchema[self.schema](context=context, count=result.count, value=result.items)
