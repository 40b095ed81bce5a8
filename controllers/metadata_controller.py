"""OData service document and $metadata endpoints."""
from typing import Sequence

from fastapi import APIRouter, Request, Response

from controllers.base_controller import BaseController
from controllers.base_controller_impl import METADATA_ROUTE_NAME
from query_options.metadata import EntitySetEntry, build_metadata_document, build_service_document


class MetadataController(BaseController):
    """Describes the entity sets and their query capabilities to OData clients."""

    def __init__(self, entity_sets: Sequence[EntitySetEntry]):
        self.entity_sets = list(entity_sets)
        self.router = APIRouter(tags=["OData"])
        # The schema never changes at runtime, render it once
        self.metadata_document = build_metadata_document(self.entity_sets)
        self._register_routes()

    def _register_routes(self):

        @self.router.get("", summary="OData service document")
        async def service_document(request: Request):
            return build_service_document(str(request.url_for(METADATA_ROUTE_NAME)), self.entity_sets)

        @self.router.get("/$metadata", name=METADATA_ROUTE_NAME, summary="OData CSDL metadata document",
                         response_class=Response, responses={200: {"content": {"application/xml": {}}}})
        async def metadata():
            return Response(content=self.metadata_document, media_type="application/xml")
