"""Seed-data controller."""
import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from config.database import get_db
from controllers.base_controller import BaseController
from services.category_service import CategoryService

logger = logging.getLogger(__name__)


class SeedController(BaseController):
    """Fills the store with generated categories for demos and tests."""

    def __init__(self):
        self.router = APIRouter(prefix="/seed-data", tags=["SeedCategories"])
        self._register_routes()

    def _register_routes(self):

        @self.router.get("/categories", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
        async def seed_categories(db: Session = Depends(get_db)):
            """Insert 100 categories with generated names. Repeated calls keep adding rows."""
            inserted = CategoryService(db).seed()
            logger.debug(f"Seed request inserted {inserted} categories")
            return Response(status_code=status.HTTP_204_NO_CONTENT)
