"""Category controller: the queryable Categories entity set."""
from controllers.base_controller_impl import BaseControllerImpl
from schemas.category_schema import CategorySchema
from services.category_service import CategoryService


class CategoryController(BaseControllerImpl):
    """Exposes GET /odata/Categories; query options are applied by the service."""

    def __init__(self):
        super().__init__(
            schema=CategorySchema,
            service_factory=lambda db: CategoryService(db),
            entity_set="Categories",
            tags=["Categories"],
        )
