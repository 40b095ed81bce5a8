"""Category service: OData queries and seed data."""
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Optional

from faker import Faker
from sqlalchemy.orm import Session

from models.category import CategoryModel
from query_options import (
    EntitySchema,
    ODataQueryOptions,
    QueryCapabilities,
    translate,
)
from repositories.category_repository import CategoryRepository
from schemas.category_schema import CategorySchema
from services.commerce_provider import with_commerce_provider

logger = logging.getLogger(__name__)

SEED_BATCH_SIZE = 100

CATEGORY_SCHEMA = EntitySchema.from_model(CategoryModel, entity_set="Categories", namespace="Catalog.Models")

# Everything except $select; $top is unbounded
CATEGORY_CAPABILITIES = QueryCapabilities(select=False, max_top=None)


@lru_cache(maxsize=1)
def default_faker() -> Faker:
    """Process-wide Faker with the commerce provider registered once."""
    return with_commerce_provider(Faker())


@dataclass
class QueryResult:
    """Materialized rows and, when requested, the total count before paging."""

    items: List[CategorySchema]
    count: Optional[int] = None


class CategoryService:
    """Service for Category entity."""

    def __init__(self, db: Session, faker: Optional[Faker] = None):
        self.repository = CategoryRepository(db)
        self._faker = faker

    @property
    def faker(self) -> Faker:
        """Name generator, built on first use so read-only requests never create one."""
        if self._faker is None:
            self._faker = default_faker()
        return self._faker

    def query(self, options: ODataQueryOptions) -> QueryResult:
        """
        Apply OData query options to the Category set and materialize the result.

        Raises:
            QueryValidationError: before any database access, if options are invalid.
            StorageError: if the database fails while executing the query.
        """
        translated = translate(options, CATEGORY_CAPABILITIES, CATEGORY_SCHEMA, self.repository.queryable())
        rows = self.repository.fetch(translated.statement)
        count = None
        if translated.count_statement is not None:
            count = self.repository.scalar(translated.count_statement)
        logger.debug(f"Category query returned {len(rows)} rows")
        return QueryResult(items=[CategorySchema.model_validate(row) for row in rows], count=count)

    def seed(self, count: int = SEED_BATCH_SIZE) -> int:
        """
        Insert `count` categories with generated names in a single commit.

        Names are not deduplicated against earlier seeds.

        Raises:
            StorageError: if the commit fails.
        """
        names = with_commerce_provider(self.faker).commerce_categories(count)
        categories = [CategoryModel(name=name) for name in names]
        self.repository.stage_all(categories)
        self.repository.commit()
        logger.info(f"Seeded {len(categories)} categories")
        return len(categories)
