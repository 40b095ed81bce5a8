"""Category repository."""
from sqlalchemy.orm import Session

from models.category import CategoryModel
from repositories.base_repository_impl import BaseRepositoryImpl


class CategoryRepository(BaseRepositoryImpl):
    """Data access for the Category table."""

    def __init__(self, session: Session):
        super().__init__(CategoryModel, session)
