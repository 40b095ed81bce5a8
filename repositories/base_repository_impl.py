"""SQLAlchemy implementation of the repository contract."""
import logging
from typing import Any, List, Sequence, Type

from sqlalchemy import Select, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models.base_model import BaseModel
from repositories.base_repository import BaseRepository

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the storage layer fails (connection loss, constraint violation, ...)."""


class BaseRepositoryImpl(BaseRepository):
    """
    Repository bound to a single SQLAlchemy session.

    Every SQLAlchemyError coming out of the session is rolled back and
    re-raised as StorageError so callers see one storage failure type.
    """

    def __init__(self, model: Type[BaseModel], session: Session):
        self._model = model
        self._session = session

    def queryable(self) -> Select:
        return select(self._model)

    def fetch(self, statement: Select) -> List[Any]:
        try:
            return list(self._session.scalars(statement).all())
        except SQLAlchemyError as e:
            raise self._storage_error("query") from e

    def scalar(self, statement: Select) -> Any:
        try:
            return self._session.execute(statement).scalar_one()
        except SQLAlchemyError as e:
            raise self._storage_error("scalar query") from e

    def stage_all(self, models: Sequence[Any]) -> List[Any]:
        self._session.add_all(models)
        return list(models)

    def commit(self) -> None:
        try:
            self._session.commit()
        except SQLAlchemyError as e:
            raise self._storage_error("commit") from e

    def ping(self) -> None:
        try:
            self._session.execute(select(1))
        except SQLAlchemyError as e:
            raise self._storage_error("ping") from e

    def _storage_error(self, operation: str) -> StorageError:
        logger.exception(f"{self._model.__name__} {operation} failed")
        self._session.rollback()
        return StorageError(f"{self._model.__name__} {operation} failed")
