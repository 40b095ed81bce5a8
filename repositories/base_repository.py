"""Abstract repository contract."""
from abc import ABC, abstractmethod
from typing import Any, List, Sequence

from sqlalchemy import Select


class BaseRepository(ABC):
    """Typed access to one table through a request-scoped session."""

    @abstractmethod
    def queryable(self) -> Select:
        """Return an unexecuted SELECT over the whole table."""

    @abstractmethod
    def fetch(self, statement: Select) -> List[Any]:
        """Execute a composed SELECT and return the mapped rows."""

    @abstractmethod
    def scalar(self, statement: Select) -> Any:
        """Execute a SELECT returning a single value."""

    @abstractmethod
    def stage_all(self, models: Sequence[Any]) -> List[Any]:
        """Add new rows to the session without flushing."""

    @abstractmethod
    def commit(self) -> None:
        """Persist everything staged in the session."""

    @abstractmethod
    def ping(self) -> None:
        """Run a trivial query to check the database is reachable."""
