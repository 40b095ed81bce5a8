"""Base controller interface."""
from abc import ABC, abstractmethod


class BaseController(ABC):
    """Every controller exposes an APIRouter and registers its routes on it."""

    router = None

    @abstractmethod
    def _register_routes(self):
        """Register the controller's routes on self.router."""
