"""Category schema."""
from pydantic import Field

from schemas.base_schema import BaseSchema


class CategorySchema(BaseSchema):
    """API representation of a Category row."""

    name: str = Field(..., description="Category name (not unique)")
