"""OData JSON envelopes."""
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from schemas.base_schema import BaseSchema

T = TypeVar("T", bound=BaseSchema)


class ODataCollectionSchema(BaseModel, Generic[T]):
    """Collection response: context URL, optional total count, and the rows."""

    model_config = ConfigDict(populate_by_name=True)

    context: str = Field(..., alias="@odata.context")
    count: Optional[int] = Field(None, alias="@odata.count")
    value: List[T]


class ODataErrorDetail(BaseModel):
    code: str
    message: str
    target: Optional[str] = None


class ODataErrorSchema(BaseModel):
    """Error body returned for rejected requests and server failures."""

    error: ODataErrorDetail

    @classmethod
    def of(cls, code: str, message: str, target: Optional[str] = None) -> "ODataErrorSchema":
        return cls(error=ODataErrorDetail(code=code, message=message, target=target))

    def to_body(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)
