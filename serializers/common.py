from typing import Generic, List, Optional, TypeVar
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")

# Largest value a 64-bit INTEGER column can hold.
MAX_ID = 2**63 - 1


class CamelModel(BaseModel):
    """Accepts snake_case or camelCase input, serializes as camelCase."""

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)


class Pagination(CamelModel):
    page: int
    limit: int
    total: int
    pages: int


class Envelope(CamelModel, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None


class PaginatedEnvelope(CamelModel, Generic[T]):
    success: bool = True
    data: List[T] = Field(default_factory=list)
    pagination: Pagination


class MessageResponse(CamelModel):
    success: bool = True
    message: str


def split_tags(value):
    """Accept tags as a list or a comma-separated string; drop blanks."""
    if value is None:
        return value
    if isinstance(value, str):
        value = value.split(",")
    if isinstance(value, (list, tuple)):
        return [str(tag).strip() for tag in value if str(tag).strip()]
    return value
