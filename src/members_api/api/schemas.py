"""Pydantic request and response models for the members API."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Base model that speaks camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class PhotoResponse(ApiModel):
    """Photo payload."""

    id: int | None = None
    url: str
    is_main: bool = False


class MemberResponse(ApiModel):
    """Member payload for listing and detail views."""

    id: int
    username: str
    gender: str
    photo_url: str | None = None
    age: int | None = None
    known_as: str | None = None
    created: datetime | None = None
    last_active: datetime | None = None
    introduction: str | None = None
    looking_for: str | None = None
    interests: str | None = None
    city: str | None = None
    country: str | None = None
    photos: list[PhotoResponse] = []


class MemberUpdateRequest(ApiModel):
    """Profile fields a member may change on their own profile."""

    introduction: str | None = None
    looking_for: str | None = None
    interests: str | None = None
    city: str | None = None
    country: str | None = None


class PaginationHeader(ApiModel):
    """Paging metadata sent in the `Pagination` response header."""

    current_page: int
    items_per_page: int
    total_items: int
    total_pages: int
