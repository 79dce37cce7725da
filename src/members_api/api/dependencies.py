"""FastAPI dependencies for identity and services."""

from fastapi import Header, HTTPException, Query, Request, status

from members_api.containers import AppContainer
from members_api.domain.pagination import DEFAULT_PAGE_SIZE, UserParams
from members_api.services.identity import parse_bearer_token
from members_api.services.members import MemberService


def get_container(request: Request) -> AppContainer:
    """Return the container attached to the running app."""
    return request.app.state.container


async def get_current_username(
    request: Request,
    authorization: str | None = Header(default=None),
) -> str:
    """Resolve the acting username from the bearer token."""
    token = parse_bearer_token(authorization)
    if token is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    username = get_container(request).identity_provider.resolve_username(token)
    if not username:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return username


def get_member_service(request: Request) -> MemberService:
    """Return a member service scoped to the current request."""
    return get_container(request).member_service_factory()


def get_user_params(  # noqa: PLR0913
    page_number: int = Query(default=1, alias="pageNumber", ge=1),
    page_size: int = Query(default=DEFAULT_PAGE_SIZE, alias="pageSize", ge=1),
    gender: str | None = Query(default=None),
    min_age: int = Query(default=18, alias="minAge", ge=0),
    max_age: int = Query(default=100, alias="maxAge", ge=0),
    order_by: str = Query(default="last_active", alias="orderBy"),
) -> UserParams:
    """Build the member listing filter from query parameters."""
    return UserParams(
        page_number=page_number,
        page_size=page_size,
        gender=gender,
        min_age=min_age,
        max_age=max_age,
        order_by=order_by,
    )
