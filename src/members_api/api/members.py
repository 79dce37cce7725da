"""Member profile and photo endpoints."""

from typing import Annotated

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Request,
    Response,
    UploadFile,
    status,
)
from fastapi.responses import JSONResponse

from members_api.api.dependencies import (
    get_current_username,
    get_member_service,
    get_user_params,
)
from members_api.api.pagination import add_pagination_header
from members_api.api.schemas import MemberResponse, MemberUpdateRequest, PhotoResponse
from members_api.domain.pagination import UserParams
from members_api.domain.photos import PhotoUpload
from members_api.services.mapping import project
from members_api.services.members import MemberService

router = APIRouter(prefix="/api/users", tags=["users"])

CurrentUsername = Annotated[str, Depends(get_current_username)]
Members = Annotated[MemberService, Depends(get_member_service)]


@router.get("/{username}", response_model=MemberResponse)
async def get_member_by_username(
    username: str, _: CurrentUsername, service: Members
) -> MemberResponse:
    """Return a member by username."""
    member = service.get_member(username)
    if member is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return project(member, MemberResponse)


@router.get("", response_model=list[MemberResponse])
async def list_members(
    response: Response,
    username: CurrentUsername,
    service: Members,
    params: Annotated[UserParams, Depends(get_user_params)],
) -> list[MemberResponse]:
    """Return one page of members; paging metadata goes in the header."""
    page = service.list_members(username, params)
    add_pagination_header(response, page)
    return [project(member, MemberResponse) for member in page.items]


@router.put("", status_code=status.HTTP_204_NO_CONTENT)
async def update_member(
    update: MemberUpdateRequest, username: CurrentUsername, service: Members
) -> Response:
    """Update the caller's own profile."""
    service.update_profile(username, update)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/add-photo", status_code=status.HTTP_201_CREATED)
async def add_photo(
    file: UploadFile, request: Request, username: CurrentUsername, service: Members
) -> JSONResponse:
    """Upload a photo to the caller's gallery."""
    upload = PhotoUpload(
        filename=file.filename or "upload",
        content=await file.read(),
        content_type=file.content_type,
    )
    photo = await service.add_photo(username, upload)
    body = project(photo, PhotoResponse).model_dump(mode="json", by_alias=True)
    location = request.url_for("get_member_by_username", username=username)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=body,
        headers={"Location": str(location)},
    )


@router.put("/set-main-photo/{photo_id}", status_code=status.HTTP_204_NO_CONTENT)
async def set_main_photo(
    photo_id: int, username: CurrentUsername, service: Members
) -> Response:
    """Make one of the caller's photos the main photo."""
    service.set_main_photo(username, photo_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/delete-photo/{photo_id}")
async def delete_photo(
    photo_id: int, username: CurrentUsername, service: Members
) -> Response:
    """Delete a non-main photo from the caller's gallery."""
    await service.delete_photo(username, photo_id)
    return Response(status_code=status.HTTP_200_OK)
