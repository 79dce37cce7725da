"""Member profile and photo gallery business logic."""

import logging
from dataclasses import dataclass
from typing import Protocol

from pydantic import BaseModel

from members_api.domain.errors import (
    ConflictError,
    NotFoundError,
    PersistenceError,
    UpstreamError,
)
from members_api.domain.models import Member, Photo, User, opposite_gender
from members_api.domain.pagination import PagedResult, UserParams
from members_api.domain.photos import (
    PhotoDeletionResult,
    PhotoUpload,
    PhotoUploadResult,
)
from members_api.services.mapping import apply_update

logger = logging.getLogger(__name__)


class UserRepository(Protocol):
    """Persistence interface for users and member projections."""

    def get_user_by_username(self, username: str) -> User | None:
        """Return the tracked user aggregate, if present."""

    def get_member_by_username(self, username: str) -> Member | None:
        """Return the member projection, if present."""

    def get_members(self, params: UserParams) -> PagedResult[Member]:
        """Return one page of members matching the filter."""

    def save_all(self) -> bool:
        """Persist pending changes on tracked users; True if anything was written."""


class PhotoService(Protocol):
    """Interface for the external photo hosting provider."""

    async def upload(self, file: PhotoUpload) -> PhotoUploadResult:
        """Upload an image and return its hosted url and id."""

    async def delete(self, public_id: str) -> PhotoDeletionResult:
        """Delete a hosted image by its provider id."""


@dataclass
class MemberService:
    """Application service behind the members endpoints.

    Every operation takes the acting username explicitly.
    """

    repository: UserRepository
    photo_service: PhotoService

    def get_member(self, username: str) -> Member | None:
        """Return the member projection for a username."""
        return self.repository.get_member_by_username(username)

    def list_members(self, username: str, params: UserParams) -> PagedResult[Member]:
        """Return a page of members, excluding the acting user."""
        current_user = self._require_user(username)
        params.current_username = current_user.username
        if not params.gender:
            params.gender = opposite_gender(current_user.gender)
        return self.repository.get_members(params)

    def update_profile(self, username: str, update: BaseModel) -> None:
        """Overwrite the profile fields present in the payload."""
        user = self._require_user(username)
        apply_update(update, user)
        if not self.repository.save_all():
            raise PersistenceError("Failed to update user")

    async def add_photo(self, username: str, file: PhotoUpload) -> Photo:
        """Upload a photo and append it to the user's gallery."""
        user = self._require_user(username)
        result = await self.photo_service.upload(file)
        if result.error is not None:
            raise UpstreamError(result.error)
        if not result.url:
            raise UpstreamError("Photo upload returned no url")

        photo = Photo(url=result.url, public_id=result.public_id)
        if not user.photos:
            photo.is_main = True
        user.photos.append(photo)

        if self.repository.save_all():
            return photo

        user.photos.remove(photo)
        await self._discard_upload(username, photo)
        raise PersistenceError("Error adding photo")

    def set_main_photo(self, username: str, photo_id: int) -> None:
        """Make one of the user's photos the main photo."""
        user = self._require_user(username)
        photo = self._require_photo(user, photo_id)
        if photo.is_main:
            raise ConflictError("This is already your main photo")

        current_main = user.main_photo()
        if current_main is not None:
            current_main.is_main = False
        photo.is_main = True

        if not self.repository.save_all():
            raise PersistenceError("Error setting the main photo")

    async def delete_photo(self, username: str, photo_id: int) -> None:
        """Remove a non-main photo from the provider and the gallery."""
        user = self._require_user(username)
        photo = self._require_photo(user, photo_id)
        if photo.is_main:
            raise ConflictError("You cannot delete your main photo")

        if photo.public_id is not None:
            result = await self.photo_service.delete(photo.public_id)
            if result.error is not None:
                raise UpstreamError(result.error)

        user.photos.remove(photo)
        if not self.repository.save_all():
            logger.warning(
                "Hosted photo deleted but gallery row kept",
                extra={"username": username, "photo_id": photo_id},
            )
            raise PersistenceError("Error deleting the main photo")

    def _require_user(self, username: str) -> User:
        user = self.repository.get_user_by_username(username)
        if user is None:
            raise NotFoundError(f"User {username} not found")
        return user

    @staticmethod
    def _require_photo(user: User, photo_id: int) -> Photo:
        photo = user.find_photo(photo_id)
        if photo is None:
            raise NotFoundError(f"Photo {photo_id} not found")
        return photo

    async def _discard_upload(self, username: str, photo: Photo) -> None:
        """Best-effort removal of an upload that could not be saved."""
        if photo.public_id is None:
            return
        try:
            result = await self.photo_service.delete(photo.public_id)
        except Exception:
            logger.exception(
                "Failed to remove orphaned upload",
                extra={"username": username, "public_id": photo.public_id},
            )
            return
        if result.error is not None:
            logger.warning(
                "Failed to remove orphaned upload",
                extra={
                    "username": username,
                    "public_id": photo.public_id,
                    "error": result.error,
                },
            )
