"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from members_api.adapters.cloudinary_photo_service import HttpxCloudinaryPhotoService
from members_api.adapters.supabase_identity_provider import SupabaseIdentityProvider
from members_api.adapters.supabase_user_repository import SupabaseUserRepository
from members_api.config import Settings
from members_api.services.identity import IdentityProvider
from members_api.services.members import MemberService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    identity_provider: IdentityProvider
    member_service_factory: Callable[[], MemberService]
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    photo_service = HttpxCloudinaryPhotoService.create(
        cloud_name=resolved_settings.cloudinary_cloud_name,
        api_key=resolved_settings.cloudinary_api_key,
        api_secret=resolved_settings.cloudinary_api_secret,
        base_url=resolved_settings.cloudinary_base_url,
        folder=resolved_settings.photo_folder,
    )

    def member_service_factory() -> MemberService:
        # Fresh repository per request; it tracks the users it loads.
        return MemberService(
            repository=SupabaseUserRepository(supabase_client),
            photo_service=photo_service,
        )

    async def close_resources() -> None:
        await photo_service.close()

    return AppContainer(
        settings=resolved_settings,
        identity_provider=SupabaseIdentityProvider(supabase_client),
        member_service_factory=member_service_factory,
        close_resources=close_resources,
    )
