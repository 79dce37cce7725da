"""Supabase-backed user repository."""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from postgrest.exceptions import APIError
from supabase import Client

from members_api.domain.models import Member, Photo, User, project_member
from members_api.domain.pagination import PagedResult, UserParams
from members_api.services.members import UserRepository

logger = logging.getLogger(__name__)

_USER_COLUMNS = (
    "id, username, gender, date_of_birth, known_as, created, last_active, "
    "introduction, looking_for, interests, city, country, "
    "photos(id, url, public_id, is_main)"
)
_PROFILE_FIELDS = (
    "gender",
    "date_of_birth",
    "known_as",
    "introduction",
    "looking_for",
    "interests",
    "city",
    "country",
)
_ORDER_COLUMNS = {
    "created": "created",
    "last_active": "last_active",
    "lastActive": "last_active",
}
# PostgREST code for an offset past the last matching row.
_RANGE_NOT_SATISFIABLE = "PGRST103"


class _MissingRowError(RuntimeError):
    """Supabase accepted a write but returned no row."""


@dataclass
class _TrackedUser:
    """A loaded user plus the state last read from or written to the database."""

    user: User
    profile: dict[str, object] = field(default_factory=dict)
    photos: dict[int, bool] = field(default_factory=dict)

    def snapshot(self) -> None:
        self.profile = _profile_row(self.user)
        self.photos = {
            photo.id: photo.is_main
            for photo in self.user.photos
            if photo.id is not None
        }


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for users and their photos.

    Users returned by `get_user_by_username` are tracked; `save_all` writes
    whatever changed on them since they were loaded.
    """

    client: Client
    _tracked: dict[str, _TrackedUser] = field(
        default_factory=dict, init=False, repr=False
    )

    def get_user_by_username(self, username: str) -> User | None:
        """Load and track the user aggregate with its photos."""
        row = self._select_user_row(username)
        if row is None:
            return None
        user = _to_user(row)
        tracked = _TrackedUser(user=user)
        tracked.snapshot()
        self._tracked[user.username] = tracked
        return user

    def get_member_by_username(self, username: str) -> Member | None:
        """Return the member projection for a username."""
        row = self._select_user_row(username)
        if row is None:
            return None
        return project_member(_to_user(row))

    def get_members(self, params: UserParams) -> PagedResult[Member]:
        """Return one page of members matching the filter."""
        order_column = _ORDER_COLUMNS.get(params.order_by, "last_active")
        try:
            response = (
                self._member_query(params, _USER_COLUMNS)
                .order(order_column, desc=True)
                .range(params.offset, params.offset + params.page_size - 1)
                .execute()
            )
        except APIError as exc:
            if exc.code != _RANGE_NOT_SATISFIABLE:
                raise
            return PagedResult.create(
                [], self._count_members(params), params.page_number, params.page_size
            )
        members = [project_member(_to_user(row)) for row in response.data or []]
        count = response.count if response.count is not None else len(members)
        return PagedResult.create(
            members, count, params.page_number, params.page_size
        )

    def save_all(self) -> bool:
        """Write pending changes on tracked users.

        Returns False when nothing changed or when a write fails; in the
        latter case the tracked state keeps only the writes that succeeded.
        """
        changed = False
        for tracked in self._tracked.values():
            try:
                changed = self._save_profile(tracked) or changed
                changed = self._save_photos(tracked) or changed
            except (APIError, _MissingRowError) as exc:
                logger.exception(
                    "Failed to save user",
                    extra={
                        "username": tracked.user.username,
                        "code": getattr(exc, "code", None),
                    },
                )
                return False
        return changed

    def _member_query(  # type: ignore[no-untyped-def]
        self, params: UserParams, columns: str
    ):
        today = date.today()
        min_dob = _years_before(today, params.max_age + 1) + timedelta(days=1)
        max_dob = _years_before(today, params.min_age)
        query = (
            self.client.table("users")
            .select(columns, count="exact")
            .gte("date_of_birth", min_dob.isoformat())
            .lte("date_of_birth", max_dob.isoformat())
        )
        if params.current_username:
            query = query.neq("username", params.current_username)
        if params.gender:
            query = query.eq("gender", params.gender)
        return query

    def _count_members(self, params: UserParams) -> int:
        response = self._member_query(params, "id").limit(1).execute()
        return response.count or 0

    def _select_user_row(self, username: str) -> dict[str, object] | None:
        response = (
            self.client.table("users")
            .select(_USER_COLUMNS)
            .eq("username", username)
            .limit(1)
            .execute()
        )
        if response.data:
            return response.data[0]
        return None

    def _save_profile(self, tracked: _TrackedUser) -> bool:
        current = _profile_row(tracked.user)
        diff = {
            key: value
            for key, value in current.items()
            if tracked.profile.get(key) != value
        }
        if not diff:
            return False
        self.client.table("users").update(diff).eq("id", tracked.user.id).execute()
        tracked.profile = current
        return True

    def _save_photos(self, tracked: _TrackedUser) -> bool:
        user = tracked.user
        current_ids = {photo.id for photo in user.photos if photo.id is not None}
        removed = [
            photo_id for photo_id in tracked.photos if photo_id not in current_ids
        ]
        flipped = [
            photo
            for photo in user.photos
            if photo.id is not None
            and photo.id in tracked.photos
            and tracked.photos[photo.id] != photo.is_main
        ]
        added = [photo for photo in user.photos if photo.id is None]

        if removed:
            self.client.table("photos").delete().in_("id", removed).execute()
            for photo_id in removed:
                del tracked.photos[photo_id]
        # Clear the old main flag before setting the new one.
        for photo in sorted(flipped, key=lambda item: item.is_main):
            self.client.table("photos").update({"is_main": photo.is_main}).eq(
                "id", photo.id
            ).execute()
            tracked.photos[photo.id] = photo.is_main
        for photo in added:
            response = (
                self.client.table("photos")
                .insert(
                    {
                        "user_id": user.id,
                        "url": photo.url,
                        "public_id": photo.public_id,
                        "is_main": photo.is_main,
                    }
                )
                .execute()
            )
            if not response.data:
                raise _MissingRowError("Failed to create photo in Supabase")
            photo.id = response.data[0]["id"]
            tracked.photos[photo.id] = photo.is_main
        return bool(removed or flipped or added)


def _profile_row(user: User) -> dict[str, object]:
    row: dict[str, object] = {name: getattr(user, name) for name in _PROFILE_FIELDS}
    if isinstance(user.date_of_birth, date):
        row["date_of_birth"] = user.date_of_birth.isoformat()
    return row


def _to_user(row: dict[str, object]) -> User:
    return User(
        id=row["id"],
        username=row["username"],
        gender=row.get("gender") or "",
        date_of_birth=_parse_date(row.get("date_of_birth")),
        known_as=row.get("known_as"),
        created=_parse_datetime(row.get("created")),
        last_active=_parse_datetime(row.get("last_active")),
        introduction=row.get("introduction"),
        looking_for=row.get("looking_for"),
        interests=row.get("interests"),
        city=row.get("city"),
        country=row.get("country"),
        photos=[
            Photo(
                id=photo["id"],
                url=photo["url"],
                public_id=photo.get("public_id"),
                is_main=bool(photo.get("is_main")),
            )
            for photo in row.get("photos") or []
        ],
    )


def _parse_date(value: object) -> date | None:
    if isinstance(value, str) and value:
        return date.fromisoformat(value[:10])
    return None


def _parse_datetime(value: object) -> datetime | None:
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return None


def _years_before(day: date, years: int) -> date:
    try:
        return day.replace(year=day.year - years)
    except ValueError:
        return day.replace(year=day.year - years, day=28)
