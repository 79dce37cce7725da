"""Domain models for members and their photos."""

from dataclasses import dataclass, field
from datetime import date, datetime


@dataclass
class Photo:
    """A hosted photo owned by a user."""

    url: str
    public_id: str | None
    is_main: bool = False
    id: int | None = None


@dataclass
class User:
    """User aggregate loaded from the database.

    Handlers edit it in place and then ask the repository to save.
    """

    id: int
    username: str
    gender: str
    date_of_birth: date | None = None
    known_as: str | None = None
    created: datetime | None = None
    last_active: datetime | None = None
    introduction: str | None = None
    looking_for: str | None = None
    interests: str | None = None
    city: str | None = None
    country: str | None = None
    photos: list[Photo] = field(default_factory=list)

    def find_photo(self, photo_id: int) -> Photo | None:
        """Return the photo with the given id from this user's gallery."""
        return next((photo for photo in self.photos if photo.id == photo_id), None)

    def main_photo(self) -> Photo | None:
        """Return the current main photo, if any."""
        return next((photo for photo in self.photos if photo.is_main), None)


@dataclass(frozen=True)
class MemberPhoto:
    """Read-only view of a photo."""

    id: int | None
    url: str
    is_main: bool


@dataclass(frozen=True)
class Member:
    """Read-only projection of a user for listing and detail views."""

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
    photos: list[MemberPhoto] = field(default_factory=list)


def calculate_age(date_of_birth: date, today: date | None = None) -> int:
    """Return the age in whole years on the given day."""
    current = today or date.today()
    age = current.year - date_of_birth.year
    if (current.month, current.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age


def opposite_gender(gender: str | None) -> str:
    """Return the default listing gender for a member of the given gender."""
    return "female" if gender == "male" else "male"


def project_member(user: User, today: date | None = None) -> Member:
    """Build the read-only member view of a user."""
    main = user.main_photo()
    return Member(
        id=user.id,
        username=user.username,
        gender=user.gender,
        photo_url=main.url if main else None,
        age=calculate_age(user.date_of_birth, today) if user.date_of_birth else None,
        known_as=user.known_as,
        created=user.created,
        last_active=user.last_active,
        introduction=user.introduction,
        looking_for=user.looking_for,
        interests=user.interests,
        city=user.city,
        country=user.country,
        photos=[
            MemberPhoto(id=photo.id, url=photo.url, is_main=photo.is_main)
            for photo in user.photos
        ],
    )
