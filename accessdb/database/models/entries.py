"""
Entry Models
-------------

The five entry categories of the accessibility database.

Models:
    - Game: Video games
    - Hardware: Devices, controllers, peripherals
    - Place: Physical venues with a location
    - Software: Applications and operating systems
    - Service: Online or offline services

Every model shares the columns of EntryMixin (name, ratings, photos,
ownership, completeness) and adds its own category-specific fields.
Ids are random hex strings, so an id identifies an entry across all
five tables.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import uuid
from typing import Any, ClassVar, Dict, List, Optional, Type

# --- Third party imports ---
from sqlalchemy import JSON, Boolean, CheckConstraint, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

# --- Local imports ---
from .base import Base, TimestampMixin
from .enums import EntryType


def new_entry_id() -> str:
    """Generate a globally unique entry id."""
    return uuid.uuid4().hex


def _rating_checks(prefix: str) -> tuple:
    """Check constraints keeping every rating column inside 1-5."""
    columns = [
        "overall_rating",
        "visual_accessibility",
        "auditory_accessibility",
        "motor_accessibility",
        "cognitive_accessibility",
    ]
    return tuple(
        CheckConstraint(
            f"{column} IS NULL OR ({column} >= 1 AND {column} <= 5)",
            name=f"ck_{prefix}_{column}_range",
        )
        for column in columns
    ) + (CheckConstraint("name != ''", name=f"ck_{prefix}_non_empty_name"),)


class EntryMixin(TimestampMixin):
    """
    Columns shared by all five entry tables.

    Attributes:
        id: Globally unique hex id
        created_by: Id of the creating user (None for legacy entries)
        name: Display name
        description: Free-text description
        photos: Storage handles of uploaded photos
        overall_rating: Required 1-5 accessibility rating
        visual_accessibility: Optional 1-5 rating (None = unknown)
        auditory_accessibility: Optional 1-5 rating
        motor_accessibility: Optional 1-5 rating
        cognitive_accessibility: Optional 1-5 rating
        website: Optional URL
        complete: Cached result of the completeness predicate
    """

    category: ClassVar[EntryType]

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_entry_id)
    created_by: Mapped[Optional[str]] = mapped_column(String(255), index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    photos: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    overall_rating: Mapped[int] = mapped_column(Integer, nullable=False)
    visual_accessibility: Mapped[Optional[int]] = mapped_column(Integer)
    auditory_accessibility: Mapped[Optional[int]] = mapped_column(Integer)
    motor_accessibility: Mapped[Optional[int]] = mapped_column(Integer)
    cognitive_accessibility: Mapped[Optional[int]] = mapped_column(Integer)

    website: Mapped[Optional[str]] = mapped_column(String(2048))
    complete: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, index=True
    )

    # Category-specific scalar fields accepted by create/update
    specific_fields: ClassVar[tuple] = ()
    # Category-specific list fields (stored as JSON arrays)
    list_fields: ClassVar[tuple] = ()

    def to_dict(self) -> Dict[str, Any]:
        """Plain dictionary of all column values plus the category."""
        data = {
            column.key: getattr(self, column.key)
            for column in self.__table__.columns  # type: ignore[attr-defined]
        }
        data["category"] = self.category.value
        return data

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(id={self.id}, name={self.name!r})>"


class Game(Base, EntryMixin):
    """A video game."""

    __tablename__ = "games"
    __table_args__ = _rating_checks("game")
    category = EntryType.GAME

    platforms: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    publisher: Mapped[Optional[str]] = mapped_column(String(255))
    developer: Mapped[Optional[str]] = mapped_column(String(255))
    release_year: Mapped[Optional[int]] = mapped_column(Integer)
    genres: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    specific_fields = ("publisher", "developer", "release_year")
    list_fields = ("platforms", "genres")


class Hardware(Base, EntryMixin):
    """A physical device or peripheral."""

    __tablename__ = "hardware"
    __table_args__ = _rating_checks("hardware")
    category = EntryType.HARDWARE

    manufacturer: Mapped[Optional[str]] = mapped_column(String(255))
    model: Mapped[Optional[str]] = mapped_column(String(255))
    product_type: Mapped[Optional[str]] = mapped_column(String(100))
    compatibility: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)

    specific_fields = ("manufacturer", "model", "product_type")
    list_fields = ("compatibility",)


class Place(Base, EntryMixin):
    """
    A physical venue.

    The location is stored as flat columns and exposed as a dictionary
    through the `location` property.
    """

    __tablename__ = "places"
    __table_args__ = _rating_checks("place")
    category = EntryType.PLACE

    location_address: Mapped[Optional[str]] = mapped_column(String(500))
    location_city: Mapped[Optional[str]] = mapped_column(String(255), index=True)
    location_country: Mapped[Optional[str]] = mapped_column(String(255))
    location_latitude: Mapped[Optional[float]] = mapped_column(Float)
    location_longitude: Mapped[Optional[float]] = mapped_column(Float)
    place_type: Mapped[Optional[str]] = mapped_column(String(100))
    wheelchair_accessible: Mapped[Optional[bool]] = mapped_column(Boolean)
    has_accessible_parking: Mapped[Optional[bool]] = mapped_column(Boolean)
    has_accessible_restroom: Mapped[Optional[bool]] = mapped_column(Boolean)

    specific_fields = (
        "place_type",
        "wheelchair_accessible",
        "has_accessible_parking",
        "has_accessible_restroom",
    )

    LOCATION_KEYS: ClassVar[tuple] = ("address", "city", "country", "latitude", "longitude")

    @property
    def location(self) -> Dict[str, Any]:
        """Location as {address, city, country, latitude, longitude}."""
        return {key: getattr(self, f"location_{key}") for key in self.LOCATION_KEYS}

    @location.setter
    def location(self, value: Optional[Dict[str, Any]]) -> None:
        value = value or {}
        for key in self.LOCATION_KEYS:
            setattr(self, f"location_{key}", value.get(key))


class Software(Base, EntryMixin):
    """An application, operating system or web app."""

    __tablename__ = "software"
    __table_args__ = _rating_checks("software")
    category = EntryType.SOFTWARE

    platforms: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    developer: Mapped[Optional[str]] = mapped_column(String(255))
    version: Mapped[Optional[str]] = mapped_column(String(100))
    software_type: Mapped[Optional[str]] = mapped_column(String(100))
    has_screen_reader_support: Mapped[Optional[bool]] = mapped_column(Boolean)
    has_keyboard_navigation: Mapped[Optional[bool]] = mapped_column(Boolean)
    has_high_contrast_mode: Mapped[Optional[bool]] = mapped_column(Boolean)

    specific_fields = (
        "developer",
        "version",
        "software_type",
        "has_screen_reader_support",
        "has_keyboard_navigation",
        "has_high_contrast_mode",
    )
    list_fields = ("platforms",)


class Service(Base, EntryMixin):
    """A service such as transport, banking or customer support."""

    __tablename__ = "services"
    __table_args__ = _rating_checks("service")
    category = EntryType.SERVICE

    service_type: Mapped[Optional[str]] = mapped_column(String(100))
    provider: Mapped[Optional[str]] = mapped_column(String(255))
    availability: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    has_sign_language_support: Mapped[Optional[bool]] = mapped_column(Boolean)
    has_accessible_support: Mapped[Optional[bool]] = mapped_column(Boolean)

    specific_fields = (
        "service_type",
        "provider",
        "has_sign_language_support",
        "has_accessible_support",
    )
    list_fields = ("availability",)


ENTRY_MODELS: Dict[EntryType, Type[EntryMixin]] = {
    EntryType.GAME: Game,
    EntryType.HARDWARE: Hardware,
    EntryType.PLACE: Place,
    EntryType.SOFTWARE: Software,
    EntryType.SERVICE: Service,
}


def model_for(entry_type: EntryType) -> Type[EntryMixin]:
    """Return the model class storing entries of the given type."""
    return ENTRY_MODELS[EntryType(entry_type)]
