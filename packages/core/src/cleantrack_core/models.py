"""Complaint data model.

Documents are stored with camelCase field names (``statusHistory``,
``userId``...) so records stay readable by other clients of the same
backend. The dataclasses here use snake_case and convert at the edges.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

MAX_IMAGES = 5
SYSTEM_ACTOR = "system"
SUBMITTED_NOTE = "Complaint submitted"


class Category(str, Enum):
    POWER_CUT = "power_cut"
    DRAINAGE = "drainage"
    ROAD_DAMAGE = "road_damage"
    WATER_SUPPLY = "water_supply"
    GARBAGE = "garbage"
    STREET_LIGHT = "street_light"
    PUBLIC_PROPERTY = "public_property"
    NOISE_POLLUTION = "noise_pollution"
    OTHER = "other"

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]


_CATEGORY_LABELS = {
    Category.POWER_CUT: "Power Cut / Electrical Issues",
    Category.DRAINAGE: "Drainage / Sewage Problems",
    Category.ROAD_DAMAGE: "Road Damage / Potholes",
    Category.WATER_SUPPLY: "Water Supply Issues",
    Category.GARBAGE: "Garbage / Waste Management",
    Category.STREET_LIGHT: "Street Light Issues",
    Category.PUBLIC_PROPERTY: "Public Property Damage",
    Category.NOISE_POLLUTION: "Noise Pollution",
    Category.OTHER: "Other",
}


def get_category(value: str | None) -> Category:
    """Look up a category by id, falling back to OTHER for unknown ids."""
    try:
        return Category(value)
    except ValueError:
        return Category.OTHER


class Status(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    REJECTED = "rejected"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ").title()


def get_status(value: str | None) -> Status:
    """Look up a stored status, reading unknown values as PENDING."""
    try:
        return Status(value)
    except ValueError:
        return Status.PENDING


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def label(self) -> str:
        return self.value.title()


def utc_now() -> str:
    """Client-clock ISO-8601 UTC timestamp used for status events."""
    return datetime.now(timezone.utc).isoformat()


@dataclass
class Location:
    latitude: float | None = None
    longitude: float | None = None
    address: str | None = None

    def to_document(self) -> dict:
        return {"latitude": self.latitude, "longitude": self.longitude, "address": self.address}

    @classmethod
    def from_document(cls, d: dict | None) -> Location | None:
        if not d:
            return None
        return cls(latitude=d.get("latitude"), longitude=d.get("longitude"), address=d.get("address"))


@dataclass(frozen=True)
class StatusEvent:
    """One immutable entry in a complaint's audit trail."""

    status: Status
    note: str
    updated_by: str
    updated_at: str = field(default_factory=utc_now)  # client clock, ISO-8601 UTC

    def to_document(self) -> dict:
        return {
            "status": self.status.value,
            "note": self.note,
            "updatedBy": self.updated_by,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_document(cls, d: dict) -> StatusEvent:
        return cls(
            status=get_status(d.get("status")),
            note=d.get("note", ""),
            updated_by=d.get("updatedBy", ""),
            updated_at=d.get("updatedAt", ""),
        )


@dataclass
class ComplaintInput:
    """Fields supplied by the submitter; everything else is set by the workflow."""

    title: str
    description: str
    category: Category
    user_id: str
    user_name: str
    images: list[str] = field(default_factory=list)
    location: Location | None = None

    def to_document(self) -> dict:
        return {
            "title": self.title,
            "description": self.description,
            "category": Category(self.category).value,
            "images": list(self.images),
            "location": self.location.to_document() if self.location else None,
            "userId": self.user_id,
            "userName": self.user_name,
        }


@dataclass
class Complaint:
    id: str
    title: str
    description: str
    category: Category
    status: Status
    priority: Priority
    status_history: list[StatusEvent]
    user_id: str
    user_name: str
    images: list[str] = field(default_factory=list)
    location: Location | None = None
    created_at: str = ""  # store clock
    updated_at: str = ""  # store clock, refreshed on every mutation

    def timeline(self) -> list[StatusEvent]:
        """History newest first, for display. Storage order is untouched."""
        return sorted(self.status_history, key=lambda e: e.updated_at, reverse=True)

    @classmethod
    def from_document(cls, d: dict) -> Complaint:
        try:
            priority = Priority(d.get("priority"))
        except ValueError:
            priority = Priority.MEDIUM
        return cls(
            id=d["id"],
            title=d.get("title", ""),
            description=d.get("description", ""),
            category=get_category(d.get("category")),
            status=get_status(d.get("status")),
            priority=priority,
            status_history=[StatusEvent.from_document(e) for e in d.get("statusHistory", [])],
            user_id=d.get("userId", ""),
            user_name=d.get("userName", ""),
            images=list(d.get("images") or []),
            location=Location.from_document(d.get("location")),
            created_at=d.get("createdAt", ""),
            updated_at=d.get("updatedAt", ""),
        )
