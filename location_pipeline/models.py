"""
In-memory record types shared by the batch jobs.

``LocationRecord`` is the snapshot representation of one row of the
``locations`` table. Every optional text field may arrive as ``None`` or as
an empty string; both mean "absent" and are checked through ``present()``.
"""

from dataclasses import asdict, dataclass, field
from typing import Any

from location_pipeline.utils.geo import parse_coordinates


def present(value: Any) -> bool:
    """True when a field carries a value (None and blank strings are absent)."""
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    return True


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float

    def to_dict(self) -> dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass
class LocationRecord:
    """
    A point of interest as read from storage.

    Nullability:
        id, name: always set (name may be empty, such records are never grouped)
        everything else: optional
    """
    id: str
    name: str = ""
    city: str | None = None
    prefecture: str | None = None
    region: str | None = None
    category: str | None = None
    coordinates: Coordinates | None = None
    place_id: str | None = None
    description: str | None = None
    short_description: str | None = None
    rating: float | None = None
    image: str | None = None
    city_original: str | None = None

    @property
    def city_key(self) -> str | None:
        """Lowercase-trimmed city used for city comparisons, None if absent."""
        if not present(self.city):
            return None
        return self.city.strip().lower()

    @property
    def was_migrated(self) -> bool:
        """A backup exists and differs from the current city."""
        return present(self.city_original) and self.city_original != self.city

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "LocationRecord":
        """Build a record from a storage row (missing columns become None)."""
        coords = parse_coordinates(row.get("coordinates"))
        rating = row.get("rating")
        return cls(
            id=str(row["id"]),
            name=row.get("name") or "",
            city=row.get("city"),
            prefecture=row.get("prefecture"),
            region=row.get("region"),
            category=row.get("category"),
            coordinates=Coordinates(*coords) if coords else None,
            place_id=row.get("place_id"),
            description=row.get("description"),
            short_description=row.get("short_description"),
            rating=float(rating) if rating is not None else None,
            image=row.get("image"),
            city_original=row.get("city_original"),
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["coordinates"] = self.coordinates.to_dict() if self.coordinates else None
        return data

    def summary(self) -> dict[str, Any]:
        """Short form used in reports."""
        return {
            "id": self.id,
            "name": self.name,
            "city": self.city,
            "place_id": self.place_id,
        }


@dataclass
class DuplicateGroup:
    """Records sharing a normalized name (derived, never persisted)."""
    normalized_name: str
    locations: list[LocationRecord] = field(default_factory=list)
    same_place_id: bool = True
    same_city: bool = True

    @property
    def size(self) -> int:
        return len(self.locations)

    def to_dict(self) -> dict[str, Any]:
        return {
            "normalized_name": self.normalized_name,
            "same_place_id": self.same_place_id,
            "same_city": self.same_city,
            "locations": [loc.to_dict() for loc in self.locations],
        }
