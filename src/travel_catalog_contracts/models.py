"""Catalog resources as the API exposes them.

These mirror the JSON documents only; the harness keeps no store of its own.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


def _text(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass
class Category:
    """Category document: `{_id, name}`."""

    name: str
    id: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Category:
        return cls(name=_text(data.get("name")), id=_text(data.get("_id")))

    def to_payload(self) -> dict[str, Any]:
        return {"name": self.name}


@dataclass
class Destination:
    """Destination document.

    `category` is whatever the server sent: a bare id in listings, an
    embedded category object when fetched by id. Use `category_id` to
    compare references.
    """

    name: str
    location: str
    description: str
    best_time_to_visit: str
    attractions: list[str] = field(default_factory=list)
    category: Any = None
    id: str = ""

    @property
    def category_id(self) -> Optional[str]:
        return category_id_of(self.category)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Destination:
        attractions = data.get("attractions")
        return cls(
            name=_text(data.get("name")),
            location=_text(data.get("location")),
            description=_text(data.get("description")),
            best_time_to_visit=_text(data.get("bestTimeToVisit")),
            attractions=[str(a) for a in attractions] if isinstance(attractions, list) else [],
            category=data.get("category"),
            id=_text(data.get("_id")),
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "location": self.location,
            "description": self.description,
            "bestTimeToVisit": self.best_time_to_visit,
            "attractions": list(self.attractions),
            "category": self.category_id,
        }


def category_id_of(value: Any) -> Optional[str]:
    """Normalize a category reference (id string or embedded object) to its id."""
    if isinstance(value, dict):
        ref = value.get("_id")
        return str(ref) if ref else None
    if value is None or value == "":
        return None
    return str(value)
