"""Data models for family members, their events and calculation results."""

import datetime
from dataclasses import dataclass, field

from .constants import DEFAULT_GENDER, DEFAULT_RELATIONSHIP
from .errors import CalculationError


@dataclass
class Event:
    id: str
    title: str = ""
    date: str | None = None  # YYYY-MM-DD

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "date": self.date,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Event":
        return cls(
            id=str(data["id"]),
            title=data.get("title") or data.get("name") or "",
            date=data.get("date"),
        )


@dataclass
class FlattenedEvent:
    """An event carrying the context of the person who owns it."""

    id: str
    name: str
    date: str | None = None
    person_id: str | None = None
    person_name: str | None = None
    person_relationship: str | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "date": self.date,
            "person_id": self.person_id,
            "person_name": self.person_name,
            "person_relationship": self.person_relationship,
        }


@dataclass
class Person:
    id: str
    name: str
    dob: str | None = None  # YYYY-MM-DD
    relationship: str = DEFAULT_RELATIONSHIP
    gender: str = DEFAULT_GENDER
    events: list[Event] = field(default_factory=list)

    def flattened_events(self) -> list[FlattenedEvent]:
        return [
            FlattenedEvent(
                id=event.id,
                name=event.title,
                date=event.date,
                person_id=self.id,
                person_name=self.name,
                person_relationship=self.relationship,
            )
            for event in self.events
        ]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "dob": self.dob,
            "relationship": self.relationship,
            "gender": self.gender,
            "events": [e.to_dict() for e in self.events],
        }

    def to_summary(self) -> dict:
        """Short summary for list views."""
        return {
            "id": self.id,
            "name": self.name,
            "dob": self.dob,
            "relationship": self.relationship,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Person":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            dob=data.get("dob"),
            relationship=data.get("relationship") or DEFAULT_RELATIONSHIP,
            gender=data.get("gender") or DEFAULT_GENDER,
            events=[Event.from_dict(e) for e in data.get("events") or []],
        )


@dataclass
class CalculationResult:
    """Outcome of one solver run.

    Exactly one of `description` (success) or `error` (failure) is meaningful.
    """

    description: str = ""
    date: datetime.date | None = None
    age: int | None = None
    error: str | None = None
    error_type: str | None = None
    details: dict = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, exc: CalculationError) -> "CalculationResult":
        return cls(error=str(exc), error_type=exc.kind)

    def to_dict(self) -> dict:
        result: dict = {"description": self.description}
        if self.date is not None:
            result["date"] = self.date.isoformat()
        if self.age is not None:
            result["age"] = self.age
        if self.error is not None:
            result["error"] = self.error
            result["error_type"] = self.error_type
        if self.details:
            result["details"] = self.details
        return result
