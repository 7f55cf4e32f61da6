"""Coaching program data models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class ProgramType(str, Enum):
    """Program access tiers."""

    DISCOVERY = "discovery"
    PREMIUM = "premium"
    PREMIUM_CLAN = "premium-clan"

    @classmethod
    def parse(cls, value: str | None) -> "ProgramType":
        """Parse a type, accepting the spellings older rows were saved with."""
        if not value:
            return cls.DISCOVERY
        normalized = value.strip().lower().replace("_", "-")
        if normalized in ("découverte", "decouverte"):
            return cls.DISCOVERY
        return cls(normalized)


class Difficulty(str, Enum):
    """Program difficulty."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass
class Phase:
    """One step of the program's journey summary."""

    title: str
    subtitle: str = ""
    text: str = ""

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"title": self.title, "subtitle": self.subtitle, "text": self.text}

    @classmethod
    def from_dict(cls, data: dict) -> "Phase":
        """Create from dictionary (older rows use French keys)."""
        return cls(
            title=data.get("title", data.get("titre", "")),
            subtitle=data.get("subtitle", data.get("sous_titre", "")),
            text=data.get("text", data.get("texte", "")),
        )


def _unique(values: list[str]) -> list[str]:
    seen = set()
    result = []
    for value in values:
        value = value.strip()
        if value and value not in seen:
            seen.add(value)
            result.append(value)
    return result


@dataclass
class Program:
    """A multi-day coaching program."""

    name: str
    duration: int  # number of days
    description: str = ""
    type: ProgramType = ProgramType.DISCOVERY
    clan_id: str | None = None
    tags: list[str] = field(default_factory=list)
    results: list[str] = field(default_factory=list)  # expected results, ordered
    summary: list[Phase] = field(default_factory=list)
    image_url: str | None = None
    difficulty: Difficulty = Difficulty.MEDIUM
    active: bool = True
    id: str | None = None
    created_at: datetime | None = None

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ValueError("Program name is required")
        if self.duration < 1:
            raise ValueError(f"Program duration must be at least 1 day, got {self.duration}")
        self.tags = _unique(self.tags)

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "name": self.name,
            "description": self.description,
            "duration": self.duration,
            "type": self.type.value,
            "clan_id": self.clan_id,
            "tags": list(self.tags),
            "results": list(self.results),
            "summary": [phase.to_dict() for phase in self.summary],
            "image_url": self.image_url,
            "difficulty": self.difficulty.value,
            "active": self.active,
        }

    @classmethod
    def from_dict(
        cls,
        data: dict,
        id: str | None = None,
        created_at: datetime | None = None,
    ) -> "Program":
        """Create from dictionary."""
        return cls(
            id=id,
            name=data["name"],
            description=data.get("description") or "",
            duration=int(data["duration"]),
            type=ProgramType.parse(data.get("type")),
            clan_id=data.get("clan_id") or None,
            tags=list(data.get("tags") or []),
            results=list(data.get("results") or []),
            summary=[Phase.from_dict(p) for p in data.get("summary") or []],
            image_url=data.get("image_url") or None,
            difficulty=Difficulty(data.get("difficulty") or "medium"),
            active=bool(data.get("active", True)),
            created_at=created_at,
        )

    def get_summary(self) -> str:
        """Generate a text summary of the program."""
        summary = f"Program: {self.name}\n"
        summary += f"Type: {self.type.value}, difficulty: {self.difficulty.value}\n"
        summary += f"Duration: {self.duration} days\n"
        if self.description:
            summary += f"Description: {self.description}\n"
        if self.tags:
            summary += f"Tags: {', '.join(self.tags)}\n"

        if self.results:
            summary += "\nExpected results:\n"
            for result in self.results:
                summary += f"  - {result}\n"

        if self.summary:
            summary += "\nJourney:\n"
            for phase in self.summary:
                summary += f"  {phase.title}"
                if phase.subtitle:
                    summary += f" - {phase.subtitle}"
                summary += "\n"

        return summary
