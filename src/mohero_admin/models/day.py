"""Program day model."""

from dataclasses import dataclass


@dataclass
class Day:
    """Day N of a program."""

    program_id: str
    ordinal: int
    id: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {"program_id": self.program_id, "ordinal": self.ordinal}

    @classmethod
    def from_dict(cls, data: dict, id: str | None = None) -> "Day":
        """Create from dictionary."""
        return cls(id=id, program_id=data["program_id"], ordinal=int(data["ordinal"]))
