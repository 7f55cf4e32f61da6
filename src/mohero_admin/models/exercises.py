"""Exercise bank entries and per-day exercise assignments."""

from dataclasses import dataclass, field
from enum import Enum


class ExerciseType(str, Enum):
    """Exercise families used across the bank."""

    PUSH = "push"
    PULL = "pull"
    SQUAT = "squat"
    CORE = "core"
    ANIMAL_FLOW = "animal-flow"
    MOBILITY = "mobility"
    BREATHING = "breathing"

    @classmethod
    def parse(cls, value: str) -> "ExerciseType":
        """Parse a type, accepting legacy labels."""
        legacy = {
            "animal flow": cls.ANIMAL_FLOW,
            "mobilite": cls.MOBILITY,
            "mobilité": cls.MOBILITY,
            "respiration": cls.BREATHING,
        }
        normalized = value.strip().lower()
        if normalized in legacy:
            return legacy[normalized]
        return cls(normalized)


def _check_level(level: int) -> int:
    level = int(level)
    if level not in (1, 2, 3):
        raise ValueError(f"Exercise level must be 1, 2 or 3, got {level}")
    return level


@dataclass
class BankExercise:
    """A reusable catalog entry, copied into a day when assigned."""

    name: str
    type: ExerciseType
    level: int = 1
    zones: list[str] = field(default_factory=list)
    category: str = ""
    description: str = ""
    image_url: str | None = None
    video_url: str | None = None
    variant: str = ""  # easier variation
    id: str | None = None

    def __post_init__(self):
        self.level = _check_level(self.level)

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "name": self.name,
            "type": self.type.value,
            "level": self.level,
            "zones": list(self.zones),
            "category": self.category,
            "description": self.description,
            "image_url": self.image_url,
            "video_url": self.video_url,
            "variant": self.variant,
        }

    @classmethod
    def from_dict(cls, data: dict, id: str | None = None) -> "BankExercise":
        """Create from dictionary."""
        return cls(
            id=id,
            name=data["name"],
            type=ExerciseType.parse(data["type"]),
            level=data.get("level") or 1,
            zones=list(data.get("zones") or []),
            category=data.get("category") or "",
            description=data.get("description") or "",
            image_url=data.get("image_url") or None,
            video_url=data.get("video_url") or None,
            variant=data.get("variant") or "",
        )


# Fields of an assignment that hold exercise content (editable after creation)
CONTENT_FIELDS = (
    "name",
    "type",
    "level",
    "target_value",
    "category",
    "description",
    "image_url",
    "video_url",
    "variant",
)


@dataclass
class ExerciseAssignment:
    """An exercise occurring on a given day.

    Content is a copy of the bank entry taken when the exercise was added;
    it is never linked back to the bank afterwards.
    """

    day_id: str
    ordinal: int  # 1-based position within the day
    name: str
    type: ExerciseType
    level: int = 1
    target_value: str = ""  # e.g. "3x12", "30s"
    category: str = ""
    description: str = ""
    image_url: str | None = None
    video_url: str | None = None
    variant: str = ""
    id: str | None = None

    def __post_init__(self):
        self.level = _check_level(self.level)

    @classmethod
    def from_bank(
        cls,
        day_id: str,
        ordinal: int,
        exercise: BankExercise,
        target_value: str,
        level: int | None = None,
    ) -> "ExerciseAssignment":
        """Copy a bank entry into a new assignment."""
        return cls(
            day_id=day_id,
            ordinal=ordinal,
            name=exercise.name,
            type=exercise.type,
            level=level if level is not None else exercise.level,
            target_value=target_value,
            category=exercise.category,
            description=exercise.description,
            image_url=exercise.image_url,
            video_url=exercise.video_url,
            variant=exercise.variant,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "day_id": self.day_id,
            "ordinal": self.ordinal,
            "name": self.name,
            "type": self.type.value,
            "level": self.level,
            "target_value": self.target_value,
            "category": self.category,
            "description": self.description,
            "image_url": self.image_url,
            "video_url": self.video_url,
            "variant": self.variant,
        }

    @classmethod
    def from_dict(cls, data: dict, id: str | None = None) -> "ExerciseAssignment":
        """Create from dictionary."""
        return cls(
            id=id,
            day_id=data["day_id"],
            ordinal=int(data["ordinal"]),
            name=data["name"],
            type=ExerciseType.parse(data["type"]),
            level=data.get("level") or 1,
            target_value=data.get("target_value") or "",
            category=data.get("category") or "",
            description=data.get("description") or "",
            image_url=data.get("image_url") or None,
            video_url=data.get("video_url") or None,
            variant=data.get("variant") or "",
        )


# Starter catalogue for a fresh exercise bank
STARTER_EXERCISES = [
    BankExercise(
        name="Push-ups",
        type=ExerciseType.PUSH,
        level=1,
        zones=["chest", "shoulders", "triceps"],
        category="Strength",
        description="Classic push-up",
        variant="Knee push-ups",
    ),
    BankExercise(
        name="Pull-ups",
        type=ExerciseType.PULL,
        level=2,
        zones=["back", "biceps"],
        category="Strength",
        description="Pull-up on a fixed bar",
        variant="Band-assisted pull-ups",
    ),
    BankExercise(
        name="Squats",
        type=ExerciseType.SQUAT,
        level=1,
        zones=["thighs", "glutes"],
        category="Strength",
        description="Basic bodyweight squat",
    ),
    BankExercise(
        name="Plank",
        type=ExerciseType.CORE,
        level=1,
        zones=["abs", "lower back"],
        category="Core",
        description="Front plank hold",
        variant="Plank on knees",
    ),
    BankExercise(
        name="Burpees",
        type=ExerciseType.PUSH,
        level=3,
        zones=["full body"],
        category="Cardio",
        description="Squat, push-up and jump combined",
    ),
    BankExercise(
        name="Mountain Climbers",
        type=ExerciseType.CORE,
        level=2,
        zones=["abs", "cardio"],
        category="Cardio",
        description="Dynamic plank with alternating knee drives",
    ),
    BankExercise(
        name="Lunges",
        type=ExerciseType.SQUAT,
        level=1,
        zones=["thighs", "glutes"],
        category="Strength",
        description="Forward lunge",
    ),
    BankExercise(
        name="Dips",
        type=ExerciseType.PUSH,
        level=2,
        zones=["triceps", "shoulders", "chest"],
        category="Strength",
        description="Bodyweight dips between two supports",
        variant="Bench dips",
    ),
    BankExercise(
        name="Beast Crawl",
        type=ExerciseType.ANIMAL_FLOW,
        level=2,
        zones=["full body"],
        category="Animal Flow",
        description="Quadruped crawl with knees hovering",
    ),
    BankExercise(
        name="Hip Openers",
        type=ExerciseType.MOBILITY,
        level=1,
        zones=["hips"],
        category="Mobility",
        description="Controlled hip circles",
    ),
    BankExercise(
        name="Box Breathing",
        type=ExerciseType.BREATHING,
        level=1,
        zones=[],
        category="Recovery",
        description="Four-count inhale, hold, exhale, hold",
    ),
]
