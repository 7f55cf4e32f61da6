"""Request bodies accepted by the JSON routes."""

from pydantic import BaseModel, ConfigDict, Field

from ..models.blog import BlogPost
from ..models.exercises import BankExercise, ExerciseType
from ..models.program import Difficulty, Phase, Program, ProgramType
from ..services.day_sync import MoveDirection


class PhaseIn(BaseModel):
    title: str
    subtitle: str = ""
    text: str = ""


class ProgramIn(BaseModel):
    """Program form."""

    name: str = Field(min_length=1)
    description: str = ""
    duration: int = Field(ge=1)
    type: ProgramType = ProgramType.DISCOVERY
    clan_id: str | None = None
    tags: list[str] = []
    results: list[str] = []
    summary: list[PhaseIn] = []
    image_url: str | None = None
    difficulty: Difficulty = Difficulty.MEDIUM
    active: bool = True

    def to_program(self) -> Program:
        return Program(
            name=self.name,
            description=self.description,
            duration=self.duration,
            type=self.type,
            clan_id=self.clan_id,
            tags=self.tags,
            results=self.results,
            summary=[Phase(**p.model_dump()) for p in self.summary],
            image_url=self.image_url,
            difficulty=self.difficulty,
            active=self.active,
        )


class BankExerciseIn(BaseModel):
    """Exercise bank form."""

    name: str = Field(min_length=1)
    type: str
    level: int = Field(default=1, ge=1, le=3)
    zones: list[str] = []
    category: str = ""
    description: str = ""
    image_url: str | None = None
    video_url: str | None = None
    variant: str = ""

    def to_exercise(self) -> BankExercise:
        return BankExercise(
            name=self.name,
            type=ExerciseType.parse(self.type),
            level=self.level,
            zones=self.zones,
            category=self.category,
            description=self.description,
            image_url=self.image_url,
            video_url=self.video_url,
            variant=self.variant,
        )


class AddExerciseIn(BaseModel):
    bank_exercise_id: str
    target_value: str = ""
    level: int | None = Field(default=None, ge=1, le=3)


class ReorderIn(BaseModel):
    index: int = Field(ge=0)
    direction: MoveDirection


class ExerciseEditIn(BaseModel):
    """Partial edit of an assigned exercise. Only the keys sent are applied."""

    # Unknown keys reach the service, which rejects them by name
    model_config = ConfigDict(extra="allow")

    name: str | None = Field(default=None, min_length=1)
    type: str | None = None
    level: int | None = Field(default=None, ge=1, le=3)
    target_value: str | None = None
    category: str | None = None
    description: str | None = None
    image_url: str | None = None
    video_url: str | None = None
    variant: str | None = None

    def to_patch(self) -> dict:
        return self.model_dump(exclude_unset=True)


class CopyDayIn(BaseModel):
    source_day_id: str


class BlogPostIn(BaseModel):
    title: str = Field(min_length=1)
    content: str = ""
    image_url: str | None = None
    category: str | None = None

    def to_post(self) -> BlogPost:
        return BlogPost(
            title=self.title,
            content=self.content,
            image_url=self.image_url,
            category=self.category,
        )
