"""Aggregate statistics for the dashboard's stats page."""

from collections import Counter
from dataclasses import dataclass, field

from ..db.backend import TableBackend
from ..db.repositories import (
    BankExerciseRepository,
    BlogPostRepository,
    DayRepository,
    ExerciseAssignmentRepository,
    ProgramRepository,
)
from ..models.program import Difficulty, ProgramType

# Key used in programs_by_clan for programs without a clan
UNASSIGNED_CLAN = "unassigned"


@dataclass
class ProgramContent:
    """How much content a program holds."""

    program_id: str
    name: str
    days: int
    exercises: int
    empty_days: int


@dataclass
class AppStats:
    """Dashboard-wide counters."""

    total_programs: int = 0
    active_programs: int = 0
    programs_by_type: dict[str, int] = field(default_factory=dict)
    programs_by_difficulty: dict[str, int] = field(default_factory=dict)
    programs_by_clan: dict[str, int] = field(default_factory=dict)
    bank_exercises: int = 0
    blog_posts: int = 0
    total_assignments: int = 0
    program_content: list[ProgramContent] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "total_programs": self.total_programs,
            "active_programs": self.active_programs,
            "programs_by_type": self.programs_by_type,
            "programs_by_difficulty": self.programs_by_difficulty,
            "programs_by_clan": self.programs_by_clan,
            "bank_exercises": self.bank_exercises,
            "blog_posts": self.blog_posts,
            "total_assignments": self.total_assignments,
            "program_content": [
                {
                    "program_id": c.program_id,
                    "name": c.name,
                    "days": c.days,
                    "exercises": c.exercises,
                    "empty_days": c.empty_days,
                }
                for c in self.program_content
            ],
        }


class StatsService:
    """Computes dashboard statistics from the stored tables."""

    def __init__(self, backend: TableBackend):
        self.programs = ProgramRepository(backend)
        self.days = DayRepository(backend)
        self.assignments = ExerciseAssignmentRepository(backend)
        self.bank = BankExerciseRepository(backend)
        self.blog = BlogPostRepository(backend)

    async def get_stats(self) -> AppStats:
        programs = await self.programs.list_all()

        by_type = Counter(p.type.value for p in programs)
        by_difficulty = Counter(p.difficulty.value for p in programs)
        by_clan = Counter(p.clan_id or UNASSIGNED_CLAN for p in programs)

        days = await self.days.list_for_programs([p.id for p in programs])
        assignments = await self.assignments.list_for_days([d.id for d in days])
        per_day = Counter(a.day_id for a in assignments)

        content = []
        for program in programs:
            # Only days inside the program's duration are shown in the manager
            program_days = [
                d for d in days
                if d.program_id == program.id and d.ordinal <= program.duration
            ]
            content.append(
                ProgramContent(
                    program_id=program.id,
                    name=program.name,
                    days=len(program_days),
                    exercises=sum(per_day[d.id] for d in program_days),
                    empty_days=sum(1 for d in program_days if per_day[d.id] == 0),
                )
            )

        return AppStats(
            total_programs=len(programs),
            active_programs=sum(1 for p in programs if p.active),
            programs_by_type={t.value: by_type.get(t.value, 0) for t in ProgramType},
            programs_by_difficulty={d.value: by_difficulty.get(d.value, 0) for d in Difficulty},
            programs_by_clan=dict(sorted(by_clan.items())),
            bank_exercises=await self.bank.count(),
            blog_posts=await self.blog.count(),
            total_assignments=len(assignments),
            program_content=content,
        )
