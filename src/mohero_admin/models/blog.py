"""Blog post model."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class BlogPost:
    """An article shown in the app's blog."""

    title: str
    content: str
    image_url: str | None = None
    category: str | None = None
    id: str | None = None
    created_at: datetime | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "title": self.title,
            "content": self.content,
            "image_url": self.image_url,
            "category": self.category,
        }

    @classmethod
    def from_dict(
        cls, data: dict, id: str | None = None, created_at: datetime | None = None
    ) -> "BlogPost":
        """Create from dictionary."""
        return cls(
            id=id,
            title=data["title"],
            content=data.get("content") or "",
            image_url=data.get("image_url") or None,
            category=data.get("category") or None,
            created_at=created_at,
        )
