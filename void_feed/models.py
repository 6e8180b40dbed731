"""Data models for the void feed."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

ANONYMOUS_AUTHOR = "Anonymous"

# Backend column name -> Item field name
ITEM_COLUMNS = {
    "id": "id",
    "title": "title",
    "summary": "summary",
    "transcript": "body",
    "audio_url": "media_ref",
    "duration": "duration_seconds",
    "created_at": "created_at",
    "categories": "tags",
    "likes": "like_count",
    "view_count": "view_count",
    "author_name": "author_name",
    "user_id": "author_id",
}


class Item(BaseModel):
    """Model for a discoverable content item."""

    id: str
    title: str = ""
    summary: Optional[str] = None
    body: str = Field("", description="Fallback text source for excerpts")
    media_ref: Optional[str] = None
    duration_seconds: float = Field(0.0, ge=0)
    created_at: datetime
    tags: List[str] = Field(default_factory=list)
    like_count: int = Field(0, ge=0)
    view_count: int = Field(0, ge=0)
    author_id: Optional[str] = None
    author_name: Optional[str] = None

    @field_validator("title", "body", mode="before")
    @classmethod
    def _null_text(cls, value):
        return "" if value is None else value

    @field_validator("tags", mode="before")
    @classmethod
    def _null_tags(cls, value):
        return [] if value is None else value

    @field_validator("like_count", "view_count", "duration_seconds", mode="before")
    @classmethod
    def _null_number(cls, value):
        return 0 if value is None else value

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Item":
        """Build an item from a backend row keyed by column name."""
        return cls(**{ITEM_COLUMNS[k]: v for k, v in record.items() if k in ITEM_COLUMNS})


class AuthorSummary(BaseModel):
    """Public identity of an item's author."""

    display_name: Optional[str] = None
    avatar_ref: Optional[str] = None


class EnrichedItem(BaseModel):
    """An item paired with its resolved author summary."""

    item: Item
    author: Optional[AuthorSummary] = None

    @property
    def id(self) -> str:
        return self.item.id

    @property
    def author_label(self) -> str:
        """Name to show for the author, falling back to the row's own name."""
        if self.author and self.author.display_name:
            return self.author.display_name
        return self.item.author_name or ANONYMOUS_AUTHOR

    def excerpt(self, limit: int = 160) -> str:
        """Return the summary, or the body, cut to ``limit`` characters on a word boundary."""
        text = (self.item.summary or self.item.body or "").strip()
        if len(text) <= limit:
            return text
        cut = text[:limit].rsplit(" ", 1)[0] or text[:limit]
        return cut.rstrip(" ,.;:") + "..."
