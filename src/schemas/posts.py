from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from db.utils import as_utc

REQUIRED_TEXT_FIELDS: tuple[str, ...] = ("title", "content", "excerpt", "author")
UPDATABLE_FIELDS: frozenset[str] = frozenset({*REQUIRED_TEXT_FIELDS, "published"})


def strip_text(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


class PostCreate(BaseModel):
    """Payload for creating a post.

    Blank values are accepted here and rejected by the store, which owns the
    non-empty invariant for every backend.
    """

    title: str = Field(..., description="Post title")
    content: str = Field(..., description="Full post content")
    excerpt: str = Field(..., description="Short summary shown in listings")
    author: str = Field(..., description="Author display name")
    published: bool = Field(default=False, description="Whether the post is published")

    strip_text_fields = field_validator(*REQUIRED_TEXT_FIELDS, mode="before")(strip_text)


class PostUpdate(BaseModel):
    """Partial update; only fields present in the payload are applied."""

    title: str | None = Field(None, description="New post title")
    content: str | None = Field(None, description="New post content")
    excerpt: str | None = Field(None, description="New post excerpt")
    author: str | None = Field(None, description="New author name")
    published: bool | None = Field(None, description="New publication status")

    strip_text_fields = field_validator(*REQUIRED_TEXT_FIELDS, mode="before")(strip_text)

    def changes(self) -> dict[str, Any]:
        """Return the explicitly supplied fields, including ones sent as null."""
        return {name: getattr(self, name) for name in self.model_fields_set if name in UPDATABLE_FIELDS}


class PostOut(BaseModel):
    id: int = Field(..., description="Post ID")
    title: str = Field(..., description="Post title")
    content: str = Field(..., description="Full post content")
    excerpt: str = Field(..., description="Post excerpt")
    author: str = Field(..., description="Author display name")
    published: bool = Field(..., description="Publication status")
    created_at: datetime = Field(..., description="Post creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    model_config = {"from_attributes": True}

    @field_validator("created_at", "updated_at")
    @classmethod
    def normalize_timestamp(cls, value: datetime) -> datetime:
        return as_utc(value)
