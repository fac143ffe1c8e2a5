from typing import Any

from pydantic import BaseModel, Field

from .posts import PostOut


class PostResponse(BaseModel):
    """Single post envelope."""

    post: PostOut = Field(..., description="The affected post")


class PostListResponse(BaseModel):
    """Collection envelope, newest first."""

    posts: list[PostOut] = Field(..., description="Posts ordered by creation time, newest first")


class SearchResponse(PostListResponse):
    """Search results together with the query that produced them."""

    query: str = Field(..., description="The search query as received")


class MessageResponse(BaseModel):
    """Simple message response schema."""

    message: str = Field(..., description="Response message")


class ErrorResponse(BaseModel):
    """Error response schema shared by every failing request."""

    error: str = Field(..., description="Human readable error message")
    details: list[dict[str, Any]] | None = Field(None, description="Field-level validation errors")


class HealthCheckResponse(BaseModel):
    """Health check response schema."""

    success: bool = Field(..., description="Whether the store answered the probe")
    status: str = Field(..., description="Service status")
    store: str = Field(..., description="Active store backend")
    timestamp: str = Field(..., description="Probe time (ISO 8601, UTC)")
