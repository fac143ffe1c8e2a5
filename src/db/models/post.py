from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Index,
    Integer,
    Text,
    false,
    func,
)

from ..database import Base
from ..utils import utcnow

POST_INDEXES = (
    # Published listing and search are filtered by status and sorted by recency
    Index("ix_post_published_created", "published", "created_at"),
)


class Post(Base):
    """SQLAlchemy model representing a blog post.

    Attributes:
        id (int): Unique post identifier, never reused.
        title (str): Post title.
        content (str): Full post body.
        excerpt (str): Short summary shown in listings.
        author (str): Display name of the author.
        published (bool): True if visible in listing and search.
        created_at (datetime): Creation timestamp (UTC).
        updated_at (datetime): Last modification timestamp (UTC).
    """

    __tablename__ = "posts"
    __table_args__ = (*POST_INDEXES, {"sqlite_autoincrement": True})

    id = Column(
        Integer,
        primary_key=True,
        autoincrement=True,
        doc="Unique post identifier",
    )
    title = Column(Text, nullable=False, doc="Post title")
    content = Column(Text, nullable=False, doc="Full post content")
    excerpt = Column(Text, nullable=False, doc="Short post summary")
    author = Column(Text, nullable=False, doc="Author display name")
    published = Column(
        Boolean,
        default=False,
        server_default=false(),
        nullable=False,
        doc="Whether the post is published",
    )
    created_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.current_timestamp(),
        nullable=False,
        doc="Post creation timestamp",
    )
    updated_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.current_timestamp(),
        nullable=False,
        doc="Last modification timestamp",
    )

    def __repr__(self) -> str:
        title_value = getattr(self, "title", None)
        if isinstance(title_value, str) and title_value:
            title_repr = title_value[:30] + "..." if len(title_value) > 30 else title_value
        else:
            title_repr = ""
        return f"<Post(id={self.id}, title={title_repr!r}, author={self.author!r})>"

    def __str__(self) -> str:
        status = "Published" if getattr(self, "published", False) else "Draft"
        title = getattr(self, "title", "") or ""
        return f"Post '{title}' by {self.author or 'Unknown'} ({status})"
