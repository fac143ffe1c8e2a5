import logging

from sqlalchemy import delete, or_, select, true, update

from core.exceptions import NotFoundError
from db.database import Database
from db.models.post import Post
from db.repositories.base import (
    PostStore,
    validate_changes,
    validate_new_post,
    validate_post_id,
    validate_query,
)
from db.repositories.decorators import handle_db_errors, with_retry
from db.utils import utcnow
from schemas.posts import PostCreate, PostOut, PostUpdate

logger = logging.getLogger(__name__)

NEWEST_FIRST = (Post.created_at.desc(), Post.id.desc())


class SqlPostStore(PostStore):
    """Post store backed by an async SQLAlchemy engine.

    Each operation runs in its own session and maps to a single statement,
    so atomicity comes from the database rather than from in-process locks.
    """

    backend = "sql"

    def __init__(self, database: Database) -> None:
        self.database = database

    @handle_db_errors("posts table")
    async def initialize(self) -> None:
        await self.database.create_tables()

    async def close(self) -> None:
        await self.database.dispose()

    async def ping(self) -> bool:
        return await self.database.check_connection()

    @handle_db_errors("post")
    async def create(self, data: PostCreate) -> PostOut:
        validate_new_post(data)
        now = utcnow()
        new_post = Post(
            title=data.title,
            content=data.content,
            excerpt=data.excerpt,
            author=data.author,
            published=data.published,
            created_at=now,
            updated_at=now,
        )
        async with self.database.session() as session:
            session.add(new_post)
            await session.flush()
            await session.refresh(new_post)
        logger.info("Created new post with id %s", new_post.id)
        return PostOut.model_validate(new_post)

    @with_retry(log_prefix="fetching post")
    async def get_by_id(self, post_id: int) -> PostOut | None:
        post_id = validate_post_id(post_id)
        async with self.database.session() as session:
            post = await session.get(Post, post_id)
        if post is None:
            logger.info("Post with id %s not found", post_id)
            return None
        return PostOut.model_validate(post)

    @with_retry(log_prefix="fetching published posts")
    async def list_published(self) -> list[PostOut]:
        stmt = select(Post).where(Post.published == true()).order_by(*NEWEST_FIRST)
        return await self._fetch(stmt)

    @with_retry(log_prefix="fetching all posts")
    async def list_all(self) -> list[PostOut]:
        return await self._fetch(select(Post).order_by(*NEWEST_FIRST))

    @handle_db_errors("post")
    async def update(self, post_id: int, data: PostUpdate) -> PostOut:
        post_id = validate_post_id(post_id)
        changes = validate_changes(data)
        stmt = (
            update(Post)
            .where(Post.id == post_id)
            .values(**changes, updated_at=utcnow())
            .returning(Post)
            .execution_options(synchronize_session=False)
        )
        async with self.database.session() as session:
            res = await session.execute(stmt)
            post = res.scalars().first()
            updated = PostOut.model_validate(post) if post is not None else None
        if updated is None:
            logger.info("Skip update: post %s not found", post_id)
            raise NotFoundError("Post not found")
        logger.info("Updated %s for post %s", sorted(changes) or "timestamp", post_id)
        return updated

    @handle_db_errors("post")
    async def delete(self, post_id: int) -> bool:
        post_id = validate_post_id(post_id)
        stmt = delete(Post).where(Post.id == post_id).execution_options(synchronize_session=False)
        async with self.database.session() as session:
            res = await session.execute(stmt)
        if not res.rowcount:
            logger.info("Skip delete: post %s not found", post_id)
            return False
        logger.info("Deleted post with id %s", post_id)
        return True

    @with_retry(log_prefix="searching posts")
    async def search(self, query: str) -> list[PostOut]:
        term = validate_query(query)
        stmt = (
            select(Post)
            .where(
                Post.published == true(),
                or_(
                    Post.title.icontains(term, autoescape=True),
                    Post.content.icontains(term, autoescape=True),
                    Post.excerpt.icontains(term, autoescape=True),
                ),
            )
            .order_by(*NEWEST_FIRST)
        )
        return await self._fetch(stmt)

    async def _fetch(self, stmt) -> list[PostOut]:
        async with self.database.session() as session:
            res = await session.execute(stmt)
            return [PostOut.model_validate(p) for p in res.scalars().all()]
