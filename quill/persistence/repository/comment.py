"""PostgreSQL implementation of Comment repository."""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import asc, desc, func, literal, not_, select, update
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from quill.domain.model import Comment, CommentFlag
from quill.domain.repository import CommentRepository, CommentStats
from quill.domain.value import (
    CommentId,
    CommentPath,
    CommentSortField,
    FlagReason,
    PostId,
    SortOrder,
    UserId,
)
from quill.persistence.mappers import comment_to_dict, flag_to_dict, row_to_comment
from quill.persistence.tables import comments_table

c = comments_table.c


class PostgresCommentRepository(CommentRepository):
    """PostgreSQL implementation of CommentRepository.

    Every mutation is a single conditional UPDATE, so concurrent requests
    never lose counter updates and a like or flag is never applied twice.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def _fetch_all(self, stmt: Select) -> List[Comment]:
        result = await self.session.execute(stmt)
        return [row_to_comment(row._asdict()) for row in result.fetchall()]

    async def find_by_id(
        self, comment_id: CommentId, include_deleted: bool = False
    ) -> Optional[Comment]:
        """Find a comment by ID."""
        stmt = select(comments_table).where(c.id == comment_id)

        if not include_deleted:
            stmt = stmt.where(c.deleted_at.is_(None))

        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_comment(row._asdict()) if row else None

    async def find_by_post(
        self,
        post_id: PostId,
        include_deleted: bool = False,
    ) -> List[Comment]:
        """Find all comments for a post in tree order."""
        stmt = select(comments_table).where(c.post_id == post_id)

        if not include_deleted:
            stmt = stmt.where(c.deleted_at.is_(None))

        return await self._fetch_all(stmt.order_by(c.path))

    def _siblings(self, post_id: PostId, parent_id: Optional[CommentId]):
        parent_clause = (
            c.parent_id.is_(None) if parent_id is None else c.parent_id == parent_id
        )
        return (c.post_id == post_id, parent_clause, c.deleted_at.is_(None))

    async def find_page(
        self,
        post_id: PostId,
        parent_id: Optional[CommentId] = None,
        sort_by: CommentSortField = CommentSortField.CREATED_AT,
        sort_order: SortOrder = SortOrder.DESC,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Comment]:
        """Find one page of non-deleted comments sharing a parent."""
        direction = desc if sort_order == SortOrder.DESC else asc
        stmt = (
            select(comments_table)
            .where(*self._siblings(post_id, parent_id))
            .order_by(
                direction(c[sort_by.value]),
                direction(c.created_at),
                direction(c.id),
            )
            .limit(limit)
            .offset(offset)
        )
        return await self._fetch_all(stmt)

    async def count(
        self, post_id: PostId, parent_id: Optional[CommentId] = None
    ) -> int:
        """Count non-deleted comments sharing a parent."""
        stmt = (
            select(func.count())
            .select_from(comments_table)
            .where(*self._siblings(post_id, parent_id))
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def find_children(
        self,
        parent_id: CommentId,
        include_deleted: bool = False,
    ) -> List[Comment]:
        """Find direct child comments of a parent comment."""
        stmt = select(comments_table).where(c.parent_id == parent_id)

        if not include_deleted:
            stmt = stmt.where(c.deleted_at.is_(None))

        return await self._fetch_all(stmt.order_by(c.created_at, c.id))

    async def find_descendants(
        self, path: CommentPath, include_deleted: bool = True
    ) -> List[Comment]:
        """Find every comment below path with a single LIKE prefix query."""
        stmt = select(comments_table).where(c.path.like(f"{path.descendant_prefix}%"))

        if not include_deleted:
            stmt = stmt.where(c.deleted_at.is_(None))

        return await self._fetch_all(stmt.order_by(c.path))

    async def find_by_author(
        self,
        author_id: UserId,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Comment]:
        """Find comments by a specific author."""
        stmt = (
            select(comments_table)
            .where(c.author_id == author_id, c.deleted_at.is_(None))
            .order_by(desc(c.created_at), desc(c.id))
            .limit(limit)
            .offset(offset)
        )
        return await self._fetch_all(stmt)

    async def count_by_author(self, author_id: UserId) -> int:
        """Count non-deleted comments by an author."""
        stmt = (
            select(func.count())
            .select_from(comments_table)
            .where(c.author_id == author_id, c.deleted_at.is_(None))
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    async def save(self, comment: Comment) -> Comment:
        """Save a comment (create or replace)."""
        comment_dict = comment_to_dict(comment)
        existing = await self.find_by_id(comment.id, include_deleted=True)

        if existing:
            stmt = (
                comments_table.update()
                .where(c.id == comment.id)
                .values(**comment_dict)
            )
        else:
            stmt = comments_table.insert().values(**comment_dict)

        await self.session.execute(stmt)
        await self.session.flush()
        return comment

    async def update_content(
        self, comment_id: CommentId, content: str, edited_at: datetime
    ) -> Optional[Comment]:
        """Replace the content of a non-deleted comment."""
        stmt = (
            update(comments_table)
            .where(c.id == comment_id, c.deleted_at.is_(None))
            .values(
                content=content,
                is_edited=True,
                edited_at=edited_at,
                updated_at=edited_at,
            )
            .returning(comments_table)
        )

        result = await self.session.execute(stmt)
        row = result.fetchone()

        if row is None:
            # Comment not found or deleted
            return None

        await self.session.flush()
        return row_to_comment(row._asdict())

    async def mark_deleted(
        self, comment_id: CommentId, deleted_by: UserId, deleted_at: datetime
    ) -> bool:
        """Soft-delete a comment if it is not already deleted."""
        stmt = (
            update(comments_table)
            .where(c.id == comment_id, c.deleted_at.is_(None))
            .values(
                deleted_at=deleted_at,
                deleted_by=deleted_by,
                updated_at=deleted_at,
            )
            .returning(c.id)
        )
        result = await self.session.execute(stmt)
        marked = result.fetchone() is not None
        await self.session.flush()
        return marked

    async def increment_replies_count(self, comment_id: CommentId, delta: int) -> bool:
        """Atomically add delta to replies_count (minimum 0).

        A concurrent delete holding the row lock is re-checked once it
        commits, so a freshly deleted parent is never counted into.
        """
        stmt = (
            update(comments_table)
            .where(c.id == comment_id, c.deleted_at.is_(None))
            .values(replies_count=func.greatest(c.replies_count + delta, 0))
            .returning(c.id)
        )
        result = await self.session.execute(stmt)
        applied = result.fetchone() is not None
        await self.session.flush()
        return applied

    async def add_like(self, comment_id: CommentId, user_id: UserId) -> Optional[int]:
        """Append user_id to liked_by unless already present."""
        stmt = (
            update(comments_table)
            .where(
                c.id == comment_id,
                c.deleted_at.is_(None),
                not_(c.liked_by.contains([user_id])),
            )
            .values(
                liked_by=func.array_append(c.liked_by, user_id, type_=c.liked_by.type),
                likes_count=c.likes_count + 1,
            )
            .returning(c.likes_count)
        )
        return await self._execute_count(stmt)

    async def remove_like(
        self, comment_id: CommentId, user_id: UserId
    ) -> Optional[int]:
        """Remove user_id from liked_by if present."""
        stmt = (
            update(comments_table)
            .where(
                c.id == comment_id,
                c.deleted_at.is_(None),
                c.liked_by.contains([user_id]),
            )
            .values(
                liked_by=func.array_remove(c.liked_by, user_id, type_=c.liked_by.type),
                likes_count=func.greatest(c.likes_count - 1, 0),
            )
            .returning(c.likes_count)
        )
        return await self._execute_count(stmt)

    async def _execute_count(self, stmt) -> Optional[int]:
        result = await self.session.execute(stmt)
        row = result.fetchone()
        await self.session.flush()
        return row[0] if row is not None else None

    async def add_flag(
        self, comment_id: CommentId, flag: CommentFlag
    ) -> Optional[Comment]:
        """Append a flag unless this flagger already flagged the comment."""
        stmt = (
            update(comments_table)
            .where(
                c.id == comment_id,
                c.deleted_at.is_(None),
                not_(c.flags.contains([{"flagger_id": str(flag.flagger_id)}])),
            )
            .values(
                flags=c.flags.op("||", return_type=JSONB)(
                    literal([flag_to_dict(flag)], type_=JSONB)
                ),
                updated_at=flag.created_at,
            )
            .returning(comments_table)
        )
        result = await self.session.execute(stmt)
        row = result.fetchone()
        await self.session.flush()
        return row_to_comment(row._asdict()) if row else None

    async def mark_flagged(
        self, comment_id: CommentId, reason: FlagReason, threshold: int
    ) -> bool:
        """Set is_flagged the first time the flag count reaches threshold."""
        stmt = (
            update(comments_table)
            .where(
                c.id == comment_id,
                c.is_flagged.is_(False),
                func.jsonb_array_length(c.flags) >= threshold,
            )
            .values(is_flagged=True, flag_reason=reason.value)
            .returning(c.id)
        )
        result = await self.session.execute(stmt)
        flipped = result.fetchone() is not None
        await self.session.flush()
        return flipped

    async def aggregate_stats(self, post_id: PostId) -> CommentStats:
        """Aggregate over the post's non-deleted comments."""
        stmt = select(
            func.count(),
            func.coalesce(func.sum(c.likes_count), 0),
            func.count().filter(c.parent_id.is_(None)),
            func.count().filter(c.parent_id.is_not(None)),
        ).where(c.post_id == post_id, c.deleted_at.is_(None))

        result = await self.session.execute(stmt)
        total, likes, top_level, replies = result.one()
        return CommentStats(
            total_comments=total,
            total_likes=likes,
            top_level_comments=top_level,
            total_replies=replies,
        )
