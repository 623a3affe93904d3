"""CommentRepository — persistence for the ``comment`` table.

Listings only ever return comments whose ``removed`` flag is false; the
direct id lookup can opt into removed rows so a soft-deleted comment stays
retrievable.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from social_network.models import Comment
from social_network.repositories.base import (
    FieldValues,
    build_soft_delete_statement,
    build_update_statement,
    page_offset,
)


class CommentRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def insert(self, comment: Comment) -> Comment:
        self.db.add(comment)
        await self.db.flush()
        return comment

    async def find_by_id(
        self,
        comment_id: str,
        include_removed: bool = False,
        for_update: bool = False,
    ) -> Comment | None:
        q = select(Comment).where(Comment.id == comment_id)
        if not include_removed:
            q = q.where(Comment.removed.is_(False))
        if for_update:
            q = q.with_for_update()
        result = await self.db.execute(q.execution_options(populate_existing=True))
        return result.scalar_one_or_none()

    async def exists_by_id(self, comment_id: str) -> bool:
        q = (
            select(Comment.id)
            .where(Comment.id == comment_id, Comment.removed.is_(False))
            .limit(1)
        )
        result = await self.db.execute(q)
        return result.first() is not None

    async def find(
        self,
        page: int,
        page_size: int,
        account_id: str | None = None,
        post_id: str | None = None,
        comment_id: str | None = None,
    ) -> list[Comment]:
        """
        Return one page of non-removed comments, newest first.

        Each supplied filter narrows the result: *account_id* by author,
        *post_id* by parent post, *comment_id* to the direct replies of that
        comment.
        """
        q = select(Comment).where(Comment.removed.is_(False))
        if account_id:
            q = q.where(Comment.account_id == account_id)
        if post_id:
            q = q.where(Comment.post_id == post_id)
        if comment_id:
            q = q.where(Comment.comment_id == comment_id)

        q = (
            q.order_by(Comment.created_at.desc(), Comment.id.desc())
            .offset(page_offset(page, page_size))
            .limit(page_size)
        )
        result = await self.db.execute(q)
        return list(result.scalars().all())

    async def update_by_id(self, comment_id: str, fields: FieldValues) -> int:
        result = await self.db.execute(
            build_update_statement(Comment, comment_id, fields, "removed")
        )
        return result.rowcount

    async def soft_delete_by_id(self, comment_id: str) -> int:
        result = await self.db.execute(
            build_soft_delete_statement(Comment, comment_id, "removed")
        )
        return result.rowcount
