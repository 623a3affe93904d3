"""PostRepository — persistence for the ``post`` table."""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from social_network.models import Post
from social_network.repositories.base import (
    FieldValues,
    build_soft_delete_statement,
    build_update_statement,
    page_offset,
)


class PostRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def insert(self, post: Post) -> Post:
        self.db.add(post)
        await self.db.flush()
        return post

    async def find_by_id(
        self,
        post_id: str,
        include_removed: bool = False,
        for_update: bool = False,
    ) -> Post | None:
        q = select(Post).where(Post.id == post_id)
        if not include_removed:
            q = q.where(Post.removed.is_(False))
        if for_update:
            q = q.with_for_update()
        result = await self.db.execute(q.execution_options(populate_existing=True))
        return result.scalar_one_or_none()

    async def exists_by_id(self, post_id: str) -> bool:
        q = select(Post.id).where(Post.id == post_id, Post.removed.is_(False)).limit(1)
        result = await self.db.execute(q)
        return result.first() is not None

    async def find_by_account_id(self, account_id: str, page: int, page_size: int) -> list[Post]:
        """Non-removed posts of *account_id*, newest first."""
        q = (
            select(Post)
            .where(Post.account_id == account_id, Post.removed.is_(False))
            .order_by(Post.created_at.desc(), Post.id.desc())
            .offset(page_offset(page, page_size))
            .limit(page_size)
        )
        result = await self.db.execute(q)
        return list(result.scalars().all())

    async def update_by_id(self, post_id: str, fields: FieldValues) -> int:
        result = await self.db.execute(build_update_statement(Post, post_id, fields, "removed"))
        return result.rowcount

    async def soft_delete_by_id(self, post_id: str) -> int:
        result = await self.db.execute(build_soft_delete_statement(Post, post_id, "removed"))
        return result.rowcount
