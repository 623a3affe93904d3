"""
Post service — CRUD for posts with author-only updates and soft removal.

Ownership rules mirror the comment service: the post is loaded with a row
lock, the requester must be its author, and removal only flips ``removed``.
"""
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from social_network.config import settings
from social_network.errors import (
    NotFoundAccountIDError,
    NotFoundPostIDError,
    UnauthorizedAccountIDError,
)
from social_network.models import Post, to_iso, utcnow
from social_network.repositories import AccountRepository, PostRepository
from social_network.schemas import PostUpdate

_MUTABLE_FIELDS: tuple[str, ...] = ("content",)


def post_to_dict(post: Post) -> dict:
    return {
        "id": post.id,
        "account_id": post.account_id,
        "content": post.content,
        "created_at": to_iso(post.created_at),
        "updated_at": to_iso(post.updated_at),
        "removed": post.removed,
    }


def new_post(account_id: str, content: str) -> Post:
    now = utcnow()
    return Post(
        id=str(uuid.uuid4()),
        account_id=account_id,
        content=content,
        created_at=now,
        updated_at=now,
        removed=False,
    )


async def _load_owned_post(db: AsyncSession, post_id: str, account_id: str) -> Post:
    post = await PostRepository(db).find_by_id(post_id, for_update=True)
    if post is None:
        raise NotFoundPostIDError(post_id)
    if post.account_id != account_id:
        raise UnauthorizedAccountIDError(account_id)
    return post


async def insert_post(db: AsyncSession, post: Post) -> dict:
    if not await AccountRepository(db).exists_by_id(post.account_id):
        raise NotFoundAccountIDError(post.account_id)
    await PostRepository(db).insert(post)
    return post_to_dict(post)


async def find_posts_by_account_id(db: AsyncSession, account_id: str, page: int = 1) -> list[dict]:
    if not await AccountRepository(db).exists_by_id(account_id):
        raise NotFoundAccountIDError(account_id)
    posts = await PostRepository(db).find_by_account_id(account_id, page, settings.PAGE_SIZE)
    return [post_to_dict(p) for p in posts]


async def find_post_by_id(db: AsyncSession, post_id: str) -> dict:
    post = await PostRepository(db).find_by_id(post_id, include_removed=True)
    if post is None:
        raise NotFoundPostIDError(post_id)
    return post_to_dict(post)


async def update_post_data_by_id(db: AsyncSession, account_id: str, data: PostUpdate) -> dict:
    post = await _load_owned_post(db, data.id, account_id)

    supplied = data.model_dump(exclude_unset=True)
    fields = [(name, supplied[name]) for name in _MUTABLE_FIELDS if name in supplied]
    fields.append(("updated_at", utcnow()))

    posts = PostRepository(db)
    await posts.update_by_id(post.id, fields)
    return post_to_dict(await posts.find_by_id(post.id))


async def remove_post_by_id(db: AsyncSession, account_id: str, post_id: str) -> dict:
    post = await _load_owned_post(db, post_id, account_id)

    posts = PostRepository(db)
    await posts.soft_delete_by_id(post.id)
    return post_to_dict(await posts.find_by_id(post.id, include_removed=True))
