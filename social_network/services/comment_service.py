"""
Comment service — business logic for comments and threaded replies.

Design notes
------------
- Every reference a new comment carries (author, post, optional parent
  comment) is checked before the insert, and each missing reference maps to
  its own not-found error.
- Update and removal load the comment with ``SELECT ... FOR UPDATE`` and
  check that the requester is the author before writing.  Both statements
  run inside the request transaction owned by ``get_db``.
- Removal is a soft delete: the row keeps its data with ``removed = true``,
  stays reachable through ``find_comment_by_id`` and disappears from every
  listing.  A removed comment can no longer be updated or removed.
"""
import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from social_network.config import settings
from social_network.errors import (
    NotFoundAccountIDError,
    NotFoundCommentIDError,
    NotFoundPostIDError,
    UnauthorizedAccountIDError,
)
from social_network.models import Comment, to_iso, utcnow
from social_network.repositories import AccountRepository, CommentRepository, PostRepository
from social_network.schemas import CommentUpdate

logger = logging.getLogger(__name__)

# Columns a comment author may change.
_MUTABLE_FIELDS: tuple[str, ...] = ("content",)


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------

def comment_to_dict(comment: Comment) -> dict:
    return {
        "id": comment.id,
        "account_id": comment.account_id,
        "post_id": comment.post_id,
        "comment_id": comment.comment_id,
        "content": comment.content,
        "created_at": to_iso(comment.created_at),
        "updated_at": to_iso(comment.updated_at),
        "removed": comment.removed,
    }


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

def new_comment(
    account_id: str,
    post_id: str,
    content: str,
    comment_id: str | None = None,
) -> Comment:
    """Build an unsaved comment with a fresh id and current timestamps."""
    now = utcnow()
    return Comment(
        id=str(uuid.uuid4()),
        account_id=account_id,
        post_id=post_id,
        comment_id=comment_id or None,
        content=content,
        created_at=now,
        updated_at=now,
        removed=False,
    )


async def _load_owned_comment(db: AsyncSession, comment_id: str, account_id: str) -> Comment:
    comment = await CommentRepository(db).find_by_id(comment_id, for_update=True)
    if comment is None:
        raise NotFoundCommentIDError(comment_id)
    if comment.account_id != account_id:
        raise UnauthorizedAccountIDError(account_id)
    return comment


# ---------------------------------------------------------------------------
# Public service functions
# ---------------------------------------------------------------------------

async def insert_comment(db: AsyncSession, comment: Comment) -> dict:
    """
    Persist *comment* after validating its references.

    Raises ``NotFoundAccountIDError``, ``NotFoundPostIDError`` (missing or
    removed post) or ``NotFoundCommentIDError`` (missing or removed parent).
    """
    if not await AccountRepository(db).exists_by_id(comment.account_id):
        raise NotFoundAccountIDError(comment.account_id)
    if not await PostRepository(db).exists_by_id(comment.post_id):
        raise NotFoundPostIDError(comment.post_id)

    comments = CommentRepository(db)
    if comment.comment_id and not await comments.exists_by_id(comment.comment_id):
        raise NotFoundCommentIDError(comment.comment_id)

    await comments.insert(comment)
    return comment_to_dict(comment)


async def find_comments(
    db: AsyncSession,
    requester_id: str,
    page: int = 1,
    account_id: str | None = None,
    post_id: str | None = None,
    comment_id: str | None = None,
) -> list[dict]:
    """
    Return one page of comments matching every supplied filter.

    Each filter must reference an existing row.  With no filter at all the
    requester's own comments are listed.
    """
    if account_id and not await AccountRepository(db).exists_by_id(account_id):
        raise NotFoundAccountIDError(account_id)
    if post_id and not await PostRepository(db).exists_by_id(post_id):
        raise NotFoundPostIDError(post_id)
    comments = CommentRepository(db)
    if comment_id and not await comments.exists_by_id(comment_id):
        raise NotFoundCommentIDError(comment_id)

    if not (account_id or post_id or comment_id):
        account_id = requester_id

    rows = await comments.find(
        page,
        settings.PAGE_SIZE,
        account_id=account_id,
        post_id=post_id,
        comment_id=comment_id,
    )
    return [comment_to_dict(c) for c in rows]


async def find_comment_by_id(db: AsyncSession, comment_id: str) -> dict:
    """Direct lookup; removed comments are returned with ``removed = true``."""
    comment = await CommentRepository(db).find_by_id(comment_id, include_removed=True)
    if comment is None:
        raise NotFoundCommentIDError(comment_id)
    return comment_to_dict(comment)


async def update_comment_data_by_id(
    db: AsyncSession, account_id: str, data: CommentUpdate
) -> dict:
    """
    Apply the supplied mutable fields of *data* to the comment ``data.id``.

    Only the author may update; ``updated_at`` is always refreshed.
    """
    comment = await _load_owned_comment(db, data.id, account_id)

    supplied = data.model_dump(exclude_unset=True)
    fields = [(name, supplied[name]) for name in _MUTABLE_FIELDS if name in supplied]
    fields.append(("updated_at", utcnow()))

    comments = CommentRepository(db)
    await comments.update_by_id(comment.id, fields)
    return comment_to_dict(await comments.find_by_id(comment.id))


async def remove_comment_by_id(db: AsyncSession, account_id: str, comment_id: str) -> dict:
    """Soft-delete the comment *comment_id*; only the author may remove it."""
    comment = await _load_owned_comment(db, comment_id, account_id)

    comments = CommentRepository(db)
    await comments.soft_delete_by_id(comment.id)
    logger.info("Comment %s removed by account %s", comment.id, account_id)
    return comment_to_dict(await comments.find_by_id(comment.id, include_removed=True))
