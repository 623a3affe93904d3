from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from social_network.cache import cache
from social_network.database import get_db
from social_network.dependencies import PaginationParams, current_account_id
from social_network.schemas import (
    CommentCreate,
    CommentRemove,
    CommentResponse,
    CommentUpdate,
    PageResponse,
)
from social_network.services import comment_service

router = APIRouter(tags=["comments"])


@router.post("/comments/{post_id}", response_model=CommentResponse)
async def create_comment(
    post_id: str,
    data: CommentCreate,
    comment_id: str | None = Query(None, description="Parent comment for a reply."),
    account_id: str = Depends(current_account_id),
    db: AsyncSession = Depends(get_db),
):
    comment = comment_service.new_comment(
        account_id, post_id, data.content, comment_id or data.comment_id
    )
    return await comment_service.insert_comment(db, comment)


@router.get("/accounts/comments", response_model=PageResponse)
async def list_comments(
    request: Request,
    account_id: str | None = Query(None),
    post_id: str | None = Query(None),
    comment_id: str | None = Query(None),
    requester_id: str = Depends(current_account_id),
    pagination: PaginationParams = Depends(),
    db: AsyncSession = Depends(get_db),
):
    async def load() -> dict:
        items = await comment_service.find_comments(
            db,
            requester_id,
            pagination.page,
            account_id=account_id,
            post_id=post_id,
            comment_id=comment_id,
        )
        return {"items": items, "page": pagination.page, "page_size": pagination.page_size}

    # Without filters the listing belongs to the requester.
    scope = None if (account_id or post_id or comment_id) else requester_id
    return await cache.read_through(request, load, scope=scope)


@router.get("/comments/{comment_id}", response_model=CommentResponse)
async def get_comment(
    comment_id: str,
    _: str = Depends(current_account_id),
    db: AsyncSession = Depends(get_db),
):
    return await comment_service.find_comment_by_id(db, comment_id)


@router.put("/comments", response_model=CommentResponse)
async def update_comment(
    data: CommentUpdate,
    account_id: str = Depends(current_account_id),
    db: AsyncSession = Depends(get_db),
):
    return await comment_service.update_comment_data_by_id(db, account_id, data)


@router.delete("/comments", response_model=CommentResponse)
async def delete_comment(
    data: CommentRemove,
    account_id: str = Depends(current_account_id),
    db: AsyncSession = Depends(get_db),
):
    return await comment_service.remove_comment_by_id(db, account_id, data.id)
