from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from social_network.cache import cache
from social_network.database import get_db
from social_network.dependencies import PaginationParams, current_account_id
from social_network.schemas import PageResponse, PostCreate, PostRemove, PostResponse, PostUpdate
from social_network.services import post_service

router = APIRouter(tags=["posts"])


@router.post("/posts", response_model=PostResponse)
async def create_post(
    data: PostCreate,
    account_id: str = Depends(current_account_id),
    db: AsyncSession = Depends(get_db),
):
    return await post_service.insert_post(db, post_service.new_post(account_id, data.content))


@router.get("/accounts/posts", response_model=PageResponse)
async def list_posts(
    request: Request,
    account_id: str | None = Query(None, description="Author; defaults to the requester."),
    requester_id: str = Depends(current_account_id),
    pagination: PaginationParams = Depends(),
    db: AsyncSession = Depends(get_db),
):
    target = account_id or requester_id

    async def load() -> dict:
        items = await post_service.find_posts_by_account_id(db, target, pagination.page)
        return {"items": items, "page": pagination.page, "page_size": pagination.page_size}

    return await cache.read_through(request, load, scope=None if account_id else requester_id)


@router.get("/posts/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: str,
    _: str = Depends(current_account_id),
    db: AsyncSession = Depends(get_db),
):
    return await post_service.find_post_by_id(db, post_id)


@router.put("/posts", response_model=PostResponse)
async def update_post(
    data: PostUpdate,
    account_id: str = Depends(current_account_id),
    db: AsyncSession = Depends(get_db),
):
    return await post_service.update_post_data_by_id(db, account_id, data)


@router.delete("/posts", response_model=PostResponse)
async def delete_post(
    data: PostRemove,
    account_id: str = Depends(current_account_id),
    db: AsyncSession = Depends(get_db),
):
    return await post_service.remove_post_by_id(db, account_id, data.id)
