from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from social_network.cache import cache
from social_network.database import get_db
from social_network.dependencies import PaginationParams, current_account_id
from social_network.schemas import (
    AccountCreate,
    AccountResponse,
    AccountUpdate,
    LoginRequest,
    PageResponse,
    Token,
)
from social_network.services import account_service

router = APIRouter(prefix="/accounts", tags=["accounts"])


@router.post("", response_model=AccountResponse)
async def create_account(data: AccountCreate, db: AsyncSession = Depends(get_db)):
    return await account_service.insert_account(db, data)


@router.post("/login", response_model=Token)
async def login(data: LoginRequest, db: AsyncSession = Depends(get_db)):
    return await account_service.login(db, data)


@router.put("", response_model=AccountResponse)
async def update_account(
    data: AccountUpdate,
    account_id: str = Depends(current_account_id),
    db: AsyncSession = Depends(get_db),
):
    return await account_service.update_account_data_by_id(db, account_id, data)


@router.delete("", response_model=AccountResponse)
async def delete_account(
    account_id: str = Depends(current_account_id),
    db: AsyncSession = Depends(get_db),
):
    return await account_service.delete_account_by_id(db, account_id)


# --- Follows ---

@router.post("/follow/{account_id}")
async def follow_account(
    account_id: str,
    requester_id: str = Depends(current_account_id),
    db: AsyncSession = Depends(get_db),
):
    return await account_service.follow(db, requester_id, account_id)


@router.delete("/follow/{account_id}")
async def unfollow_account(
    account_id: str,
    requester_id: str = Depends(current_account_id),
    db: AsyncSession = Depends(get_db),
):
    return await account_service.unfollow(db, requester_id, account_id)


@router.get("/followers", response_model=PageResponse)
async def list_followers(
    request: Request,
    account_id: str | None = Query(None, description="Defaults to the requester."),
    requester_id: str = Depends(current_account_id),
    pagination: PaginationParams = Depends(),
    db: AsyncSession = Depends(get_db),
):
    target = account_id or requester_id

    async def load() -> dict:
        items = await account_service.find_followers(db, target, pagination.page)
        return {"items": items, "page": pagination.page, "page_size": pagination.page_size}

    return await cache.read_through(request, load, scope=None if account_id else requester_id)


@router.get("/following", response_model=PageResponse)
async def list_following(
    request: Request,
    account_id: str | None = Query(None, description="Defaults to the requester."),
    requester_id: str = Depends(current_account_id),
    pagination: PaginationParams = Depends(),
    db: AsyncSession = Depends(get_db),
):
    target = account_id or requester_id

    async def load() -> dict:
        items = await account_service.find_following(db, target, pagination.page)
        return {"items": items, "page": pagination.page, "page_size": pagination.page_size}

    return await cache.read_through(request, load, scope=None if account_id else requester_id)


# Declared last so the literal paths above take precedence.
@router.get("/{account_id}", response_model=AccountResponse)
async def get_account(
    account_id: str,
    _: str = Depends(current_account_id),
    db: AsyncSession = Depends(get_db),
):
    return await account_service.find_account_by_id(db, account_id)
