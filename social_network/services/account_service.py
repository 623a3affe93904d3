"""
Account service — registration, login, profile changes and follows.

Username and email are unique among accounts that are not soft-deleted;
the checks live here rather than in database constraints so a deleted
account releases its username and email.  Passwords are stored as bcrypt
hashes and never serialised.
"""
import logging
import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from social_network.config import settings
from social_network.errors import (
    EmailExistsError,
    FollowExistsError,
    InvalidCredentialsError,
    NotFoundAccountIDError,
    NotFoundFollowError,
    UsernameExistsError,
    ValidationFailedError,
)
from social_network.models import Account, AccountFollow, to_iso, utcnow
from social_network.repositories import AccountRepository, FollowRepository
from social_network.schemas import AccountCreate, AccountUpdate, LoginRequest, Token
from social_network.security import create_token, hash_password, verify_password

logger = logging.getLogger(__name__)

# Update order is fixed so the generated SQL is stable.
_MUTABLE_FIELDS: tuple[str, ...] = ("username", "name", "description", "email", "password")
_NULLABLE_FIELDS: frozenset[str] = frozenset({"description"})


# ---------------------------------------------------------------------------
# Serialisation helpers
# ---------------------------------------------------------------------------

def account_to_dict(account: Account) -> dict:
    """Serialise an Account without its password hash."""
    return {
        "id": account.id,
        "username": account.username,
        "name": account.name,
        "description": account.description,
        "email": account.email,
        "created_at": to_iso(account.created_at),
        "updated_at": to_iso(account.updated_at),
        "deleted": account.deleted,
    }


def new_account(data: AccountCreate) -> Account:
    now = utcnow()
    return Account(
        id=str(uuid.uuid4()),
        username=data.username,
        name=data.name,
        description=data.description,
        email=data.email,
        password=hash_password(data.password),
        created_at=now,
        updated_at=now,
        deleted=False,
    )


async def _require_account(accounts: AccountRepository, account_id: str) -> None:
    if not await accounts.exists_by_id(account_id):
        raise NotFoundAccountIDError(account_id)


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------

async def insert_account(db: AsyncSession, data: AccountCreate) -> dict:
    accounts = AccountRepository(db)
    if await accounts.exists_by_username(data.username):
        raise UsernameExistsError()
    if await accounts.exists_by_email(data.email):
        raise EmailExistsError()

    account = await accounts.insert(new_account(data))
    logger.info("Account %s created", account.id)
    return account_to_dict(account)


async def login(db: AsyncSession, data: LoginRequest) -> Token:
    account = await AccountRepository(db).find_by_email(data.email)
    if account is None or not verify_password(data.password, account.password):
        raise InvalidCredentialsError()
    return Token(token=create_token(account.id))


async def find_account_by_id(db: AsyncSession, account_id: str) -> dict:
    account = await AccountRepository(db).find_by_id(account_id)
    if account is None:
        raise NotFoundAccountIDError(account_id)
    return account_to_dict(account)


async def update_account_data_by_id(
    db: AsyncSession, account_id: str, data: AccountUpdate
) -> dict:
    """
    Change the supplied fields of the requester's own account.

    A new username or email is re-checked for uniqueness and a new password
    is hashed before it is written.
    """
    accounts = AccountRepository(db)
    account = await accounts.find_by_id(account_id, for_update=True)
    if account is None:
        raise NotFoundAccountIDError(account_id)

    supplied = data.model_dump(exclude_unset=True)
    fields = []
    for name in _MUTABLE_FIELDS:
        if name not in supplied:
            continue
        value = supplied[name]
        if value is None and name not in _NULLABLE_FIELDS:
            continue
        if name == "username" and value != account.username:
            if await accounts.exists_by_username(value):
                raise UsernameExistsError()
        if name == "email" and value != account.email:
            if await accounts.exists_by_email(value):
                raise EmailExistsError()
        if name == "password":
            value = hash_password(value)
        fields.append((name, value))

    if not fields:
        raise ValidationFailedError({"body": "No fields to update"})
    fields.append(("updated_at", utcnow()))

    await accounts.update_by_id(account.id, fields)
    return account_to_dict(await accounts.find_by_id(account.id))


async def delete_account_by_id(db: AsyncSession, account_id: str) -> dict:
    accounts = AccountRepository(db)
    if not await accounts.soft_delete_by_id(account_id):
        raise NotFoundAccountIDError(account_id)
    logger.info("Account %s deleted", account_id)
    return account_to_dict(await accounts.find_by_id(account_id, include_deleted=True))


# ---------------------------------------------------------------------------
# Follows
# ---------------------------------------------------------------------------

async def follow(db: AsyncSession, account_id: str, account_id_followed: str) -> dict:
    if account_id == account_id_followed:
        raise ValidationFailedError({"account_id": "An account cannot follow itself"})

    accounts = AccountRepository(db)
    await _require_account(accounts, account_id)
    await _require_account(accounts, account_id_followed)

    follows = FollowRepository(db)
    if await follows.exists_follow(account_id, account_id_followed):
        raise FollowExistsError(account_id_followed)

    try:
        row = await follows.insert(
            AccountFollow(
                account_id=account_id,
                account_id_followed=account_id_followed,
                created_at=utcnow(),
                unfollowed=False,
            )
        )
    except IntegrityError:
        # A concurrent request created the same active follow.
        raise FollowExistsError(account_id_followed) from None
    return {
        "account_id": row.account_id,
        "account_id_followed": row.account_id_followed,
        "created_at": to_iso(row.created_at),
    }


async def unfollow(db: AsyncSession, account_id: str, account_id_followed: str) -> dict:
    if not await FollowRepository(db).remove(account_id, account_id_followed):
        raise NotFoundFollowError(account_id_followed)
    return {"account_id": account_id, "account_id_followed": account_id_followed}


async def find_followers(db: AsyncSession, account_id: str, page: int = 1) -> list[dict]:
    await _require_account(AccountRepository(db), account_id)
    rows = await FollowRepository(db).find_followers(account_id, page, settings.PAGE_SIZE)
    return [account_to_dict(a) for a in rows]


async def find_following(db: AsyncSession, account_id: str, page: int = 1) -> list[dict]:
    await _require_account(AccountRepository(db), account_id)
    rows = await FollowRepository(db).find_following(account_id, page, settings.PAGE_SIZE)
    return [account_to_dict(a) for a in rows]
