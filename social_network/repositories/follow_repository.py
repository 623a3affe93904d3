"""FollowRepository — persistence for the ``account_follow`` table.

Unfollowing flips ``unfollowed`` instead of deleting the row, so the table
doubles as a follow history.  Only rows with ``unfollowed = false`` count as
an active relationship.
"""
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from social_network.models import Account, AccountFollow
from social_network.repositories.base import page_offset


class FollowRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def insert(self, follow: AccountFollow) -> AccountFollow:
        self.db.add(follow)
        await self.db.flush()
        return follow

    async def exists_follow(self, account_id: str, account_id_followed: str) -> bool:
        q = (
            select(AccountFollow.id)
            .where(
                AccountFollow.account_id == account_id,
                AccountFollow.account_id_followed == account_id_followed,
                AccountFollow.unfollowed.is_(False),
            )
            .limit(1)
        )
        result = await self.db.execute(q)
        return result.first() is not None

    async def remove(self, account_id: str, account_id_followed: str) -> int:
        stmt = (
            update(AccountFollow)
            .where(
                AccountFollow.account_id == account_id,
                AccountFollow.account_id_followed == account_id_followed,
                AccountFollow.unfollowed.is_(False),
            )
            .values(unfollowed=True)
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        return result.rowcount

    async def find_following(self, account_id: str, page: int, page_size: int) -> list[Account]:
        """Accounts that *account_id* follows, most recent follow first."""
        q = (
            select(Account)
            .join(AccountFollow, AccountFollow.account_id_followed == Account.id)
            .where(
                AccountFollow.account_id == account_id,
                AccountFollow.unfollowed.is_(False),
                Account.deleted.is_(False),
            )
            .order_by(AccountFollow.created_at.desc(), AccountFollow.id.desc())
            .offset(page_offset(page, page_size))
            .limit(page_size)
        )
        result = await self.db.execute(q)
        return list(result.scalars().all())

    async def find_followers(self, account_id: str, page: int, page_size: int) -> list[Account]:
        """Accounts following *account_id*, most recent follow first."""
        q = (
            select(Account)
            .join(AccountFollow, AccountFollow.account_id == Account.id)
            .where(
                AccountFollow.account_id_followed == account_id,
                AccountFollow.unfollowed.is_(False),
                Account.deleted.is_(False),
            )
            .order_by(AccountFollow.created_at.desc(), AccountFollow.id.desc())
            .offset(page_offset(page, page_size))
            .limit(page_size)
        )
        result = await self.db.execute(q)
        return list(result.scalars().all())
