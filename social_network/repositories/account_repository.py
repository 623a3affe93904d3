"""AccountRepository — persistence for the ``account`` table.

Every lookup except ``find_by_id(include_deleted=True)`` ignores soft-deleted
accounts.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from social_network.models import Account
from social_network.repositories.base import (
    FieldValues,
    build_soft_delete_statement,
    build_update_statement,
)


class AccountRepository:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def insert(self, account: Account) -> Account:
        self.db.add(account)
        await self.db.flush()
        return account

    async def find_by_id(
        self,
        account_id: str,
        include_deleted: bool = False,
        for_update: bool = False,
    ) -> Account | None:
        q = select(Account).where(Account.id == account_id)
        if not include_deleted:
            q = q.where(Account.deleted.is_(False))
        if for_update:
            q = q.with_for_update()
        result = await self.db.execute(q.execution_options(populate_existing=True))
        return result.scalar_one_or_none()

    async def find_by_email(self, email: str) -> Account | None:
        q = select(Account).where(Account.email == email, Account.deleted.is_(False))
        result = await self.db.execute(q)
        return result.scalars().first()

    async def exists_by_id(self, account_id: str) -> bool:
        return await self._exists(Account.id == account_id)

    async def exists_by_username(self, username: str) -> bool:
        return await self._exists(Account.username == username)

    async def exists_by_email(self, email: str) -> bool:
        return await self._exists(Account.email == email)

    async def update_by_id(self, account_id: str, fields: FieldValues) -> int:
        stmt = build_update_statement(Account, account_id, fields, "deleted")
        result = await self.db.execute(stmt)
        return result.rowcount

    async def soft_delete_by_id(self, account_id: str) -> int:
        result = await self.db.execute(build_soft_delete_statement(Account, account_id, "deleted"))
        return result.rowcount

    async def _exists(self, criterion) -> bool:
        q = select(Account.id).where(criterion, Account.deleted.is_(False)).limit(1)
        result = await self.db.execute(q)
        return result.first() is not None
