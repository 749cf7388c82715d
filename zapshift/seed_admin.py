"""
Admin bootstrap script.

Every admin route needs an existing admin, so the first one is seeded here.
Run after the database is reachable:

    python -m zapshift.seed_admin admin@example.com
"""

import asyncio
import sys

from sqlalchemy import select

from zapshift.app.db.session import AsyncSessionLocal, Base, engine
from zapshift.app.core.timeutils import utcnow
from zapshift.app.models.account import Account
from zapshift.app.models.enums import AccountRole


async def seed_admin(email: str, session_factory=AsyncSessionLocal) -> str:
    """
    Create ``email`` as an admin account, or promote the existing account.

    Returns:
        "created", "promoted" or "unchanged"
    """
    async with session_factory() as db:
        account = await db.scalar(select(Account).where(Account.email == email))

        if account is None:
            now = utcnow()
            db.add(Account(email=email, role=AccountRole.ADMIN, created_at=now, last_logged_in=now))
            await db.commit()
            return "created"

        if account.role == AccountRole.ADMIN:
            return "unchanged"

        account.role = AccountRole.ADMIN
        await db.commit()
        return "promoted"


async def main(email: str) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    outcome = await seed_admin(email)
    if outcome == "created":
        print(f"✅ Created ADMIN account for {email}")
    elif outcome == "promoted":
        print(f"✅ Promoted {email} to ADMIN")
    else:
        print(f"ℹ️  {email} is already an ADMIN, nothing to do")

    await engine.dispose()


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print("usage: python -m zapshift.seed_admin <email>")
        sys.exit(2)
    asyncio.run(main(sys.argv[1]))
