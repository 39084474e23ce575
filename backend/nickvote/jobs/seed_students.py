"""Seed student and admin accounts from a roster workbook.

    python -m nickvote.jobs.seed_students students.xlsx passwords.xlsx

Every account created gets a random password. The plaintext passwords are
written to the output workbook so they can be handed out.
"""
from __future__ import annotations
import argparse
import asyncio
import sys
from typing import Sequence
import structlog
from sqlalchemy import select

from nickvote.config import settings
from nickvote.db import Database
from nickvote.logging_setup import configure_logging
from nickvote.models.admin import Admin
from nickvote.models.student import Student
from nickvote.security import hash_password
from nickvote.services.passwords import generate_password
from nickvote.services.spreadsheet import RosterRow, CredentialRow, read_roster, write_credentials

log = structlog.get_logger()

ADMIN_DISPLAY_NAME = "Admin User"

async def seed_accounts(
    db: Database,
    roster: Sequence[RosterRow],
    *,
    password_length: int = 10,
    admin_username: str = "admin@nickvote.com",
    admin_password: str = "",
) -> list[CredentialRow]:
    """Create missing students and the admin; return credentials for what was created."""
    created: list[CredentialRow] = []
    async with db.session() as session:
        async with session.begin():
            existing = set((await session.execute(select(Student.username))).scalars().all())
            for row in roster:
                if row.email in existing:
                    continue
                existing.add(row.email)
                plain = generate_password(password_length)
                session.add(Student(username=row.email, name=row.name, password_hash=hash_password(plain), has_voted=False))
                created.append(CredentialRow(email=row.email, name=row.name, password=plain))

            admin = await session.scalar(select(Admin).where(Admin.username == admin_username))
            if admin is None:
                plain = admin_password or generate_password(max(12, password_length))
                session.add(Admin(username=admin_username, password_hash=hash_password(plain)))
                created.append(CredentialRow(email=admin_username, name=ADMIN_DISPLAY_NAME, password=plain))
    return created

async def _run(args: argparse.Namespace) -> int:
    db = Database(args.database_url)
    try:
        if args.create_tables:
            await db.create_all()
        roster = read_roster(args.roster)
        created = await seed_accounts(
            db, roster,
            password_length=settings.seed_password_length,
            admin_username=settings.admin_username,
            admin_password=settings.admin_password,
        )
    finally:
        await db.dispose()

    if not created:
        log.info("seed_skipped", reason="already_seeded", roster_rows=len(roster))
        return 0
    write_credentials(args.output, created)
    log.info("seed_completed", created=len(created), roster_rows=len(roster), output=str(args.output))
    return 0

def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed student accounts from a roster workbook.")
    parser.add_argument("roster", help="Input .xlsx with Email and Name columns")
    parser.add_argument("output", help="Where to write the generated passwords (.xlsx)")
    parser.add_argument("--database-url", default=settings.database_url)
    parser.add_argument("--create-tables", action="store_true", help="Create tables first (no migrations)")
    args = parser.parse_args(argv)
    configure_logging()
    return asyncio.run(_run(args))

if __name__ == "__main__":
    sys.exit(main())
