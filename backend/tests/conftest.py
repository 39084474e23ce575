"""Shared fixtures: a throwaway SQLite database and an app bound to it."""
import httpx
import pytest
import pytest_asyncio
from httpx import AsyncClient

from nickvote.config import Settings
from nickvote.db import Database
from nickvote.main import create_app
from nickvote.models.admin import Admin
from nickvote.models.student import Student
from nickvote.security import hash_password


@pytest_asyncio.fixture
async def db(tmp_path):
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'nickvote.db'}")
    await database.create_all()
    yield database
    await database.dispose()


@pytest.fixture
def app(db):
    return create_app(Settings(environment="test", database_url=db.url), database=db)


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


async def make_student(db: Database, name: str, username: str | None = None, password: str | None = None, has_voted: bool = False) -> Student:
    """Insert a student. Without a password the account cannot log in (keeps bcrypt out of most tests)."""
    student = Student(
        username=username or f"{name.lower().replace(' ', '.')}@school.test",
        name=name,
        password_hash=hash_password(password) if password else "!",
        has_voted=has_voted,
    )
    async with db.session() as session:
        session.add(student)
        await session.commit()
    return student


async def make_admin(db: Database, username: str = "admin@nickvote.com", password: str = "admin-pass") -> Admin:
    admin = Admin(username=username, password_hash=hash_password(password))
    async with db.session() as session:
        session.add(admin)
        await session.commit()
    return admin
