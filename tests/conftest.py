"""
Shared fixtures: a SQLite file per test (async engine for the app, sync
engine for seeding and inspection), an in-memory bucket and session tokens.
"""
import asyncio
import os
import time
from typing import Callable, Optional

# Settings are read at import time; these must be set before any project import
os.environ["BACKEND_URL"] = "https://talent.example.co"
os.environ["BACKEND_ANON_KEY"] = "test-anon-key"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["SESSION_JWT_SECRET"] = "test-jwt-secret"
os.environ["STORAGE_ACCESS_KEY_ID"] = "test-access-key"
os.environ["STORAGE_SECRET_ACCESS_KEY"] = "test-secret-key"
os.environ["IMPORT_PASSWORD"] = "import-secret"
os.environ["DEBUG"] = "false"

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine, event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import NullPool

from core.database import get_db
from main import app
from models.base import Base
from models.profile import Profile
from models.profile_image import ProfileImage
from utils.storage import BucketStorage, StorageEntry, StorageError, get_storage

BACKEND_URL = os.environ["BACKEND_URL"]
API_KEY = os.environ["BACKEND_ANON_KEY"]
PUBLIC_PREFIX = f"{BACKEND_URL}/storage/v1/object/public/assets/"


class FakeStorage(BucketStorage):
    """Bucket kept in a dict; every call is recorded in `calls`."""

    def __init__(self):
        super().__init__(client=None, bucket="assets", public_base_url=BACKEND_URL)
        self.objects: dict[str, bytes] = {}
        self.calls: list[tuple] = []
        self.on_upload: Optional[Callable[[str], None]] = None
        self.fail_uploads = False

    def upload(self, path, data, content_type):
        self.calls.append(("upload", path))
        if self.fail_uploads:
            raise StorageError("storage is down")
        if self.on_upload is not None:
            self.on_upload(path)
        self.objects[path] = data

    def remove(self, paths):
        self.calls.append(("remove", tuple(paths)))
        for path in paths:
            self.objects.pop(path, None)

    def list(self, prefix):
        self.calls.append(("list", prefix))
        prefix = prefix.strip("/") + "/"
        children: dict[str, bool] = {}
        for path in self.objects:
            if not path.startswith(prefix):
                continue
            head, sep, _ = path[len(prefix):].partition("/")
            children[head] = children.get(head, False) or bool(sep)
        return sorted(
            (StorageEntry(name=name, is_folder=is_folder) for name, is_folder in children.items()),
            key=lambda e: e.name,
        )


@pytest.fixture
def storage() -> FakeStorage:
    return FakeStorage()


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "talent.db"


@pytest.fixture
def sync_engine(db_path):
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def async_engine(db_path, sync_engine):
    # NullPool: no connection outlives the event loop that opened it
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
    yield engine
    asyncio.run(engine.dispose())


@pytest.fixture
def statements(async_engine) -> list:
    """SQL statements the app sends to the database."""
    executed: list = []

    @event.listens_for(async_engine.sync_engine, "before_cursor_execute")
    def _record(conn, cursor, statement, parameters, context, executemany):
        executed.append(statement)

    return executed


@pytest.fixture
def session_factory(async_engine):
    return async_sessionmaker(bind=async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def run_db(session_factory):
    """Run `await fn(db, *args)` in a fresh session and return its result."""

    def runner(fn, *args, **kwargs):
        async def _go():
            async with session_factory() as db:
                return await fn(db, *args, **kwargs)

        return asyncio.run(_go())

    return runner


@pytest.fixture
def client(session_factory, storage):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    try:
        yield TestClient(app, headers={"apikey": API_KEY})
    finally:
        app.dependency_overrides.clear()


def make_token(sub: Optional[str] = "admin-user", aud: str = "authenticated", secret: str = "test-jwt-secret") -> str:
    claims = {"aud": aud, "exp": int(time.time()) + 3600, "role": "authenticated"}
    if sub is not None:
        claims["sub"] = sub
    return jwt.encode(claims, secret, algorithm="HS256")


@pytest.fixture
def auth_headers() -> dict:
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def add_profile(sync_engine):
    def _add(**fields) -> int:
        with Session(sync_engine) as s:
            profile = Profile(**fields)
            s.add(profile)
            s.commit()
            return profile.id

    return _add


@pytest.fixture
def add_image_record(sync_engine):
    def _add(profile_id: int, file_url: str, **fields) -> int:
        with Session(sync_engine) as s:
            record = ProfileImage(profile_id=profile_id, file_url=file_url, **fields)
            s.add(record)
            s.commit()
            return record.id

    return _add


@pytest.fixture
def load_profile(sync_engine):
    def _load(profile_id: int) -> Optional[Profile]:
        with Session(sync_engine, expire_on_commit=False) as s:
            return s.get(Profile, profile_id)

    return _load


@pytest.fixture
def image_urls(sync_engine):
    """file_url of every image record of a profile."""

    def _urls(profile_id: int) -> list[str]:
        with Session(sync_engine) as s:
            rows = s.query(ProfileImage.file_url).filter(ProfileImage.profile_id == profile_id).all()
            return [r[0] for r in rows]

    return _urls
