import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./leettracker-test.db")
os.environ.setdefault("REDIS_URL", "")

import pytest  # noqa: E402
from fastapi import Depends  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from leettracker.db.init_db import init_db  # noqa: E402
from leettracker.db.session import build_engine, build_sessionmaker  # noqa: E402
from leettracker.dependencies import get_cache_service, get_db_session, get_storage  # noqa: E402
from leettracker.main import app  # noqa: E402
from leettracker.schemas.problems import ProblemCreate  # noqa: E402
from leettracker.services.storage import build_storage  # noqa: E402


@pytest.fixture(params=["relational", "embedded"])
def backend(request) -> str:
    return request.param


@pytest.fixture
async def engine(tmp_path, backend):
    test_engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'tracker.db'}")
    await init_db(test_engine, backend)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def session(engine):
    async with build_sessionmaker(engine)() as db_session:
        yield db_session


@pytest.fixture
async def storage(session, backend):
    store = build_storage(session, backend)
    await store.get_or_create_user("alice", email="alice@example.com")
    await store.get_or_create_user("bob", email="bob@example.com")
    return store


@pytest.fixture
async def client(engine, backend):
    sessionmaker = build_sessionmaker(engine)

    async def override_db_session():
        async with sessionmaker() as db_session:
            yield db_session

    async def override_storage(db_session=Depends(get_db_session)):
        return build_storage(db_session, backend)

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_storage] = override_storage
    app.dependency_overrides[get_cache_service] = lambda: None

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test", headers={"X-User-Id": "alice"}) as http:
        yield http

    app.dependency_overrides.clear()


def make_problem(**overrides) -> ProblemCreate:
    data = {
        "problem_number": 1,
        "title": "Two Sum",
        "difficulty": "easy",
        "category": "Array",
        "description": "Find two numbers that add up to target.",
        "notes": "Classic hash map warm-up.",
        "solution": "const seen = new Map();",
    }
    data.update(overrides)
    return ProblemCreate(**data)


def problem_payload(**overrides) -> dict:
    return make_problem(**overrides).model_dump(by_alias=True)
