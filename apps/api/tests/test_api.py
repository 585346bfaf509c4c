from typing import Any, Dict, Optional

from conftest import problem_payload
from leettracker.core.config import settings
from leettracker.dependencies import get_cache_service, get_storage
from leettracker.main import app
from leettracker.services.cache import CacheService

NESTED_SOLUTION = "for i in range(n):\n    for j in range(n):\n        total += grid[i][j]\n"


async def _create(client, **overrides) -> Dict[str, Any]:
    response = await client.post("/api/problems", json=problem_payload(**overrides))
    assert response.status_code == 201, response.text
    return response.json()


async def test_health_endpoints(client):
    assert (await client.get("/healthz")).json() == {"status": "ok"}
    assert (await client.get("/api/health")).json() == {"status": "healthy"}


async def test_auth_user_is_created_from_identity_headers(client):
    response = await client.get("/api/auth/user", headers={"X-User-Email": "alice@example.com"})

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == "alice"
    assert body["email"] == "alice@example.com"
    assert "createdAt" in body


async def test_auth_user_picks_up_profile_changes(client):
    await client.get("/api/auth/user", headers={"X-User-Email": "alice@example.com"})

    response = await client.get(
        "/api/auth/user",
        headers={"X-User-Email": "alice@work.example.com", "X-User-First-Name": "Alice"},
    )

    assert response.status_code == 200
    assert response.json()["email"] == "alice@work.example.com"
    assert response.json()["firstName"] == "Alice"


async def test_email_shared_by_two_identities_is_conflict(client):
    first = await client.get("/api/auth/user", headers={"X-User-Id": "u1", "X-User-Email": "same@example.com"})
    assert first.status_code == 200

    second = await client.get("/api/auth/user", headers={"X-User-Id": "u2", "X-User-Email": "same@example.com"})
    assert second.status_code == 409
    assert second.json() == {"detail": "Email already in use"}

    problems = await client.get("/api/problems", headers={"X-User-Id": "u2", "X-User-Email": "same@example.com"})
    assert problems.status_code == 409

    again = await client.get("/api/auth/user", headers={"X-User-Id": "u1", "X-User-Email": "same@example.com"})
    assert again.json()["id"] == "u1"


async def test_missing_identity_is_unauthorized(client, monkeypatch):
    monkeypatch.setattr(settings, "default_user_id", "")

    response = await client.get("/api/problems", headers={"X-User-Id": ""})

    assert response.status_code == 401


async def test_create_and_fetch_problem(client):
    created = await _create(client)

    assert created["problemNumber"] == 1
    assert created["userId"] == "alice"
    assert created["difficulty"] == "easy"

    response = await client.get(f"/api/problems/{created['id']}")
    assert response.status_code == 200
    assert response.json()["title"] == "Two Sum"

    other = await client.get(f"/api/problems/{created['id']}", headers={"X-User-Id": "bob"})
    assert other.status_code == 404


async def test_create_accepts_snake_case_keys(client):
    response = await client.post(
        "/api/problems",
        json={"problem_number": 7, "title": "Reverse Integer", "difficulty": "MEDIUM", "solution": "return 0"},
    )

    assert response.status_code == 201
    assert response.json()["difficulty"] == "medium"


async def test_create_validation_errors_are_400(client):
    missing_title = problem_payload()
    del missing_title["title"]

    assert (await client.post("/api/problems", json=missing_title)).status_code == 400
    assert (await client.post("/api/problems", json=problem_payload() | {"difficulty": "extreme"})).status_code == 400
    assert (await client.post("/api/problems", json=problem_payload() | {"problemNumber": 0})).status_code == 400


async def test_partial_update(client):
    created = await _create(client)

    response = await client.put(f"/api/problems/{created['id']}", json={"notes": "Revisit with two pointers"})

    assert response.status_code == 200
    body = response.json()
    assert body["notes"] == "Revisit with two pointers"
    assert body["title"] == created["title"]
    assert body["solution"] == created["solution"]


async def test_update_errors(client):
    created = await _create(client)

    assert (await client.put("/api/problems/9999", json={"title": "Nope"})).status_code == 404
    assert (await client.put(f"/api/problems/{created['id']}", json={"title": None})).status_code == 400
    assert (await client.put(f"/api/problems/{created['id']}", json={"difficulty": "impossible"})).status_code == 400
    assert (
        await client.put(f"/api/problems/{created['id']}", json={"title": "Mine"}, headers={"X-User-Id": "bob"})
    ).status_code == 404


async def test_delete_problem(client):
    created = await _create(client)

    response = await client.delete(f"/api/problems/{created['id']}")
    assert response.status_code == 204
    assert response.content == b""

    assert (await client.get(f"/api/problems/{created['id']}")).status_code == 404
    assert (await client.delete(f"/api/problems/{created['id']}")).status_code == 404


async def test_non_integer_id_is_400(client):
    assert (await client.get("/api/problems/abc")).status_code == 400


async def test_list_pagination(client):
    ids = [(await _create(client, problem_number=n, title=f"Problem {n}"))["id"] for n in range(1, 16)]

    first = (await client.get("/api/problems", params={"limit": 10, "offset": 0})).json()
    second = (await client.get("/api/problems", params={"limit": 10, "offset": 10})).json()

    assert len(first) == 10
    assert len(second) == 5
    assert [problem["id"] for problem in first + second] == list(reversed(ids))
    assert (await client.get("/api/problems", params={"limit": 0})).status_code == 400


async def test_list_search_and_filters(client):
    await _create(client, title="Two Sum", difficulty="easy", category="Array")
    await _create(client, problem_number=15, title="3Sum", difficulty="medium", category="Two Pointers")

    search = (await client.get("/api/problems", params={"search": "3sum"})).json()
    assert [problem["title"] for problem in search] == ["3Sum"]

    by_difficulty = (await client.get("/api/problems", params={"difficulty": "easy"})).json()
    assert [problem["title"] for problem in by_difficulty] == ["Two Sum"]

    by_category = (await client.get("/api/problems", params={"category": "pointers"})).json()
    assert [problem["title"] for problem in by_category] == ["3Sum"]


async def test_stats(client):
    await _create(client, problem_number=1, difficulty="easy")
    await _create(client, problem_number=2, difficulty="easy")
    await _create(client, problem_number=3, difficulty="medium")

    response = await client.get("/api/stats")

    assert response.status_code == 200
    assert response.json() == {"total": 3, "easy": 2, "medium": 1, "hard": 0}


async def test_chat_exchange(client):
    created = await _create(client, solution=NESTED_SOLUTION)

    response = await client.post(f"/api/problems/{created['id']}/chat", json={"message": "What's the time complexity?"})

    assert response.status_code == 200
    body = response.json()
    assert body["userMessage"]["message"] == "What's the time complexity?"
    assert body["userMessage"]["isAi"] is False
    assert body["aiMessage"]["isAi"] is True
    assert "Time Complexity:" in body["aiMessage"]["message"]
    assert "O(n²)" in body["aiMessage"]["message"]

    history = (await client.get(f"/api/problems/{created['id']}/chat")).json()
    assert [message["id"] for message in history] == [body["userMessage"]["id"], body["aiMessage"]["id"]]


async def test_chat_errors(client):
    created = await _create(client)

    assert (await client.post(f"/api/problems/{created['id']}/chat", json={"message": "   "})).status_code == 400
    assert (await client.post(f"/api/problems/{created['id']}/chat", json={})).status_code == 400
    assert (await client.post("/api/problems/9999/chat", json={"message": "hi"})).status_code == 404
    assert (await client.get("/api/problems/9999/chat")).status_code == 404


async def test_chat_history_is_gone_after_delete(client):
    created = await _create(client)
    await client.post(f"/api/problems/{created['id']}/chat", json={"message": "explain"})

    await client.delete(f"/api/problems/{created['id']}")

    assert (await client.get(f"/api/problems/{created['id']}/chat")).status_code == 404


async def test_analyze_get_and_post(client):
    created = await _create(client, solution=NESTED_SOLUTION)

    for method in ("GET", "POST"):
        response = await client.request(method, f"/api/problems/{created['id']}/analyze")
        assert response.status_code == 200
        body = response.json()
        assert body["timeComplexity"] == "O(n²)"
        assert body["spaceComplexity"] == "O(1)"
        assert "Nested loops" in body["patterns"]
        assert len(body["suggestions"]) == len(set(body["suggestions"]))

    assert (await client.get("/api/problems/9999/analyze")).status_code == 404


class InMemoryRedis:
    def __init__(self) -> None:
        self.values: Dict[str, str] = {}

    async def get(self, key: str) -> Optional[str]:
        return self.values.get(key)

    async def set(self, key: str, value: str, ex: Optional[int] = None) -> None:
        self.values[key] = value


async def test_analyze_uses_cache_when_configured(client):
    redis = InMemoryRedis()
    cache = CacheService(redis, ttl_seconds=60)
    app.dependency_overrides[get_cache_service] = lambda: cache
    created = await _create(client, solution=NESTED_SOLUTION)

    first = await client.get(f"/api/problems/{created['id']}/analyze")
    assert first.status_code == 200
    assert len(redis.values) == 1

    key = next(iter(redis.values))
    await cache.set(key, {"time_complexity": "cached", "space_complexity": "O(1)", "suggestions": [], "patterns": []})

    second = await client.get(f"/api/problems/{created['id']}/analyze")
    assert second.json()["timeComplexity"] == "cached"


async def test_unexpected_errors_are_500(client):
    class BrokenStorage:
        async def get_or_create_user(self, user_id, **profile):
            raise RuntimeError("database is on fire")

    app.dependency_overrides[get_storage] = lambda: BrokenStorage()

    response = await client.get("/api/stats")

    assert response.status_code == 500
    assert response.json() == {"detail": "Internal server error"}
