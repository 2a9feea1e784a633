"""Tests for the fixed-window rate limiter."""

import pytest
from httpx import AsyncClient

from cms_api.exceptions import RateLimitedError
from cms_api.main import app
from cms_api.rate_limit import InMemoryRateLimitStore, RateLimiter


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def limiter(clock: FakeClock) -> RateLimiter:
    return RateLimiter(
        InMemoryRateLimitStore(clock=clock), max_requests=3, window_seconds=60, clock=clock
    )


@pytest.mark.asyncio
async def test_allows_up_to_ceiling(limiter: RateLimiter) -> None:
    counts = [(await limiter.check("user:1")).count for _ in range(3)]
    assert counts == [1, 2, 3]


@pytest.mark.asyncio
async def test_rejects_past_ceiling_with_retry_after(
    limiter: RateLimiter, clock: FakeClock
) -> None:
    for _ in range(3):
        await limiter.check("user:1")
    clock.now += 15.5

    with pytest.raises(RateLimitedError) as exc_info:
        await limiter.check("user:1")
    assert exc_info.value.retry_after == 45
    assert exc_info.value.extra == {"retryAfter": 45}


@pytest.mark.asyncio
async def test_keys_are_independent(limiter: RateLimiter) -> None:
    for _ in range(3):
        await limiter.check("user:1")
    assert (await limiter.check("user:2")).count == 1


@pytest.mark.asyncio
async def test_window_resets(limiter: RateLimiter, clock: FakeClock) -> None:
    for _ in range(3):
        await limiter.check("user:1")
    clock.now += 60
    assert (await limiter.check("user:1")).count == 1


@pytest.mark.asyncio
async def test_store_reset(clock: FakeClock) -> None:
    store = InMemoryRateLimitStore(clock=clock)
    await store.hit("user:1", 60)
    assert len(store) == 1
    await store.reset("user:1")
    assert len(store) == 0


@pytest.mark.asyncio
async def test_admin_writes_are_rate_limited(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    app.state.rate_limiter = RateLimiter(
        InMemoryRateLimitStore(), max_requests=2, window_seconds=60
    )
    for name in ("Go", "Rust"):
        resp = await client.post("/api/technologies", json={"name": name}, headers=admin_headers)
        assert resp.status_code == 201

    resp = await client.post("/api/technologies", json={"name": "Zig"}, headers=admin_headers)
    assert resp.status_code == 429
    body = resp.json()
    assert body["success"] is False
    assert body["retryAfter"] >= 1


@pytest.mark.asyncio
async def test_public_reads_are_not_rate_limited(client: AsyncClient) -> None:
    app.state.rate_limiter = RateLimiter(
        InMemoryRateLimitStore(), max_requests=1, window_seconds=60
    )
    for _ in range(3):
        assert (await client.get("/api/technologies")).status_code == 200
