import pytest

from read_tools_server.rate_limiter import KEY_PREFIX, RateLimiter
from read_tools_server.storage import InMemoryStore


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def limiter(clock):
    return RateLimiter(InMemoryStore(clock=clock), max_requests=3, window_seconds=60, enabled=True)


def test_key_is_hashed_identity():
    key = RateLimiter.key_for("8.8.8.8")
    assert key.startswith(KEY_PREFIX)
    assert "8.8.8.8" not in key
    assert key == RateLimiter.key_for("8.8.8.8")


@pytest.mark.asyncio
async def test_n_plus_one_request_rejected(limiter):
    for _ in range(3):
        assert await limiter.allow("8.8.8.8") is True
    assert await limiter.allow("8.8.8.8") is False


@pytest.mark.asyncio
async def test_new_window_after_quiet_period(limiter, clock):
    for _ in range(4):
        await limiter.allow("8.8.8.8")

    clock.now += 60
    assert await limiter.allow("8.8.8.8") is True

    # Counter restarted at 1, so two more fit before the ceiling.
    assert await limiter.allow("8.8.8.8") is True
    assert await limiter.allow("8.8.8.8") is True
    assert await limiter.allow("8.8.8.8") is False


@pytest.mark.asyncio
async def test_paced_requests_keep_window_open(clock):
    limiter = RateLimiter(InMemoryStore(clock=clock), max_requests=2, window_seconds=10, enabled=True)

    assert await limiter.allow("8.8.8.8") is True
    clock.now = 8
    assert await limiter.allow("8.8.8.8") is True

    # Only 4s since the last accepted request.
    clock.now = 12
    assert await limiter.allow("8.8.8.8") is False

    clock.now = 18
    assert await limiter.allow("8.8.8.8") is True


@pytest.mark.asyncio
async def test_identities_counted_separately(limiter):
    for _ in range(3):
        await limiter.allow("8.8.8.8")
    assert await limiter.allow("8.8.8.8") is False
    assert await limiter.allow("1.1.1.1") is True


@pytest.mark.asyncio
@pytest.mark.parametrize("identity", [None, ""])
async def test_unknown_identity_always_allowed(limiter, identity):
    for _ in range(10):
        assert await limiter.allow(identity) is True


@pytest.mark.asyncio
async def test_disabled_limiter_allows_everything(clock):
    limiter = RateLimiter(InMemoryStore(clock=clock), max_requests=1, window_seconds=60, enabled=False)
    for _ in range(5):
        assert await limiter.allow("8.8.8.8") is True
