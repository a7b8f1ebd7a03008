import pytest
from bs4 import BeautifulSoup
from httpx import AsyncClient, ASGITransport

from read_tools_server.api.dependencies import get_item_repository
from read_tools_server.auth.nonce import verify_nonce
from read_tools_server.config import settings
from read_tools_server.main import create_app

from fakes import FakeItems


@pytest.fixture
def items():
    repo = FakeItems()
    repo.add(3, " ".join(["word"] * 360))
    repo.add(4, "secret draft", status="draft")
    return repo


@pytest.fixture
async def async_client(items):
    app = create_app()
    app.dependency_overrides[get_item_repository] = lambda: items
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides = {}


@pytest.mark.asyncio
async def test_health(async_client):
    resp = await async_client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_client_settings_carry_fresh_nonce(async_client):
    resp = await async_client.get("/read-aloud/settings")
    assert resp.status_code == 200

    data = resp.json()
    assert data["ajax_url"] == settings.endpoint_url
    assert data["ajax_action"] == settings.ajax_action
    assert data["pause_text"] == settings.pause_text
    assert data["resume_text"] == settings.resume_text
    assert verify_nonce(data["nonce"]).action == "read_aloud_nonce"


@pytest.mark.asyncio
async def test_readtime_markup(async_client):
    resp = await async_client.get(
        "/items/3/readtime",
        params={"read_aloud": "yes", "class": "post-time", "link_text": "Play"},
    )
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")

    soup = BeautifulSoup(resp.text, "html.parser")
    assert soup.select_one("div.post-time span.read-time-line").get_text(strip=True) == "2.0 min read"

    trigger = soup.select_one("a.read-aloud-trigger")
    assert trigger["data-post-id"] == "3"
    assert trigger.get_text(strip=True) == "Play"


@pytest.mark.asyncio
async def test_readtime_without_trigger_by_default(async_client):
    resp = await async_client.get("/items/3/readtime")
    assert "read-aloud-trigger" not in resp.text


@pytest.mark.asyncio
@pytest.mark.parametrize("item_id", [4, 404])
async def test_readtime_hidden_items(async_client, item_id):
    resp = await async_client.get(f"/items/{item_id}/readtime")

    assert resp.status_code == 404
    assert resp.json()["data"]["code"] == "ItemNotAccessible"
