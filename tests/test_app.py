import io
import json

import pytest
from PIL import Image

from meme_viewer.app import create_app
from meme_viewer.infrastructure.network import HttpFetcher
from meme_viewer.runner import LoopRunner
from meme_viewer.service import MemeService


API_URL = "http://api.test/get_memes"

ENVELOPE = json.dumps(
    {
        "success": True,
        "data": {
            "memes": [
                {"id": "1", "name": "Cat", "url": "http://x/cat.png", "rating": 5},
                {"id": "2", "name": "Broken", "url": "http://x/broken.png", "rating": 1},
            ]
        },
    }
).encode()


@pytest.fixture
def runner():
    loop_runner = LoopRunner()
    yield loop_runner
    loop_runner.stop()


@pytest.fixture
def service(fake_session, make_png):
    fake_session.routes[API_URL] = (200, ENVELOPE)
    fake_session.routes["http://x/cat.png"] = (200, make_png((10, 10)))
    fake_session.routes["http://x/broken.png"] = (200, b"not an image")
    return MemeService(HttpFetcher(lambda: fake_session), api_url=API_URL)


@pytest.fixture
def client(service, runner):
    app = create_app(service, runner, load_directory=False)
    return app.test_client()


def test_directory_is_loading_before_first_fetch(client):
    response = client.get("/memes")

    assert response.get_json() == {"state": "loading", "memes": []}
    assert b"Loading memes" in client.get("/").data


def test_refresh_then_list(client):
    refreshed = client.post("/memes/refresh")
    listing = client.get("/memes").get_json()

    assert refreshed.status_code == 200
    assert refreshed.get_json()["count"] == 2
    assert listing["state"] == "ready"
    assert listing["memes"][0] == {"id": "1", "title": "Cat", "url": "http://x/cat.png", "rating": 5}


def test_refresh_reports_network_error(client, fake_session):
    fake_session.routes[API_URL] = (500, b"")

    response = client.post("/memes/refresh")

    assert response.status_code == 502
    assert response.get_json()["error"] == "network"
    assert response.get_json()["state"] == "unavailable"


def test_index_lists_titles(client):
    client.post("/memes/refresh")

    page = client.get("/").data

    assert b'href="/memes/1"' in page
    assert b"Cat" in page


def test_detail_page_embeds_image(client):
    client.post("/memes/refresh")

    page = client.get("/memes/1")

    assert page.status_code == 200
    assert b'src="/memes/1/image"' in page.data


def test_image_route_serves_cached_png(client, fake_session):
    client.post("/memes/refresh")

    first = client.get("/memes/1/image")
    second = client.get("/memes/1/image")

    assert first.status_code == 200
    assert first.mimetype == "image/png"
    assert Image.open(io.BytesIO(first.data)).size == (10, 10)
    assert second.status_code == 200
    assert fake_session.count("http://x/cat.png") == 1


def test_image_route_reports_decode_failure(client):
    client.post("/memes/refresh")

    response = client.get("/memes/2/image")

    assert response.status_code == 502
    assert b"image_decode" in response.data


def test_unknown_meme_is_404(client):
    client.post("/memes/refresh")

    assert client.get("/memes/nope").status_code == 404
    assert client.get("/memes/nope/image").status_code == 404


def test_health_counts_cached_images(client):
    client.post("/memes/refresh")
    client.get("/memes/1/image")

    health = client.get("/health").get_json()

    assert health == {"ok": True, "state": "ready", "memes": 2, "cached_images": 1}


def test_create_app_starts_directory_fetch(service, runner):
    app = create_app(service, runner)

    result = app.extensions["meme_startup"].result(timeout=5)

    assert result.ok
    assert service.state.value == "ready"
