import io
import threading

import pytest
import requests
from PIL import Image


API_URL = "http://api.test/get_memes"


class FakeSession:
    """Stands in for ``requests.Session``; routes map a URL to ``(status, body)`` or an exception."""

    def __init__(self, routes=None, gates=None):
        self.headers = {}
        self.routes = dict(routes or {})
        self.gates = dict(gates or {})
        self.calls = []
        self.timeouts = []
        self._lock = threading.Lock()

    def get(self, url, timeout=None):
        with self._lock:
            self.calls.append(url)
            self.timeouts.append(timeout)
        gate = self.gates.get(url)
        if gate is not None:
            gate.wait(5)
        if url not in self.routes:
            raise AssertionError(f"unexpected request to {url}")
        outcome = self.routes[url]
        if isinstance(outcome, Exception):
            raise outcome
        status, body = outcome
        response = requests.Response()
        response.status_code = status
        response._content = body
        response.url = url
        response.reason = "OK" if status < 400 else "Error"
        return response

    def count(self, url):
        with self._lock:
            return self.calls.count(url)

    def close(self):
        pass


def png_bytes(size=(10, 10), color=(255, 0, 0)):
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, "PNG")
    return buffer.getvalue()


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def make_png():
    return png_bytes
