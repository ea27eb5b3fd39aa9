"""Shared fixtures for all tests."""

from collections.abc import Generator

import httpx
import pytest
import respx

BASE_URL = "https://blob.example.com/api/"


@pytest.fixture(autouse=True)
def mock_env_clear(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Clear blobstore-related environment variables for every test.

    This ensures tests don't accidentally use real credentials from the environment.
    """
    env_vars_to_clear = [
        "BLOBSTORE_READ_ACL",
        "BLOBSTORE_WRITE_ACL",
        "BLOBSTORE_URL",
        "BLOBSTORE_TIMEOUT",
        "DEBUG",
    ]
    for var in env_vars_to_clear:
        monkeypatch.delenv(var, raising=False)
    yield


@pytest.fixture
def base_url() -> str:
    return BASE_URL


@pytest.fixture
def acl_env(monkeypatch: pytest.MonkeyPatch) -> tuple[str, str]:
    """Set read/write ACL tokens in the environment."""
    monkeypatch.setenv("BLOBSTORE_READ_ACL", "env-read")
    monkeypatch.setenv("BLOBSTORE_WRITE_ACL", "env-write")
    return "env-read", "env-write"


class FakeBlobStore:
    """In-memory service: POST stores, GET/HEAD read, DELETE removes, _dir/ lists."""

    def __init__(self, base: str = BASE_URL) -> None:
        self.base = base
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.posts = 0

    def _key(self, request: httpx.Request) -> str:
        return request.url.path[len(httpx.URL(self.base).path) :]

    def handle(self, request: httpx.Request) -> httpx.Response:
        key = self._key(request)
        if request.method == "POST":
            self.posts += 1
            self.objects[key] = (request.read(), request.headers.get("content-type", ""))
            return httpx.Response(200)
        if request.method == "DELETE":
            if self.objects.pop(key, None) is None:
                return httpx.Response(404, text="not found")
            return httpx.Response(200)
        if request.method == "GET" and key.startswith("_dir/"):
            prefix = key[len("_dir/") :]
            return httpx.Response(200, json=sorted(k for k in self.objects if k.startswith(prefix)))
        if key not in self.objects:
            return httpx.Response(404, text="not found")
        content, content_type = self.objects[key]
        headers = {"Content-Type": content_type}
        if request.method == "HEAD":
            headers["Content-Length"] = str(len(content))
            return httpx.Response(200, headers=headers)
        return httpx.Response(200, content=content, headers=headers)


@pytest.fixture
def store() -> Generator[FakeBlobStore, None, None]:
    fake = FakeBlobStore()
    with respx.mock(base_url=BASE_URL, assert_all_called=False) as mock:
        mock.route().mock(side_effect=fake.handle)
        yield fake
