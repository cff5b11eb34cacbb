"""
Pytest configuration and fixtures
"""
import json
import random
from typing import Any, List, Optional

import pytest

from wrongway.common.config import Settings
from wrongway.generation.params import JokeRequest


class FakeResponse:
    """Streams `text` (or the given chunks) the way a requests.Response does with stream=True."""

    encoding = "utf-8"

    def __init__(
        self,
        status_code: int,
        body: Any = None,
        text: Optional[str] = None,
        chunks: Optional[List[str]] = None,
    ):
        self.status_code = status_code
        self.text = text if text is not None else (json.dumps(body) if body is not None else "")
        self.chunks = chunks if chunks is not None else [self.text]

    def iter_content(self, chunk_size=1):
        for chunk in self.chunks:
            yield chunk.encode(self.encoding)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeSession:
    """Replays a scripted list of responses (or exceptions) one per post()."""

    def __init__(self, script: List[Any]):
        self.script = list(script)
        self.calls: List[dict] = []
        self.closed = False

    def post(self, url, headers=None, json=None, timeout=None, stream=False):
        self.calls.append({"url": url, "headers": headers, "json": json, "timeout": timeout, "stream": stream})
        if not self.script:
            raise AssertionError("Unexpected extra upstream call")
        item = self.script.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True
        return False


def chat_body(content: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def model_output(request: JokeRequest, joke: str, ending_phrase: str, **extra) -> str:
    obj = {
        "joke": joke,
        "scenario": request.scenario,
        "roles": list(request.roles),
        "tone": request.tone,
        "length": request.length,
        "ending_phrase": ending_phrase,
        "tags": ["queue"],
    }
    obj.update(extra)
    return json.dumps(obj)


@pytest.fixture
def queue_request() -> JokeRequest:
    return JokeRequest(scenario="Queue", roles=("Visitor",), tone="Dry", length="short")


@pytest.fixture
def settings() -> Settings:
    return Settings(api_key="sk-test", timeout_ms=1000, retries=2, backoff_ms=100)


@pytest.fixture
def stub_settings() -> Settings:
    return Settings(use_stub=True)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(7)


@pytest.fixture
def sleeps() -> List[float]:
    return []

