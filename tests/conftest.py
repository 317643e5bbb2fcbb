"""
Shared fixtures: an aiohttp-shaped fake HTTP session so no test touches the network.
"""

import asyncio
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from biogloss.core.cache import DefinitionCache  # noqa: E402
from biogloss.core.resolver import DefinitionResolver  # noqa: E402


def dictionary_payload(definition: str) -> list:
    """Response body in the dictionary service's shape"""
    return [{
        "word": "x",
        "meanings": [{
            "partOfSpeech": "noun",
            "definitions": [{"definition": definition}],
        }],
    }]


class FakeReply:
    def __init__(self, status: int = 200, payload: Any = None,
                 delay: float = 0.0, error: Optional[BaseException] = None):
        self.status = status
        self.payload = payload
        self.delay = delay
        self.error = error

    async def json(self, content_type=None):
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload


class _FakeRequest:
    def __init__(self, reply: FakeReply):
        self.reply = reply

    async def __aenter__(self):
        if self.reply.delay:
            await asyncio.sleep(self.reply.delay)
        if self.reply.error is not None:
            raise self.reply.error
        return self.reply

    async def __aexit__(self, *exc_info):
        return False


class FakeSession:
    """Stands in for aiohttp.ClientSession; records every requested URL"""

    def __init__(self, replies: Optional[Dict[str, FakeReply]] = None):
        self.replies = replies or {}
        self.calls = []

    def get(self, url: str):
        self.calls.append(url)
        word = url.rsplit('/', 1)[-1]
        return _FakeRequest(self.replies.get(word, FakeReply(status=404, payload={"title": "No Definitions Found"})))

    def calls_for(self, word: str) -> int:
        return sum(1 for url in self.calls if url.rsplit('/', 1)[-1] == word)


@pytest.fixture
def fake_session():
    return FakeSession({
        "dog": FakeReply(payload=dictionary_payload("A domesticated carnivorous mammal.")),
        "ran": FakeReply(payload=dictionary_payload("Past tense of run.")),
        "ubiquitous": FakeReply(payload=dictionary_payload("Present everywhere.")),
    })


@pytest.fixture
def cache():
    return DefinitionCache()


@pytest.fixture
def resolver(cache, fake_session):
    return DefinitionResolver(cache, endpoint="https://dict.test/api", timeout=1.0, session=fake_session)
