"""Tests for the definition cache and the dictionary service resolver."""

import asyncio

import aiohttp
import pytest

from biogloss.core.cache import ABSENT, DefinitionCache
from biogloss.core.errors import LookupTimeoutError
from biogloss.core.resolver import DefinitionResolver, extract_first_definition

from conftest import FakeReply, FakeSession, dictionary_payload


class TestDefinitionCache:

    def test_unknown_word_is_distinct_from_absent(self, cache):
        assert cache.lookup("gene") is None
        cache.store("gene", None)
        entry = cache.lookup("gene")
        assert entry is not None
        assert entry.definition is None
        assert not entry.found

    def test_keys_are_lowercased(self, cache):
        cache.store("Dog", "A canine.")
        assert "dog" in cache
        assert cache.definition_for("DOG") == "A canine."

    def test_first_value_wins(self, cache):
        cache.store("dog", "A canine.")
        cache.store("dog", "Something else.")
        cache.store("dog", None)
        assert cache.definition_for("dog") == "A canine."

    def test_empty_definition_stored_as_absent(self, cache):
        cache.store("blank", "")
        assert cache.lookup("blank").definition is None
        assert cache.stats()["absent"] == 1

    def test_clear(self, cache):
        cache.store("dog", "A canine.")
        cache.clear()
        assert len(cache) == 0
        assert cache.lookup("dog") is None

    def test_absent_marker_is_falsy_singleton(self):
        assert not ABSENT
        assert repr(ABSENT) == "ABSENT"
        assert type(ABSENT)() is ABSENT


class TestExtractFirstDefinition:

    def test_full_chain(self):
        assert extract_first_definition(dictionary_payload("Present everywhere.")) == "Present everywhere."

    def test_only_first_result_used(self):
        payload = dictionary_payload("first") + dictionary_payload("second")
        payload[0]["meanings"][0]["definitions"].append({"definition": "later"})
        assert extract_first_definition(payload) == "first"

    @pytest.mark.parametrize("payload", [
        None,
        {},
        [],
        {"title": "No Definitions Found"},
        [{}],
        [{"meanings": []}],
        [{"meanings": [{}]}],
        [{"meanings": [{"definitions": []}]}],
        [{"meanings": [{"definitions": [{}]}]}],
        [{"meanings": [{"definitions": [{"definition": ""}]}]}],
        [{"meanings": [{"definitions": [{"definition": 42}]}]}],
        ["not an object"],
    ])
    def test_missing_links_yield_none(self, payload):
        assert extract_first_definition(payload) is None


class TestDefinitionResolver:

    def test_resolves_and_caches(self, resolver, cache, fake_session):
        async def scenario():
            first = await resolver.resolve("Ubiquitous")
            second = await resolver.resolve("ubiquitous")
            return first, second

        assert asyncio.run(scenario()) == ("Present everywhere.", "Present everywhere.")
        assert fake_session.calls == ["https://dict.test/api/ubiquitous"]
        assert cache.definition_for("ubiquitous") == "Present everywhere."

    def test_concurrent_resolutions_share_one_request(self, cache):
        session = FakeSession({"salient": FakeReply(payload=dictionary_payload("Most noticeable."), delay=0.05)})
        resolver = DefinitionResolver(cache, endpoint="https://dict.test/api", session=session)

        async def scenario():
            return await asyncio.gather(*(resolver.resolve("salient") for _ in range(10)))

        results = asyncio.run(scenario())
        assert results == ["Most noticeable."] * 10
        assert session.calls_for("salient") == 1
        assert cache.pending("salient") is None

    def test_not_found_is_cached_as_absent(self, resolver, cache, fake_session):
        async def scenario():
            return [await resolver.resolve("zzyzx") for _ in range(3)]

        assert asyncio.run(scenario()) == [None, None, None]
        assert fake_session.calls_for("zzyzx") == 1
        assert "zzyzx" in cache
        assert cache.lookup("zzyzx").definition is None

    def test_unexpected_shape_is_cached_as_absent(self, cache):
        session = FakeSession({"odd": FakeReply(payload=[{"meanings": []}])})
        resolver = DefinitionResolver(cache, session=session)

        assert asyncio.run(resolver.resolve("odd")) is None
        assert "odd" in cache

    def test_invalid_json_is_cached_as_absent(self, cache):
        session = FakeSession({"garbled": FakeReply(payload=ValueError("Expecting value"))})
        resolver = DefinitionResolver(cache, session=session)

        assert asyncio.run(resolver.resolve("garbled")) is None
        assert "garbled" in cache

    def test_network_error_is_cached_as_absent(self, cache):
        session = FakeSession({"offline": FakeReply(error=aiohttp.ClientConnectionError("connection refused"))})
        resolver = DefinitionResolver(cache, session=session)

        async def scenario():
            return await resolver.resolve("offline"), await resolver.resolve("offline")

        assert asyncio.run(scenario()) == (None, None)
        assert session.calls_for("offline") == 1
        assert cache.lookup("offline").definition is None

    def test_timeout_is_not_cached(self, cache):
        session = FakeSession({"slow": FakeReply(payload=dictionary_payload("Not fast."), delay=5.0)})
        resolver = DefinitionResolver(cache, session=session, timeout=0.01)

        with pytest.raises(LookupTimeoutError):
            asyncio.run(resolver.resolve("slow"))
        assert "slow" not in cache
        assert cache.pending("slow") is None

        session.replies["slow"] = FakeReply(payload=dictionary_payload("Not fast."))
        assert asyncio.run(resolver.resolve("slow")) == "Not fast."
        assert session.calls_for("slow") == 2

    def test_empty_word_is_never_looked_up(self, resolver, fake_session):
        assert asyncio.run(resolver.resolve("")) is None
        assert fake_session.calls == []

    def test_cancelled_waiter_does_not_cancel_shared_lookup(self, cache):
        session = FakeSession({"lucid": FakeReply(payload=dictionary_payload("Clearly expressed."), delay=0.05)})
        resolver = DefinitionResolver(cache, session=session)

        async def scenario():
            waiter = asyncio.ensure_future(resolver.resolve("lucid"))
            other = asyncio.ensure_future(resolver.resolve("lucid"))
            await asyncio.sleep(0.01)
            waiter.cancel()
            return await other

        assert asyncio.run(scenario()) == "Clearly expressed."
        assert cache.definition_for("lucid") == "Clearly expressed."
        assert session.calls_for("lucid") == 1

    def test_word_is_quoted_in_url(self, cache):
        session = FakeSession()
        resolver = DefinitionResolver(cache, endpoint="https://dict.test/api/", session=session)

        asyncio.run(resolver.resolve("a/b"))
        assert session.calls == ["https://dict.test/api/a%2Fb"]
