"""
Tests for the LinkStore against a real SQLite database.
"""

import asyncio

import pytest

from shortlink.core.exceptions import LinkNotFoundError, PersistenceError
from shortlink.services import link_store as link_store_module
from shortlink.services.code_generator import SHORT_CODE_ALPHABET
from shortlink.services.link_store import LinkStore


def fixed_codes(monkeypatch, *codes):
    """Make the store draw the given codes, in order."""
    queue = list(codes)
    monkeypatch.setattr(link_store_module, "generate_short_code", lambda length: queue.pop(0))
    return queue


class TestCreate:

    @pytest.mark.asyncio
    async def test_create_stores_link_with_zero_clicks(self, session):
        store = LinkStore(session)
        link = await store.create("https://example.com")

        assert link.id is not None
        assert link.original_url == "https://example.com"
        assert link.clicks == 0
        assert link.created_at is not None
        assert len(link.short_code) == 6
        assert set(link.short_code) <= set(SHORT_CODE_ALPHABET)

    @pytest.mark.asyncio
    async def test_create_uses_configured_length(self, session):
        store = LinkStore(session, code_length=10)
        link = await store.create("https://example.com/long")
        assert len(link.short_code) == 10

    @pytest.mark.asyncio
    async def test_url_is_stored_verbatim(self, session):
        """No normalization: no trailing slash added, no validation applied."""
        store = LinkStore(session)
        for url in ["https://Example.com", "example.com/no-scheme", "https://e.com/a?b=1&c=%20#frag"]:
            link = await store.create(url)
            assert (await store.lookup(link.short_code)).original_url == url

    @pytest.mark.asyncio
    async def test_same_url_twice_gets_two_codes(self, session):
        store = LinkStore(session)
        first = await store.create("https://example.com")
        second = await store.create("https://example.com")
        assert first.short_code != second.short_code

    @pytest.mark.asyncio
    async def test_collision_regenerates_code(self, session, monkeypatch):
        fixed_codes(monkeypatch, "aaaaaa", "aaaaaa", "bbbbbb")
        store = LinkStore(session)

        first_code = (await store.create("https://one.example")).short_code
        second_code = (await store.create("https://two.example")).short_code

        assert first_code == "aaaaaa"
        assert second_code == "bbbbbb"
        assert (await store.lookup("aaaaaa")).original_url == "https://one.example"

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(self, session, monkeypatch):
        fixed_codes(monkeypatch, "aaaaaa", "aaaaaa", "aaaaaa", "aaaaaa")
        store = LinkStore(session, max_attempts=3)
        await store.create("https://one.example")

        with pytest.raises(PersistenceError):
            await store.create("https://two.example")

    @pytest.mark.asyncio
    async def test_reserved_codes_are_skipped(self, session, monkeypatch):
        fixed_codes(monkeypatch, "health", "cdefgh")
        store = LinkStore(session)
        link = await store.create("https://example.com")
        assert link.short_code == "cdefgh"


class TestLookup:

    @pytest.mark.asyncio
    async def test_unknown_code_raises_not_found(self, session):
        store = LinkStore(session)
        with pytest.raises(LinkNotFoundError) as exc_info:
            await store.lookup("nope42")
        assert exc_info.value.short_code == "nope42"

    @pytest.mark.asyncio
    async def test_malformed_code_raises_not_found(self, session):
        store = LinkStore(session)
        for code in ["", "has space", "dot.ted", "x" * 33]:
            with pytest.raises(LinkNotFoundError):
                await store.lookup(code)

    @pytest.mark.asyncio
    async def test_lookup_is_idempotent(self, session):
        store = LinkStore(session)
        link = await store.create("https://example.com")
        counts = [(await store.lookup(link.short_code)).clicks for _ in range(3)]
        assert counts == [0, 0, 0]


class TestRecordClick:

    @pytest.mark.asyncio
    async def test_sequential_clicks_increase_by_n(self, session):
        store = LinkStore(session)
        link = await store.create("https://example.com")

        for _ in range(5):
            await store.record_click(link.short_code)

        await session.refresh(link)
        assert link.clicks == 5

    @pytest.mark.asyncio
    async def test_unknown_code_raises_not_found(self, session):
        store = LinkStore(session)
        with pytest.raises(LinkNotFoundError):
            await store.record_click("nope42")

    @pytest.mark.asyncio
    async def test_concurrent_clicks_are_not_lost(self, database):
        async with database.session() as session:
            short_code = (await LinkStore(session).create("https://example.com")).short_code

        async def click():
            async with database.session() as session:
                await LinkStore(session).record_click(short_code)

        await asyncio.gather(*(click() for _ in range(10)))

        async with database.session() as session:
            assert (await LinkStore(session).lookup(short_code)).clicks == 10
