"""Unit tests for AccountRouter."""

from typing import Any
from unittest.mock import AsyncMock

import pytest

from solarex.domain.account.model.entity import CreatorDisplay
from solarex.domain.account.model.key import AccountKind, IndexName
from solarex.domain.account.model.outcome import RouteStatus
from solarex.domain.account.model.parsed import ParsedAccount
from solarex.domain.account.service.classifier import AccountClassifier
from solarex.domain.account.service.router import AccountRouter
from solarex.domain.shared.error import ConfigurationError, MalformedAccountError
from solarex.infrastructure.cache.memory import InMemoryAccountCache, InMemoryIndexStore
from solarex.infrastructure.whitelist.program_address import ProgramAddressWhitelistResolver
from tests import builders
from tests.builders import PROGRAM_ID, key, keyed

STORE_ID = key(1)
ACCOUNT_KEY = key(50)


class RecordingSetter:
    """Fake setter that records every call."""

    def __init__(self):
        self.calls: list[tuple[str, str, ParsedAccount[Any]]] = []

    def __call__(self, collection: str, key: str, value: ParsedAccount[Any]) -> None:
        self.calls.append((collection, key, value))

    @property
    def targets(self) -> list[tuple[str, str]]:
        return [(collection, key) for collection, key, _ in self.calls]


class FakeResolver:
    """Fake whitelist resolver returning a fixed key."""

    def __init__(self, result: str | None = None, error: Exception | None = None):
        self.resolve = AsyncMock(return_value=result, side_effect=error)


def make_router(
    *,
    store_id: str | None = STORE_ID,
    resolver: FakeResolver | None = None,
    cache: InMemoryAccountCache | None = None,
    name_overrides: dict | None = None,
) -> AccountRouter:
    return AccountRouter(
        classifier=AccountClassifier(program_id=PROGRAM_ID),
        cache=cache if cache is not None else InMemoryAccountCache(),
        resolver=resolver or FakeResolver(result=ACCOUNT_KEY),
        name_overrides=name_overrides or {},
        store_id=store_id,
    )


@pytest.fixture
def setter() -> RecordingSetter:
    return RecordingSetter()


ALL_LAYOUTS = [
    builders.auction_manager_v2(),
    builders.auction_manager_v1(),
    builders.bid_redemption_ticket_v1(),
    builders.bid_redemption_ticket_v2(winner_index=1),
    builders.payout_ticket(),
    builders.prize_tracking_ticket(),
    builders.store(),
    builders.safety_deposit_config(),
    builders.whitelisted_creator(),
]


class TestFiltering:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("data", ALL_LAYOUTS + [b"", b"\x03"])
    async def test_foreign_owner_writes_nothing(self, setter: RecordingSetter, data: bytes):
        resolver = FakeResolver(result=ACCOUNT_KEY)
        router = make_router(resolver=resolver)

        result = await router.route(keyed(ACCOUNT_KEY, data, owner=key(99)), setter, True)

        assert setter.calls == []
        assert result.status == RouteStatus.FILTERED
        assert result.kind is None
        resolver.resolve.assert_not_called()

    @pytest.mark.asyncio
    async def test_unrouted_discriminant_writes_nothing(self, setter: RecordingSetter):
        router = make_router()

        result = await router.route(keyed(ACCOUNT_KEY, b"\x06" + b"\x00" * 40), setter)

        assert setter.calls == []
        assert result.status == RouteStatus.FILTERED
        assert not result


class TestAuctionManager:
    @pytest.mark.asyncio
    async def test_indexes_by_auction_for_matching_store(self, setter: RecordingSetter):
        router = make_router()

        result = await router.route(keyed(ACCOUNT_KEY, builders.auction_manager_v2(store=1)), setter)

        assert setter.targets == [(IndexName.AUCTION_MANAGERS_BY_AUCTION, key(3))]
        parsed = setter.calls[0][2]
        assert parsed.pubkey == ACCOUNT_KEY
        assert parsed.info.auction == key(3)
        assert result.status == RouteStatus.ROUTED
        assert result.kind == AccountKind.AUCTION_MANAGER

    @pytest.mark.asyncio
    async def test_other_store_is_filtered(self, setter: RecordingSetter):
        router = make_router()

        result = await router.route(keyed(ACCOUNT_KEY, builders.auction_manager_v2(store=8)), setter)

        assert setter.calls == []
        assert result.status == RouteStatus.FILTERED

    @pytest.mark.asyncio
    async def test_other_store_with_include_all_stores(self, setter: RecordingSetter):
        router = make_router()

        await router.route(
            keyed(ACCOUNT_KEY, builders.auction_manager_v2(store=8)), setter, include_all_stores=True
        )

        assert setter.targets == [(IndexName.AUCTION_MANAGERS_BY_AUCTION, key(3))]

    @pytest.mark.asyncio
    async def test_no_configured_store_indexes_every_store(self, setter: RecordingSetter):
        router = make_router(store_id=None)

        await router.route(keyed(ACCOUNT_KEY, builders.auction_manager_v2(store=8)), setter)

        assert setter.targets == [(IndexName.AUCTION_MANAGERS_BY_AUCTION, key(3))]

    @pytest.mark.asyncio
    async def test_v1_is_indexed_by_auction(self, setter: RecordingSetter):
        router = make_router()

        await router.route(keyed(ACCOUNT_KEY, builders.auction_manager_v1(auction=6)), setter)

        assert setter.targets == [(IndexName.AUCTION_MANAGERS_BY_AUCTION, key(6))]

    @pytest.mark.asyncio
    async def test_truncated_payload_fails_quietly(self, setter: RecordingSetter):
        router = make_router()
        data = builders.auction_manager_v2()[:100]

        result = await router.route(keyed(ACCOUNT_KEY, data), setter)

        assert setter.calls == []
        assert result.status == RouteStatus.DECODE_FAILED
        assert isinstance(result.error, MalformedAccountError)


class TestBidRedemptionTicket:
    @pytest.mark.asyncio
    async def test_v1_only_indexed_by_own_key(self, setter: RecordingSetter):
        router = make_router()

        await router.route(keyed(ACCOUNT_KEY, builders.bid_redemption_ticket_v1()), setter)

        assert setter.targets == [(IndexName.BID_REDEMPTIONS, ACCOUNT_KEY)]

    @pytest.mark.asyncio
    async def test_v2_with_winner_index_is_also_indexed_by_manager_and_index(
        self, setter: RecordingSetter
    ):
        router = make_router()
        data = builders.bid_redemption_ticket_v2(winner_index=2, auction_manager=7)

        result = await router.route(keyed(ACCOUNT_KEY, data), setter)

        assert setter.targets == [
            (IndexName.BID_REDEMPTIONS, ACCOUNT_KEY),
            (IndexName.BID_REDEMPTION_V2S_BY_AUCTION_MANAGER_AND_WINNING_INDEX, f"{key(7)}-2"),
        ]
        # Both indices hold the same object
        assert setter.calls[0][2] is setter.calls[1][2]
        assert len(result.writes) == 2

    @pytest.mark.asyncio
    async def test_v2_winner_index_zero_is_indexed(self, setter: RecordingSetter):
        router = make_router()
        data = builders.bid_redemption_ticket_v2(winner_index=0, auction_manager=7)

        await router.route(keyed(ACCOUNT_KEY, data), setter)

        assert (
            IndexName.BID_REDEMPTION_V2S_BY_AUCTION_MANAGER_AND_WINNING_INDEX,
            f"{key(7)}-0",
        ) in setter.targets

    @pytest.mark.asyncio
    async def test_v2_without_winner_index(self, setter: RecordingSetter):
        router = make_router()
        data = builders.bid_redemption_ticket_v2(winner_index=None)

        await router.route(keyed(ACCOUNT_KEY, data), setter)

        assert setter.targets == [(IndexName.BID_REDEMPTIONS, ACCOUNT_KEY)]


class TestStandaloneTickets:
    @pytest.mark.asyncio
    async def test_payout_ticket(self, setter: RecordingSetter):
        router = make_router()

        await router.route(keyed(ACCOUNT_KEY, builders.payout_ticket()), setter)

        assert setter.targets == [(IndexName.PAYOUT_TICKETS, ACCOUNT_KEY)]
        assert setter.calls[0][2].info.amount_paid == 42

    @pytest.mark.asyncio
    async def test_prize_tracking_ticket(self, setter: RecordingSetter):
        router = make_router()

        await router.route(keyed(ACCOUNT_KEY, builders.prize_tracking_ticket()), setter)

        assert setter.targets == [(IndexName.PRIZE_TRACKING_TICKETS, ACCOUNT_KEY)]

    @pytest.mark.asyncio
    async def test_safety_deposit_config_keyed_by_manager_and_order(self, setter: RecordingSetter):
        router = make_router()
        data = builders.safety_deposit_config(auction_manager=7, order=3)

        await router.route(keyed(ACCOUNT_KEY, data), setter)

        assert setter.targets == [
            (IndexName.SAFETY_DEPOSIT_CONFIGS_BY_AUCTION_MANAGER_AND_INDEX, f"{key(7)}-3")
        ]


class TestStore:
    @pytest.mark.asyncio
    async def test_configured_store_fills_singleton_and_list(self, setter: RecordingSetter):
        router = make_router()

        await router.route(keyed(STORE_ID, builders.store()), setter)

        assert set(setter.targets) == {
            (IndexName.STORE, STORE_ID),
            (IndexName.STORES, STORE_ID),
        }

    @pytest.mark.asyncio
    async def test_other_store_only_fills_list(self, setter: RecordingSetter):
        router = make_router()

        await router.route(keyed(key(9), builders.store()), setter)

        assert setter.targets == [(IndexName.STORES, key(9))]

    @pytest.mark.asyncio
    async def test_no_configured_store_skips_singleton(self, setter: RecordingSetter):
        router = make_router(store_id=None)

        await router.route(keyed(STORE_ID, builders.store()), setter)

        assert setter.targets == [(IndexName.STORES, STORE_ID)]


class TestWhitelistedCreator:
    @pytest.mark.asyncio
    async def test_matching_authoritative_key_is_indexed(self, setter: RecordingSetter):
        resolver = FakeResolver(result=ACCOUNT_KEY)
        cache = InMemoryAccountCache()
        router = make_router(resolver=resolver, cache=cache)

        result = await router.route(keyed(ACCOUNT_KEY, builders.whitelisted_creator(address=31)), setter)

        resolver.resolve.assert_awaited_once_with(key(31))
        assert setter.targets == [(IndexName.WHITELISTED_CREATORS_BY_CREATOR, key(31))]
        assert cache.get(ACCOUNT_KEY) is setter.calls[0][2]
        assert not cache.is_active(ACCOUNT_KEY)
        assert result.status == RouteStatus.ROUTED

    @pytest.mark.asyncio
    async def test_mismatching_key_is_dropped(self, setter: RecordingSetter):
        cache = InMemoryAccountCache()
        router = make_router(resolver=FakeResolver(result=key(77)), cache=cache)

        result = await router.route(keyed(ACCOUNT_KEY, builders.whitelisted_creator()), setter)

        assert setter.calls == []
        assert ACCOUNT_KEY not in cache
        assert result.status == RouteStatus.FILTERED

    @pytest.mark.asyncio
    async def test_name_override_enriches_indexed_creator(self, setter: RecordingSetter):
        overrides = {key(31): CreatorDisplay(name="Ada", twitter="@ada")}
        cache = InMemoryAccountCache()
        router = make_router(cache=cache, name_overrides=overrides)

        await router.route(keyed(ACCOUNT_KEY, builders.whitelisted_creator(address=31)), setter)

        info = setter.calls[0][2].info
        assert info.name == "Ada"
        assert info.twitter == "@ada"
        assert info.image is None
        assert info.address == key(31)
        # The cached entry is the enriched one
        assert cache.get(ACCOUNT_KEY).info.name == "Ada"

    @pytest.mark.asyncio
    async def test_name_override_not_applied_when_dropped(self, setter: RecordingSetter):
        overrides = {key(31): CreatorDisplay(name="Ada")}
        cache = InMemoryAccountCache()
        router = make_router(resolver=FakeResolver(result=key(77)), cache=cache, name_overrides=overrides)

        await router.route(keyed(ACCOUNT_KEY, builders.whitelisted_creator(address=31)), setter)

        assert setter.calls == []
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_resolver_failure_is_swallowed(self, setter: RecordingSetter):
        router = make_router(resolver=FakeResolver(error=RuntimeError("rpc down")))

        result = await router.route(keyed(ACCOUNT_KEY, builders.whitelisted_creator()), setter)

        assert setter.calls == []
        assert result.status == RouteStatus.LOOKUP_FAILED
        assert isinstance(result.error.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_unconfigured_store_is_a_lookup_failure(self, setter: RecordingSetter):
        resolver = ProgramAddressWhitelistResolver(PROGRAM_ID, None)
        router = AccountRouter(
            classifier=AccountClassifier(program_id=PROGRAM_ID),
            cache=InMemoryAccountCache(),
            resolver=resolver,
        )

        result = await router.route(keyed(ACCOUNT_KEY, builders.whitelisted_creator()), setter)

        assert setter.calls == []
        assert result.status == RouteStatus.LOOKUP_FAILED
        assert isinstance(result.error.__cause__, ConfigurationError)

    @pytest.mark.asyncio
    async def test_malformed_creator_skips_lookup(self, setter: RecordingSetter):
        resolver = FakeResolver(result=ACCOUNT_KEY)
        router = make_router(resolver=resolver)

        result = await router.route(keyed(ACCOUNT_KEY, builders.whitelisted_creator()[:10]), setter)

        assert result.status == RouteStatus.DECODE_FAILED
        resolver.resolve.assert_not_called()


class TestIdempotence:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("data", ALL_LAYOUTS)
    async def test_routing_twice_matches_routing_once(self, data: bytes):
        router = make_router()
        once = InMemoryIndexStore()
        twice = InMemoryIndexStore()
        account = keyed(ACCOUNT_KEY, data)

        await router.route(account, once)
        await router.route(account, twice)
        await router.route(account, twice)

        assert len(twice) == len(once)
        assert {name: set(entries) for name, entries in twice.snapshot().items()} == {
            name: set(entries) for name, entries in once.snapshot().items()
        }

    @pytest.mark.asyncio
    async def test_newer_snapshot_replaces_older(self):
        router = make_router()
        store = InMemoryIndexStore()

        await router.route(keyed(ACCOUNT_KEY, builders.payout_ticket(amount_paid=1)), store)
        await router.route(keyed(ACCOUNT_KEY, builders.payout_ticket(amount_paid=2)), store)

        entries = store.collection(IndexName.PAYOUT_TICKETS)
        assert len(entries) == 1
        assert entries[ACCOUNT_KEY].info.amount_paid == 2
