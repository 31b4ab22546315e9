"""AccountRouter - decodes classified accounts and writes them into indices."""

import logging
from dataclasses import field
from typing import Any

from solarex.domain.account.model.entity import BidRedemptionTicketV2
from solarex.domain.account.model.key import AccountKind, IndexName
from solarex.domain.account.model.outcome import IndexWrite, RouteResult, RouteStatus
from solarex.domain.account.model.parsed import ParsedAccount
from solarex.domain.account.model.record import KeyedAccount
from solarex.domain.account.port.cache import AccountCache
from solarex.domain.account.port.index import IndexSetter
from solarex.domain.account.port.whitelist import NameOverrides, WhitelistResolver
from solarex.domain.account.service.classifier import AccountClassifier
from solarex.domain.account.util.decode import (
    decode_auction_manager,
    decode_bid_redemption_ticket,
    decode_payout_ticket,
    decode_prize_tracking_ticket,
    decode_safety_deposit_config,
    decode_store,
    decode_whitelisted_creator,
    read_store_key,
    whitelisted_creator_parser,
)
from solarex.domain.shared.error import LookupFailedError, MalformedAccountError
from solarex.domain.shared.model.pubkey import PublicKeyString
from solarex.domain.shared.service import Service

logger = logging.getLogger(__name__)


def composite_key(parent: str, position: int) -> str:
    """Key for indices addressed by a parent account and a numeric position."""
    return f"{parent}-{position}"


class _RecordingSetter:
    """Forwards writes to the caller's setter and records them on the result."""

    def __init__(self, setter: IndexSetter, result: RouteResult) -> None:
        self._setter = setter
        self._result = result

    def __call__(self, collection: IndexName, key: str, value: ParsedAccount[Any]) -> None:
        self._setter(str(collection), key, value)
        self._result.writes.append(IndexWrite(collection=collection, key=key))
        logger.debug(f"Indexed {value.pubkey} into {collection}[{key}]")


class AccountRouter(Service):
    """Routes solarex accounts into keyed indices.

    One call handles one account snapshot. Records owned by another program,
    or whose discriminant has no routing family, are filtered without side
    effects. Decode and lookup failures are caught here and reported on the
    returned RouteResult; route() itself never raises.

    Attributes:
        classifier: Owner and discriminant gate.
        cache: Shared account cache, used to register whitelisted creators.
        resolver: Derives the authoritative whitelisted creator key.
        name_overrides: Read-only display fields keyed by creator address.
        store_id: Key of the store this deployment serves. When unset,
            auction managers from every store are indexed and no store is
            written into the singleton slot.
    """

    classifier: AccountClassifier
    cache: AccountCache
    resolver: WhitelistResolver
    name_overrides: NameOverrides = field(default_factory=dict)
    store_id: PublicKeyString | None = None

    async def route(
        self,
        keyed: KeyedAccount,
        setter: IndexSetter,
        include_all_stores: bool = False,
    ) -> RouteResult:
        """Decode one account and write it into the matching indices.

        Args:
            keyed: The account snapshot and its key.
            setter: Upsert callable of the index store.
            include_all_stores: Index auction managers of every store, not
                only the configured one.

        Returns:
            RouteResult describing the writes made, or why none were made.
        """
        result = RouteResult(pubkey=keyed.pubkey)
        kind = self.classifier.classify(keyed.account)
        if kind is None:
            return result

        result.kind = kind
        write = _RecordingSetter(setter, result)
        try:
            match kind:
                case AccountKind.AUCTION_MANAGER:
                    self._route_auction_manager(keyed, write, include_all_stores)
                case AccountKind.BID_REDEMPTION_TICKET:
                    self._route_bid_redemption_ticket(keyed, write)
                case AccountKind.PAYOUT_TICKET:
                    parsed = ParsedAccount(
                        keyed.pubkey, keyed.account, decode_payout_ticket(keyed.account.data)
                    )
                    write(IndexName.PAYOUT_TICKETS, keyed.pubkey, parsed)
                case AccountKind.PRIZE_TRACKING_TICKET:
                    parsed = ParsedAccount(
                        keyed.pubkey,
                        keyed.account,
                        decode_prize_tracking_ticket(keyed.account.data),
                    )
                    write(IndexName.PRIZE_TRACKING_TICKETS, keyed.pubkey, parsed)
                case AccountKind.STORE:
                    self._route_store(keyed, write)
                case AccountKind.SAFETY_DEPOSIT_CONFIG:
                    config = decode_safety_deposit_config(keyed.account.data)
                    write(
                        IndexName.SAFETY_DEPOSIT_CONFIGS_BY_AUCTION_MANAGER_AND_INDEX,
                        composite_key(config.auction_manager, config.order),
                        ParsedAccount(keyed.pubkey, keyed.account, config),
                    )
                case AccountKind.WHITELISTED_CREATOR:
                    await self._route_whitelisted_creator(keyed, write)
        except LookupFailedError as e:
            result.status = RouteStatus.LOOKUP_FAILED
            result.error = e
            return result
        except MalformedAccountError as e:
            result.status = RouteStatus.DECODE_FAILED
            result.error = e
            return result
        except Exception as e:
            # Anything else raised while decoding (e.g. model validation) is bad data too
            result.status = RouteStatus.DECODE_FAILED
            result.error = e
            return result

        result.status = RouteStatus.ROUTED if result.writes else RouteStatus.FILTERED
        return result

    def _route_auction_manager(
        self, keyed: KeyedAccount, write: _RecordingSetter, include_all_stores: bool
    ) -> None:
        # Check the store before trusting the rest of the layout
        store_key = read_store_key(keyed.account.data)
        if self.store_id is not None and store_key != self.store_id and not include_all_stores:
            return

        manager = decode_auction_manager(keyed.account.data)
        write(
            IndexName.AUCTION_MANAGERS_BY_AUCTION,
            manager.auction,
            ParsedAccount(keyed.pubkey, keyed.account, manager),
        )

    def _route_bid_redemption_ticket(self, keyed: KeyedAccount, write: _RecordingSetter) -> None:
        ticket = decode_bid_redemption_ticket(keyed.account.data)
        parsed = ParsedAccount(keyed.pubkey, keyed.account, ticket)
        write(IndexName.BID_REDEMPTIONS, keyed.pubkey, parsed)

        # Winner index 0 is the first winner, only a missing index is skipped
        if isinstance(ticket, BidRedemptionTicketV2) and ticket.winner_index is not None:
            write(
                IndexName.BID_REDEMPTION_V2S_BY_AUCTION_MANAGER_AND_WINNING_INDEX,
                composite_key(ticket.auction_manager, ticket.winner_index),
                parsed,
            )

    def _route_store(self, keyed: KeyedAccount, write: _RecordingSetter) -> None:
        parsed = ParsedAccount(keyed.pubkey, keyed.account, decode_store(keyed.account.data))
        if self.store_id is not None and keyed.pubkey == self.store_id:
            write(IndexName.STORE, keyed.pubkey, parsed)
        write(IndexName.STORES, keyed.pubkey, parsed)

    async def _route_whitelisted_creator(self, keyed: KeyedAccount, write: _RecordingSetter) -> None:
        creator = decode_whitelisted_creator(keyed.account.data)

        try:
            authoritative = await self.resolver.resolve(creator.address)
        except LookupFailedError:
            raise
        except Exception as e:
            raise LookupFailedError(f"Could not resolve whitelist key for {creator.address}") from e

        if authoritative != keyed.pubkey:
            return

        try:
            parsed = await self.cache.add(
                keyed.pubkey, keyed.account, whitelisted_creator_parser, False
            )
        except MalformedAccountError:
            raise
        except Exception as e:
            raise LookupFailedError(f"Could not register whitelisted creator {keyed.pubkey}") from e

        display = self.name_overrides.get(parsed.info.address)
        if display is not None:
            parsed.info = parsed.info.with_display(display)

        write(IndexName.WHITELISTED_CREATORS_BY_CREATOR, creator.address, parsed)
