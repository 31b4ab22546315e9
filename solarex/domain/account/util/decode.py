"""Pure decoders for solarex account layouts.

Each decoder takes the full account data (discriminant byte included),
checks the discriminant and returns the typed entity. Trailing bytes past
the layout are ignored since accounts are allocated with spare room.

Raises:
    MalformedAccountError: On a truncated buffer, an invalid option tag, an
        unsupported numeric width or an unexpected discriminant.
"""

from solarex.domain.account.model.entity import (
    AmountRange,
    AuctionManager,
    AuctionManagerSettingsV1,
    AuctionManagerStateV1,
    AuctionManagerStateV2,
    AuctionManagerV1,
    AuctionManagerV2,
    BidRedemptionTicket,
    BidRedemptionTicketV1,
    BidRedemptionTicketV2,
    ParticipationConfigV1,
    ParticipationConfigV2,
    ParticipationStateV1,
    ParticipationStateV2,
    PayoutTicket,
    PrizeTrackingTicket,
    SafetyDepositConfig,
    Store,
    WhitelistedCreator,
    WinningConfig,
    WinningConfigItem,
    WinningConfigState,
    WinningConfigStateItem,
)
from solarex.domain.account.model.key import SolarexKey
from solarex.domain.account.model.parsed import ParsedAccount
from solarex.domain.account.model.record import AccountRecord
from solarex.domain.account.util.reader import AccountReader
from solarex.domain.shared.error import MalformedAccountError
from solarex.domain.shared.model.pubkey import PUBKEY_LENGTH, PublicKeyString, pubkey_from_bytes

# The store key sits right after the discriminant in both auction manager versions
STORE_KEY_OFFSET = 1


def _read_key(reader: AccountReader, *expected: SolarexKey) -> SolarexKey:
    raw = reader.u8()
    try:
        key = SolarexKey(raw)
    except ValueError:
        raise MalformedAccountError(f"Unknown discriminant {raw}", offset=0) from None
    if key not in expected:
        names = ", ".join(k.name for k in expected)
        raise MalformedAccountError(f"Expected {names}, got {key.name}", offset=0)
    return key


def read_store_key(data: bytes) -> PublicKeyString:
    """Read the store key embedded at a fixed offset of an auction manager.

    Works without decoding the rest of the payload, so the store can be
    checked before the layout is trusted.
    """
    end = STORE_KEY_OFFSET + PUBKEY_LENGTH
    if len(data) < end:
        raise MalformedAccountError(
            f"Auction manager data too short for store key ({len(data)} bytes)",
            offset=STORE_KEY_OFFSET,
        )
    return pubkey_from_bytes(data[STORE_KEY_OFFSET:end])


# --- Auction managers ---


def _decode_auction_manager_v1(reader: AccountReader) -> AuctionManagerV1:
    store = reader.pubkey()
    authority = reader.pubkey()
    auction = reader.pubkey()
    vault = reader.pubkey()
    accept_payment = reader.pubkey()

    def state_item() -> WinningConfigStateItem:
        return WinningConfigStateItem(
            primary_sale_happened=reader.boolean(),
            claimed=reader.boolean(),
        )

    def winning_config_state() -> WinningConfigState:
        return WinningConfigState(
            items=reader.vec(state_item),
            money_pushed_to_accept_payment=reader.boolean(),
        )

    def participation_state() -> ParticipationStateV1:
        return ParticipationStateV1(
            collected_to_accept_payment=reader.u64(),
            primary_sale_happened=reader.boolean(),
            validated=reader.boolean(),
            printing_authorization_token_account=reader.option(reader.pubkey),
        )

    state = AuctionManagerStateV1(
        status=reader.u8(),
        winning_config_items_validated=reader.u8(),
        winning_config_states=reader.vec(winning_config_state),
        participation_state=reader.option(participation_state),
    )

    def config_item() -> WinningConfigItem:
        return WinningConfigItem(
            safety_deposit_box_index=reader.u8(),
            amount=reader.u8(),
            winning_config_type=reader.u8(),
        )

    def winning_config() -> WinningConfig:
        return WinningConfig(items=reader.vec(config_item))

    def participation_config() -> ParticipationConfigV1:
        return ParticipationConfigV1(
            winner_constraint=reader.u8(),
            non_winning_constraint=reader.u8(),
            safety_deposit_box_index=reader.u8(),
            fixed_price=reader.option(reader.u64),
        )

    settings = AuctionManagerSettingsV1(
        winning_configs=reader.vec(winning_config),
        participation_config=reader.option(participation_config),
    )

    return AuctionManagerV1(
        store=store,
        authority=authority,
        auction=auction,
        vault=vault,
        accept_payment=accept_payment,
        state=state,
        settings=settings,
    )


def _decode_auction_manager_v2(reader: AccountReader) -> AuctionManagerV2:
    return AuctionManagerV2(
        store=reader.pubkey(),
        authority=reader.pubkey(),
        auction=reader.pubkey(),
        vault=reader.pubkey(),
        accept_payment=reader.pubkey(),
        state=AuctionManagerStateV2(
            status=reader.u8(),
            safety_config_items_validated=reader.u64(),
            bids_pushed_to_accept_payment=reader.u64(),
            has_participation=reader.boolean(),
        ),
    )


def decode_auction_manager(data: bytes) -> AuctionManager:
    """Decode either auction manager version, chosen by the discriminant."""
    reader = AccountReader(data)
    key = _read_key(reader, SolarexKey.AUCTION_MANAGER_V1, SolarexKey.AUCTION_MANAGER_V2)
    if key == SolarexKey.AUCTION_MANAGER_V1:
        return _decode_auction_manager_v1(reader)
    return _decode_auction_manager_v2(reader)


# --- Bid redemption tickets ---


def decode_bid_redemption_ticket(data: bytes) -> BidRedemptionTicket:
    """Decode either bid redemption ticket version, chosen by the discriminant.

    V2 tickets are laid out as an optional u64 winner index, the auction
    manager key and a bitmap of redeemed items filling the rest of the data.
    """
    reader = AccountReader(data)
    key = _read_key(
        reader, SolarexKey.BID_REDEMPTION_TICKET_V1, SolarexKey.BID_REDEMPTION_TICKET_V2
    )
    if key == SolarexKey.BID_REDEMPTION_TICKET_V1:
        return BidRedemptionTicketV1(
            participation_redeemed=reader.boolean(),
            items_redeemed=reader.u8(),
        )
    return BidRedemptionTicketV2(
        winner_index=reader.option(reader.u64),
        auction_manager=reader.pubkey(),
        redeemed=reader.rest(),
    )


# --- Standalone tickets ---


def decode_payout_ticket(data: bytes) -> PayoutTicket:
    reader = AccountReader(data)
    _read_key(reader, SolarexKey.PAYOUT_TICKET_V1)
    return PayoutTicket(recipient=reader.pubkey(), amount_paid=reader.u64())


def decode_prize_tracking_ticket(data: bytes) -> PrizeTrackingTicket:
    reader = AccountReader(data)
    _read_key(reader, SolarexKey.PRIZE_TRACKING_TICKET_V1)
    return PrizeTrackingTicket(
        metadata=reader.pubkey(),
        supply_snapshot=reader.u64(),
        expected_redemptions=reader.u64(),
        redemptions=reader.u64(),
    )


# --- Store ---


def decode_store(data: bytes) -> Store:
    reader = AccountReader(data)
    _read_key(reader, SolarexKey.STORE_V1)
    return Store(
        public=reader.boolean(),
        auction_program=reader.pubkey(),
        token_vault_program=reader.pubkey(),
        token_metadata_program=reader.pubkey(),
        token_program=reader.pubkey(),
    )


# --- Safety deposit config ---


def decode_safety_deposit_config(data: bytes) -> SafetyDepositConfig:
    """Decode a safety deposit config.

    The amount ranges use variable integer widths given by amount_type and
    length_type, so this layout is read field by field rather than from a
    fixed schema.
    """
    reader = AccountReader(data)
    _read_key(reader, SolarexKey.SAFETY_DEPOSIT_CONFIG_V1)
    auction_manager = reader.pubkey()
    order = reader.u64()
    winning_config_type = reader.u8()
    amount_type = reader.u8()
    length_type = reader.u8()

    def amount_range() -> AmountRange:
        return AmountRange(
            amount=reader.unsigned(amount_type),
            length=reader.unsigned(length_type),
        )

    amount_ranges = reader.vec(amount_range)

    def participation_config() -> ParticipationConfigV2:
        return ParticipationConfigV2(
            winner_constraint=reader.u8(),
            non_winning_constraint=reader.u8(),
            fixed_price=reader.option(reader.u64),
        )

    def participation_state() -> ParticipationStateV2:
        return ParticipationStateV2(collected_to_accept_payment=reader.u64())

    return SafetyDepositConfig(
        auction_manager=auction_manager,
        order=order,
        winning_config_type=winning_config_type,
        amount_type=amount_type,
        length_type=length_type,
        amount_ranges=amount_ranges,
        participation_config=reader.option(participation_config),
        participation_state=reader.option(participation_state),
    )


# --- Whitelisted creator ---


def decode_whitelisted_creator(data: bytes) -> WhitelistedCreator:
    reader = AccountReader(data)
    _read_key(reader, SolarexKey.WHITELISTED_CREATOR_V1)
    return WhitelistedCreator(address=reader.pubkey(), activated=reader.boolean())


def whitelisted_creator_parser(
    pubkey: PublicKeyString, account: AccountRecord
) -> ParsedAccount[WhitelistedCreator]:
    """Account cache parser for whitelisted creator accounts."""
    return ParsedAccount(
        pubkey=pubkey,
        account=account,
        info=decode_whitelisted_creator(account.data),
    )
