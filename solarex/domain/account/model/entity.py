"""Decoded solarex account structures.

Every model mirrors the on-chain layout field for field; integer widths are
noted where they are wider than a byte. Keys are base58 strings.
"""

from pydantic import Field

from solarex.domain.account.model.key import SolarexKey
from solarex.domain.shared.model.pubkey import PublicKeyString
from solarex.domain.shared.model.value import ValueObject

# --- Auction managers ---


class WinningConfigStateItem(ValueObject):
    primary_sale_happened: bool
    claimed: bool


class WinningConfigState(ValueObject):
    items: list[WinningConfigStateItem] = Field(default_factory=list)
    money_pushed_to_accept_payment: bool


class ParticipationStateV1(ValueObject):
    collected_to_accept_payment: int  # u64
    primary_sale_happened: bool
    validated: bool
    printing_authorization_token_account: PublicKeyString | None = None


class AuctionManagerStateV1(ValueObject):
    status: int
    winning_config_items_validated: int
    winning_config_states: list[WinningConfigState] = Field(default_factory=list)
    participation_state: ParticipationStateV1 | None = None


class WinningConfigItem(ValueObject):
    safety_deposit_box_index: int
    amount: int
    winning_config_type: int


class WinningConfig(ValueObject):
    items: list[WinningConfigItem] = Field(default_factory=list)


class ParticipationConfigV1(ValueObject):
    winner_constraint: int
    non_winning_constraint: int
    safety_deposit_box_index: int
    fixed_price: int | None = None  # u64


class AuctionManagerSettingsV1(ValueObject):
    winning_configs: list[WinningConfig] = Field(default_factory=list)
    participation_config: ParticipationConfigV1 | None = None


class AuctionManagerV1(ValueObject):
    """Deprecated auction manager carrying its full winning configuration."""

    key: SolarexKey = SolarexKey.AUCTION_MANAGER_V1
    store: PublicKeyString
    authority: PublicKeyString
    auction: PublicKeyString
    vault: PublicKeyString
    accept_payment: PublicKeyString
    state: AuctionManagerStateV1
    settings: AuctionManagerSettingsV1


class AuctionManagerStateV2(ValueObject):
    status: int
    safety_config_items_validated: int  # u64
    bids_pushed_to_accept_payment: int  # u64
    has_participation: bool


class AuctionManagerV2(ValueObject):
    """Auction manager whose per-item settings live in SafetyDepositConfig accounts."""

    key: SolarexKey = SolarexKey.AUCTION_MANAGER_V2
    store: PublicKeyString
    authority: PublicKeyString
    auction: PublicKeyString
    vault: PublicKeyString
    accept_payment: PublicKeyString
    state: AuctionManagerStateV2


AuctionManager = AuctionManagerV1 | AuctionManagerV2


# --- Bid redemption tickets ---


class BidRedemptionTicketV1(ValueObject):
    key: SolarexKey = SolarexKey.BID_REDEMPTION_TICKET_V1
    participation_redeemed: bool
    items_redeemed: int


class BidRedemptionTicketV2(ValueObject):
    """Redemption ticket for one bid, with a bitmap of redeemed items.

    Attributes:
        winner_index: Place of the bid among winners, None for non-winning bids.
        auction_manager: Key of the auction manager the bid belongs to.
        redeemed: Bitmap of redeemed safety deposit orders, most significant bit first.
    """

    key: SolarexKey = SolarexKey.BID_REDEMPTION_TICKET_V2
    winner_index: int | None = None  # u64
    auction_manager: PublicKeyString
    redeemed: bytes = b""

    def is_item_redeemed(self, order: int) -> bool:
        """Check the redemption bit for the safety deposit at `order`."""
        position = order // 8
        if order < 0 or position >= len(self.redeemed):
            return False
        mask = 1 << (7 - order % 8)
        return bool(self.redeemed[position] & mask)


BidRedemptionTicket = BidRedemptionTicketV1 | BidRedemptionTicketV2


# --- Standalone tickets ---


class PayoutTicket(ValueObject):
    key: SolarexKey = SolarexKey.PAYOUT_TICKET_V1
    recipient: PublicKeyString
    amount_paid: int  # u64


class PrizeTrackingTicket(ValueObject):
    key: SolarexKey = SolarexKey.PRIZE_TRACKING_TICKET_V1
    metadata: PublicKeyString
    supply_snapshot: int  # u64
    expected_redemptions: int  # u64
    redemptions: int  # u64


# --- Store ---


class Store(ValueObject):
    """Deployment-wide configuration record."""

    key: SolarexKey = SolarexKey.STORE_V1
    public: bool
    auction_program: PublicKeyString
    token_vault_program: PublicKeyString
    token_metadata_program: PublicKeyString
    token_program: PublicKeyString


# --- Safety deposit config ---


class AmountRange(ValueObject):
    amount: int
    length: int


class ParticipationConfigV2(ValueObject):
    winner_constraint: int
    non_winning_constraint: int
    fixed_price: int | None = None  # u64


class ParticipationStateV2(ValueObject):
    collected_to_accept_payment: int  # u64


class SafetyDepositConfig(ValueObject):
    """Per-item settings of an AuctionManagerV2, positioned by `order`.

    amount_type and length_type are byte widths (1, 2, 4 or 8) of the
    numbers stored in amount_ranges.
    """

    key: SolarexKey = SolarexKey.SAFETY_DEPOSIT_CONFIG_V1
    auction_manager: PublicKeyString
    order: int  # u64
    winning_config_type: int
    amount_type: int
    length_type: int
    amount_ranges: list[AmountRange] = Field(default_factory=list)
    participation_config: ParticipationConfigV2 | None = None
    participation_state: ParticipationStateV2 | None = None


# --- Whitelisted creator ---


class CreatorDisplay(ValueObject):
    """Display fields that can be merged into a whitelisted creator."""

    name: str | None = None
    image: str | None = None
    description: str | None = None
    twitter: str | None = None


class WhitelistedCreator(ValueObject):
    key: SolarexKey = SolarexKey.WHITELISTED_CREATOR_V1
    address: PublicKeyString
    activated: bool = True

    # Display fields, only set by name-override enrichment
    name: str | None = None
    image: str | None = None
    description: str | None = None
    twitter: str | None = None

    def with_display(self, display: CreatorDisplay) -> "WhitelistedCreator":
        """Return a copy with the given display fields merged over this one's."""
        return self.model_copy(update=display.model_dump(exclude_none=True))


DecodedEntity = (
    AuctionManager
    | BidRedemptionTicket
    | PayoutTicket
    | PrizeTrackingTicket
    | Store
    | SafetyDepositConfig
    | WhitelistedCreator
)
