"""Discriminants, routing families and index names for solarex accounts."""

from enum import IntEnum, StrEnum


class SolarexKey(IntEnum):
    """Leading byte of every solarex account's data."""

    UNINITIALIZED = 0
    ORIGINAL_AUTHORITY_LOOKUP_V1 = 1
    BID_REDEMPTION_TICKET_V1 = 2
    STORE_V1 = 3
    WHITELISTED_CREATOR_V1 = 4
    PAYOUT_TICKET_V1 = 5
    SAFETY_DEPOSIT_VALIDATION_TICKET_V1 = 6
    AUCTION_MANAGER_V1 = 7
    PRIZE_TRACKING_TICKET_V1 = 8
    SAFETY_DEPOSIT_CONFIG_V1 = 9
    AUCTION_MANAGER_V2 = 10
    BID_REDEMPTION_TICKET_V2 = 11
    AUCTION_WINNER_TOKEN_TYPE_TRACKER_V1 = 12


class AccountKind(StrEnum):
    """Routing family of an account. Versions of one entity share a family."""

    AUCTION_MANAGER = "auction_manager"
    BID_REDEMPTION_TICKET = "bid_redemption_ticket"
    PAYOUT_TICKET = "payout_ticket"
    PRIZE_TRACKING_TICKET = "prize_tracking_ticket"
    STORE = "store"
    SAFETY_DEPOSIT_CONFIG = "safety_deposit_config"
    WHITELISTED_CREATOR = "whitelisted_creator"


class IndexName(StrEnum):
    """Named collections the router writes into."""

    AUCTION_MANAGERS_BY_AUCTION = "auctionManagersByAuction"
    BID_REDEMPTIONS = "bidRedemptions"
    BID_REDEMPTION_V2S_BY_AUCTION_MANAGER_AND_WINNING_INDEX = (
        "bidRedemptionV2sByAuctionManagerAndWinningIndex"
    )
    PAYOUT_TICKETS = "payoutTickets"
    PRIZE_TRACKING_TICKETS = "prizeTrackingTickets"
    STORES = "stores"
    STORE = "store"
    SAFETY_DEPOSIT_CONFIGS_BY_AUCTION_MANAGER_AND_INDEX = (
        "safetyDepositConfigsByAuctionManagerAndIndex"
    )
    WHITELISTED_CREATORS_BY_CREATOR = "whitelistedCreatorsByCreator"
