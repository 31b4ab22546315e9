"""AccountClassifier - decides which routing family an account belongs to."""

from solarex.domain.account.model.key import AccountKind, SolarexKey
from solarex.domain.account.model.record import AccountRecord
from solarex.domain.shared.model.pubkey import PublicKeyString
from solarex.domain.shared.service import Service


def discriminant(account: AccountRecord) -> SolarexKey | None:
    """Return the account's discriminant, or None for empty or unknown data."""
    if not account.data:
        return None
    try:
        return SolarexKey(account.data[0])
    except ValueError:
        return None


def kind_of(key: SolarexKey) -> AccountKind | None:
    """Map a discriminant to its routing family, None for unrouted kinds."""
    match key:
        case SolarexKey.AUCTION_MANAGER_V1 | SolarexKey.AUCTION_MANAGER_V2:
            return AccountKind.AUCTION_MANAGER
        case SolarexKey.BID_REDEMPTION_TICKET_V1 | SolarexKey.BID_REDEMPTION_TICKET_V2:
            return AccountKind.BID_REDEMPTION_TICKET
        case SolarexKey.PAYOUT_TICKET_V1:
            return AccountKind.PAYOUT_TICKET
        case SolarexKey.PRIZE_TRACKING_TICKET_V1:
            return AccountKind.PRIZE_TRACKING_TICKET
        case SolarexKey.STORE_V1:
            return AccountKind.STORE
        case SolarexKey.SAFETY_DEPOSIT_CONFIG_V1:
            return AccountKind.SAFETY_DEPOSIT_CONFIG
        case SolarexKey.WHITELISTED_CREATOR_V1:
            return AccountKind.WHITELISTED_CREATOR
        case (
            SolarexKey.UNINITIALIZED
            | SolarexKey.ORIGINAL_AUTHORITY_LOOKUP_V1
            | SolarexKey.SAFETY_DEPOSIT_VALIDATION_TICKET_V1
            | SolarexKey.AUCTION_WINNER_TOKEN_TYPE_TRACKER_V1
        ):
            return None


def _has_key(account: AccountRecord, *keys: SolarexKey) -> bool:
    return discriminant(account) in keys


def is_auction_manager_account(account: AccountRecord) -> bool:
    return _has_key(account, SolarexKey.AUCTION_MANAGER_V1, SolarexKey.AUCTION_MANAGER_V2)


def is_bid_redemption_ticket_account(account: AccountRecord) -> bool:
    return _has_key(
        account, SolarexKey.BID_REDEMPTION_TICKET_V1, SolarexKey.BID_REDEMPTION_TICKET_V2
    )


def is_payout_ticket_account(account: AccountRecord) -> bool:
    return _has_key(account, SolarexKey.PAYOUT_TICKET_V1)


def is_prize_tracking_ticket_account(account: AccountRecord) -> bool:
    return _has_key(account, SolarexKey.PRIZE_TRACKING_TICKET_V1)


def is_store_account(account: AccountRecord) -> bool:
    return _has_key(account, SolarexKey.STORE_V1)


def is_safety_deposit_config_account(account: AccountRecord) -> bool:
    return _has_key(account, SolarexKey.SAFETY_DEPOSIT_CONFIG_V1)


def is_whitelisted_creator_account(account: AccountRecord) -> bool:
    return _has_key(account, SolarexKey.WHITELISTED_CREATOR_V1)


class AccountClassifier(Service):
    """Owner and discriminant gate in front of the decoders.

    Never decodes beyond the first byte, so it is safe on buffers of any
    length. Accounts owned by another program classify to nothing no matter
    what their data holds.
    """

    program_id: PublicKeyString

    def is_solarex_account(self, account: AccountRecord) -> bool:
        return account.owner == self.program_id

    def classify(self, account: AccountRecord) -> AccountKind | None:
        """Return the routing family of the account, or None if none applies."""
        if not self.is_solarex_account(account):
            return None
        key = discriminant(account)
        if key is None:
            return None
        return kind_of(key)
