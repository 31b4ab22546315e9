"""Raw account records as delivered by the network layer."""

from solarex.domain.shared.model.pubkey import PublicKeyString
from solarex.domain.shared.model.value import ValueObject


class AccountRecord(ValueObject):
    """Owner program and raw data of an account snapshot.

    Attributes:
        owner: Base58 key of the program that owns the account.
        data: Raw account data, discriminant byte first.
    """

    owner: PublicKeyString
    data: bytes


class KeyedAccount(ValueObject):
    """An account snapshot together with its own key."""

    pubkey: PublicKeyString
    account: AccountRecord
