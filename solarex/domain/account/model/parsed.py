"""ParsedAccount - the unit written into indices."""

from dataclasses import dataclass
from typing import Generic, TypeVar

from solarex.domain.account.model.entity import DecodedEntity
from solarex.domain.account.model.record import AccountRecord
from solarex.domain.shared.model.pubkey import PublicKeyString

T = TypeVar("T", bound=DecodedEntity)


@dataclass
class ParsedAccount(Generic[T]):
    """A decoded account snapshot.

    The same instance may be held by several indices at once. `info` is
    replaced, not mutated, when display fields are merged in.

    Attributes:
        pubkey: The account's own key.
        account: The raw snapshot the entity was decoded from.
        info: The decoded entity.
    """

    pubkey: PublicKeyString
    account: AccountRecord
    info: T
