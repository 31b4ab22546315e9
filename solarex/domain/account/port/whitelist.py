from abc import abstractmethod
from collections.abc import Mapping
from typing import Protocol

from solarex.domain.account.model.entity import CreatorDisplay
from solarex.domain.shared.model.pubkey import PublicKeyString
from solarex.domain.shared.port import Port

# Static display fields keyed by creator address, loaded once at startup
NameOverrides = Mapping[PublicKeyString, CreatorDisplay]


class WhitelistResolver(Port, Protocol):
    @abstractmethod
    async def resolve(self, creator: PublicKeyString) -> PublicKeyString:
        """Return the key a whitelisted creator account must have in the current store.

        Raises:
            LookupFailedError: If the key cannot be derived.
        """
        ...
