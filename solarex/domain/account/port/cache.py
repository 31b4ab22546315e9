from abc import abstractmethod
from collections.abc import Callable
from typing import Any, Protocol

from solarex.domain.account.model.parsed import ParsedAccount
from solarex.domain.account.model.record import AccountRecord
from solarex.domain.shared.model.pubkey import PublicKeyString
from solarex.domain.shared.port import Port

AccountParser = Callable[[PublicKeyString, AccountRecord], ParsedAccount[Any]]


class AccountCache(Port, Protocol):
    """Shared cache that makes parsed accounts retrievable by key."""

    @abstractmethod
    async def add(
        self,
        pubkey: PublicKeyString,
        account: AccountRecord,
        parser: AccountParser | None = None,
        is_active: bool = False,
    ) -> ParsedAccount[Any]:
        """Parse and register an account, returning the stored ParsedAccount."""
        ...

    @abstractmethod
    def get(self, pubkey: PublicKeyString) -> ParsedAccount[Any] | None:
        """Return a registered account, or None."""
        ...
