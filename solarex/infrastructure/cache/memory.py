"""In-memory index store and account cache."""

import logging
from collections import defaultdict
from collections.abc import Iterator
from typing import Any

from solarex.domain.account.model.parsed import ParsedAccount
from solarex.domain.account.model.record import AccountRecord
from solarex.domain.account.port.cache import AccountCache, AccountParser
from solarex.domain.account.port.index import IndexSetter
from solarex.domain.shared.model.pubkey import PublicKeyString

logger = logging.getLogger(__name__)


class InMemoryIndexStore(IndexSetter):
    """Named collections of parsed accounts, keyed by derived keys.

    The store itself is the setter: pass it wherever an IndexSetter is
    expected. Writing an existing key replaces the previous value.
    """

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, ParsedAccount[Any]]] = defaultdict(dict)

    def __call__(self, collection: str, key: str, value: ParsedAccount[Any]) -> None:
        self._collections[collection][key] = value

    def get(self, collection: str, key: str) -> ParsedAccount[Any] | None:
        """Get a value by collection and key."""
        return self._collections.get(collection, {}).get(key)

    def collection(self, name: str) -> dict[str, ParsedAccount[Any]]:
        """Return a copy of one collection."""
        return dict(self._collections.get(name, {}))

    def names(self) -> list[str]:
        """List collections that hold at least one entry."""
        return [name for name, entries in self._collections.items() if entries]

    def snapshot(self) -> dict[str, dict[str, ParsedAccount[Any]]]:
        """Copy of every collection, for comparisons."""
        return {name: dict(entries) for name, entries in self._collections.items() if entries}

    def __contains__(self, name: str) -> bool:
        return bool(self._collections.get(name))

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        """Total number of entries across collections."""
        return sum(len(entries) for entries in self._collections.values())


class InMemoryAccountCache(AccountCache):
    """Parsed accounts retrievable by their own key."""

    def __init__(self) -> None:
        self._accounts: dict[PublicKeyString, ParsedAccount[Any]] = {}
        self._active: set[PublicKeyString] = set()

    async def add(
        self,
        pubkey: PublicKeyString,
        account: AccountRecord,
        parser: AccountParser | None = None,
        is_active: bool = False,
    ) -> ParsedAccount[Any]:
        """Parse and store an account, replacing any earlier snapshot.

        Without a parser the raw record is stored as its own info. Accounts
        added with is_active are tracked as subscribed for live updates.
        """
        if parser is not None:
            parsed = parser(pubkey, account)
        else:
            parsed = ParsedAccount(pubkey=pubkey, account=account, info=account)

        self._accounts[pubkey] = parsed
        if is_active:
            self._active.add(pubkey)
        logger.debug(f"Cached account {pubkey}")
        return parsed

    def get(self, pubkey: PublicKeyString) -> ParsedAccount[Any] | None:
        return self._accounts.get(pubkey)

    def is_active(self, pubkey: PublicKeyString) -> bool:
        return pubkey in self._active

    def __contains__(self, pubkey: str) -> bool:
        return pubkey in self._accounts

    def __len__(self) -> int:
        return len(self._accounts)
