from abc import abstractmethod
from typing import Any, Protocol

from solarex.domain.account.model.parsed import ParsedAccount
from solarex.domain.shared.port import Port


class IndexSetter(Port, Protocol):
    @abstractmethod
    def __call__(self, collection: str, key: str, value: ParsedAccount[Any]) -> None:
        """Upsert `value` under `key` in the named collection. Last write wins."""
        ...
