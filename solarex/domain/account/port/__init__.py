from solarex.domain.account.port.cache import AccountCache, AccountParser
from solarex.domain.account.port.index import IndexSetter
from solarex.domain.account.port.whitelist import NameOverrides, WhitelistResolver

__all__ = [
    "AccountCache",
    "AccountParser",
    "IndexSetter",
    "NameOverrides",
    "WhitelistResolver",
]
