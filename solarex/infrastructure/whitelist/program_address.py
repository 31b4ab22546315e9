"""Whitelisted creator key derivation from program addresses."""

import logging

from solders.pubkey import Pubkey

from solarex.domain.account.port.whitelist import WhitelistResolver
from solarex.domain.shared.error import ConfigurationError
from solarex.domain.shared.model.pubkey import PublicKeyString

logger = logging.getLogger(__name__)

DEFAULT_SEED_PREFIX = "metaplex"


class ProgramAddressWhitelistResolver(WhitelistResolver):
    """Derives the whitelisted creator account key for a creator in a store.

    The key is the program-derived address of
    [prefix, program id, store id, creator] under the program id, so only
    the account the program itself created for this store matches. Results
    are memoized per creator since the derivation is deterministic.
    """

    def __init__(
        self,
        program_id: str,
        store_id: str | None,
        seed_prefix: str = DEFAULT_SEED_PREFIX,
    ) -> None:
        self._program = Pubkey.from_string(program_id)
        self._store = Pubkey.from_string(store_id) if store_id else None
        self._prefix = seed_prefix.encode()
        self._derived: dict[str, PublicKeyString] = {}

    async def resolve(self, creator: PublicKeyString) -> PublicKeyString:
        if self._store is None:
            raise ConfigurationError("Store not configured, cannot derive whitelisted creator keys")

        derived = self._derived.get(creator)
        if derived is None:
            address, _bump = Pubkey.find_program_address(
                [
                    self._prefix,
                    bytes(self._program),
                    bytes(self._store),
                    bytes(Pubkey.from_string(creator)),
                ],
                self._program,
            )
            derived = PublicKeyString(str(address))
            self._derived[creator] = derived
            logger.debug(f"Derived whitelisted creator key {derived} for {creator}")
        return derived
