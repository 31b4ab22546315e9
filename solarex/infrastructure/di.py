"""Dependency injection provider for account routing."""

import logging

from dishka import Provider, from_context, provide

from solarex.config import Config
from solarex.domain.account.port.cache import AccountCache
from solarex.domain.account.port.whitelist import WhitelistResolver
from solarex.domain.account.service.classifier import AccountClassifier
from solarex.domain.account.service.processor import AccountProcessor
from solarex.domain.account.service.router import AccountRouter
from solarex.domain.shared.model.pubkey import PublicKeyString
from solarex.infrastructure.cache.memory import InMemoryAccountCache, InMemoryIndexStore
from solarex.infrastructure.names.loader import load_name_overrides
from solarex.infrastructure.whitelist.program_address import ProgramAddressWhitelistResolver
from solarex.util.di.scope import Scope

logger = logging.getLogger(__name__)


class AccountProvider(Provider):
    """Provides account routing components.

    The classifier, router, cache and collaborators are APP-scoped
    singletons. Each BATCH scope gets a fresh InMemoryIndexStore.
    """

    config = from_context(provides=Config, scope=Scope.APP)

    @provide(scope=Scope.APP)
    def get_account_cache(self) -> AccountCache:
        return InMemoryAccountCache()

    @provide(scope=Scope.APP)
    def get_whitelist_resolver(self, config: Config) -> WhitelistResolver:
        return ProgramAddressWhitelistResolver(
            program_id=config.program.program_id,
            store_id=config.program.store_id,
            seed_prefix=config.program.whitelist_seed_prefix,
        )

    @provide(scope=Scope.APP)
    def get_classifier(self, config: Config) -> AccountClassifier:
        return AccountClassifier(program_id=PublicKeyString(config.program.program_id))

    @provide(scope=Scope.APP)
    def get_router(
        self,
        config: Config,
        classifier: AccountClassifier,
        cache: AccountCache,
        resolver: WhitelistResolver,
    ) -> AccountRouter:
        store_id = config.program.store_id
        logger.info(
            f"AccountRouter for program {config.program.program_id}, "
            f"store {store_id or '<any>'}"
        )
        return AccountRouter(
            classifier=classifier,
            cache=cache,
            resolver=resolver,
            name_overrides=load_name_overrides(config.routing.name_overrides_file),
            store_id=PublicKeyString(store_id) if store_id else None,
        )

    @provide(scope=Scope.APP)
    def get_processor(self, config: Config, router: AccountRouter) -> AccountProcessor:
        return AccountProcessor(router=router, include_all_stores=config.routing.include_all_stores)

    @provide(scope=Scope.BATCH)
    def get_index_store(self) -> InMemoryIndexStore:
        return InMemoryIndexStore()
