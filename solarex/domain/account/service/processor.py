"""AccountProcessor - routes a batch of accounts concurrently."""

import asyncio
import logging
from collections.abc import Iterable

import logfire

from solarex.domain.account.model.outcome import BatchSummary, RouteStatus
from solarex.domain.account.model.record import KeyedAccount
from solarex.domain.account.port.index import IndexSetter
from solarex.domain.account.service.router import AccountRouter
from solarex.domain.shared.service import Service

logger = logging.getLogger(__name__)


class AccountProcessor(Service):
    """Routes many account snapshots at once.

    Each account is routed in its own task, so a slow whitelist lookup only
    delays that account. Failures stay on the individual RouteResult.
    """

    router: AccountRouter
    include_all_stores: bool = False

    async def process(
        self,
        accounts: Iterable[KeyedAccount],
        setter: IndexSetter,
        include_all_stores: bool | None = None,
    ) -> BatchSummary:
        """Route every account and summarize the outcomes.

        Args:
            accounts: Account snapshots with their keys.
            setter: Upsert callable of the index store.
            include_all_stores: Index auction managers of every store. Defaults
                to the processor's own setting.

        Returns:
            BatchSummary with one RouteResult per account, in input order.
        """
        batch = list(accounts)
        if include_all_stores is None:
            include_all_stores = self.include_all_stores
        with logfire.span("ProcessAccounts", count=len(batch)):
            results = await asyncio.gather(
                *(self.router.route(keyed, setter, include_all_stores) for keyed in batch)
            )

        summary = BatchSummary(results=list(results))
        logger.info(
            f"Processed {len(summary)} accounts: {summary.routed} routed, "
            f"{summary.filtered} filtered, "
            f"{summary.count(RouteStatus.DECODE_FAILED)} malformed, "
            f"{summary.count(RouteStatus.LOOKUP_FAILED)} lookup failures"
        )
        return summary
