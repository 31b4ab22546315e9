"""Per-record routing outcomes."""

from dataclasses import dataclass, field
from enum import StrEnum

from solarex.domain.account.model.key import AccountKind, IndexName
from solarex.domain.shared.model.pubkey import PublicKeyString


class RouteStatus(StrEnum):
    """How routing of a single record ended."""

    ROUTED = "routed"  # at least one index write
    FILTERED = "filtered"  # not applicable: other owner, unknown kind, store or whitelist mismatch
    DECODE_FAILED = "decode_failed"
    LOOKUP_FAILED = "lookup_failed"


@dataclass(frozen=True)
class IndexWrite:
    """A single setter call issued by the router."""

    collection: IndexName
    key: str


@dataclass
class RouteResult:
    """Result of routing one record.

    Attributes:
        pubkey: Key of the routed record.
        status: Final status.
        kind: Routing family, None when the record was not classified.
        writes: Index writes issued, in order.
        error: The swallowed error for failed statuses.
    """

    pubkey: PublicKeyString
    status: RouteStatus = RouteStatus.FILTERED
    kind: AccountKind | None = None
    writes: list[IndexWrite] = field(default_factory=list)
    error: Exception | None = None

    def __bool__(self) -> bool:
        """Return True if the record was written to any index."""
        return self.status == RouteStatus.ROUTED

    @property
    def failed(self) -> bool:
        return self.status in (RouteStatus.DECODE_FAILED, RouteStatus.LOOKUP_FAILED)


@dataclass(frozen=True)
class BatchSummary:
    """Aggregate of routing a batch of records."""

    results: list[RouteResult]

    def __len__(self) -> int:
        return len(self.results)

    def count(self, status: RouteStatus) -> int:
        """Number of results that ended with `status`."""
        return sum(1 for result in self.results if result.status == status)

    @property
    def routed(self) -> int:
        return self.count(RouteStatus.ROUTED)

    @property
    def filtered(self) -> int:
        return self.count(RouteStatus.FILTERED)

    @property
    def failed(self) -> int:
        return sum(1 for result in self.results if result.failed)
