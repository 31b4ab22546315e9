"""Error hierarchy for solarex.

Error layers:
- SolarexError: Base class for all solarex errors
- DomainError: Malformed account data and other domain rule violations
- InfrastructureError: Collaborator failures like cross-reference lookups or misconfiguration

The account router catches all of these at its boundary and reports them
through RouteResult instead of raising.
"""


class SolarexError(Exception):
    """Base class for all solarex errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(message)


# =============================================================================
# Domain Errors (bad input data)
# =============================================================================


class DomainError(SolarexError):
    """Base class for domain errors."""


class MalformedAccountError(DomainError):
    """Account data does not match the layout of its discriminant."""

    def __init__(self, message: str, offset: int | None = None) -> None:
        super().__init__(message, code="MALFORMED_ACCOUNT")
        self.offset = offset


# =============================================================================
# Infrastructure Errors (collaborator failures)
# =============================================================================


class InfrastructureError(SolarexError):
    """Base class for infrastructure/system errors."""


class LookupFailedError(InfrastructureError):
    """A cross-reference lookup (resolver or cache) failed."""


class ConfigurationError(InfrastructureError):
    """System misconfiguration detected."""
