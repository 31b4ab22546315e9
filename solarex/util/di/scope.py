"""Custom Dishka scopes for solarex."""

from dishka import BaseScope, new_scope


class Scope(BaseScope):  # type: ignore[misc]  # BaseScope is designed to be subclassed
    """Solarex dependency injection scopes.

    Hierarchy: APP -> BATCH

    - APP: Application lifetime (configuration, caches, router)
    - BATCH: One batch of incoming accounts and the index store it fills
    """

    APP = new_scope("APP")
    BATCH = new_scope("BATCH")
