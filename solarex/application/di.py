from dishka import AsyncContainer, make_async_container

from solarex.config import Config
from solarex.infrastructure.di import AccountProvider
from solarex.util.di.scope import Scope


def create_container(config: Config | None = None) -> AsyncContainer:
    # Pydantic Settings populates from env vars at runtime
    config = config or Config()

    return make_async_container(
        AccountProvider(),
        context={Config: config},
        scopes=Scope,  # type: ignore[arg-type]  # Custom scope class
    )
