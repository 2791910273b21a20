"""Application use cases - Business logic orchestration."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

# Type variables for generic use case pattern
TRequest = TypeVar("TRequest")
TResponse = TypeVar("TResponse")


class UseCase(ABC, Generic[TRequest, TResponse]):
    """Base class for all use cases following command pattern."""

    @abstractmethod
    async def execute(self, request: TRequest) -> TResponse:
        """Execute the use case with the given request."""
        pass


# Import concrete use cases (after UseCase definition to avoid circular imports)
from smartlink.application.use_cases.resolve_listen_link import (  # noqa: E402
    ListenRequest,
    ListenResolution,
    ResolutionState,
    ResolveListenLinkUseCase,
)

__all__ = [
    "UseCase",
    "ListenRequest",
    "ListenResolution",
    "ResolutionState",
    "ResolveListenLinkUseCase",
]
