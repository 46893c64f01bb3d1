"""Base service class for domain services."""

import asyncio
from typing import Awaitable, TypeVar

from telloom.domain.error import AuthorityUnavailableError

T = TypeVar("T")


class Service:
    """Base class for all domain services.

    Domain services contain business logic that doesn't naturally belong
    to a single entity or spans multiple entities/aggregates.
    """

    pass


async def within_budget(call: Awaitable[T], operation: str, timeout: float) -> T:
    """Await an authority store call, bounded by a latency budget.

    PostgreSQL-backed stores hit their server-side ``statement_timeout``
    first (``AuthoritySettings.statement_timeout_ms``); this client-side
    cancel is the backstop for a store that stops answering altogether.

    Args:
        call: The pending store call
        operation: Name used in logs and in the raised error
        timeout: Budget in seconds

    Returns:
        Whatever the call returned

    Raises:
        AuthorityUnavailableError: If the budget is exceeded, or the call
            itself reported the store as unavailable
    """
    try:
        return await asyncio.wait_for(call, timeout=timeout)
    except asyncio.TimeoutError as e:
        raise AuthorityUnavailableError(operation, f"timed out after {timeout}s") from e
