"""Create-if-absent writes over redundant write paths."""

from typing import Awaitable, Callable, Sequence

import logfire
from sqlalchemy.exc import IntegrityError

from telloom.config import AuthoritySettings
from telloom.domain.error import AuthorityUnavailableError, ProvisioningError
from telloom.domain.repository import RelationshipWriter

from .base import Service, within_budget

Write = Callable[[RelationshipWriter], Awaitable[bool]]


class IdempotentUpsert(Service):
    """Applies a provisioning write through the first write path that works.

    Paths are tried in order (procedure path first, then direct privileged
    writes). A unique-key violation on any path means a concurrent or earlier
    call already created the row, which counts as success.
    """

    def __init__(
        self,
        paths: Sequence[RelationshipWriter],
        authority_settings: AuthoritySettings,
    ) -> None:
        """Initialize upsert helper.

        Args:
            paths: Write paths in preference order
            authority_settings: Store call budget
        """
        self.paths = list(paths)
        self.timeout = authority_settings.query_timeout_seconds

    async def apply(self, step: str, write: Write) -> bool:
        """Run one create-if-absent write.

        Args:
            step: Step name for logs and errors
            write: Calls the relevant ensure_* method on a given path

        Returns:
            True if the row was created, False if it already existed

        Raises:
            ProvisioningError: If every path failed
        """
        failures: list[str] = []

        for path in self.paths:
            try:
                created = await within_budget(
                    write(path), f"{step}.{path.path_name}", self.timeout
                )
            except IntegrityError:
                logfire.info("Row already exists", step=step, path=path.path_name)
                return False
            except AuthorityUnavailableError as e:
                logfire.warn(
                    "Write path failed, trying next",
                    step=step,
                    path=path.path_name,
                    error=str(e),
                )
                failures.append(f"{path.path_name}: {e}")
                continue

            if failures:
                logfire.info("Write succeeded on fallback path", step=step, path=path.path_name)
            return created

        logfire.error("All write paths failed", step=step, failures=failures)
        raise ProvisioningError(step, failures)
