"""Periodic removal of accounts that were never verified."""

import asyncio
import contextlib
import logging
from collections.abc import Callable

from sqlalchemy.orm import Session

from app.services.auth import get_auth_service

logger = logging.getLogger("authflow")


class ExpiredAccountSweeper:
    """Background task that deletes unverified users past their code expiry.

    Started and stopped by the application lifespan. Uses its own sessions
    from ``session_factory`` rather than a request-scoped one.
    """

    def __init__(self, session_factory: Callable[[], Session], interval_seconds: float) -> None:
        self.session_factory = session_factory
        self.interval_seconds = interval_seconds
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def sweep_once(self) -> int:
        """Run a single sweep. Returns the number of deleted accounts."""
        db = self.session_factory()
        try:
            deleted = get_auth_service().delete_expired_unverified_users(db)
        finally:
            db.close()
        if deleted:
            logger.info("Deleted %d expired unverified account(s)", deleted)
        return deleted

    def start(self) -> None:
        """Schedule the sweep loop on the running event loop."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="expired-account-sweeper")

    async def stop(self) -> None:
        """Cancel the sweep loop and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                await asyncio.to_thread(self.sweep_once)
            except Exception:
                logger.exception("Error deleting expired unverified users")
