"""
Process invoker for container restarts.

Wraps a ContainerManager with the per-target single-flight gate and handles
restart failures locally: they are logged and returned as failed outcomes,
never raised to the dispatcher or the webhook caller.
"""

import time

import structlog

from .exceptions import InvocationError
from .models import RestartOutcome
from .runtime import ContainerManager
from .singleflight import SingleFlight


logger = structlog.get_logger(__name__)


class ProcessInvoker:
    """Restart named targets through a container manager."""

    def __init__(self, manager: ContainerManager):
        self.manager = manager
        self._gate = SingleFlight()

    async def restart(self, target: str) -> RestartOutcome:
        """
        Restart ``target`` and report what happened.

        Concurrent calls for the same target share the in-flight restart and
        its outcome. Calls made one after another each issue a restart.

        Args:
            target: Container name, possibly empty

        Returns:
            RestartOutcome for the restart this call issued or joined
        """
        outcome, shared = await self._gate.do(target, lambda: self._restart(target))

        if shared:
            logger.info(
                "Joined in-flight restart",
                target=target,
                success=outcome.success
            )

        return outcome

    async def _restart(self, target: str) -> RestartOutcome:
        logger.info("Restarting container", target=target)
        start_time = time.time()

        try:
            outcome = await self.manager.restart(target)
        except InvocationError as e:
            logger.error(
                "Failed to restart container",
                target=target,
                error=e.outcome.error,
                output=e.outcome.combined_output,
                returncode=e.returncode,
                execution_time_ms=int((time.time() - start_time) * 1000)
            )
            return e.outcome

        logger.info(
            "Restarted container",
            target=target,
            output=outcome.combined_output,
            execution_time_ms=int((time.time() - start_time) * 1000)
        )
        return outcome
