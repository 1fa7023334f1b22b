"""
Container runtime access.

The restart action sits behind the ``ContainerManager`` capability so the
mechanism (shelling out to a CLI, talking to a runtime API) can be swapped and
faked in tests. ``CLIContainerManager`` runs ``<cli> restart -- <name>``.
"""

import asyncio
from abc import ABC, abstractmethod

import structlog

from .exceptions import InvocationError
from .models import RestartOutcome


logger = structlog.get_logger(__name__)


class ContainerManager(ABC):
    """Capability to restart a named container."""

    @abstractmethod
    async def restart(self, name: str) -> RestartOutcome:
        """
        Restart the container called ``name``.

        Returns:
            A successful RestartOutcome

        Raises:
            InvocationError: if the restart could not be started or failed
        """


class CLIContainerManager(ContainerManager):
    """Restart containers through the runtime's command line client."""

    def __init__(self, cli: str = "docker"):
        self.cli = cli

    def command(self, name: str) -> list[str]:
        # "--" keeps dash-prefixed names from being read as runtime options
        return [self.cli, "restart", "--", name]

    async def restart(self, name: str) -> RestartOutcome:
        argv = self.command(name)
        logger.debug("Executing restart command", command=argv)

        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except (OSError, ValueError) as e:
            outcome = RestartOutcome.error_result(
                target=name,
                error=f"Could not start {self.cli!r}: {e}",
            )
            raise InvocationError(outcome) from e

        # No deadline: a wedged runtime stalls this restart until it exits
        stdout, _ = await process.communicate()
        output = stdout.decode("utf-8", errors="replace") if stdout else ""

        if process.returncode != 0:
            outcome = RestartOutcome.error_result(
                target=name,
                error=f"{' '.join(argv)} exited with status {process.returncode}",
                combined_output=output,
            )
            raise InvocationError(outcome, returncode=process.returncode)

        return RestartOutcome.success_result(target=name, combined_output=output)
