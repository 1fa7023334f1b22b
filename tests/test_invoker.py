import asyncio

import pytest
from structlog.testing import capture_logs

from remediator.invoker import ProcessInvoker
from remediator.models import RestartOutcome
from remediator.runtime import CLIContainerManager, ContainerManager

from conftest import RecordingManager


class BlockingManager(ContainerManager):
    """Holds every restart open until released."""

    def __init__(self):
        self.calls = []
        self.release = asyncio.Event()

    async def restart(self, name):
        self.calls.append(name)
        await self.release.wait()
        return RestartOutcome.success_result(target=name)


@pytest.mark.asyncio
async def test_successful_restart_is_logged():
    invoker = ProcessInvoker(RecordingManager())

    with capture_logs() as logs:
        outcome = await invoker.restart("checkout-api")

    assert outcome.success
    events = [entry["event"] for entry in logs]
    assert events == ["Restarting container", "Restarted container"]
    assert logs[-1]["target"] == "checkout-api"


@pytest.mark.asyncio
async def test_failure_is_logged_and_not_raised():
    invoker = ProcessInvoker(RecordingManager(failing=["checkout-api"]))

    with capture_logs() as logs:
        outcome = await invoker.restart("checkout-api")

    assert not outcome.success
    assert outcome.target == "checkout-api"

    failures = [entry for entry in logs if entry["event"] == "Failed to restart container"]
    assert len(failures) == 1
    assert failures[0]["log_level"] == "error"
    assert failures[0]["target"] == "checkout-api"
    assert "No such container" in failures[0]["output"]
    assert failures[0]["returncode"] == 1


@pytest.mark.asyncio
async def test_failing_cli_is_recovered(failing_cli):
    invoker = ProcessInvoker(CLIContainerManager(cli=str(failing_cli)))

    outcome = await invoker.restart("checkout-api")

    assert not outcome.success
    assert "No such container: checkout-api" in outcome.combined_output


@pytest.mark.asyncio
async def test_concurrent_restarts_of_one_target_collapse():
    manager = BlockingManager()
    invoker = ProcessInvoker(manager)

    first = asyncio.create_task(invoker.restart("checkout-api"))
    second = asyncio.create_task(invoker.restart("checkout-api"))
    other = asyncio.create_task(invoker.restart("payments"))
    await asyncio.sleep(0)
    await asyncio.sleep(0)
    manager.release.set()

    first_outcome, second_outcome, _ = await asyncio.gather(first, second, other)

    assert sorted(manager.calls) == ["checkout-api", "payments"]
    assert first_outcome == second_outcome


@pytest.mark.asyncio
async def test_sequential_restarts_are_not_collapsed():
    manager = RecordingManager()
    invoker = ProcessInvoker(manager)

    await invoker.restart("checkout-api")
    await invoker.restart("checkout-api")

    assert manager.calls == ["checkout-api", "checkout-api"]
