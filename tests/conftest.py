"""
Shared fixtures: a recording container manager and webhook test clients.
"""

import stat
from pathlib import Path
from typing import Iterable, List

import pytest
from fastapi.testclient import TestClient

from remediator.dispatcher import HealDispatcher
from remediator.exceptions import InvocationError
from remediator.invoker import ProcessInvoker
from remediator.models import RestartOutcome
from remediator.runtime import ContainerManager
from remediator.webhook import create_app


class RecordingManager(ContainerManager):
    """Fake container manager that records every restart it is asked for."""

    def __init__(self, failing: Iterable[str] = ()):
        self.calls: List[str] = []
        self.failing = set(failing)

    async def restart(self, name: str) -> RestartOutcome:
        self.calls.append(name)
        if name in self.failing:
            raise InvocationError(
                RestartOutcome.error_result(
                    target=name,
                    error="docker restart exited with status 1",
                    combined_output=f"Error response from daemon: No such container: {name}\n",
                ),
                returncode=1,
            )
        return RestartOutcome.success_result(target=name, combined_output=f"{name}\n")


def write_script(directory: Path, name: str, body: str) -> Path:
    """Write an executable shell script standing in for the runtime CLI."""
    path = directory / name
    path.write_text("#!/bin/sh\n" + body)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def manager():
    return RecordingManager()


@pytest.fixture
def client(manager):
    app = create_app(HealDispatcher(ProcessInvoker(manager)))
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def fake_cli(tmp_path):
    """Runtime CLI that echoes its arguments and succeeds."""
    return write_script(tmp_path, "fake-docker", 'echo "$@"\nexit 0\n')


@pytest.fixture
def failing_cli(tmp_path):
    """Runtime CLI that reports a missing container on stderr and fails."""
    return write_script(
        tmp_path,
        "failing-docker",
        'echo "restarting $3"\necho "Error: No such container: $3" >&2\nexit 1\n',
    )
