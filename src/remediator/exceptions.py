"""
Error types raised along the remediation pipeline.
"""

from typing import Optional

from .models import RestartOutcome


class RemediatorError(Exception):
    """Base class for all remediator errors."""


class ParseError(RemediatorError):
    """Webhook body is not valid JSON or does not match the alert batch shape."""

    def __init__(self, detail: str):
        super().__init__(f"Invalid webhook payload: {detail}")
        self.detail = detail


class InvocationError(RemediatorError):
    """Restart command failed to start or exited with a non-zero status."""

    def __init__(self, outcome: RestartOutcome, returncode: Optional[int] = None):
        super().__init__(f"Failed to restart {outcome.target!r}: {outcome.error}")
        self.outcome = outcome
        self.returncode = returncode
