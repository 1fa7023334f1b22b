"""
Pydantic models for AlertManager webhook payloads and restart results.

Only the fields the remediation pipeline reads are modelled; everything else
AlertManager sends (annotations, fingerprints, group labels...) is ignored.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    """Get current UTC time."""
    return datetime.now(timezone.utc)


class Alert(BaseModel):
    """Individual alert from AlertManager."""

    model_config = ConfigDict(extra="ignore")

    labels: Dict[str, str] = Field(default_factory=dict, description="Alert labels")

    def label(self, name: str) -> str:
        """Get a label value, treating a missing label as the empty string."""
        return self.labels.get(name, "")


class AlertBatch(BaseModel):
    """AlertManager webhook payload."""

    model_config = ConfigDict(extra="ignore")

    status: str = Field(default="", description="Group status")
    alerts: List[Alert] = Field(..., description="List of alerts, in delivery order")


class RestartOutcome(BaseModel):
    """Result of a single container restart."""

    target: str = Field(..., description="Name of the restarted resource")
    success: bool = Field(..., description="Whether the restart succeeded")
    combined_output: str = Field(default="", description="Interleaved stdout/stderr of the restart command")
    error: Optional[str] = Field(None, description="Error detail when the restart failed")
    finished_at: datetime = Field(default_factory=_utcnow, description="When the restart command finished")

    @classmethod
    def success_result(cls, target: str, combined_output: str = "") -> "RestartOutcome":
        """Create a success result."""
        return cls(target=target, success=True, combined_output=combined_output)

    @classmethod
    def error_result(cls, target: str, error: str, combined_output: str = "") -> "RestartOutcome":
        """Create an error result."""
        return cls(target=target, success=False, combined_output=combined_output, error=error)
