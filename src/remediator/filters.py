"""
Alert selection for automatic remediation.
"""

from .models import Alert


# Severity label value marking an alert as auto-remediable
HEAL_SEVERITY = "heal"


def is_healable(alert: Alert) -> bool:
    """Check whether an alert asks for automatic remediation (case-sensitive)."""
    return alert.label("severity") == HEAL_SEVERITY
