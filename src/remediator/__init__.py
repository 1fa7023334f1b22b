"""
Remediator - Alert-driven container remediation service

Receives Prometheus AlertManager webhooks and restarts the container named by
every alert labelled ``severity=heal``.
"""

__version__ = "0.1.0"
