"""
Heal dispatcher.

Walks an alert batch in delivery order and issues one restart per healable
alert, targeting the alert's ``job`` label.
"""

from typing import List, Optional

import structlog

from .filters import is_healable
from .invoker import ProcessInvoker
from .models import AlertBatch, RestartOutcome


logger = structlog.get_logger(__name__)

TARGET_LABEL = "job"


class HealDispatcher:
    """Dispatch restarts for the healable alerts of a batch."""

    def __init__(self, invoker: ProcessInvoker):
        self.invoker = invoker

    async def dispatch(
        self,
        batch: AlertBatch,
        correlation_id: Optional[str] = None
    ) -> List[RestartOutcome]:
        """
        Restart the target of every healable alert, one after another.

        Identical targets are not deduplicated and a failed restart does not
        stop the rest of the batch.

        Args:
            batch: Parsed webhook payload
            correlation_id: Request correlation id for logging

        Returns:
            One outcome per dispatched alert, in batch order
        """
        outcomes = []

        for alert in batch.alerts:
            if not is_healable(alert):
                continue

            target = alert.label(TARGET_LABEL)
            outcomes.append(await self.invoker.restart(target))

        if outcomes:
            logger.info(
                "Batch dispatch completed",
                correlation_id=correlation_id,
                dispatched_count=len(outcomes),
                failed_count=sum(1 for outcome in outcomes if not outcome.success)
            )

        return outcomes
