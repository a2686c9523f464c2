"""
Event handlers for domain events.

These handlers process domain events for side effects
like audit logging and purchaser notifications.
"""

import logging

from core.domain.events import DomainEvent, EventHandler
from licenses.domain.events import LicenseKeyIssued, LicenseKeyRedeemed

logger = logging.getLogger(__name__)


class AuditLogEventHandler(EventHandler):
    """
    Event handler for audit logging.

    Writes every license event to the structured log.
    """

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event for audit logging.

        Args:
            event: Domain event to log
        """
        logger.info(
            "Audit log: %s - %s",
            event.event_type,
            event.aggregate_id,
            extra={
                "event_id": str(event.event_id),
                "event_type": event.event_type,
                "aggregate_id": event.aggregate_id,
                "occurred_at": event.occurred_at.isoformat(),
            },
        )


class PurchaserNotificationHandler(EventHandler):
    """
    Event handler that emails a newly issued key to the purchaser.

    Delivery runs as a Celery task. Failing to enqueue it is logged and
    never surfaces to the issuance that raised the event.
    """

    async def handle(self, event: DomainEvent) -> None:
        """
        Handle LicenseKeyIssued by dispatching the notification task.

        Args:
            event: LicenseKeyIssued event
        """
        from core.tasks import send_license_key_email_task

        if not isinstance(event, LicenseKeyIssued):
            return

        try:
            send_license_key_email_task.delay(event.email, event.license_key)
        except Exception:  # pylint: disable=broad-exception-caught
            logger.error(
                "Could not dispatch license key email for %s",
                event.aggregate_id,
                exc_info=True,
            )
            return

        logger.info("License key email dispatched for %s", event.aggregate_id)


def register_event_handlers():
    """Register all event handlers with the event bus."""
    from core.infrastructure.events import event_bus

    audit_handler = AuditLogEventHandler()
    notification_handler = PurchaserNotificationHandler()

    event_bus.subscribe(LicenseKeyIssued, audit_handler)
    event_bus.subscribe(LicenseKeyRedeemed, audit_handler)

    event_bus.subscribe(LicenseKeyIssued, notification_handler)

    logger.info("Event handlers registered")
