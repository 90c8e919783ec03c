"""Notification Service Implementations

Provides concrete implementations for announcing booking events.
"""

import logging
from typing import Optional
import httpx
from src.app.services.notification_service import BookingEvent, NotificationService
from src.domain.booking import Booking

logger = logging.getLogger(__name__)


def booking_payload(booking: Booking, event: BookingEvent) -> dict:
    return {
        "type": event.value,
        "booking_id": booking.id,
        "trainer_id": booking.trainer_id,
        "client_id": booking.client_id,
        "service_id": booking.service_id,
        "status": booking.status.value,
        "scheduled_at": booking.scheduled_at.isoformat(),
        "duration_minutes": booking.duration_minutes,
        "hold_expiry": booking.hold_expiry.isoformat() if booking.hold_expiry else None,
        "credits_charged": booking.credits_charged,
        "occurred_at": booking.updated_at.isoformat(),
    }


class LoggingNotificationService(NotificationService):
    """
    Notification service that logs booking events

    Useful for development and testing, or as a fallback.
    """

    async def send_booking_event(self, booking: Booking, event: BookingEvent) -> bool:
        logger.info(
            f"[{event.value}] Booking: {booking.id}, "
            f"Trainer: {booking.trainer_id}, "
            f"Client: {booking.client_id}, "
            f"Status: {booking.status.value}, "
            f"Scheduled: {booking.scheduled_at.isoformat()}"
        )
        return True


class WebhookNotificationService(NotificationService):
    """
    Notification service that posts booking events to an HTTP webhook

    Sends JSON payload to configured webhook URL.
    """

    def __init__(self, webhook_url: str, timeout: float = 10.0):
        """
        Initialize webhook notification service

        Args:
            webhook_url: URL to POST events to
            timeout: Request timeout in seconds
        """
        self.webhook_url = webhook_url
        self.timeout = timeout

    async def send_booking_event(self, booking: Booking, event: BookingEvent) -> bool:
        """
        Send booking event via webhook

        Returns:
            True if webhook call succeeded, False otherwise
        """
        payload = booking_payload(booking, event)

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    self.webhook_url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                logger.info(
                    f"Webhook notification {event.value} sent for booking {booking.id}"
                )
                return True
        except httpx.HTTPError as e:
            logger.error(
                f"Failed to send webhook notification {event.value} for booking {booking.id}: {e}"
            )
            return False


class CompositeNotificationService(NotificationService):
    """
    Notification service that delegates to multiple services

    Useful for sending to multiple channels (e.g., log + webhook).
    """

    def __init__(self, services: list[NotificationService]):
        self.services = services

    async def send_booking_event(self, booking: Booking, event: BookingEvent) -> bool:
        """True if at least one service delivered the event"""
        success = False
        for service in self.services:
            try:
                if await service.send_booking_event(booking, event):
                    success = True
            except Exception as e:
                logger.error(f"Notification service {type(service).__name__} failed: {e}")
        return success


def create_notification_service(webhook_url: Optional[str] = None) -> NotificationService:
    """
    Factory function to create appropriate notification service

    Args:
        webhook_url: Optional webhook URL. If provided, creates composite
                     service with logging + webhook. Otherwise, just logging.
    """
    services: list[NotificationService] = [LoggingNotificationService()]

    if webhook_url:
        services.append(WebhookNotificationService(webhook_url))

    if len(services) == 1:
        return services[0]

    return CompositeNotificationService(services)
