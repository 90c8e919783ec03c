from .unit_of_work import SqlAlchemyUnitOfWork
from .studio_policy_provider import ConfigStudioPolicyProvider
from .notification_service import (
    LoggingNotificationService,
    WebhookNotificationService,
    CompositeNotificationService,
    create_notification_service,
)

__all__ = [
    "SqlAlchemyUnitOfWork",
    "ConfigStudioPolicyProvider",
    "LoggingNotificationService",
    "WebhookNotificationService",
    "CompositeNotificationService",
    "create_notification_service",
]
