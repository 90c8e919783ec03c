from .unit_of_work import UnitOfWork
from .notification_service import NotificationService, BookingEvent
from .studio_policy_provider import StudioPolicyProvider
from .credit_ledger import CreditLedger

__all__ = [
    "UnitOfWork",
    "NotificationService",
    "BookingEvent",
    "StudioPolicyProvider",
    "CreditLedger",
]
