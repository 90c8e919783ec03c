from .base import BaseModel, generate_uuid, utc_now
from .availability_rule import AvailabilityRule, RuleKind, RulePolarity
from .service import Service
from .booking import Booking, BookingStatus, ACTIVE_STATUSES, TERMINAL_STATUSES
from .credit_package import CreditPackage, CreditLevel, PackageStatus, credit_level, package_status
from .ledger_entry import LedgerEntry, LedgerReason
from .studio_policy import StudioPolicy, DayHours, HoursSlot
from .intervals import TimeWindow

__all__ = [
    "BaseModel",
    "generate_uuid",
    "utc_now",
    "AvailabilityRule",
    "RuleKind",
    "RulePolarity",
    "Service",
    "Booking",
    "BookingStatus",
    "ACTIVE_STATUSES",
    "TERMINAL_STATUSES",
    "CreditPackage",
    "PackageStatus",
    "package_status",
    "CreditLevel",
    "credit_level",
    "LedgerEntry",
    "LedgerReason",
    "StudioPolicy",
    "DayHours",
    "HoursSlot",
    "TimeWindow",
]
