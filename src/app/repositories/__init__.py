from .availability_rule_repository import AvailabilityRuleRepository
from .service_repository import ServiceRepository
from .booking_repository import BookingRepository
from .credit_package_repository import CreditPackageRepository
from .ledger_entry_repository import LedgerEntryRepository

__all__ = [
    "AvailabilityRuleRepository",
    "ServiceRepository",
    "BookingRepository",
    "CreditPackageRepository",
    "LedgerEntryRepository",
]
