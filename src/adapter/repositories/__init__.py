from .booking_repository import SqlAlchemyBookingRepository
from .credit_package_repository import SqlAlchemyCreditPackageRepository
from .ledger_entry_repository import SqlAlchemyLedgerEntryRepository
from .availability_rule_repository import SqlAlchemyAvailabilityRuleRepository
from .service_repository import SqlAlchemyServiceRepository

__all__ = [
    "SqlAlchemyBookingRepository",
    "SqlAlchemyCreditPackageRepository",
    "SqlAlchemyLedgerEntryRepository",
    "SqlAlchemyAvailabilityRuleRepository",
    "SqlAlchemyServiceRepository",
]
