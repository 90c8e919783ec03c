"""Credit use cases"""
from .issue_package import IssueCreditPackage
from .adjust_credits import AdjustCredits
from .get_summary import GetCreditSummary
from .list_ledger_entries import ListLedgerEntries
from .dtos import (
    IssuePackageCommandDTO,
    AdjustCreditsCommandDTO,
    AdjustmentKind,
    AdjustCreditsResponseDTO,
    CreditPackageDTO,
    CreditSummaryDTO,
    LedgerEntryDTO,
    ListLedgerEntriesResponseDTO,
)

__all__ = [
    "IssueCreditPackage",
    "AdjustCredits",
    "GetCreditSummary",
    "ListLedgerEntries",
    "IssuePackageCommandDTO",
    "AdjustCreditsCommandDTO",
    "AdjustmentKind",
    "AdjustCreditsResponseDTO",
    "CreditPackageDTO",
    "CreditSummaryDTO",
    "LedgerEntryDTO",
    "ListLedgerEntriesResponseDTO",
]
