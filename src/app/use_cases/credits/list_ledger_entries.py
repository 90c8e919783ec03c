"""
List Ledger Entries Use Case

Retrieves a client's credit audit trail with pagination.
"""
from libs.result import Result, Return
from src.app.services.credit_ledger import CreditLedger
from .dtos import LedgerEntryDTO, ListLedgerEntriesResponseDTO


class ListLedgerEntries:
    """
    Use case: View credit history

    Entries are ordered by created_at DESC (most recent first).
    """

    def __init__(self, ledger: CreditLedger):
        self.ledger = ledger

    async def execute(
        self, client_id: str, limit: int = 50, offset: int = 0
    ) -> Result[ListLedgerEntriesResponseDTO]:
        entries, total = await self.ledger.history(client_id, limit=limit, offset=offset)

        return Return.ok(
            ListLedgerEntriesResponseDTO(
                entries=[LedgerEntryDTO.from_entry(e) for e in entries],
                total=total,
                limit=limit,
                offset=offset,
            )
        )
