"""Credits API Routes

FastAPI routes for client credit packages and the credit ledger.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.api.error import ClientError
from src.api.schemas.credit_request import AdjustCreditsRequestSchema, IssuePackageRequestSchema
from src.app.services.credit_ledger import CreditLedger
from src.app.services.notification_service import NotificationService
from src.app.use_cases.credits.dtos import (
    AdjustCreditsCommandDTO,
    AdjustCreditsResponseDTO,
    CreditPackageDTO,
    CreditSummaryDTO,
    IssuePackageCommandDTO,
    ListLedgerEntriesResponseDTO,
)
from src.app.use_cases.credits.issue_package import IssueCreditPackage
from src.app.use_cases.credits.adjust_credits import AdjustCredits
from src.app.use_cases.credits.get_summary import GetCreditSummary
from src.app.use_cases.credits.list_ledger_entries import ListLedgerEntries
from src.adapter.repositories.booking_repository import SqlAlchemyBookingRepository
from src.adapter.repositories.credit_package_repository import SqlAlchemyCreditPackageRepository
from src.adapter.repositories.ledger_entry_repository import SqlAlchemyLedgerEntryRepository
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_notifier, get_session

router = APIRouter(prefix="/credits", tags=["Credits"])


def _ledger(session: AsyncSession) -> CreditLedger:
    return CreditLedger(
        SqlAlchemyCreditPackageRepository(session),
        SqlAlchemyLedgerEntryRepository(session),
    )


@router.get("/{client_id}/summary", response_model=CreditSummaryDTO)
async def get_credit_summary(
    client_id: str,
    session: AsyncSession = Depends(get_session),
    notifier: NotificationService = Depends(get_notifier),
):
    """
    Client's usable credits, nearest expiry and per-package breakdown.

    Display-only; booking re-reads balances under lock. Lapsed holds of
    the client are expired first.
    """
    use_case = GetCreditSummary(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyBookingRepository(session),
        _ledger(session),
        notifier=notifier,
    )
    result = await use_case.execute(client_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/packages",
    response_model=CreditPackageDTO,
    status_code=status.HTTP_201_CREATED,
)
async def issue_credit_package(
    request: IssuePackageRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """Issue a bundle of credits to a client."""
    use_case = IssueCreditPackage(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyCreditPackageRepository(session),
    )
    result = await use_case.execute(
        IssuePackageCommandDTO(
            client_id=request.client_id,
            credits=request.credits,
            name=request.name,
            expires_at=request.expires_at,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.post(
    "/adjustments",
    response_model=AdjustCreditsResponseDTO,
    responses={
        402: {
            "description": "Deduction larger than the package's remaining credits",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INSUFFICIENT_CREDITS",
                            "message": "Insufficient credits. Required: 5, Available: 2"
                        }
                    }
                }
            }
        },
        404: {"description": "Package not found"},
    },
)
async def adjust_credits(
    request: AdjustCreditsRequestSchema,
    session: AsyncSession = Depends(get_session),
):
    """Manually grant or deduct credits on one package."""
    use_case = AdjustCredits(SqlAlchemyUnitOfWork(session), _ledger(session))
    result = await use_case.execute(
        AdjustCreditsCommandDTO(
            package_id=request.package_id,
            kind=request.kind,
            credits=request.credits,
            notes=request.notes,
        )
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get("/{client_id}/ledger", response_model=ListLedgerEntriesResponseDTO)
async def list_ledger_entries(
    client_id: str,
    limit: int = Query(default=50, ge=1, le=200, description="Max entries to return"),
    offset: int = Query(default=0, ge=0, description="Entries to skip"),
    session: AsyncSession = Depends(get_session),
):
    """Client's credit movements, newest first."""
    result = await ListLedgerEntries(_ledger(session)).execute(
        client_id, limit=limit, offset=offset
    )

    if result.is_err():
        raise ClientError(result.error)

    return result.value
